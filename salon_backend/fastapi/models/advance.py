"""
Advance payment model.

Staff can request a cash advance; once approved it is deducted from payroll.
"""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship

from salon_backend.fastapi.dependencies.database import Base


class AdvanceStatus(str, Enum):
    """Enum for advance payment review states."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AdvancePayment(Base):
    """
    Cash advance requested by a staff member.

    Attributes:
        id: Unique identifier
        staff_id: Foreign key to Staff
        request_date: When the advance was requested
        amount: Amount advanced (positive)
        reason: Why the advance was requested
        repayment_plan: Agreed repayment plan
        status: pending, approved or rejected
        approved_date: When the advance was approved
    """

    __tablename__ = "advance_payments"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        index=True,
        doc="Unique identifier for the advance"
    )

    staff_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Foreign key to the staff member"
    )

    request_date = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        doc="When the advance was requested"
    )

    amount = Column(
        Numeric(precision=12, scale=2),
        nullable=False,
        doc="Advance amount"
    )

    reason = Column(
        String(500),
        nullable=False,
        doc="Reason for the advance"
    )

    repayment_plan = Column(
        String(500),
        nullable=False,
        doc="Agreed repayment plan"
    )

    status = Column(
        SQLEnum(AdvanceStatus, values_callable=lambda enum: [member.value for member in enum]),
        nullable=False,
        default=AdvanceStatus.PENDING,
        index=True,
        doc="Review status of the advance"
    )

    approved_date = Column(
        DateTime(timezone=True),
        nullable=True,
        doc="When the advance was approved"
    )

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        doc="Timestamp when the record was created"
    )

    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
        doc="Timestamp when the record was last changed"
    )

    staff = relationship("Staff", back_populates="advance_payments")

    def __repr__(self) -> str:
        return f"<AdvancePayment(id='{self.id}', staff_id='{self.staff_id}', amount={self.amount}, status={self.status})>"

    @property
    def is_approved(self) -> bool:
        return self.status == AdvanceStatus.APPROVED
