"""
Staff model used as reference data by attendance and payroll.

Staff administration lives outside this service; the table only carries
what check-in and payroll processing need to read.
"""

from uuid import uuid4
from sqlalchemy import Column, String, DateTime, Boolean, Numeric, Uuid
from sqlalchemy.orm import relationship

from salon_backend.fastapi.core.utils import utcnow_naive
from salon_backend.fastapi.dependencies.database import Base


class Staff(Base):
    """
    Staff member of the salon.

    Attributes:
        id: Unique identifier (UUID)
        name: Display name
        position: Job title (stylist, receptionist, etc.)
        base_salary: Monthly base salary (None is treated as 0)
        ot_rate_per_hour: Overtime pay per hour (None uses the shop default)
        is_active: Whether the staff member can check in
        created_at: Record creation timestamp
        updated_at: Last update timestamp
    """

    __tablename__ = "staff"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        index=True,
        doc="Unique staff identifier"
    )

    name = Column(
        String(100),
        nullable=False,
        index=True,
        doc="Staff member's display name"
    )

    position = Column(
        String(100),
        nullable=False,
        default="stylist",
        doc="Job title"
    )

    base_salary = Column(
        Numeric(precision=12, scale=2),
        nullable=True,
        doc="Monthly base salary"
    )

    ot_rate_per_hour = Column(
        Numeric(precision=10, scale=2),
        nullable=True,
        doc="Overtime pay per hour; falls back to the shop default when empty"
    )

    is_active = Column(
        Boolean,
        default=True,
        nullable=False,
        doc="Whether the staff member is active"
    )

    created_at = Column(
        DateTime,
        default=utcnow_naive,
        nullable=False,
        doc="Record creation timestamp"
    )

    updated_at = Column(
        DateTime,
        default=utcnow_naive,
        onupdate=utcnow_naive,
        nullable=False,
        doc="Last update timestamp"
    )

    # Relationships
    ledger_entries = relationship("TimeLedgerEntry", back_populates="staff", cascade="all, delete-orphan")
    payroll_records = relationship("PayrollRecord", back_populates="staff", cascade="all, delete-orphan")
    advance_payments = relationship("AdvancePayment", back_populates="staff", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Staff(id={self.id}, name='{self.name}', active={self.is_active})>"
