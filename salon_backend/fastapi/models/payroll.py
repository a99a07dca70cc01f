"""
Payroll record model for monthly staff compensation.

One record exists per staff member, month and year. It stores the inputs and
results of the payroll computation and the payment status.
"""

from uuid import uuid4
from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, Numeric, Boolean, Date, DateTime, ForeignKey, Uuid,
    UniqueConstraint
)
from sqlalchemy.orm import relationship

from salon_backend.fastapi.core.utils import MONTH_NAMES
from salon_backend.fastapi.dependencies.database import Base


def _money_column(doc: str) -> Column:
    return Column(Numeric(precision=12, scale=2), nullable=False, default=0, doc=doc)


class PayrollRecord(Base):
    """
    Monthly payroll computation for one staff member.

    Attributes:
        id: Unique identifier for the payroll record
        staff_id: Foreign key to Staff
        month: Month index (1-12)
        year: Calendar year
        base_salary .. net_salary: Computed payroll figures
        is_paid: Whether the salary has been paid
        paid_date: Date of payment, set when marked paid
        created_at: When the record was first processed
        updated_at: When the record was last processed or paid
    """
    __tablename__ = "payroll_records"
    __table_args__ = (
        UniqueConstraint("staff_id", "month", "year", name="uq_payroll_staff_period"),
    )

    # Primary key
    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        index=True,
        doc="Unique identifier for the payroll record"
    )

    # Foreign key
    staff_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Foreign key to the staff member"
    )

    # Period
    month = Column(
        Integer,
        nullable=False,
        doc="Month index (1-12)"
    )

    year = Column(
        Integer,
        nullable=False,
        index=True,
        doc="Calendar year"
    )

    # Earnings
    base_salary = _money_column("Monthly base salary")
    ot_hours = _money_column("Overtime hours paid")
    ot_rate_per_hour = _money_column("Overtime rate applied")
    ot_amount = _money_column("Overtime pay")
    extra_days = _money_column("Extra days worked")
    extra_day_pay = _money_column("Pay for extra days")

    # Deductions
    food_deduction = _money_column("Food deduction")
    recurring_deduction = _money_column("Recurring expense deduction")
    advance_deducted = _money_column("Approved advances deducted")

    # Totals
    total_earnings = _money_column("Base salary plus overtime and extra-day pay")
    total_deductions = _money_column("Sum of all deductions")
    net_salary = _money_column("Earnings minus deductions (may be negative)")

    # Payment state
    is_paid = Column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
        doc="Whether the salary has been paid"
    )

    paid_date = Column(
        Date,
        nullable=True,
        doc="Date the salary was paid"
    )

    # Audit fields
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        doc="Timestamp when the payroll record was created"
    )

    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
        doc="Timestamp when the payroll record was last changed"
    )

    # Relationships
    staff = relationship(
        "Staff",
        back_populates="payroll_records",
        doc="The staff member this payroll record belongs to"
    )

    def __repr__(self) -> str:
        return (
            f"<PayrollRecord(id='{self.id}', "
            f"staff_id='{self.staff_id}', "
            f"period={self.year}-{self.month:02d}, "
            f"net={self.net_salary}, paid={self.is_paid})>"
        )

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]
