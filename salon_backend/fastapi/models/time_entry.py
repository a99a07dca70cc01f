"""
Time ledger models for daily staff attendance.

This module defines the SQLAlchemy models for a staff member's attendance
day (check-in, check-out and computed totals) and the temporary exits taken
during that day.
"""

from enum import Enum
from typing import Optional
from uuid import uuid4
from sqlalchemy import (
    Column, String, Integer, Boolean, Date, DateTime, ForeignKey, Uuid,
    UniqueConstraint, Enum as SQLEnum
)
from sqlalchemy.orm import relationship

from salon_backend.fastapi.core.utils import utcnow_naive
from salon_backend.fastapi.dependencies.database import Base
from salon_backend.fastapi.services.time_accounting import DEFAULT_STANDARD_MINUTES


class AttendanceStatus(str, Enum):
    """Enum for attendance day status."""
    PRESENT = "present"
    INCOMPLETE = "incomplete"
    ABSENT = "absent"
    LATE = "late"
    ON_LEAVE = "on_leave"


class TimeLedgerEntry(Base):
    """
    One staff member's attendance record for one calendar day.

    Attributes:
        id: Unique identifier (UUID)
        staff_id: Foreign key to Staff
        work_date: Calendar day the entry belongs to
        check_in: When the staff member checked in (None for placeholders)
        check_out: When the staff member checked out
        total_worked_minutes: Worked minutes, final only after check-out
        overtime_minutes: Minutes worked beyond the daily standard
        is_complete: Whether the daily standard was reached
        standard_minutes: Daily standard in force when the day was finalized
        status: Attendance status for the day
        notes: Optional notes
        version: Incremented by every mutation, used for conditional updates

    Relationships:
        staff: The staff member this entry belongs to
        exits: Temporary exits taken during the day, oldest first
    """

    __tablename__ = "time_ledger_entries"
    __table_args__ = (
        UniqueConstraint("staff_id", "work_date", name="uq_time_ledger_staff_day"),
    )

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        index=True,
        doc="Unique ledger entry identifier"
    )

    staff_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Reference to the staff member"
    )

    work_date = Column(
        Date,
        nullable=False,
        index=True,
        doc="Calendar day of this attendance entry"
    )

    check_in = Column(
        DateTime,
        nullable=True,
        doc="Check-in time (UTC)"
    )

    check_out = Column(
        DateTime,
        nullable=True,
        doc="Check-out time (UTC)"
    )

    total_worked_minutes = Column(
        Integer,
        nullable=False,
        default=0,
        doc="Worked minutes after subtracting temporary exits"
    )

    overtime_minutes = Column(
        Integer,
        nullable=False,
        default=0,
        doc="Worked minutes beyond the daily standard"
    )

    is_complete = Column(
        Boolean,
        nullable=False,
        default=False,
        doc="Whether the daily standard was reached"
    )

    standard_minutes = Column(
        Integer,
        nullable=False,
        default=DEFAULT_STANDARD_MINUTES,
        doc="Daily standard minutes used to finalize this entry"
    )

    status = Column(
        SQLEnum(AttendanceStatus, values_callable=lambda enum: [member.value for member in enum]),
        nullable=False,
        default=AttendanceStatus.ABSENT,
        doc="Attendance status for the day"
    )

    notes = Column(
        String(500),
        nullable=True,
        doc="Optional notes about the day"
    )

    version = Column(
        Integer,
        nullable=False,
        default=1,
        doc="Row version for conditional updates"
    )

    # Audit timestamps
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
    staff = relationship("Staff", back_populates="ledger_entries")
    exits = relationship(
        "ExitInterval",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="ExitInterval.start_time",
    )

    def __repr__(self) -> str:
        return (
            f"<TimeLedgerEntry(id={self.id}, staff_id={self.staff_id}, "
            f"date={self.work_date}, status={self.status})>"
        )

    @property
    def open_exit(self) -> Optional["ExitInterval"]:
        """The exit still in progress, if any."""
        for exit_ in self.exits:
            if exit_.is_open:
                return exit_
        return None

    @property
    def last_exit_end(self):
        """End time of the latest closed exit, or None."""
        ends = [exit_.end_time for exit_ in self.exits if exit_.end_time is not None]
        return max(ends) if ends else None

    @property
    def is_finalized(self) -> bool:
        return self.check_out is not None


class ExitInterval(Base):
    """
    A temporary departure within a workday.

    Attributes:
        id: Unique identifier (UUID)
        entry_id: Owning ledger entry
        start_time: When the staff member left
        end_time: When they came back (None while ongoing)
        reason: Why they left
        duration_minutes: 0 until closed, then whole minutes away
    """

    __tablename__ = "exit_intervals"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        index=True,
        doc="Unique exit identifier"
    )

    entry_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("time_ledger_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Owning ledger entry"
    )

    start_time = Column(
        DateTime,
        nullable=False,
        doc="Exit start time (UTC)"
    )

    end_time = Column(
        DateTime,
        nullable=True,
        doc="Exit end time (UTC), empty while ongoing"
    )

    reason = Column(
        String(255),
        nullable=False,
        doc="Reason for the exit"
    )

    duration_minutes = Column(
        Integer,
        nullable=False,
        default=0,
        doc="Minutes away, set when the exit ends"
    )

    created_at = Column(
        DateTime,
        default=utcnow_naive,
        nullable=False,
        doc="Record creation timestamp"
    )

    entry = relationship("TimeLedgerEntry", back_populates="exits")

    def __repr__(self) -> str:
        return f"<ExitInterval(id={self.id}, entry_id={self.entry_id}, start={self.start_time}, end={self.end_time})>"

    @property
    def is_open(self) -> bool:
        return self.end_time is None
