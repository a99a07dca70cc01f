"""
Time ledger CRUD operations.

This module provides database operations for attendance entries: check-in,
check-out, temporary exits, placeholder days, listings and the monthly
overtime total handed to payroll.

Every mutation of an entry is a conditional update on its ``version``
column. When the update matches no row, the transaction is rolled back, the
entry is re-read and the error the fresh state implies is raised.
"""

import logging
from datetime import date, datetime
from typing import Callable, List, Optional, Union
from uuid import UUID
from sqlalchemy import desc, func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from salon_backend.fastapi.core.exceptions import (
    AlreadyCheckedIn, AlreadyCheckedOut, ConcurrentUpdate, CoreError,
    EntryAlreadyExists, EntryNotFound, ExitAlreadyClosed, ExitAlreadyOpen,
    ExitNotFound, ExitStillOpen, InvalidTimestamp, MissingReason,
    NotCheckedIn, ValidationError
)
from salon_backend.fastapi.core.init_settings import global_settings
from salon_backend.fastapi.core.utils import (
    business_date, month_bounds, month_name, normalize_month, to_utc_naive,
    utcnow_naive
)
from salon_backend.fastapi.crud.staff import require_staff
from salon_backend.fastapi.models.time_entry import (
    AttendanceStatus, ExitInterval, TimeLedgerEntry
)
from salon_backend.fastapi.services.time_accounting import (
    compute_day_totals, estimate_day_totals, minutes_between, overtime_hours
)

logger = logging.getLogger(__name__)


class TimeLedgerCRUD:
    """CRUD operations for TimeLedgerEntry and ExitInterval models."""

    def __init__(self, db: Session,
                 standard_minutes: Optional[int] = None,
                 business_timezone: Optional[str] = None):
        """Initialize with database session and attendance settings."""
        self.db = db
        self.standard_minutes = (
            standard_minutes if standard_minutes is not None
            else global_settings.STANDARD_DAILY_MINUTES
        )
        self.business_timezone = business_timezone or global_settings.BUSINESS_TIMEZONE

    # Lookups

    def get_entry(self, entry_id: UUID) -> Optional[TimeLedgerEntry]:
        """Get an attendance entry by ID, or None."""
        return self.db.query(TimeLedgerEntry).filter(TimeLedgerEntry.id == entry_id).first()

    def get_exit(self, exit_id: UUID) -> Optional[ExitInterval]:
        """Get a temporary exit by ID, or None."""
        return self.db.query(ExitInterval).filter(ExitInterval.id == exit_id).first()

    def get_day_entry(self, staff_id: UUID, work_date: date) -> Optional[TimeLedgerEntry]:
        """Get the entry of a staff member for one calendar day, or None."""
        return (self.db.query(TimeLedgerEntry)
                .filter(TimeLedgerEntry.staff_id == staff_id,
                        TimeLedgerEntry.work_date == work_date)
                .first())

    def require_entry(self, entry_id: UUID) -> TimeLedgerEntry:
        entry = self.get_entry(entry_id)
        if entry is None:
            raise EntryNotFound()
        return entry

    def list_entries(self,
                     staff_id: Optional[UUID] = None,
                     work_date: Optional[date] = None,
                     year: Optional[int] = None,
                     month: Optional[Union[str, int]] = None,
                     start_date: Optional[date] = None,
                     end_date: Optional[date] = None,
                     limit: int = 100) -> List[TimeLedgerEntry]:
        """
        List attendance entries with optional filtering.

        Args:
            staff_id: Only entries of this staff member
            work_date: Only entries of this day
            year: Only entries of this month (requires month)
            month: Only entries of this month (requires year)
            start_date: Entries from this day (inclusive)
            end_date: Entries up to this day (inclusive)
            limit: Maximum number of entries to return

        Returns:
            Entries, most recent day first and by check-in time within a day

        Raises:
            ValidationError: If only one of year and month is given
        """
        query = self.db.query(TimeLedgerEntry)

        if staff_id:
            query = query.filter(TimeLedgerEntry.staff_id == staff_id)

        if work_date:
            query = query.filter(TimeLedgerEntry.work_date == work_date)

        if (year is None) != (month is None):
            raise ValidationError("year and month must be given together")
        if year is not None:
            first_day, next_month = month_bounds(year, normalize_month(month))
            query = query.filter(TimeLedgerEntry.work_date >= first_day,
                                 TimeLedgerEntry.work_date < next_month)

        if start_date:
            query = query.filter(TimeLedgerEntry.work_date >= start_date)

        if end_date:
            query = query.filter(TimeLedgerEntry.work_date <= end_date)

        return (query
                .order_by(desc(TimeLedgerEntry.work_date), TimeLedgerEntry.check_in)
                .limit(limit)
                .all())

    # Transitions

    def check_in(self, staff_id: UUID, now: datetime) -> TimeLedgerEntry:
        """
        Check a staff member in for the calendar day of ``now``.

        A placeholder entry for the day (no check-in yet) is filled in;
        otherwise a new entry is created.

        Raises:
            StaffNotFound: If the staff member does not exist or is inactive
            AlreadyCheckedIn: If the day already has a check-in
        """
        require_staff(self.db, staff_id, active_only=True)
        now = to_utc_naive(now)
        work_date = business_date(now, self.business_timezone)

        entry = self.get_day_entry(staff_id, work_date)
        if entry is None:
            entry = TimeLedgerEntry(
                staff_id=staff_id,
                work_date=work_date,
                check_in=now,
                status=AttendanceStatus.PRESENT,
                standard_minutes=self.standard_minutes,
                version=1,
            )
            self.db.add(entry)
            try:
                self.db.commit()
            except IntegrityError:
                # Another request created the day first
                self.db.rollback()
                entry = self.get_day_entry(staff_id, work_date)
                if entry is None:
                    raise ConcurrentUpdate()
            else:
                self.db.refresh(entry)
                logger.info("Staff %s checked in at %s (entry %s)", staff_id, now, entry.id)
                return entry

        if entry.check_in is not None:
            self._reject(entry, AlreadyCheckedIn())

        entry_id = entry.id
        updated = self._guarded_update(
            entry,
            TimeLedgerEntry.check_in.is_(None),
            check_in=now,
            status=AttendanceStatus.PRESENT,
        )
        if not updated:
            self._raise_for_fresh_state(entry_id, self._ensure_placeholder)

        self.db.commit()
        self.db.refresh(entry)
        logger.info("Staff %s checked in at %s on placeholder entry %s", staff_id, now, entry.id)
        return entry

    def check_out(self, entry_id: UUID, now: datetime) -> TimeLedgerEntry:
        """
        Check out of an entry and store its final totals.

        Raises:
            EntryNotFound: If the entry does not exist
            NotCheckedIn: If the entry has no check-in
            AlreadyCheckedOut: If the entry is already checked out
            ExitStillOpen: If a temporary exit has not ended
            InvalidTimestamp: If ``now`` is not after the check-in or precedes
                the end of an exit
        """
        now = to_utc_naive(now)
        entry = self.require_entry(entry_id)

        def ensure(current: TimeLedgerEntry) -> None:
            self._ensure_open_day(current)
            if current.open_exit is not None:
                self._reject(current, ExitStillOpen())
            if now <= current.check_in:
                self._reject(current, InvalidTimestamp("Check-out must be after check-in"))
            last_end = current.last_exit_end
            if last_end is not None and now < last_end:
                self._reject(current, InvalidTimestamp("Check-out cannot be before the end of an exit"))

        ensure(entry)

        totals = compute_day_totals(entry.check_in, now, entry.exits, self.standard_minutes)
        updated = self._guarded_update(
            entry,
            TimeLedgerEntry.check_out.is_(None),
            check_out=now,
            total_worked_minutes=totals.total_worked_minutes,
            overtime_minutes=totals.overtime_minutes,
            is_complete=totals.is_complete,
            standard_minutes=totals.standard_minutes,
            status=AttendanceStatus(totals.status),
        )
        if not updated:
            self._raise_for_fresh_state(entry_id, ensure)

        self.db.commit()
        self.db.refresh(entry)
        logger.info(
            "Entry %s checked out at %s: worked=%s overtime=%s complete=%s",
            entry.id, now, totals.total_worked_minutes, totals.overtime_minutes, totals.is_complete
        )
        return entry

    def start_exit(self, entry_id: UUID, reason: Optional[str], now: datetime) -> ExitInterval:
        """
        Start a temporary exit on a checked-in entry.

        Raises:
            EntryNotFound: If the entry does not exist
            NotCheckedIn: If the entry has no check-in
            AlreadyCheckedOut: If the entry is already checked out
            ExitAlreadyOpen: If another exit is still ongoing
            MissingReason: If the reason is empty
            InvalidTimestamp: If ``now`` is before the check-in or the end of
                an earlier exit
        """
        now = to_utc_naive(now)
        reason = (reason or "").strip()
        entry = self.require_entry(entry_id)

        def ensure(current: TimeLedgerEntry) -> None:
            self._ensure_open_day(current)
            if current.open_exit is not None:
                self._reject(current, ExitAlreadyOpen())
            if not reason:
                self._reject(current, MissingReason())
            if now < current.check_in:
                self._reject(current, InvalidTimestamp("Exit cannot start before check-in"))
            last_end = current.last_exit_end
            if last_end is not None and now < last_end:
                self._reject(current, InvalidTimestamp("Exits cannot overlap"))

        ensure(entry)

        if not self._guarded_update(entry, TimeLedgerEntry.check_out.is_(None)):
            self._raise_for_fresh_state(entry_id, ensure)

        exit_ = ExitInterval(
            entry_id=entry.id,
            start_time=now,
            reason=reason,
            duration_minutes=0,
        )
        self.db.add(exit_)
        self.db.commit()
        self.db.refresh(exit_)

        logger.info("Exit %s started on entry %s at %s (%s)", exit_.id, entry_id, now, reason)
        return exit_

    def end_exit(self, exit_id: UUID, now: datetime) -> ExitInterval:
        """
        End a temporary exit and record its duration in whole minutes.

        Raises:
            ExitNotFound: If the exit does not exist
            ExitAlreadyClosed: If the exit has already ended
        """
        now = to_utc_naive(now)
        exit_ = self.get_exit(exit_id)
        if exit_ is None:
            raise ExitNotFound()
        if not exit_.is_open:
            logger.warning("Rejected end of exit %s: already ended", exit_id)
            raise ExitAlreadyClosed()

        duration = max(0, minutes_between(exit_.start_time, now))
        entry = exit_.entry
        entry_id = entry.id

        result = self.db.execute(
            update(ExitInterval)
            .where(ExitInterval.id == exit_id, ExitInterval.end_time.is_(None))
            .values(end_time=now, duration_minutes=duration)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.rollback()
            logger.warning("Rejected end of exit %s: ended concurrently", exit_id)
            raise ExitAlreadyClosed()

        if not self._guarded_update(entry):
            fresh = self.get_exit(exit_id)
            if fresh is not None and fresh.end_time is not None:
                raise ExitAlreadyClosed()
            logger.warning("Concurrent update on entry %s while ending exit %s", entry_id, exit_id)
            raise ConcurrentUpdate()

        self.db.commit()
        self.db.refresh(exit_)

        logger.info("Exit %s ended at %s after %s minutes", exit_id, now, duration)
        return exit_

    def create_placeholder(self, staff_id: UUID, work_date: date,
                           status: Union[str, AttendanceStatus] = AttendanceStatus.ABSENT,
                           notes: Optional[str] = None) -> TimeLedgerEntry:
        """
        Create an entry without a check-in, e.g. for absence or leave.

        A later check-in on the same day fills in the placeholder.

        Raises:
            StaffNotFound: If the staff member does not exist
            EntryAlreadyExists: If the staff member already has an entry that day
        """
        require_staff(self.db, staff_id)
        if self.get_day_entry(staff_id, work_date) is not None:
            raise EntryAlreadyExists()

        entry = TimeLedgerEntry(
            staff_id=staff_id,
            work_date=work_date,
            status=AttendanceStatus(status),
            notes=notes,
            standard_minutes=self.standard_minutes,
            version=1,
        )
        self.db.add(entry)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise EntryAlreadyExists()
        self.db.refresh(entry)

        logger.info("Placeholder entry %s (%s) created for staff %s on %s",
                    entry.id, entry.status.value, staff_id, work_date)
        return entry

    # Reporting

    def live_estimate(self, entry_id: UUID, now: datetime) -> dict:
        """
        Worked time of an entry as of ``now``, for display only.

        Finalized entries return their stored totals. Nothing is written.
        """
        now = to_utc_naive(now)
        entry = self.require_entry(entry_id)
        if entry.check_in is None:
            raise NotCheckedIn()

        if entry.is_finalized:
            result = {
                "total_worked_minutes": entry.total_worked_minutes,
                "overtime_minutes": entry.overtime_minutes,
                "is_complete": entry.is_complete,
                "standard_minutes": entry.standard_minutes,
            }
        else:
            totals = estimate_day_totals(entry.check_in, now, entry.exits, self.standard_minutes)
            result = {
                "total_worked_minutes": totals.total_worked_minutes,
                "overtime_minutes": totals.overtime_minutes,
                "is_complete": totals.is_complete,
                "standard_minutes": totals.standard_minutes,
            }

        result.update(
            entry_id=entry.id,
            as_of=now,
            is_final=entry.is_finalized,
            on_exit=entry.open_exit is not None,
        )
        return result

    def get_overtime_total(self, staff_id: UUID, year: int, month: Union[str, int]) -> dict:
        """
        Sum overtime over the finalized entries of one staff member and month.

        Returns:
            Dictionary with total_ot_minutes, total_ot_hours and entry_count
        """
        require_staff(self.db, staff_id)
        month_index = normalize_month(month)
        first_day, next_month = month_bounds(year, month_index)

        total_minutes, entry_count = (
            self.db.query(
                func.coalesce(func.sum(TimeLedgerEntry.overtime_minutes), 0),
                func.count(TimeLedgerEntry.id),
            )
            .filter(
                TimeLedgerEntry.staff_id == staff_id,
                TimeLedgerEntry.check_out.isnot(None),
                TimeLedgerEntry.work_date >= first_day,
                TimeLedgerEntry.work_date < next_month,
            )
            .one()
        )

        total_minutes = int(total_minutes or 0)
        return {
            "staff_id": staff_id,
            "year": year,
            "month": month_index,
            "month_name": month_name(month_index),
            "entry_count": int(entry_count or 0),
            "total_ot_minutes": total_minutes,
            "total_ot_hours": overtime_hours(total_minutes),
        }

    # Internals

    def _guarded_update(self, entry: TimeLedgerEntry, *guards, **values) -> bool:
        """
        Apply ``values`` to the entry only if its version is still the one read.

        Bumps the version. On a miss the transaction is rolled back and
        False is returned; the caller commits on success.
        """
        seen = entry.version
        result = self.db.execute(
            update(TimeLedgerEntry)
            .where(TimeLedgerEntry.id == entry.id, TimeLedgerEntry.version == seen, *guards)
            .values(version=seen + 1, updated_at=utcnow_naive(), **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.rollback()
            return False
        return True

    def _raise_for_fresh_state(self, entry_id: UUID,
                               ensure: Callable[[TimeLedgerEntry], None]) -> None:
        """Re-read the entry and raise the error its current state implies."""
        fresh = self.require_entry(entry_id)
        ensure(fresh)
        logger.warning("Concurrent update on entry %s", entry_id)
        raise ConcurrentUpdate()

    def _ensure_open_day(self, entry: TimeLedgerEntry) -> None:
        if entry.check_in is None:
            self._reject(entry, NotCheckedIn())
        if entry.check_out is not None:
            self._reject(entry, AlreadyCheckedOut())

    def _ensure_placeholder(self, entry: TimeLedgerEntry) -> None:
        if entry.check_in is not None:
            self._reject(entry, AlreadyCheckedIn())

    @staticmethod
    def _reject(entry: TimeLedgerEntry, error: CoreError) -> None:
        logger.warning("Rejected transition on entry %s: %s", entry.id, error.error)
        raise error


# Convenience functions for direct use
def check_in(db: Session, staff_id: UUID, now: datetime) -> TimeLedgerEntry:
    """Check a staff member in."""
    return TimeLedgerCRUD(db).check_in(staff_id, now)


def check_out(db: Session, entry_id: UUID, now: datetime) -> TimeLedgerEntry:
    """Check out of an attendance entry."""
    return TimeLedgerCRUD(db).check_out(entry_id, now)


def start_exit(db: Session, entry_id: UUID, reason: Optional[str], now: datetime) -> ExitInterval:
    """Start a temporary exit."""
    return TimeLedgerCRUD(db).start_exit(entry_id, reason, now)


def end_exit(db: Session, exit_id: UUID, now: datetime) -> ExitInterval:
    """End a temporary exit."""
    return TimeLedgerCRUD(db).end_exit(exit_id, now)


def create_placeholder(db: Session, staff_id: UUID, work_date: date,
                       status: Union[str, AttendanceStatus] = AttendanceStatus.ABSENT,
                       notes: Optional[str] = None) -> TimeLedgerEntry:
    """Create an attendance entry without a check-in."""
    return TimeLedgerCRUD(db).create_placeholder(staff_id, work_date, status, notes)


def get_entry(db: Session, entry_id: UUID) -> Optional[TimeLedgerEntry]:
    """Get attendance entry by ID."""
    return TimeLedgerCRUD(db).get_entry(entry_id)


def list_entries(db: Session, **filters) -> List[TimeLedgerEntry]:
    """List attendance entries."""
    return TimeLedgerCRUD(db).list_entries(**filters)


def live_estimate(db: Session, entry_id: UUID, now: datetime) -> dict:
    """Live worked-time estimate for an entry."""
    return TimeLedgerCRUD(db).live_estimate(entry_id, now)


def get_overtime_total(db: Session, staff_id: UUID, year: int, month: Union[str, int]) -> dict:
    """Monthly overtime total for payroll."""
    return TimeLedgerCRUD(db).get_overtime_total(staff_id, year, month)
