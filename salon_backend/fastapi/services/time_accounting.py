"""
Time accounting engine.

Pure functions that turn a day's check-in, check-out and temporary exits into
worked minutes, overtime and completeness. Nothing here reads the clock or
touches the database: callers pass every timestamp explicitly.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Protocol

DEFAULT_STANDARD_MINUTES = 540

HOURS_QUANTUM = Decimal("0.01")


class ExitLike(Protocol):
    start_time: datetime
    end_time: Optional[datetime]
    duration_minutes: int


@dataclass(frozen=True)
class DayTotals:
    """Computed totals for one attendance day."""

    total_worked_minutes: int
    overtime_minutes: int
    is_complete: bool
    standard_minutes: int = DEFAULT_STANDARD_MINUTES

    @property
    def status(self) -> str:
        return "present" if self.is_complete else "incomplete"

    @property
    def overtime_hours(self) -> Decimal:
        return overtime_hours(self.overtime_minutes)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, truncated toward zero."""
    seconds = (end - start).total_seconds()
    return int(seconds / 60)


def closed_exit_minutes(exits: Iterable[ExitLike]) -> int:
    """Sum of recorded durations of closed exits."""
    return sum(max(0, exit_.duration_minutes or 0) for exit_ in exits if exit_.end_time is not None)


def totals_from_worked(worked_minutes: int, standard_minutes: int = DEFAULT_STANDARD_MINUTES) -> DayTotals:
    worked = max(0, worked_minutes)
    return DayTotals(
        total_worked_minutes=worked,
        overtime_minutes=max(0, worked - standard_minutes),
        is_complete=worked >= standard_minutes,
        standard_minutes=standard_minutes,
    )


def compute_day_totals(
    check_in: datetime,
    check_out: datetime,
    exits: Iterable[ExitLike],
    standard_minutes: int = DEFAULT_STANDARD_MINUTES,
) -> DayTotals:
    """
    Final totals for a finished day.

    Only closed exits are subtracted; the caller guarantees none is open.
    """
    elapsed = minutes_between(check_in, check_out)
    return totals_from_worked(elapsed - closed_exit_minutes(exits), standard_minutes)


def estimate_day_totals(
    check_in: datetime,
    now: datetime,
    exits: Iterable[ExitLike],
    standard_minutes: int = DEFAULT_STANDARD_MINUTES,
) -> DayTotals:
    """
    Live estimate for a day still in progress.

    ``now`` stands in for the check-out and an exit that is still open counts
    as away time up to ``now``. The result is for display only.
    """
    away = 0
    for exit_ in exits:
        if exit_.end_time is not None:
            away += max(0, exit_.duration_minutes or 0)
        else:
            away += max(0, minutes_between(exit_.start_time, now))
    return totals_from_worked(minutes_between(check_in, now) - away, standard_minutes)


def overtime_hours(minutes: int) -> Decimal:
    """Convert overtime minutes to hours rounded to two places."""
    return (Decimal(minutes) / Decimal(60)).quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)
