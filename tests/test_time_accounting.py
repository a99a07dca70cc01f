from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from salon_backend.fastapi.services.time_accounting import (
    compute_day_totals, estimate_day_totals, minutes_between, overtime_hours, totals_from_worked
)


@dataclass
class FakeExit:
    start_time: datetime
    end_time: Optional[datetime]
    duration_minutes: int = 0


def at(hour, minute=0, second=0):
    return datetime(2024, 6, 3, hour, minute, second)


def test_minutes_between_truncates_partial_minutes():
    assert minutes_between(at(9), at(9, 0, 59)) == 0
    assert minutes_between(at(9), at(9, 1, 30)) == 1
    assert minutes_between(at(9), at(18)) == 540


def test_minutes_between_truncates_toward_zero_when_negative():
    assert minutes_between(at(9, 1, 30), at(9)) == -1


def test_full_day_with_lunch_break():
    lunch = FakeExit(at(13), at(13, 30), 30)

    totals = compute_day_totals(at(9), at(19), [lunch])

    assert totals.total_worked_minutes == 570
    assert totals.overtime_minutes == 30
    assert totals.is_complete is True
    assert totals.status == "present"
    assert totals.overtime_hours == Decimal("0.50")


def test_short_day_is_incomplete():
    totals = compute_day_totals(at(9), at(13), [])

    assert totals.total_worked_minutes == 240
    assert totals.overtime_minutes == 0
    assert totals.is_complete is False
    assert totals.status == "incomplete"


def test_exactly_standard_is_complete_without_overtime():
    totals = compute_day_totals(at(9), at(18), [])

    assert totals.total_worked_minutes == 540
    assert totals.overtime_minutes == 0
    assert totals.is_complete is True


def test_custom_standard_minutes():
    totals = compute_day_totals(at(9), at(17), [], standard_minutes=480)

    assert totals.is_complete is True
    assert totals.standard_minutes == 480


def test_exits_longer_than_the_day_clamp_to_zero():
    long_exit = FakeExit(at(9, 5), at(12), 175)

    totals = compute_day_totals(at(9), at(10), [long_exit])

    assert totals.total_worked_minutes == 0
    assert totals.is_complete is False


def test_open_exits_are_ignored_by_final_totals():
    open_exit = FakeExit(at(12), None)

    totals = compute_day_totals(at(9), at(18), [open_exit])

    assert totals.total_worked_minutes == 540


def test_estimate_counts_open_exit_up_to_now():
    closed = FakeExit(at(11), at(11, 15), 15)
    ongoing = FakeExit(at(13), None)

    totals = estimate_day_totals(at(9), at(13, 45), [closed, ongoing])

    # 285 elapsed, 15 closed, 45 ongoing
    assert totals.total_worked_minutes == 225
    assert totals.overtime_minutes == 0


def test_estimate_before_check_in_is_zero():
    totals = estimate_day_totals(at(9), at(8), [])
    assert totals.total_worked_minutes == 0


def test_overtime_hours_rounds_half_up_to_cents():
    assert overtime_hours(0) == Decimal("0.00")
    assert overtime_hours(1) == Decimal("0.02")
    assert overtime_hours(90) == Decimal("1.50")
    assert overtime_hours(100) == Decimal("1.67")


def test_totals_from_worked_never_negative():
    totals = totals_from_worked(-20)
    assert totals.total_worked_minutes == 0
    assert totals.overtime_minutes == 0


def test_long_day_across_midnight():
    start = datetime(2024, 6, 3, 20)
    totals = compute_day_totals(start, start + timedelta(hours=10), [])
    assert totals.total_worked_minutes == 600
    assert totals.overtime_minutes == 60
