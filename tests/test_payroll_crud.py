import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from salon_backend.fastapi.core.exceptions import (
    InvalidMonth, PayrollAlreadyPaid, RecordNotFound, StaffNotFound, ValidationError
)
from salon_backend.fastapi.core.init_settings import global_settings
from salon_backend.fastapi.crud.advance import create_advance, update_advance_status
from salon_backend.fastapi.crud.payroll import (
    delete_payroll, get_payroll, get_payrolls, mark_paid, process_payroll, sum_approved_advances
)
from salon_backend.fastapi.crud.staff import create_staff
from salon_backend.fastapi.crud.time_entry import check_in, check_out
from salon_backend.fastapi.models.payroll import PayrollRecord
from salon_backend.fastapi.schemas.advance import AdvanceCreate
from salon_backend.fastapi.schemas.staff import StaffCreate


def approved_advance(db, staff_id, amount):
    advance = create_advance(db, AdvanceCreate(
        staff_id=staff_id, amount=Decimal(amount), reason="rent", repayment_plan="next salary"
    ))
    return update_advance_status(db, advance.id, "approved")


def process_june(db, staff_id, **inputs):
    inputs.setdefault("ot_hours", Decimal("5"))
    inputs.setdefault("food_deduction", Decimal("2500"))
    return process_payroll(db, staff_id, "June", 2024, **inputs)


def test_june_scenario(db, staff):
    approved_advance(db, staff.id, "1000")

    record = process_june(db, staff.id)

    assert record.month == 6
    assert record.month_name == "June"
    assert record.year == 2024
    assert record.base_salary == Decimal("30000.00")
    assert record.ot_amount == Decimal("250.00")
    assert record.advance_deducted == Decimal("1000.00")
    assert record.total_earnings == Decimal("30250.00")
    assert record.total_deductions == Decimal("3500.00")
    assert record.net_salary == Decimal("26750.00")
    assert record.is_paid is False
    assert record.paid_date is None


def test_reprocessing_with_same_inputs_is_idempotent(db, staff):
    first = process_june(db, staff.id)
    first_net = first.net_salary

    second = process_june(db, staff.id)

    assert second.id == first.id
    assert second.net_salary == first_net
    assert db.query(PayrollRecord).count() == 1


def test_reprocessing_unpaid_record_overwrites_it(db, staff):
    first = process_june(db, staff.id)

    second = process_june(db, staff.id, ot_hours=Decimal("10"), food_deduction=Decimal("0"))

    assert second.id == first.id
    assert second.ot_amount == Decimal("500.00")
    assert second.net_salary == Decimal("30500.00")


def test_month_forms_address_the_same_period(db, staff):
    first = process_payroll(db, staff.id, "june", 2024)
    second = process_payroll(db, staff.id, 6, 2024)
    third = process_payroll(db, staff.id, "Jun", 2024)

    assert first.id == second.id == third.id


def test_reprocessing_paid_record_is_rejected(db, staff):
    record = process_june(db, staff.id)
    mark_paid(db, record.id, date(2024, 7, 1))

    with pytest.raises(PayrollAlreadyPaid):
        process_june(db, staff.id, ot_hours=Decimal("20"))

    db.refresh(record)
    assert record.is_paid is True
    assert record.ot_hours == Decimal("5.00")
    assert record.net_salary == Decimal("27750.00")


def test_mark_paid_sets_date(db, staff):
    record = process_june(db, staff.id)

    paid = mark_paid(db, record.id, date(2024, 7, 1))

    assert paid.is_paid is True
    assert paid.paid_date == date(2024, 7, 1)


def test_mark_paid_twice_is_rejected(db, staff):
    record = process_june(db, staff.id)
    mark_paid(db, record.id, date(2024, 7, 1))

    with pytest.raises(PayrollAlreadyPaid):
        mark_paid(db, record.id, date(2024, 7, 5))

    db.refresh(record)
    assert record.paid_date == date(2024, 7, 1)


def test_mark_paid_unknown_record(db):
    with pytest.raises(RecordNotFound):
        mark_paid(db, uuid4(), date(2024, 7, 1))


def test_process_unknown_staff(db):
    with pytest.raises(StaffNotFound):
        process_payroll(db, uuid4(), "June", 2024)


def test_process_invalid_month(db, staff):
    with pytest.raises(InvalidMonth):
        process_payroll(db, staff.id, "Juno", 2024)


def test_process_rejects_negative_inputs(db, staff):
    with pytest.raises(ValidationError):
        process_payroll(db, staff.id, "June", 2024, food_deduction=Decimal("-1"))


def test_overtime_hours_default_to_attendance_ledger(db, staff):
    for day, end in ((3, 19), (4, 18)):
        entry = check_in(db, staff.id, datetime(2024, 6, day, 9, tzinfo=timezone.utc))
        check_out(db, entry.id, datetime(2024, 6, day, end, 30, tzinfo=timezone.utc))

    record = process_payroll(db, staff.id, "June", 2024)

    # 90 + 30 overtime minutes
    assert record.ot_hours == Decimal("2.00")
    assert record.ot_amount == Decimal("100.00")


def test_rate_falls_back_to_default(db):
    staff = create_staff(db, StaffCreate(name="Ben", base_salary=Decimal("20000")))

    record = process_payroll(db, staff.id, "May", 2024, ot_hours=Decimal("4"))

    assert record.ot_rate_per_hour == Decimal(str(global_settings.DEFAULT_OT_RATE)).quantize(Decimal("0.01"))
    assert record.ot_amount == (Decimal("4") * record.ot_rate_per_hour).quantize(Decimal("0.01"))


def test_only_approved_advances_are_deducted(db, staff):
    approved_advance(db, staff.id, "700")
    approved_advance(db, staff.id, "300")
    create_advance(db, AdvanceCreate(
        staff_id=staff.id, amount=Decimal("999"), reason="pending", repayment_plan="later"
    ))
    rejected = create_advance(db, AdvanceCreate(
        staff_id=staff.id, amount=Decimal("555"), reason="rejected", repayment_plan="later"
    ))
    update_advance_status(db, rejected.id, "rejected")

    assert sum_approved_advances(db, staff.id) == Decimal("1000.00")
    assert process_june(db, staff.id).advance_deducted == Decimal("1000.00")


def test_net_salary_can_be_negative(db):
    staff = create_staff(db, StaffCreate(name="Cleo", base_salary=Decimal("1000")))

    record = process_payroll(db, staff.id, "June", 2024, ot_hours=0, food_deduction=Decimal("1500"))

    assert record.net_salary == Decimal("-500.00")


def test_list_sorted_by_year_desc_then_month(db, staff):
    process_payroll(db, staff.id, "December", 2023, ot_hours=0)
    process_payroll(db, staff.id, "February", 2024, ot_hours=0)
    process_payroll(db, staff.id, "January", 2024, ot_hours=0)

    records = get_payrolls(db, staff_id=staff.id)

    assert [(record.year, record.month) for record in records] == [(2024, 1), (2024, 2), (2023, 12)]
    assert [record.month for record in get_payrolls(db, year=2024, month="feb")] == [2]


def test_delete_payroll(db, staff):
    record = process_june(db, staff.id)

    assert delete_payroll(db, record.id) is True
    assert get_payroll(db, record.id) is None

    with pytest.raises(RecordNotFound):
        delete_payroll(db, record.id)


def test_paid_payroll_cannot_be_deleted_or_reset(db, staff, caplog):
    record = process_june(db, staff.id)
    mark_paid(db, record.id, date(2024, 7, 1))

    with caplog.at_level(logging.WARNING, logger="salon_backend.fastapi.crud.payroll"):
        with pytest.raises(PayrollAlreadyPaid):
            delete_payroll(db, record.id)

    assert "Rejected deletion of paid payroll" in caplog.text
    with pytest.raises(PayrollAlreadyPaid):
        process_june(db, staff.id, food_deduction=Decimal("0"))

    record = get_payroll(db, record.id)
    assert record.is_paid is True
    assert record.paid_date == date(2024, 7, 1)
    assert record.food_deduction == Decimal("2500")


def test_delete_loses_to_concurrent_payment(db, session_factory, staff):
    record = process_june(db, staff.id)

    other = session_factory()
    try:
        mark_paid(other, record.id, date(2024, 7, 1))
    finally:
        other.close()

    # db still holds the unpaid copy of the record
    with pytest.raises(PayrollAlreadyPaid):
        delete_payroll(db, record.id)

    db.expire_all()
    assert get_payroll(db, record.id).is_paid is True
