"""
Payroll CRUD operations.

This module provides processing, reading, payment and deletion of monthly
payroll records. Processing upserts one record per staff member and period;
a record that has been paid never changes again.
"""

import logging
from uuid import UUID
from typing import List, Optional, Union
from datetime import date, datetime, timezone
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy import func, desc, asc, delete, update
from sqlalchemy.exc import IntegrityError

from salon_backend.fastapi.core.exceptions import (
    ConcurrentUpdate, PayrollAlreadyPaid, RecordNotFound, ValidationError
)
from salon_backend.fastapi.core.init_settings import global_settings
from salon_backend.fastapi.core.utils import normalize_month
from salon_backend.fastapi.crud.staff import require_staff
from salon_backend.fastapi.crud.time_entry import TimeLedgerCRUD
from salon_backend.fastapi.models.advance import AdvancePayment, AdvanceStatus
from salon_backend.fastapi.models.payroll import PayrollRecord
from salon_backend.fastapi.services.payroll_calculator import (
    PayrollInputs, calculate_payroll, to_money
)

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]


def get_payroll(db: Session, payroll_id: UUID) -> Optional[PayrollRecord]:
    """
    Get payroll record by ID.

    Args:
        db: Database session
        payroll_id: Payroll record UUID

    Returns:
        PayrollRecord instance or None if not found
    """
    return db.query(PayrollRecord).filter(PayrollRecord.id == payroll_id).first()


def get_period_payroll(db: Session, staff_id: UUID, month: int, year: int) -> Optional[PayrollRecord]:
    """Get the payroll record of a staff member for one period, or None."""
    return db.query(PayrollRecord).filter(
        PayrollRecord.staff_id == staff_id,
        PayrollRecord.month == month,
        PayrollRecord.year == year
    ).first()


def get_payrolls(
    db: Session,
    staff_id: Optional[UUID] = None,
    year: Optional[int] = None,
    month: Optional[Union[str, int]] = None,
    skip: int = 0,
    limit: int = 100
) -> List[PayrollRecord]:
    """
    Get payroll records with optional filtering.

    Args:
        db: Database session
        staff_id: Filter by staff member
        year: Filter by year
        month: Filter by month (name or number)
        skip: Number of records to skip
        limit: Maximum number of records to return

    Returns:
        Payroll records, newest year first and January to December within a year
    """
    query = db.query(PayrollRecord)

    if staff_id:
        query = query.filter(PayrollRecord.staff_id == staff_id)

    if year is not None:
        query = query.filter(PayrollRecord.year == year)

    if month is not None:
        query = query.filter(PayrollRecord.month == normalize_month(month))

    return (query
            .order_by(desc(PayrollRecord.year), asc(PayrollRecord.month), asc(PayrollRecord.created_at))
            .offset(skip)
            .limit(limit)
            .all())


def sum_approved_advances(db: Session, staff_id: UUID) -> Decimal:
    """
    Total of all approved advances of a staff member.

    Every approved advance is counted, whatever its request date.
    """
    total = db.query(func.coalesce(func.sum(AdvancePayment.amount), 0)).filter(
        AdvancePayment.staff_id == staff_id,
        AdvancePayment.status == AdvanceStatus.APPROVED
    ).scalar()
    return to_money(total)


def process_payroll(
    db: Session,
    staff_id: UUID,
    month: Union[str, int],
    year: int,
    ot_hours: Optional[Number] = None,
    extra_days: Number = 0,
    food_deduction: Number = 0,
    recurring_deduction: Number = 0
) -> PayrollRecord:
    """
    Compute and store the payroll of one staff member for one month.

    Re-processing an unpaid period overwrites its record with the new
    figures. When ``ot_hours`` is omitted it is taken from the overtime
    recorded in the attendance ledger for the month.

    Args:
        db: Database session
        staff_id: Staff member UUID
        month: Month name or number
        year: Calendar year
        ot_hours: Overtime hours to pay
        extra_days: Extra days worked
        food_deduction: Food deduction
        recurring_deduction: Recurring expense deduction

    Returns:
        The stored PayrollRecord

    Raises:
        InvalidMonth: If the month is not recognized
        StaffNotFound: If the staff member doesn't exist
        PayrollAlreadyPaid: If the period has already been paid
    """
    month_index = normalize_month(month)
    if not 1900 <= year <= 9999:
        raise ValidationError("Year must be between 1900 and 9999")
    for field_name, value in (("ot_hours", ot_hours), ("extra_days", extra_days),
                              ("food_deduction", food_deduction),
                              ("recurring_deduction", recurring_deduction)):
        if value is not None and Decimal(str(value)) < 0:
            raise ValidationError(f"{field_name} must not be negative")

    staff = require_staff(db, staff_id)

    existing = get_period_payroll(db, staff_id, month_index, year)
    if existing is not None and existing.is_paid:
        logger.warning("Rejected re-processing of paid payroll %s (%s %s)",
                       existing.id, existing.month_name, year)
        raise PayrollAlreadyPaid()

    if ot_hours is None:
        ot_hours = TimeLedgerCRUD(db).get_overtime_total(staff_id, year, month_index)["total_ot_hours"]

    rate = staff.ot_rate_per_hour
    if rate is None:
        rate = global_settings.DEFAULT_OT_RATE

    figures = calculate_payroll(
        base_salary=staff.base_salary,
        ot_rate_per_hour=rate,
        inputs=PayrollInputs(
            ot_hours=to_money(ot_hours),
            extra_days=to_money(extra_days),
            food_deduction=to_money(food_deduction),
            recurring_deduction=to_money(recurring_deduction),
        ),
        advance_deducted=sum_approved_advances(db, staff_id),
        days_per_month=global_settings.PAYROLL_DAYS_PER_MONTH,
    )
    values = figures.as_dict()

    if existing is None:
        record = PayrollRecord(
            staff_id=staff_id,
            month=month_index,
            year=year,
            is_paid=False,
            paid_date=None,
            **values
        )
        db.add(record)
        try:
            db.commit()
        except IntegrityError:
            # Another request created the period first; overwrite it instead
            db.rollback()
            existing = get_period_payroll(db, staff_id, month_index, year)
            if existing is None:
                raise ConcurrentUpdate()
        else:
            db.refresh(record)
            logger.info("Processed payroll %s for staff %s, %s %s: net=%s",
                        record.id, staff_id, record.month_name, year, record.net_salary)
            return record

    result = db.execute(
        update(PayrollRecord)
        .where(PayrollRecord.id == existing.id, PayrollRecord.is_paid == False)
        .values(is_paid=False, paid_date=None, updated_at=datetime.now(timezone.utc), **values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.warning("Rejected re-processing of payroll %s: paid concurrently", existing.id)
        raise PayrollAlreadyPaid()

    db.commit()
    db.refresh(existing)
    logger.info("Re-processed payroll %s for staff %s, %s %s: net=%s",
                existing.id, staff_id, existing.month_name, year, existing.net_salary)
    return existing


def mark_paid(db: Session, payroll_id: UUID, paid_date: date) -> PayrollRecord:
    """
    Mark a payroll record as paid.

    Args:
        db: Database session
        payroll_id: Payroll record UUID
        paid_date: Date of payment

    Returns:
        Updated PayrollRecord

    Raises:
        RecordNotFound: If the record doesn't exist
        PayrollAlreadyPaid: If the record is already paid
    """
    record = get_payroll(db, payroll_id)
    if record is None:
        raise RecordNotFound()
    if record.is_paid:
        logger.warning("Rejected payment of payroll %s: already paid on %s", payroll_id, record.paid_date)
        raise PayrollAlreadyPaid()

    result = db.execute(
        update(PayrollRecord)
        .where(PayrollRecord.id == payroll_id, PayrollRecord.is_paid == False)
        .values(is_paid=True, paid_date=paid_date, updated_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.warning("Rejected payment of payroll %s: paid concurrently", payroll_id)
        raise PayrollAlreadyPaid()

    db.commit()
    db.refresh(record)
    logger.info("Payroll %s marked paid on %s", payroll_id, paid_date)
    return record


def delete_payroll(db: Session, payroll_id: UUID) -> bool:
    """
    Delete an unpaid payroll record.

    Paid records are frozen and cannot be deleted.

    Args:
        db: Database session
        payroll_id: Payroll record UUID

    Returns:
        True when the record was deleted

    Raises:
        RecordNotFound: If the record doesn't exist
        PayrollAlreadyPaid: If the record has been paid
    """
    record = get_payroll(db, payroll_id)
    if record is None:
        raise RecordNotFound()
    if record.is_paid:
        logger.warning("Rejected deletion of paid payroll %s (%s %s)",
                       payroll_id, record.month_name, record.year)
        raise PayrollAlreadyPaid("Paid payroll records cannot be deleted")

    result = db.execute(
        delete(PayrollRecord)
        .where(PayrollRecord.id == payroll_id, PayrollRecord.is_paid == False)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.warning("Rejected deletion of payroll %s: paid concurrently", payroll_id)
        raise PayrollAlreadyPaid("Paid payroll records cannot be deleted")

    db.expunge(record)
    db.commit()
    logger.info("Deleted payroll %s (%s %s)", payroll_id, record.month_name, record.year)
    return True
