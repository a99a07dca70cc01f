"""
Advance payment CRUD operations.

Advances are requested as pending and then approved or rejected by an operator.
Approved advances are deducted by payroll processing.
"""

import logging
from uuid import UUID
from typing import List, Optional, Union
from datetime import datetime, timezone
from sqlalchemy import desc
from sqlalchemy.orm import Session

from salon_backend.fastapi.core.exceptions import AdvanceNotFound, ValidationError
from salon_backend.fastapi.crud.staff import require_staff
from salon_backend.fastapi.models.advance import AdvancePayment, AdvanceStatus
from salon_backend.fastapi.schemas.advance import AdvanceCreate

logger = logging.getLogger(__name__)


def create_advance(db: Session, advance_data: AdvanceCreate) -> AdvancePayment:
    """
    Record a new advance request in pending state.

    Raises:
        StaffNotFound: If the staff member doesn't exist
    """
    require_staff(db, advance_data.staff_id)

    now = datetime.now(timezone.utc)
    advance = AdvancePayment(
        staff_id=advance_data.staff_id,
        request_date=now,
        amount=advance_data.amount,
        reason=advance_data.reason,
        repayment_plan=advance_data.repayment_plan,
        status=AdvanceStatus.PENDING,
    )
    db.add(advance)
    db.commit()
    db.refresh(advance)

    logger.info("Advance %s of %s requested by staff %s", advance.id, advance.amount, advance.staff_id)
    return advance


def get_advance(db: Session, advance_id: UUID) -> Optional[AdvancePayment]:
    return db.query(AdvancePayment).filter(AdvancePayment.id == advance_id).first()


def get_advances(
    db: Session,
    staff_id: Optional[UUID] = None,
    status: Optional[Union[str, AdvanceStatus]] = None,
    skip: int = 0,
    limit: int = 100
) -> List[AdvancePayment]:
    """
    Get advance payments with optional filtering.

    Args:
        db: Database session
        staff_id: Filter by staff member
        status: Filter by review status
        skip: Number of records to skip
        limit: Maximum number of records to return

    Returns:
        Advances, newest request first
    """
    query = db.query(AdvancePayment)

    if staff_id:
        query = query.filter(AdvancePayment.staff_id == staff_id)

    if status:
        query = query.filter(AdvancePayment.status == AdvanceStatus(status))

    return query.order_by(desc(AdvancePayment.request_date)).offset(skip).limit(limit).all()


def update_advance_status(
    db: Session,
    advance_id: UUID,
    status: Union[str, AdvanceStatus]
) -> AdvancePayment:
    """
    Approve or reject an advance.

    Approval stamps ``approved_date``; rejection clears it.

    Raises:
        AdvanceNotFound: If the advance doesn't exist
        ValidationError: If the status is not approved or rejected
    """
    try:
        new_status = AdvanceStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown advance status: {status!r}")
    if new_status == AdvanceStatus.PENDING:
        raise ValidationError("Status must be approved or rejected")

    advance = get_advance(db, advance_id)
    if advance is None:
        raise AdvanceNotFound()

    advance.status = new_status
    advance.approved_date = datetime.now(timezone.utc) if advance.is_approved else None
    db.commit()
    db.refresh(advance)

    logger.info("Advance %s %s", advance_id, new_status.value)
    return advance
