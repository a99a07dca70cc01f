from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError as SchemaValidationError

from salon_backend.fastapi.core.exceptions import AdvanceNotFound, StaffNotFound, ValidationError
from salon_backend.fastapi.crud.advance import create_advance, get_advances, update_advance_status
from salon_backend.fastapi.models.advance import AdvanceStatus
from salon_backend.fastapi.schemas.advance import AdvanceCreate


def request(staff_id, amount="500", reason="school fees"):
    return AdvanceCreate(staff_id=staff_id, amount=Decimal(amount), reason=reason,
                         repayment_plan="two installments")


def test_new_advance_is_pending(db, staff):
    advance = create_advance(db, request(staff.id))

    assert advance.status == AdvanceStatus.PENDING
    assert advance.approved_date is None
    assert advance.amount == Decimal("500.00")


def test_approve_then_reject_clears_approval_date(db, staff):
    advance = create_advance(db, request(staff.id))

    approved = update_advance_status(db, advance.id, "approved")
    assert approved.status == AdvanceStatus.APPROVED
    assert approved.approved_date is not None

    rejected = update_advance_status(db, advance.id, AdvanceStatus.REJECTED)
    assert rejected.status == AdvanceStatus.REJECTED
    assert rejected.approved_date is None


def test_status_must_be_a_review_outcome(db, staff):
    advance = create_advance(db, request(staff.id))

    with pytest.raises(ValidationError):
        update_advance_status(db, advance.id, "pending")
    with pytest.raises(ValidationError):
        update_advance_status(db, advance.id, "cancelled")


def test_unknown_advance_and_staff(db):
    with pytest.raises(AdvanceNotFound):
        update_advance_status(db, uuid4(), "approved")
    with pytest.raises(StaffNotFound):
        create_advance(db, request(uuid4()))


def test_list_filters_by_status(db, staff):
    first = create_advance(db, request(staff.id, "100"))
    create_advance(db, request(staff.id, "200"))
    update_advance_status(db, first.id, "approved")

    approved = get_advances(db, staff_id=staff.id, status="approved")

    assert [advance.id for advance in approved] == [first.id]
    assert len(get_advances(db, staff_id=staff.id)) == 2


@pytest.mark.parametrize("amount, reason", [("0", "rent"), ("-5", "rent"), ("10", "   ")])
def test_request_schema_rejects_bad_input(amount, reason):
    with pytest.raises(SchemaValidationError):
        AdvanceCreate(staff_id=uuid4(), amount=Decimal(amount), reason=reason, repayment_plan="x")
