"""
Payroll API endpoints.

This module provides FastAPI endpoints for processing monthly payroll,
listing and reading payroll records, marking them paid and deleting them.
"""

import logging
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from salon_backend.fastapi.dependencies.database import get_sync_db
from salon_backend.fastapi.core.exceptions import RecordNotFound
from salon_backend.fastapi.schemas.payroll import (
    PayrollProcessRequest, PayrollRead, MarkPaidRequest, PayrollListResponse
)
from salon_backend.fastapi.crud.payroll import (
    process_payroll, get_payroll, get_payrolls, mark_paid, delete_payroll
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payroll"])


@router.post("/process", response_model=PayrollRead,
             status_code=status.HTTP_201_CREATED, summary="Process Monthly Payroll")
async def process_payroll_record(
    payload: PayrollProcessRequest,
    db: Session = Depends(get_sync_db)
):
    """
    Compute and store the payroll of a staff member for one month.

    Processing the same unpaid month again overwrites the record.

    **Parameters:**
    - **staff_id**: Staff member
    - **month**: Month name ("June", "jun") or number (1-12)
    - **year**: Calendar year
    - **ot_hours**: Overtime hours (optional, taken from attendance when omitted)
    - **extra_days**: Extra days worked
    - **food_deduction**: Food deduction
    - **recurring_deduction**: Recurring expense deduction

    **Returns:**
    - Payroll record with earnings, deductions and net salary

    **Errors:**
    - **400**: Unrecognized month
    - **404**: Staff member not found
    - **409**: The month has already been paid
    - **422**: Validation errors (negative amounts)
    """
    try:
        record = process_payroll(
            db,
            staff_id=payload.staff_id,
            month=payload.month,
            year=payload.year,
            ot_hours=payload.ot_hours,
            extra_days=payload.extra_days,
            food_deduction=payload.food_deduction,
            recurring_deduction=payload.recurring_deduction
        )
        return PayrollRead.model_validate(record)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to process payroll")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to process payroll: {str(e)}"
        )


@router.get("/", response_model=PayrollListResponse, summary="List Payroll Records")
async def list_payroll_records(
    staff_id: Optional[UUID] = Query(None, description="Filter by staff member"),
    year: Optional[int] = Query(None, ge=1900, le=9999, description="Filter by year"),
    month: Optional[str] = Query(None, description="Filter by month name or number"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    db: Session = Depends(get_sync_db)
):
    """
    Get payroll records, newest year first and by month within a year.

    **Parameters:**
    - **staff_id**: Filter by staff member (optional)
    - **year**: Filter by year (optional)
    - **month**: Filter by month (optional)
    - **skip**: Number of records to skip (pagination)
    - **limit**: Maximum number of records to return

    **Errors:**
    - **400**: Unrecognized month
    """
    try:
        records = get_payrolls(db, staff_id=staff_id, year=year, month=month, skip=skip, limit=limit)
        return PayrollListResponse(
            payroll_records=[PayrollRead.model_validate(record) for record in records],
            total=len(records)
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to list payroll records")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to list payroll records: {str(e)}"
        )


@router.get("/{payroll_id}", response_model=PayrollRead, summary="Get Payroll Record")
async def get_payroll_record(
    payroll_id: UUID,
    db: Session = Depends(get_sync_db)
):
    """
    Get a payroll record by ID.

    **Errors:**
    - **404**: Payroll record not found
    """
    record = get_payroll(db, payroll_id)
    if not record:
        raise RecordNotFound()
    return PayrollRead.model_validate(record)


@router.patch("/{payroll_id}/paid", response_model=PayrollRead, summary="Mark Payroll Paid")
async def mark_payroll_paid(
    payroll_id: UUID,
    payload: MarkPaidRequest,
    db: Session = Depends(get_sync_db)
):
    """
    Mark a payroll record as paid. Paid records can no longer be re-processed.

    **Parameters:**
    - **paid_date**: Date of payment

    **Errors:**
    - **404**: Payroll record not found
    - **409**: Record already paid
    """
    try:
        record = mark_paid(db, payroll_id, payload.paid_date)
        return PayrollRead.model_validate(record)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to mark payroll %s paid", payroll_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to mark payroll paid: {str(e)}"
        )


@router.delete("/{payroll_id}", summary="Delete Payroll Record")
async def delete_payroll_record(
    payroll_id: UUID,
    db: Session = Depends(get_sync_db)
):
    """
    Delete an unpaid payroll record. Paid records are frozen.

    **Returns:**
    - Success message with the deleted record ID

    **Errors:**
    - **404**: Payroll record not found
    - **409**: Record already paid
    """
    try:
        delete_payroll(db, payroll_id)
        return {"message": "Payroll record deleted successfully", "payroll_id": str(payroll_id)}
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to delete payroll %s", payroll_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete payroll record: {str(e)}"
        )
