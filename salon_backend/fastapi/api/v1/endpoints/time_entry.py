"""
Attendance API endpoints.

This module provides FastAPI endpoints for the attendance ledger: check-in,
check-out, temporary exits, placeholder days, listings, live estimates and
monthly overtime totals.
"""

import logging
from typing import Optional
from uuid import UUID
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from salon_backend.fastapi.dependencies.database import get_sync_db
from salon_backend.fastapi.core.utils import event_time
from salon_backend.fastapi.crud.time_entry import TimeLedgerCRUD
from salon_backend.fastapi.schemas.time_entry import (
    CheckInRequest, CheckOutRequest, StartExitRequest, EndExitRequest,
    PlaceholderCreate, ExitIntervalRead, TimeLedgerEntryRead,
    TimeLedgerListResponse, LiveEstimate, OvertimeTotal
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["attendance"])


def _unexpected(action: str, exc: Exception) -> HTTPException:
    logger.exception("Failed to %s", action)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {str(exc)}"
    )


@router.post("/check-in", response_model=TimeLedgerEntryRead,
             status_code=status.HTTP_201_CREATED, summary="Check In")
async def check_in(
    payload: CheckInRequest,
    db: Session = Depends(get_sync_db)
):
    """
    Check a staff member in for today.

    **Parameters:**
    - **staff_id**: Staff member checking in
    - **timestamp**: Time of check-in (optional, defaults to now)

    **Returns:**
    - The attendance entry for the day

    **Errors:**
    - **404**: Staff member not found or inactive
    - **409**: Already checked in today
    - **422**: Validation errors
    """
    try:
        entry = TimeLedgerCRUD(db).check_in(payload.staff_id, event_time(payload.timestamp))
        return TimeLedgerEntryRead.model_validate(entry)
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("check in", e)


@router.post("/placeholder", response_model=TimeLedgerEntryRead,
             status_code=status.HTTP_201_CREATED, summary="Create Placeholder Day")
async def create_placeholder(
    payload: PlaceholderCreate,
    db: Session = Depends(get_sync_db)
):
    """
    Pre-create an attendance day without a check-in (absence or leave).

    **Parameters:**
    - **staff_id**: Staff member
    - **work_date**: Day of the entry
    - **status**: absent or on_leave
    - **notes**: Optional notes

    **Returns:**
    - The created attendance entry

    **Errors:**
    - **404**: Staff member not found
    - **409**: An entry already exists for that day
    """
    try:
        entry = TimeLedgerCRUD(db).create_placeholder(
            payload.staff_id, payload.work_date, payload.status, payload.notes
        )
        return TimeLedgerEntryRead.model_validate(entry)
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("create placeholder entry", e)


@router.post("/{entry_id}/check-out", response_model=TimeLedgerEntryRead, summary="Check Out")
async def check_out(
    entry_id: UUID,
    payload: Optional[CheckOutRequest] = None,
    db: Session = Depends(get_sync_db)
):
    """
    Check out of an attendance entry and compute the day's totals.

    **Parameters:**
    - **entry_id**: Attendance entry
    - **timestamp**: Time of check-out (optional, defaults to now)

    **Returns:**
    - The finalized attendance entry with worked and overtime minutes

    **Errors:**
    - **400**: Not checked in, already checked out, exit still open or invalid time
    - **404**: Attendance entry not found
    - **409**: Entry changed concurrently
    """
    try:
        timestamp = payload.timestamp if payload else None
        entry = TimeLedgerCRUD(db).check_out(entry_id, event_time(timestamp))
        return TimeLedgerEntryRead.model_validate(entry)
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("check out", e)


@router.post("/{entry_id}/exits", response_model=ExitIntervalRead,
             status_code=status.HTTP_201_CREATED, summary="Start Temporary Exit")
async def start_exit(
    entry_id: UUID,
    payload: StartExitRequest,
    db: Session = Depends(get_sync_db)
):
    """
    Start a temporary exit (lunch, errand, ...) on a checked-in entry.

    **Parameters:**
    - **entry_id**: Attendance entry
    - **reason**: Why the staff member is leaving
    - **timestamp**: Time the exit starts (optional, defaults to now)

    **Returns:**
    - The open exit

    **Errors:**
    - **400**: Missing reason, not checked in, already checked out, exit already open or invalid time
    - **404**: Attendance entry not found
    - **409**: Entry changed concurrently
    """
    try:
        exit_ = TimeLedgerCRUD(db).start_exit(entry_id, payload.reason, event_time(payload.timestamp))
        return ExitIntervalRead.model_validate(exit_)
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("start exit", e)


@router.put("/exits/{exit_id}/end", response_model=ExitIntervalRead, summary="End Temporary Exit")
async def end_exit(
    exit_id: UUID,
    payload: Optional[EndExitRequest] = None,
    db: Session = Depends(get_sync_db)
):
    """
    End a temporary exit.

    **Parameters:**
    - **exit_id**: Temporary exit
    - **timestamp**: Time the exit ends (optional, defaults to now)

    **Returns:**
    - The closed exit with its duration in minutes

    **Errors:**
    - **400**: Exit already ended
    - **404**: Temporary exit not found
    """
    try:
        timestamp = payload.timestamp if payload else None
        exit_ = TimeLedgerCRUD(db).end_exit(exit_id, event_time(timestamp))
        return ExitIntervalRead.model_validate(exit_)
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("end exit", e)


@router.get("/overtime", response_model=OvertimeTotal, summary="Monthly Overtime Total")
async def get_overtime_total(
    staff_id: UUID = Query(..., description="Staff member"),
    year: int = Query(..., ge=1900, le=9999, description="Calendar year"),
    month: str = Query(..., description="Month name or number"),
    db: Session = Depends(get_sync_db)
):
    """
    Overtime of a staff member over the finalized days of a month.

    **Returns:**
    - Total overtime minutes and hours and the number of entries counted

    **Errors:**
    - **400**: Unrecognized month
    - **404**: Staff member not found
    """
    try:
        return OvertimeTotal(**TimeLedgerCRUD(db).get_overtime_total(staff_id, year, month))
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("compute overtime total", e)


@router.get("/", response_model=TimeLedgerListResponse, summary="List Attendance Entries")
async def list_entries(
    staff_id: Optional[UUID] = Query(None, description="Filter by staff member"),
    work_date: Optional[date] = Query(None, description="Filter by day"),
    year: Optional[int] = Query(None, ge=1900, le=9999, description="Filter by year (with month)"),
    month: Optional[str] = Query(None, description="Filter by month name or number (with year)"),
    start_date: Optional[date] = Query(None, description="Entries from this day"),
    end_date: Optional[date] = Query(None, description="Entries until this day"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum entries to return"),
    db: Session = Depends(get_sync_db)
):
    """
    List attendance entries: a day's attendance, a month's attendance or a
    staff member's history.

    **Returns:**
    - Entries, most recent day first

    **Errors:**
    - **400**: year given without month (or the reverse), or unrecognized month
    """
    try:
        entries = TimeLedgerCRUD(db).list_entries(
            staff_id=staff_id,
            work_date=work_date,
            year=year,
            month=month,
            start_date=start_date,
            end_date=end_date,
            limit=limit
        )
        return TimeLedgerListResponse(
            entries=[TimeLedgerEntryRead.model_validate(entry) for entry in entries],
            total=len(entries)
        )
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("list attendance entries", e)


@router.get("/{entry_id}", response_model=TimeLedgerEntryRead, summary="Get Attendance Entry")
async def get_entry(
    entry_id: UUID,
    db: Session = Depends(get_sync_db)
):
    """
    Get an attendance entry with its exits.

    **Errors:**
    - **404**: Attendance entry not found
    """
    entry = TimeLedgerCRUD(db).require_entry(entry_id)
    return TimeLedgerEntryRead.model_validate(entry)


@router.get("/{entry_id}/live", response_model=LiveEstimate, summary="Live Worked Time")
async def get_live_estimate(
    entry_id: UUID,
    db: Session = Depends(get_sync_db)
):
    """
    Worked time of an entry as of now, counting an ongoing exit up to now.
    The estimate is for display and is never stored.

    **Errors:**
    - **400**: Entry has no check-in
    - **404**: Attendance entry not found
    """
    try:
        return LiveEstimate(**TimeLedgerCRUD(db).live_estimate(entry_id, event_time()))
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("estimate worked time", e)
