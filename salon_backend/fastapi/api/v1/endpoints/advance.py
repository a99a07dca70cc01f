"""
Advance payment API endpoints.
"""

import logging
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from salon_backend.fastapi.dependencies.database import get_sync_db
from salon_backend.fastapi.models.advance import AdvanceStatus
from salon_backend.fastapi.schemas.advance import (
    AdvanceCreate, AdvanceStatusUpdate, AdvanceRead, AdvanceListResponse
)
from salon_backend.fastapi.crud.advance import (
    create_advance, get_advances, update_advance_status
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["advances"])


@router.post("/", response_model=AdvanceRead,
             status_code=status.HTTP_201_CREATED, summary="Request Advance")
async def request_advance(
    payload: AdvanceCreate,
    db: Session = Depends(get_sync_db)
):
    """
    Record an advance request. New advances start as pending.

    **Parameters:**
    - **staff_id**: Staff member
    - **amount**: Amount requested (positive)
    - **reason**: Reason for the advance
    - **repayment_plan**: Agreed repayment plan

    **Errors:**
    - **404**: Staff member not found
    - **422**: Validation errors
    """
    try:
        return AdvanceRead.model_validate(create_advance(db, payload))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to create advance")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create advance: {str(e)}"
        )


@router.get("/", response_model=AdvanceListResponse, summary="List Advances")
async def list_advances(
    staff_id: Optional[UUID] = Query(None, description="Filter by staff member"),
    status_filter: Optional[AdvanceStatus] = Query(None, alias="status", description="Filter by status"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    db: Session = Depends(get_sync_db)
):
    """
    List advances, newest request first.
    """
    advances = get_advances(db, staff_id=staff_id, status=status_filter, skip=skip, limit=limit)
    return AdvanceListResponse(
        advances=[AdvanceRead.model_validate(advance) for advance in advances],
        total=len(advances)
    )


@router.patch("/{advance_id}/status", response_model=AdvanceRead, summary="Review Advance")
async def review_advance(
    advance_id: UUID,
    payload: AdvanceStatusUpdate,
    db: Session = Depends(get_sync_db)
):
    """
    Approve or reject an advance. Approved advances are deducted from payroll.

    **Errors:**
    - **404**: Advance not found
    - **422**: Status other than approved or rejected
    """
    try:
        return AdvanceRead.model_validate(update_advance_status(db, advance_id, payload.status))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to update advance %s", advance_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update advance: {str(e)}"
        )
