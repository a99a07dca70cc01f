"""
Pydantic schemas for time ledger validation and serialization.

This module defines the request and response schemas for check-in,
check-out, temporary exits and overtime reporting.
"""

from datetime import date, datetime
from typing import List, Literal, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from salon_backend.fastapi.models.time_entry import AttendanceStatus


class ClockRequest(BaseModel):
    """Base schema for requests that carry an optional event time."""

    timestamp: Optional[datetime] = Field(
        None,
        description="Time of the event in ISO-8601 (defaults to the time the request is received)"
    )


class CheckInRequest(ClockRequest):
    """Schema for checking a staff member in."""

    staff_id: UUID = Field(..., description="Staff member checking in")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "staff_id": "123e4567-e89b-12d3-a456-426614174000",
                "timestamp": "2024-06-03T09:00:00Z"
            }
        }
    )


class CheckOutRequest(ClockRequest):
    """Schema for checking out of an attendance entry."""


class StartExitRequest(ClockRequest):
    """Schema for starting a temporary exit."""

    reason: Optional[str] = Field(
        None,
        max_length=255,
        description="Why the staff member is leaving",
        examples=["lunch", "bank errand"]
    )


class EndExitRequest(ClockRequest):
    """Schema for ending a temporary exit."""


class PlaceholderCreate(BaseModel):
    """Schema for pre-creating an attendance day without a check-in."""

    staff_id: UUID = Field(..., description="Staff member")
    work_date: date = Field(..., description="Day of the entry (YYYY-MM-DD)")
    status: Literal["absent", "on_leave"] = Field(
        "absent",
        description="Initial status of the day"
    )
    notes: Optional[str] = Field(None, max_length=500, description="Optional notes")


class ExitIntervalRead(BaseModel):
    """Schema for reading a temporary exit."""

    id: UUID = Field(..., description="Exit identifier")
    entry_id: UUID = Field(..., description="Owning attendance entry")
    start_time: datetime = Field(..., description="When the exit started")
    end_time: Optional[datetime] = Field(None, description="When the exit ended")
    reason: str = Field(..., description="Reason for the exit")
    duration_minutes: int = Field(..., description="Minutes away (0 while ongoing)")

    model_config = ConfigDict(from_attributes=True)


class TimeLedgerEntryRead(BaseModel):
    """Schema for reading an attendance entry."""

    id: UUID = Field(..., description="Entry identifier")
    staff_id: UUID = Field(..., description="Staff member")
    work_date: date = Field(..., description="Day of the entry")
    check_in: Optional[datetime] = Field(None, description="Check-in time")
    check_out: Optional[datetime] = Field(None, description="Check-out time")
    exits: List[ExitIntervalRead] = Field(default_factory=list, description="Temporary exits")
    total_worked_minutes: int = Field(..., description="Worked minutes (final after check-out)")
    overtime_minutes: int = Field(..., description="Overtime minutes")
    is_complete: bool = Field(..., description="Whether the daily standard was reached")
    standard_minutes: int = Field(..., description="Daily standard used for this entry")
    status: AttendanceStatus = Field(..., description="Attendance status")
    notes: Optional[str] = Field(None, description="Notes")
    created_at: datetime = Field(..., description="Record creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)


class TimeLedgerListResponse(BaseModel):
    """Schema for listing attendance entries."""

    entries: List[TimeLedgerEntryRead] = Field(..., description="Attendance entries")
    total: int = Field(..., description="Number of entries returned")


class LiveEstimate(BaseModel):
    """Display-only totals for a day still in progress."""

    entry_id: UUID = Field(..., description="Entry identifier")
    as_of: datetime = Field(..., description="Time the estimate was computed for")
    is_final: bool = Field(..., description="True when the entry is already checked out")
    on_exit: bool = Field(..., description="Whether an exit is currently open")
    total_worked_minutes: int = Field(..., description="Worked minutes so far")
    overtime_minutes: int = Field(..., description="Overtime minutes so far")
    is_complete: bool = Field(..., description="Whether the standard is already reached")
    standard_minutes: int = Field(..., description="Daily standard minutes")


class OvertimeTotal(BaseModel):
    """Monthly overtime aggregated from finalized attendance entries."""

    staff_id: UUID = Field(..., description="Staff member")
    year: int = Field(..., description="Calendar year")
    month: int = Field(..., description="Month index (1-12)")
    month_name: str = Field(..., description="English month name")
    entry_count: int = Field(..., description="Finalized entries in the month")
    total_ot_minutes: int = Field(..., description="Overtime minutes in the month")
    total_ot_hours: float = Field(..., description="Overtime hours (minutes / 60, two decimals)")
