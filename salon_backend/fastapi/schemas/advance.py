"""
Advance payment schemas for request/response validation.
"""

from uuid import UUID
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Literal
from pydantic import BaseModel, Field, ConfigDict, field_validator

from salon_backend.fastapi.models.advance import AdvanceStatus


class AdvanceCreate(BaseModel):
    """Schema for requesting a new advance."""

    staff_id: UUID = Field(..., description="Staff member requesting the advance")

    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=12,
        decimal_places=2,
        description="Amount requested"
    )

    reason: str = Field(
        ...,
        max_length=500,
        description="Reason for the advance"
    )

    repayment_plan: str = Field(
        ...,
        max_length=500,
        description="Agreed repayment plan"
    )

    @field_validator('reason', 'repayment_plan')
    @classmethod
    def validate_not_blank(cls, v):
        """Reject blank text fields."""
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "staff_id": "123e4567-e89b-12d3-a456-426614174000",
                "amount": "1000.00",
                "reason": "Medical expenses",
                "repayment_plan": "Deduct from next salary"
            }
        }
    )


class AdvanceStatusUpdate(BaseModel):
    """Schema for approving or rejecting an advance."""

    status: Literal["approved", "rejected"] = Field(
        ...,
        description="New review state"
    )


class AdvanceRead(BaseModel):
    """Schema for reading an advance payment."""

    id: UUID = Field(..., description="Advance identifier")
    staff_id: UUID = Field(..., description="Staff member")
    request_date: datetime = Field(..., description="When the advance was requested")
    amount: Decimal = Field(..., description="Advance amount")
    reason: str = Field(..., description="Reason for the advance")
    repayment_plan: str = Field(..., description="Repayment plan")
    status: AdvanceStatus = Field(..., description="Review status")
    approved_date: Optional[datetime] = Field(None, description="When the advance was approved")
    created_at: datetime = Field(..., description="Record creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)


class AdvanceListResponse(BaseModel):
    """Schema for listing advance payments."""

    advances: List[AdvanceRead] = Field(..., description="Advance payments")
    total: int = Field(..., description="Number of advances returned")
