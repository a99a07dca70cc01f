"""
Staff schemas for seeding and reading staff reference data.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class StaffCreate(BaseModel):
    """Schema for creating a staff member."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    position: str = Field("stylist", max_length=100, description="Job title")
    base_salary: Optional[Decimal] = Field(
        None,
        ge=0,
        max_digits=12,
        decimal_places=2,
        description="Monthly base salary"
    )
    ot_rate_per_hour: Optional[Decimal] = Field(
        None,
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Overtime pay per hour (shop default when empty)"
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Trim the name and reject blanks."""
        if not v.strip():
            raise ValueError("Name must not be empty")
        return v.strip()
