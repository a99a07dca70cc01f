"""
Payroll Pydantic schemas for request/response validation.

This module defines the data validation schemas for payroll processing,
payment and listing.
"""

from uuid import UUID
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List, Union
from pydantic import BaseModel, Field, ConfigDict


class PayrollProcessRequest(BaseModel):
    """Schema for processing the payroll of one staff member and month."""

    staff_id: UUID = Field(
        ...,
        description="ID of the staff member"
    )

    month: Union[str, int] = Field(
        ...,
        description="Month as an English name (e.g. \"June\") or number 1-12"
    )

    year: int = Field(
        ...,
        ge=1900,
        le=9999,
        description="Calendar year"
    )

    ot_hours: Optional[Decimal] = Field(
        None,
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Overtime hours; taken from the attendance ledger when omitted"
    )

    extra_days: Decimal = Field(
        Decimal("0"),
        ge=0,
        le=31,
        description="Extra days worked"
    )

    food_deduction: Decimal = Field(
        Decimal("0"),
        ge=0,
        max_digits=12,
        decimal_places=2,
        description="Food deduction"
    )

    recurring_deduction: Decimal = Field(
        Decimal("0"),
        ge=0,
        max_digits=12,
        decimal_places=2,
        description="Recurring expense deduction"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "staff_id": "123e4567-e89b-12d3-a456-426614174000",
                "month": "June",
                "year": 2024,
                "ot_hours": "5",
                "extra_days": "0",
                "food_deduction": "2500",
                "recurring_deduction": "0"
            }
        }
    )


class MarkPaidRequest(BaseModel):
    """Schema for marking a payroll record as paid."""

    paid_date: date = Field(
        ...,
        description="Date of payment (YYYY-MM-DD)"
    )


class PayrollRead(BaseModel):
    """Schema for reading a payroll record."""

    id: UUID = Field(..., description="Unique identifier of the payroll record")
    staff_id: UUID = Field(..., description="ID of the staff member")
    month: int = Field(..., description="Month index (1-12)")
    month_name: str = Field(..., description="English month name")
    year: int = Field(..., description="Calendar year")

    base_salary: Decimal = Field(..., description="Monthly base salary")
    ot_hours: Decimal = Field(..., description="Overtime hours")
    ot_rate_per_hour: Decimal = Field(..., description="Overtime rate applied")
    ot_amount: Decimal = Field(..., description="Overtime pay")
    extra_days: Decimal = Field(..., description="Extra days worked")
    extra_day_pay: Decimal = Field(..., description="Pay for extra days")
    food_deduction: Decimal = Field(..., description="Food deduction")
    recurring_deduction: Decimal = Field(..., description="Recurring expense deduction")
    advance_deducted: Decimal = Field(..., description="Approved advances deducted")
    total_earnings: Decimal = Field(..., description="Total earnings")
    total_deductions: Decimal = Field(..., description="Total deductions")
    net_salary: Decimal = Field(..., description="Net salary (may be negative)")

    is_paid: bool = Field(..., description="Whether the salary has been paid")
    paid_date: Optional[date] = Field(None, description="Date of payment")
    created_at: datetime = Field(..., description="When the record was created")
    updated_at: datetime = Field(..., description="When the record was last changed")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "789e0123-e89b-12d3-a456-426614174000",
                "staff_id": "123e4567-e89b-12d3-a456-426614174000",
                "month": 6,
                "month_name": "June",
                "year": 2024,
                "base_salary": "30000.00",
                "ot_hours": "5.00",
                "ot_rate_per_hour": "50.00",
                "ot_amount": "250.00",
                "extra_days": "0.00",
                "extra_day_pay": "0.00",
                "food_deduction": "2500.00",
                "recurring_deduction": "0.00",
                "advance_deducted": "1000.00",
                "total_earnings": "30250.00",
                "total_deductions": "3500.00",
                "net_salary": "26750.00",
                "is_paid": False,
                "paid_date": None,
                "created_at": "2024-07-01T10:30:00Z",
                "updated_at": "2024-07-01T10:30:00Z"
            }
        }
    )


class PayrollListResponse(BaseModel):
    """Schema for payroll listing."""

    payroll_records: List[PayrollRead] = Field(
        ...,
        description="List of payroll records"
    )

    total: int = Field(
        ...,
        description="Number of payroll records returned"
    )
