"""
Monthly payroll arithmetic.

Combines base salary, overtime pay, extra-day pay and deductions into the
figures stored on a payroll record. Amounts are Decimal and rounded to cents
half-up after every product, so identical inputs always give identical
figures.
"""

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CENT = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_money(value: Number) -> Decimal:
    """Coerce a number to a Decimal rounded to cents."""
    if value is None:
        return Decimal("0.00")
    if isinstance(value, float):
        value = repr(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PayrollInputs:
    """Operator-entered adjustments for a payroll run."""

    ot_hours: Decimal = Decimal("0")
    extra_days: Decimal = Decimal("0")
    food_deduction: Decimal = Decimal("0")
    recurring_deduction: Decimal = Decimal("0")


@dataclass(frozen=True)
class PayrollFigures:
    base_salary: Decimal
    ot_hours: Decimal
    ot_rate_per_hour: Decimal
    ot_amount: Decimal
    extra_days: Decimal
    extra_day_pay: Decimal
    food_deduction: Decimal
    recurring_deduction: Decimal
    advance_deducted: Decimal
    total_earnings: Decimal
    total_deductions: Decimal
    net_salary: Decimal

    def as_dict(self) -> dict:
        return asdict(self)


def calculate_payroll(
    base_salary: Number,
    ot_rate_per_hour: Number,
    inputs: PayrollInputs,
    advance_deducted: Number = 0,
    days_per_month: int = 30,
) -> PayrollFigures:
    """
    Compute payroll figures for one staff member and period.

    Net salary is not clamped; a negative result is returned as is.
    """
    base = to_money(base_salary)
    rate = to_money(ot_rate_per_hour)
    ot_hours = to_money(inputs.ot_hours)
    extra_days = to_money(inputs.extra_days)
    food = to_money(inputs.food_deduction)
    recurring = to_money(inputs.recurring_deduction)
    advance = to_money(advance_deducted)

    per_diem = base / Decimal(days_per_month)
    ot_amount = to_money(ot_hours * rate)
    extra_day_pay = to_money(extra_days * per_diem)

    total_earnings = base + ot_amount + extra_day_pay
    total_deductions = food + recurring + advance

    return PayrollFigures(
        base_salary=base,
        ot_hours=ot_hours,
        ot_rate_per_hour=rate,
        ot_amount=ot_amount,
        extra_days=extra_days,
        extra_day_pay=extra_day_pay,
        food_deduction=food,
        recurring_deduction=recurring,
        advance_deducted=advance,
        total_earnings=total_earnings,
        total_deductions=total_deductions,
        net_salary=total_earnings - total_deductions,
    )
