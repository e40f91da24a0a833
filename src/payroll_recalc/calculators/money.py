"""Currency rounding and numeric input coercion."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from payroll_recalc.calculators.types import ZERO, Hours

CENT = Decimal("0.01")  # 2 decimal places for posted amounts


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places, half away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Decimal:
    """Coerce user input to Decimal.

    Missing, blank and non-numeric values become zero rather than raising.
    Floats go through str() so 20.33 stays 20.33.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not result.is_finite():
        return ZERO
    return result


def coerce_hours(value: Hours | Mapping[str, Any] | None) -> Hours:
    """Build Hours from a mapping of hour types, coercing each value."""
    if isinstance(value, Hours):
        return Hours(
            regular=to_decimal(value.regular),
            overtime=to_decimal(value.overtime),
            pto=to_decimal(value.pto),
            holiday=to_decimal(value.holiday),
        )
    data = value or {}
    return Hours(
        regular=to_decimal(data.get("regular")),
        overtime=to_decimal(data.get("overtime")),
        pto=to_decimal(data.get("pto")),
        holiday=to_decimal(data.get("holiday")),
    )
