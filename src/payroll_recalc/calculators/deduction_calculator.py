"""Employee deduction calculation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from payroll_recalc.calculators.money import round_to_cents, to_decimal
from payroll_recalc.calculators.types import ZERO, AppliedDeduction, Deduction, DeductionType


@dataclass
class DeductionResult:
    """Deductions applied to one period and their rounded total."""

    deductions: list[AppliedDeduction] = field(default_factory=list)
    total: Decimal = ZERO


def is_effective(deduction: Deduction, pay_date: date | None) -> bool:
    """Whether a deduction applies to a period paid on pay_date.

    Deductions are not retroactive. Undated (legacy) deductions always apply,
    as does every deduction when no pay date is given.
    """
    if pay_date is None or deduction.effective_date is None:
        return True
    return deduction.effective_date <= pay_date


def calculate_deductions(
    deductions: Iterable[Deduction] | None,
    gross_pay: Decimal,
    pay_date: date | None = None,
) -> DeductionResult:
    """Apply deductions to gross pay.

    Line amounts are kept unrounded; only the total is rounded.
    """
    applied: list[AppliedDeduction] = []
    total = ZERO

    for deduction in deductions or []:
        if not is_effective(deduction, pay_date):
            continue

        amount = to_decimal(deduction.amount)
        if DeductionType(deduction.type) == DeductionType.PERCENT:
            calculated = gross_pay * amount / Decimal("100")
        else:
            calculated = amount

        applied.append(
            AppliedDeduction(
                deduction_id=deduction.deduction_id,
                name=deduction.name,
                type=DeductionType(deduction.type),
                amount=amount,
                calculated_amount=calculated,
            )
        )
        total += calculated

    return DeductionResult(deductions=applied, total=round_to_cents(total))
