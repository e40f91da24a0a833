"""Unit tests for deduction calculation."""

from datetime import date
from decimal import Decimal

from payroll_recalc.calculators.deduction_calculator import calculate_deductions, is_effective
from payroll_recalc.calculators.types import Deduction, DeductionType


def deduction(amount, kind=DeductionType.FIXED, effective=None, name="Health"):
    return Deduction(
        deduction_id=f"ded_{name.lower()}",
        name=name,
        amount=Decimal(amount),
        type=kind,
        effective_date=effective,
    )


class TestDeductionAmounts:
    """Test fixed and percentage deductions."""

    def test_fixed_amount(self):
        result = calculate_deductions([deduction("100")], Decimal("2000"))

        assert result.total == Decimal("100.00")
        assert result.deductions[0].calculated_amount == Decimal("100")

    def test_percent_of_gross(self):
        result = calculate_deductions([deduction("10", DeductionType.PERCENT)], Decimal("2000"))

        assert result.total == Decimal("200.00")

    def test_percentage_spelling_is_accepted(self):
        assert DeductionType("percentage") == DeductionType.PERCENT
        assert DeductionType("Fixed") == DeductionType.FIXED

    def test_only_total_is_rounded(self):
        """Lines keep fractional cents; the sum is rounded once."""
        items = [
            deduction("1.0005", DeductionType.PERCENT, name="A"),
            deduction("1.0005", DeductionType.PERCENT, name="B"),
        ]

        result = calculate_deductions(items, Decimal("1000"))

        assert [d.calculated_amount for d in result.deductions] == [Decimal("10.005"), Decimal("10.005")]
        assert result.total == Decimal("20.01")

    def test_no_deductions(self):
        result = calculate_deductions(None, Decimal("2000"))

        assert result.total == Decimal("0.00")
        assert result.deductions == []


class TestEffectiveDates:
    """Test that deductions are not retroactive."""

    def test_deduction_skipped_before_effective_date(self):
        items = [deduction("100", effective=date(2024, 6, 1))]

        result = calculate_deductions(items, Decimal("2000"), date(2024, 5, 15))

        assert result.total == Decimal("0.00")
        assert result.deductions == []

    def test_deduction_applied_after_effective_date(self):
        items = [deduction("100", effective=date(2024, 6, 1))]

        result = calculate_deductions(items, Decimal("2000"), date(2024, 6, 15))

        assert result.total == Decimal("100.00")

    def test_applies_on_the_effective_date(self):
        assert is_effective(deduction("100", effective=date(2024, 6, 1)), date(2024, 6, 1))

    def test_undated_deduction_always_applies(self):
        assert is_effective(deduction("100"), date(2024, 1, 5))
