"""Unit tests for PayrollEngine.

Tests the single-period pipeline without any application state.
"""

from dataclasses import replace
from decimal import Decimal

from payroll_recalc.calculators.engine import PayrollEngine
from payroll_recalc.calculators.period_generator import generate_base_periods
from payroll_recalc.calculators.types import Deduction, TaxRemainders

from .conftest import make_hours


def run_period(settings, employee, hours, number=1, history=None, remainders=None, pto_balance="0"):
    periods = history if history is not None else generate_base_periods(settings)
    period = next(p for p in periods if p.period == number)
    return PayrollEngine(settings).calculate_period(
        employee,
        period,
        hours,
        periods,
        remainders or TaxRemainders.zero(),
        Decimal(pto_balance),
        len(periods),
    )


class TestEarnings:
    """Test earnings by hour type."""

    def test_regular_hours(self, employee):
        earnings = PayrollEngine.calculate_earnings(employee, make_hours(regular=80))

        assert earnings.regular == Decimal("2000.00")
        assert earnings.total == Decimal("2000.00")

    def test_overtime_and_holiday_multipliers(self, employee):
        earnings = PayrollEngine.calculate_earnings(employee, make_hours(overtime=10, holiday=8))

        assert earnings.overtime == Decimal("375.00")
        assert earnings.holiday == Decimal("400.00")

    def test_pto_paid_at_regular_rate(self, employee):
        earnings = PayrollEngine.calculate_earnings(employee, make_hours(pto=8))

        assert earnings.pto == Decimal("200.00")

    def test_each_line_rounded_to_cents(self, employee):
        odd = replace(employee, rate=Decimal("20.333"))

        earnings = PayrollEngine.calculate_earnings(odd, make_hours(regular=1, overtime=1))

        assert earnings.regular == Decimal("20.33")
        assert earnings.overtime == Decimal("30.50")


class TestCalculatePeriod:
    """Test the full single-period pipeline."""

    def test_standard_period(self, settings, employee, full_time):
        result = run_period(settings, employee, full_time)

        period = result.period
        assert period.gross_pay == Decimal("2000.00")
        assert period.taxes.total == Decimal("533.00")
        assert period.taxes.suta == Decimal("54.00")
        assert period.taxes.futa == Decimal("12.00")
        assert period.net_pay == Decimal("1467.00")

    def test_net_pay_subtracts_deductions(self, settings, employee, full_time):
        with_health = replace(
            employee,
            deductions=[Deduction(deduction_id="ded_1", name="Health", amount=Decimal("100"))],
        )

        result = run_period(settings, with_health, full_time)

        assert result.period.total_deductions == Decimal("100.00")
        assert result.period.net_pay == Decimal("1367.00")

    def test_wage_base_uses_earlier_history(self, settings, employee, full_time):
        """Three $2,000 periods precede period 4, leaving $1,000 of FUTA base."""
        periods = [
            replace(p, gross_pay=Decimal("2000")) if p.period < 4 else p
            for p in generate_base_periods(settings)
        ]

        result = run_period(settings, employee, full_time, number=4, history=periods)

        assert result.period.taxes.futa == Decimal("6.00")
        assert result.period.taxes.wages.futa == Decimal("1000")

    def test_result_does_not_touch_inputs(self, settings, employee, full_time):
        periods = generate_base_periods(settings)

        result = run_period(settings, employee, full_time, history=periods)

        assert periods[0].gross_pay == Decimal("0")
        assert employee.tax_remainders == TaxRemainders.zero()
        assert result.period is not periods[0]

    def test_period_without_hours_is_zeroed(self, settings, employee):
        carried = TaxRemainders(federal=Decimal("0.004"))

        result = run_period(settings, employee, make_hours(), remainders=carried)

        assert result.period.gross_pay == Decimal("0")
        assert result.period.net_pay == Decimal("0")
        assert result.period.taxes.total == Decimal("0")
        assert result.remainders == carried


class TestPtoAccrual:
    """Test PTO accrual and balance movement."""

    def test_worked_period_accrues(self, settings, employee, full_time):
        accruing = replace(employee, pto_accrual_rate=Decimal("80"))

        result = run_period(settings, accruing, full_time)

        assert result.period.pto_accrued == Decimal("3.0769")
        assert result.pto_balance == Decimal("3.08")

    def test_pto_only_period_does_not_accrue(self, settings, employee):
        accruing = replace(employee, pto_accrual_rate=Decimal("80"))

        result = run_period(settings, accruing, make_hours(pto=8), pto_balance="40")

        assert result.period.pto_accrued == Decimal("0")
        assert result.pto_balance == Decimal("32.00")

    def test_recomputing_a_period_does_not_double_count(self, settings, employee, full_time):
        accruing = replace(employee, pto_accrual_rate=Decimal("80"))
        first = run_period(settings, accruing, full_time)
        periods = generate_base_periods(settings)
        periods[0] = first.period

        again = run_period(
            settings, accruing, full_time, history=periods, pto_balance=str(first.pto_balance)
        )

        assert again.pto_balance == first.pto_balance
