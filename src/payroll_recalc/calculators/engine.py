"""Payroll calculation engine - single period pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from payroll_recalc.calculators.deduction_calculator import calculate_deductions
from payroll_recalc.calculators.money import round_to_cents, to_decimal
from payroll_recalc.calculators.tax_calculator import TaxCalculator
from payroll_recalc.calculators.types import (
    Earnings,
    Employee,
    Hours,
    PayPeriod,
    PayrollSettings,
    TaxRemainders,
)
from payroll_recalc.calculators.wage_base import WageBaseTracker

PTO_PRECISION = Decimal("0.0001")


@dataclass(frozen=True)
class CalculationResult:
    """Result of calculating one period for one employee.

    Nothing has been written back yet: the caller commits period, remainders
    and pto_balance together.
    """

    employee_id: str
    period: PayPeriod
    remainders: TaxRemainders
    pto_balance: Decimal


class PayrollEngine:
    """Runs the calculation pipeline for one pay period.

    Pipeline (stable order):
    1) Earnings from hours, rate and multipliers
    2) Taxable wages from year-to-date history (ceilings/thresholds)
    3) Taxes with carried remainders
    4) Deductions effective on the pay date
    5) Net pay and PTO accrual
    """

    def __init__(self, settings: PayrollSettings):
        self.settings = settings
        self.wage_base = WageBaseTracker(settings)
        self.tax_calculator = TaxCalculator(settings)

    @staticmethod
    def calculate_earnings(employee: Employee, hours: Hours) -> Earnings:
        """Earnings by hour type, each rounded to the cent."""
        rate = to_decimal(employee.rate)
        return Earnings(
            regular=round_to_cents(hours.regular * rate),
            overtime=round_to_cents(
                hours.overtime * rate * to_decimal(employee.overtime_multiplier)
            ),
            pto=round_to_cents(hours.pto * rate),
            holiday=round_to_cents(
                hours.holiday * rate * to_decimal(employee.holiday_multiplier)
            ),
        )

    def calculate_period(
        self,
        employee: Employee,
        period: PayPeriod,
        hours: Hours,
        history: Sequence[PayPeriod],
        remainders: TaxRemainders,
        pto_balance: Decimal,
        periods_in_year: int,
    ) -> CalculationResult:
        """Calculate period with the given hours.

        history supplies the gross pay of earlier periods for wage-base
        tracking; remainders and pto_balance are the values carried in. A
        period without hours contributes nothing and carries remainders
        through unchanged.
        """
        result = PayPeriod(
            period=period.period,
            tax_year=period.tax_year,
            start_date=period.start_date,
            end_date=period.end_date,
            pay_date=period.pay_date,
            hours=hours,
        )

        if hours.total != 0:
            result.earnings = self.calculate_earnings(employee, hours)
            result.gross_pay = result.earnings.total

            wages = self.wage_base.for_period(history, period.period, result.gross_pay)
            calculation = self.tax_calculator.calculate(
                wages, self.tax_calculator.rates_for(employee), remainders
            )
            result.taxes = calculation.taxes
            remainders = calculation.remainders

            deductions = calculate_deductions(
                employee.deductions, result.gross_pay, period.pay_date
            )
            result.deductions = deductions.deductions
            result.total_deductions = deductions.total

            result.net_pay = (
                result.gross_pay - result.taxes.total - result.total_deductions
            )

            if hours.worked > 0 and periods_in_year > 0:
                result.pto_accrued = (
                    to_decimal(employee.pto_accrual_rate) / periods_in_year
                ).quantize(PTO_PRECISION)

        # Move the balance by the change against the previous computation
        previous_net_pto = period.pto_accrued - period.hours.pto
        current_net_pto = result.pto_accrued - hours.pto
        new_balance = round_to_cents(
            to_decimal(pto_balance) - previous_net_pto + current_net_pto
        )

        return CalculationResult(
            employee_id=employee.employee_id,
            period=result,
            remainders=remainders,
            pto_balance=new_balance,
        )
