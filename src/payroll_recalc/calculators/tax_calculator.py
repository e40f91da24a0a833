"""Tax calculation with fractional-cent remainders carried between periods."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from payroll_recalc.calculators.money import CENT, round_to_cents
from payroll_recalc.calculators.types import (
    EMPLOYEE_TAX_LINES,
    ZERO,
    Employee,
    PayrollSettings,
    PeriodTaxes,
    TaxableWages,
    TaxLine,
    TaxLines,
    TaxRemainders,
)
from payroll_recalc.exceptions import RoundingInvariantViolation

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class TaxCalculation:
    """Taxes for one period and the remainders to carry into the next."""

    taxes: PeriodTaxes
    remainders: TaxRemainders


class TaxCalculator:
    """Calculates the seven tax lines of a period.

    For each line:

        unrounded = taxable_wages * rate / 100
        total     = unrounded + carried remainder
        rounded   = total rounded half-up to the cent
        remainder = total - rounded

    Rounding never drifts over a year because each period's sub-cent error is
    folded into the next. The calculator does not touch the employee; callers
    commit the returned remainders.
    """

    def __init__(self, settings: PayrollSettings):
        self.settings = settings

    def rates_for(self, employee: Employee) -> TaxLines:
        """Percentage rate per tax line for an employee."""
        s = self.settings
        return TaxLines(
            federal=employee.federal_rate,
            state=employee.state_rate,
            local=employee.local_rate,
            fica=s.social_security,
            medicare=s.medicare,
            suta=s.suta_rate,
            futa=s.futa_rate,
        )

    @staticmethod
    def wages_for(line: TaxLine, wages: TaxableWages) -> Decimal:
        """Taxable wages that feed a tax line."""
        if line == TaxLine.FICA:
            return wages.social_security
        if line == TaxLine.FUTA:
            return wages.futa
        if line == TaxLine.SUTA:
            return wages.suta
        if line == TaxLine.MEDICARE:
            return wages.medicare
        return wages.gross

    @staticmethod
    def carry(unrounded: Decimal, remainder: Decimal) -> tuple[Decimal, Decimal]:
        """Round unrounded plus the carried remainder.

        Returns (rounded amount, new remainder).
        """
        total = unrounded + remainder
        rounded = round_to_cents(total)
        return rounded, total - rounded

    def calculate(
        self,
        wages: TaxableWages,
        rates: TaxLines,
        remainders: TaxRemainders,
    ) -> TaxCalculation:
        """Calculate every tax line for one period."""
        rounded: dict[str, Decimal] = {}
        unrounded: dict[str, Decimal] = {}
        carried: dict[str, Decimal] = {}

        for line in TaxLine:
            amount = self.wages_for(line, wages) * rates.get(line) / HUNDRED
            unrounded[line.value] = amount
            rounded[line.value], carried[line.value] = self.carry(
                amount, remainders.get(line)
            )

        new_remainders = TaxRemainders(**carried)
        self.check_remainders(new_remainders)

        employee_total = sum((rounded[line.value] for line in EMPLOYEE_TAX_LINES), ZERO)

        return TaxCalculation(
            taxes=PeriodTaxes(
                **rounded,
                total=employee_total,
                unrounded=TaxLines(**unrounded),
                wages=wages,
            ),
            remainders=new_remainders,
        )

    @staticmethod
    def check_remainders(remainders: TaxRemainders) -> None:
        """Raise if any remainder reached a full cent."""
        for line, value in remainders.items():
            if abs(value) >= CENT:
                raise RoundingInvariantViolation(line.value, value)
