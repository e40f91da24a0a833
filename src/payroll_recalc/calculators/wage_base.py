"""Year-to-date wage-base tracking for capped taxes."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from payroll_recalc.calculators.types import (
    ZERO,
    PayPeriod,
    PayrollSettings,
    TaxableWages,
)


def taxable_under_ceiling(
    gross: Decimal, ytd_before: Decimal, ceiling: Decimal | None
) -> Decimal:
    """Portion of gross still under a wage-base ceiling.

    No ceiling means all wages are taxable.
    """
    if ceiling is None:
        return gross
    remaining_base = max(ZERO, ceiling - ytd_before)
    return min(gross, remaining_base)


def taxable_above_threshold(
    gross: Decimal, ytd_before: Decimal, threshold: Decimal
) -> Decimal:
    """Portion of gross that pushes cumulative wages past a threshold."""
    if ytd_before >= threshold:
        return gross
    ytd_after = ytd_before + gross
    if ytd_after > threshold:
        return ytd_after - threshold
    return ZERO


def ytd_gross_before(periods: Iterable[PayPeriod], period_number: int) -> Decimal:
    """Sum gross pay of every period sequenced before period_number."""
    return sum(
        (p.gross_pay for p in periods if p.period < period_number),
        ZERO,
    )


class WageBaseTracker:
    """Computes taxable wages per period from chronological history.

    Nothing is cached on the employee: every call rescans the periods, so the
    totals are always consistent with the current period data.
    """

    def __init__(self, settings: PayrollSettings):
        self.settings = settings

    def taxable_wages(self, gross: Decimal, ytd_before: Decimal) -> TaxableWages:
        """Taxable wages for one period given gross paid earlier in the year."""
        s = self.settings
        return TaxableWages(
            gross=gross,
            social_security=taxable_under_ceiling(gross, ytd_before, s.ss_wage_base),
            medicare=gross,
            futa=taxable_under_ceiling(gross, ytd_before, s.futa_wage_base),
            suta=taxable_under_ceiling(gross, ytd_before, s.suta_wage_base),
            additional_medicare=taxable_above_threshold(
                gross, ytd_before, s.additional_medicare_threshold
            ),
        )

    def for_period(
        self, periods: Sequence[PayPeriod], period_number: int, gross: Decimal
    ) -> TaxableWages:
        """Taxable wages for period_number if it paid gross."""
        return self.taxable_wages(gross, ytd_gross_before(periods, period_number))

    def track(
        self, periods: Iterable[PayPeriod]
    ) -> list[tuple[PayPeriod, TaxableWages]]:
        """Taxable wages for every period, in sequence order."""
        ytd = ZERO
        tracked: list[tuple[PayPeriod, TaxableWages]] = []
        for period in sorted(periods, key=lambda p: p.period):
            tracked.append((period, self.taxable_wages(period.gross_pay, ytd)))
            ytd += period.gross_pay
        return tracked

    def totals(self, periods: Iterable[PayPeriod]) -> TaxableWages:
        """Year-to-date taxable wages summed across periods."""
        tracked = [wages for _, wages in self.track(periods)]
        return TaxableWages(
            gross=sum((w.gross for w in tracked), ZERO),
            social_security=sum((w.social_security for w in tracked), ZERO),
            medicare=sum((w.medicare for w in tracked), ZERO),
            futa=sum((w.futa for w in tracked), ZERO),
            suta=sum((w.suta for w in tracked), ZERO),
            additional_medicare=sum((w.additional_medicare for w in tracked), ZERO),
        )
