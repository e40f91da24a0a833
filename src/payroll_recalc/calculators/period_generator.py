"""Pay period generation for a tax year."""

from __future__ import annotations

import calendar
import logging
from datetime import date, timedelta

from payroll_recalc.calculators.types import PayFrequency, PayPeriod, PayrollSettings
from payroll_recalc.exceptions import ConfigurationMissingError

logger = logging.getLogger(__name__)

# Upper bound on periods per year by frequency
MAX_PERIODS: dict[PayFrequency, int] = {
    PayFrequency.WEEKLY: 53,
    PayFrequency.BIWEEKLY: 53,
    PayFrequency.SEMIMONTHLY: 24,
    PayFrequency.MONTHLY: 12,
}


def _last_day_of_month(day: date) -> date:
    return date(day.year, day.month, calendar.monthrange(day.year, day.month)[1])


def _first_of_next_month(day: date) -> date:
    if day.month == 12:
        return date(day.year + 1, 1, 1)
    return date(day.year, day.month + 1, 1)


class PeriodGenerator:
    """Derives the ordered pay periods of a tax year.

    Periods are kept only when their end date falls inside the tax year; the
    pay date may still land in the following year. Sequence numbers are
    1-based and gap free.
    """

    def __init__(self, settings: PayrollSettings):
        self.settings = settings

    def generate(self) -> list[PayPeriod]:
        """Generate zeroed period skeletons.

        Raises ConfigurationMissingError when no anchor date is configured.
        """
        anchor = self.settings.first_period_start
        if anchor is None:
            raise ConfigurationMissingError("first_period_start")

        tax_year = self.settings.tax_year
        frequency = PayFrequency(self.settings.pay_frequency)
        payday_offset = timedelta(days=self.settings.days_until_payday or 0)
        max_periods = MAX_PERIODS[frequency]

        periods: list[PayPeriod] = []
        current = anchor
        while current.year <= tax_year and len(periods) < max_periods:
            start = current
            end, current = self._next_boundary(start, frequency)

            if end.year > tax_year:
                break
            if end.year < tax_year:
                continue

            periods.append(
                PayPeriod(
                    period=len(periods) + 1,
                    tax_year=tax_year,
                    start_date=start,
                    end_date=end,
                    pay_date=end + payday_offset,
                )
            )

        return periods

    @staticmethod
    def _next_boundary(start: date, frequency: PayFrequency) -> tuple[date, date]:
        """Return (end date of the period starting at start, next start)."""
        if frequency == PayFrequency.WEEKLY:
            return start + timedelta(days=6), start + timedelta(days=7)
        if frequency == PayFrequency.BIWEEKLY:
            return start + timedelta(days=13), start + timedelta(days=14)
        if frequency == PayFrequency.SEMIMONTHLY:
            if start.day == 1:
                return date(start.year, start.month, 15), date(start.year, start.month, 16)
            return _last_day_of_month(start), _first_of_next_month(start)
        # Monthly
        return _last_day_of_month(start), _first_of_next_month(start)


def generate_base_periods(settings: PayrollSettings) -> list[PayPeriod]:
    """Generate period skeletons, or an empty list when unconfigured."""
    try:
        return PeriodGenerator(settings).generate()
    except ConfigurationMissingError as e:
        logger.warning("No pay periods generated: %s", e)
        return []
