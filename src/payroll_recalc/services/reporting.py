"""Year-to-date totals, pay stubs, tax liabilities and cash projections."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from payroll_recalc.calculators.money import round_to_cents
from payroll_recalc.calculators.period_generator import generate_base_periods
from payroll_recalc.calculators.types import (
    ZERO,
    Earnings,
    Employee,
    PayPeriod,
    PayrollSettings,
    PeriodTaxes,
    TaxableWages,
    TaxLine,
    TaxLines,
)
from payroll_recalc.calculators.wage_base import WageBaseTracker
from payroll_recalc.services.register_service import employer_cost


@dataclass
class YearToDate:
    """Totals across periods 1..through_period inclusive."""

    through_period: int
    hours: Decimal = ZERO
    earnings: Earnings = field(default_factory=Earnings)
    gross_pay: Decimal = ZERO
    taxes: TaxLines = field(default_factory=TaxLines)
    total_taxes: Decimal = ZERO
    total_deductions: Decimal = ZERO
    net_pay: Decimal = ZERO
    pto_accrued: Decimal = ZERO
    wages: TaxableWages = field(default_factory=TaxableWages)


@dataclass
class PayStub:
    """Everything printed on one pay stub."""

    company_name: str
    company_address: str
    company_phone: str
    employee: Employee
    period: PayPeriod
    year_to_date: YearToDate


@dataclass
class LiabilityGroup:
    """One deposit group and its contributing tax lines."""

    name: str
    frequency: str
    amount: Decimal = ZERO
    breakdown: dict[str, Decimal] = field(default_factory=dict)


@dataclass
class TaxLiabilities:
    """Deposits owed for periods paid within a date range.

    The 941 figures always cover every employee in range, whatever the
    frequency filter: deposited_941 sums the rounded federal, FICA and
    Medicare lines (the last two doubled), unrounded_941 the same lines
    before rounding. fractions_of_cents is their difference.
    """

    start_date: date
    end_date: date
    groups: list[LiabilityGroup] = field(default_factory=list)
    additional_medicare_wages: Decimal = ZERO
    additional_medicare_tax: Decimal = ZERO
    deposited_941: Decimal = ZERO
    unrounded_941: Decimal = ZERO

    @property
    def fractions_of_cents(self) -> Decimal:
        return self.deposited_941 - round_to_cents(self.unrounded_941)

    @property
    def total(self) -> Decimal:
        return sum((g.amount for g in self.groups), ZERO)


@dataclass
class CashProjection:
    """Expected payroll cash needs for this month and next."""

    average_cost: Decimal = ZERO
    average_hours: Decimal = ZERO
    periods_this_month: int = 0
    periods_next_month: int = 0
    this_month_required: Decimal = ZERO
    next_month_required: Decimal = ZERO


def summarize_year_to_date(
    settings: PayrollSettings,
    periods: Iterable[PayPeriod],
    through_period: int,
) -> YearToDate:
    """Sum rounded period values up to and including through_period."""
    included = sorted(
        (p for p in periods if p.period <= through_period),
        key=lambda p: p.period,
    )
    ytd = YearToDate(through_period=through_period)
    taxes = {line.value: ZERO for line in TaxLine}
    regular = overtime = pto = holiday = ZERO

    for period in included:
        ytd.hours += period.hours.total
        regular += period.earnings.regular
        overtime += period.earnings.overtime
        pto += period.earnings.pto
        holiday += period.earnings.holiday
        ytd.gross_pay += period.gross_pay
        for line in TaxLine:
            taxes[line.value] += period.taxes.get(line)
        ytd.total_taxes += period.taxes.total
        ytd.total_deductions += period.total_deductions
        ytd.net_pay += period.net_pay
        ytd.pto_accrued += period.pto_accrued

    ytd.earnings = Earnings(regular=regular, overtime=overtime, pto=pto, holiday=holiday)
    ytd.taxes = TaxLines(**taxes)
    ytd.wages = WageBaseTracker(settings).totals(included)
    return ytd


def _frequency_matches(settings: PayrollSettings, key: str, frequency: str | None) -> bool:
    if frequency is None:
        return True
    configured = settings.tax_frequencies.get(key, "")
    return configured.lower() == frequency.lower()


def _federal_941(lines: TaxLines | PeriodTaxes) -> Decimal:
    return lines.federal + lines.fica * 2 + lines.medicare * 2


def calculate_liabilities(
    settings: PayrollSettings,
    periods_by_employee: Mapping[str, Iterable[PayPeriod]],
    start_date: date,
    end_date: date,
    frequency: str | None = None,
) -> TaxLiabilities:
    """Group taxes owed for periods paid between start_date and end_date.

    Employer FICA and Medicare match the employee share, so the federal 941
    deposit counts both lines twice. When frequency is given, only groups
    deposited on that schedule are returned. Additional Medicare wages come
    from each employee's full-year history, counted for periods in range.
    """
    tracker = WageBaseTracker(settings)
    liabilities = TaxLiabilities(start_date=start_date, end_date=end_date)
    totals = {line: ZERO for line in TaxLine}

    for periods in periods_by_employee.values():
        for period, wages in tracker.track(periods):
            if not start_date <= period.pay_date <= end_date:
                continue
            for line in TaxLine:
                totals[line] += period.taxes.get(line)
            liabilities.additional_medicare_wages += wages.additional_medicare
            liabilities.deposited_941 += _federal_941(period.taxes)
            liabilities.unrounded_941 += _federal_941(period.taxes.unrounded)

    liabilities.additional_medicare_tax = round_to_cents(
        liabilities.additional_medicare_wages * settings.additional_medicare_rate / 100
    )

    federal_breakdown = {
        "federal_income_tax": totals[TaxLine.FEDERAL],
        "social_security": totals[TaxLine.FICA] * 2,
        "medicare": totals[TaxLine.MEDICARE] * 2,
    }
    candidates = [
        ("federal", "Federal Payroll (941)", federal_breakdown),
        ("futa", "FUTA (940)", {"futa": totals[TaxLine.FUTA]}),
        ("suta", "SUTA", {"suta": totals[TaxLine.SUTA]}),
        ("state", "State Withholding", {"state": totals[TaxLine.STATE]}),
        ("local", "Local Withholding", {"local": totals[TaxLine.LOCAL]}),
    ]

    for key, name, breakdown in candidates:
        if not _frequency_matches(settings, key, frequency):
            continue
        liabilities.groups.append(
            LiabilityGroup(
                name=name,
                frequency=settings.tax_frequencies.get(key, ""),
                amount=sum(breakdown.values(), ZERO),
                breakdown=breakdown,
            )
        )
    return liabilities


def _next_month(day: date) -> tuple[int, int]:
    if day.month == 12:
        return day.year + 1, 1
    return day.year, day.month + 1


def project_cash(
    settings: PayrollSettings,
    periods_by_employee: dict[str, list[PayPeriod]],
    today: date,
) -> CashProjection:
    """Project payroll cash needs from average cost per computed period."""
    computed = [
        p for periods in periods_by_employee.values() for p in periods if p.gross_pay > 0
    ]
    projection = CashProjection()
    if not computed:
        return projection

    projection.average_cost = round_to_cents(
        sum((employer_cost(p) for p in computed), ZERO) / len(computed)
    )
    projection.average_hours = round_to_cents(
        sum((p.hours.total for p in computed), ZERO) / len(computed)
    )

    next_year, next_month = _next_month(today)
    for period in generate_base_periods(settings):
        pay_date = period.pay_date
        if (pay_date.year, pay_date.month) == (today.year, today.month) and pay_date >= today:
            projection.periods_this_month += 1
        elif (pay_date.year, pay_date.month) == (next_year, next_month):
            projection.periods_next_month += 1

    projection.this_month_required = projection.average_cost * projection.periods_this_month
    projection.next_month_required = projection.average_cost * projection.periods_next_month
    return projection
