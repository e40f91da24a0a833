"""Type definitions for the period calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

ZERO = Decimal("0")


class TaxLine(str, Enum):
    """The seven tax lines computed for every pay period."""

    FEDERAL = "federal"
    STATE = "state"
    LOCAL = "local"
    FICA = "fica"
    MEDICARE = "medicare"
    SUTA = "suta"
    FUTA = "futa"


# Lines withheld from the employee's pay
EMPLOYEE_TAX_LINES = (
    TaxLine.FEDERAL,
    TaxLine.STATE,
    TaxLine.LOCAL,
    TaxLine.FICA,
    TaxLine.MEDICARE,
)


class PayFrequency(str, Enum):
    """Pay period frequencies."""

    WEEKLY = "weekly"
    BIWEEKLY = "bi-weekly"
    SEMIMONTHLY = "semi-monthly"
    MONTHLY = "monthly"

    @classmethod
    def _missing_(cls, value: object) -> PayFrequency | None:
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class DeductionType(str, Enum):
    """How a deduction amount is interpreted."""

    FIXED = "fixed"
    PERCENT = "percent"

    @classmethod
    def _missing_(cls, value: object) -> DeductionType | None:
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in ("percent", "percentage"):
                return cls.PERCENT
            if normalized == "fixed":
                return cls.FIXED
        return None


@dataclass(frozen=True)
class TaxLines:
    """One amount per tax line."""

    federal: Decimal = ZERO
    state: Decimal = ZERO
    local: Decimal = ZERO
    fica: Decimal = ZERO
    medicare: Decimal = ZERO
    suta: Decimal = ZERO
    futa: Decimal = ZERO

    def get(self, line: TaxLine) -> Decimal:
        return getattr(self, line.value)

    def items(self) -> list[tuple[TaxLine, Decimal]]:
        return [(line, self.get(line)) for line in TaxLine]


@dataclass(frozen=True)
class TaxRemainders(TaxLines):
    """Signed fractional-cent remainders carried into the next period.

    Invariant: every value has magnitude below one cent once committed.
    """

    @classmethod
    def zero(cls) -> TaxRemainders:
        return cls()


@dataclass
class Hours:
    """Hours entered for one pay period."""

    regular: Decimal = ZERO
    overtime: Decimal = ZERO
    pto: Decimal = ZERO
    holiday: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.regular + self.overtime + self.pto + self.holiday

    @property
    def worked(self) -> Decimal:
        """Hours that earn PTO accrual (regular and overtime)."""
        return self.regular + self.overtime


@dataclass
class Earnings:
    """Earnings by hour type for one pay period."""

    regular: Decimal = ZERO
    overtime: Decimal = ZERO
    pto: Decimal = ZERO
    holiday: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.regular + self.overtime + self.pto + self.holiday


@dataclass(frozen=True)
class TaxableWages:
    """Wages subject to each tax after ceilings are applied."""

    gross: Decimal = ZERO
    social_security: Decimal = ZERO
    medicare: Decimal = ZERO
    futa: Decimal = ZERO
    suta: Decimal = ZERO
    additional_medicare: Decimal = ZERO


@dataclass
class PeriodTaxes:
    """Rounded tax lines, their pre-rounding values and the employee total."""

    federal: Decimal = ZERO
    state: Decimal = ZERO
    local: Decimal = ZERO
    fica: Decimal = ZERO
    medicare: Decimal = ZERO
    suta: Decimal = ZERO
    futa: Decimal = ZERO
    total: Decimal = ZERO
    unrounded: TaxLines = field(default_factory=TaxLines)
    wages: TaxableWages = field(default_factory=TaxableWages)

    def get(self, line: TaxLine) -> Decimal:
        return getattr(self, line.value)

    @property
    def employer_cost(self) -> Decimal:
        """Employer-side cash cost on top of gross pay.

        FICA and Medicare are counted once here; liability reports double them.
        """
        return self.suta + self.futa + self.fica + self.medicare


@dataclass
class Deduction:
    """A deduction configured on an employee.

    Deductions only apply to periods paid on or after the effective date.
    A deduction without a date predates effective-date tracking and always
    applies.
    """

    deduction_id: str
    name: str
    amount: Decimal
    type: DeductionType = DeductionType.FIXED
    effective_date: date | None = None


@dataclass
class AppliedDeduction:
    """A deduction as applied to one pay period."""

    deduction_id: str
    name: str
    type: DeductionType
    amount: Decimal  # Configured amount or percentage
    calculated_amount: Decimal


@dataclass
class Employee:
    """An employee and the state carried between pay periods."""

    employee_id: str
    name: str
    rate: Decimal = ZERO
    id_number: str = ""
    address: str = ""
    overtime_multiplier: Decimal = Decimal("1.5")
    holiday_multiplier: Decimal = Decimal("2.0")

    # Percentage rates, e.g. 12 for 12%
    federal_rate: Decimal = ZERO
    state_rate: Decimal = ZERO
    local_rate: Decimal = ZERO

    pto_accrual_rate: Decimal = ZERO  # Annual hours
    pto_balance: Decimal = ZERO
    deductions: list[Deduction] = field(default_factory=list)
    tax_remainders: TaxRemainders = field(default_factory=TaxRemainders)


@dataclass
class PayPeriod:
    """One pay period for one employee.

    Invariant: net_pay = gross_pay - taxes.total - total_deductions.
    """

    period: int  # 1-based sequence number, the ordering key
    tax_year: int
    start_date: date
    end_date: date
    pay_date: date
    hours: Hours = field(default_factory=Hours)
    earnings: Earnings = field(default_factory=Earnings)
    gross_pay: Decimal = ZERO
    taxes: PeriodTaxes = field(default_factory=PeriodTaxes)
    deductions: list[AppliedDeduction] = field(default_factory=list)
    total_deductions: Decimal = ZERO
    net_pay: Decimal = ZERO
    pto_accrued: Decimal = ZERO

    @property
    def has_hours(self) -> bool:
        return self.hours.total != 0


@dataclass
class PayrollSettings:
    """Company-wide payroll configuration."""

    tax_year: int
    company_name: str = "Your Company LLC"
    company_address: str = ""
    company_phone: str = ""
    pay_frequency: PayFrequency = PayFrequency.WEEKLY
    first_period_start: date | None = None
    days_until_payday: int = 5

    # Percentage rates
    social_security: Decimal = Decimal("6.2")
    medicare: Decimal = Decimal("1.45")
    suta_rate: Decimal = Decimal("2.7")
    futa_rate: Decimal = Decimal("0.6")

    # Ceilings and thresholds
    ss_wage_base: Decimal | None = Decimal("168600")
    futa_wage_base: Decimal | None = Decimal("7000")
    suta_wage_base: Decimal | None = None
    additional_medicare_threshold: Decimal = Decimal("200000")
    additional_medicare_rate: Decimal = Decimal("0.9")

    tax_frequencies: dict[str, str] = field(
        default_factory=lambda: {
            "federal": "monthly",
            "futa": "quarterly",
            "suta": "quarterly",
            "state": "monthly",
            "local": "monthly",
        }
    )
    auto_subtraction: bool = True
