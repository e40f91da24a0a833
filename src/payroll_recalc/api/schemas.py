"""Pydantic schemas for API request/response models."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from payroll_recalc.calculators.types import DeductionType, PayFrequency


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str | None = None


# ============================================================================
# Settings schemas
# ============================================================================


class PayrollSettingsSchema(BaseModel):
    """Payroll settings, used for both reads and full replacement."""

    model_config = ConfigDict(from_attributes=True)

    tax_year: int
    company_name: str = "Your Company LLC"
    company_address: str = ""
    company_phone: str = ""
    pay_frequency: PayFrequency = PayFrequency.WEEKLY
    first_period_start: date | None = None
    days_until_payday: int = Field(default=5, ge=0)
    social_security: Decimal = Decimal("6.2")
    medicare: Decimal = Decimal("1.45")
    suta_rate: Decimal = Decimal("2.7")
    futa_rate: Decimal = Decimal("0.6")
    ss_wage_base: Decimal | None = Decimal("168600")
    futa_wage_base: Decimal | None = Decimal("7000")
    suta_wage_base: Decimal | None = None
    additional_medicare_threshold: Decimal = Decimal("200000")
    additional_medicare_rate: Decimal = Decimal("0.9")
    tax_frequencies: dict[str, str] = Field(default_factory=dict)
    auto_subtraction: bool = True


# ============================================================================
# Period schemas
# ============================================================================


class HoursSchema(BaseModel):
    """Hours by type for one period."""

    model_config = ConfigDict(from_attributes=True)

    regular: Decimal = Decimal("0")
    overtime: Decimal = Decimal("0")
    pto: Decimal = Decimal("0")
    holiday: Decimal = Decimal("0")


class EarningsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    regular: Decimal
    overtime: Decimal
    pto: Decimal
    holiday: Decimal


class TaxLinesSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    federal: Decimal
    state: Decimal
    local: Decimal
    fica: Decimal
    medicare: Decimal
    suta: Decimal
    futa: Decimal


class TaxableWagesSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gross: Decimal
    social_security: Decimal
    medicare: Decimal
    futa: Decimal
    suta: Decimal
    additional_medicare: Decimal


class PeriodTaxesSchema(TaxLinesSchema):
    """Rounded taxes for a period, with the pre-rounding amounts."""

    total: Decimal
    unrounded: TaxLinesSchema
    wages: TaxableWagesSchema


class AppliedDeductionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    deduction_id: str
    name: str
    type: DeductionType
    amount: Decimal
    calculated_amount: Decimal


class PayPeriodResponse(BaseModel):
    """Schema for one pay period of one employee."""

    model_config = ConfigDict(from_attributes=True)

    period: int
    tax_year: int
    start_date: date
    end_date: date
    pay_date: date
    hours: HoursSchema
    earnings: EarningsSchema
    gross_pay: Decimal
    taxes: PeriodTaxesSchema
    deductions: list[AppliedDeductionSchema]
    total_deductions: Decimal
    net_pay: Decimal
    pto_accrued: Decimal


class PeriodListResponse(BaseModel):
    items: list[PayPeriodResponse]
    total: int


class GeneratePeriodsResponse(BaseModel):
    """Periods per employee after regeneration."""

    employees: int
    periods_per_employee: int


class RecalculateRequest(BaseModel):
    """Hours to record for a period."""

    hours: HoursSchema


# ============================================================================
# Employee schemas
# ============================================================================


class DeductionCreate(BaseModel):
    name: str = Field(min_length=1)
    amount: Decimal = Field(ge=0)
    type: DeductionType = DeductionType.FIXED
    effective_date: date | None = None


class DeductionUpdate(BaseModel):
    name: str = Field(min_length=1)
    amount: Decimal = Field(ge=0)
    type: DeductionType = DeductionType.FIXED


class DeductionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    deduction_id: str
    name: str
    amount: Decimal
    type: DeductionType
    effective_date: date | None = None


class EmployeeCreate(BaseModel):
    """Schema for creating an employee."""

    name: str = Field(min_length=1)
    rate: Decimal = Field(default=Decimal("0"), ge=0)
    id_number: str = ""
    address: str = ""
    overtime_multiplier: Decimal = Decimal("1.5")
    holiday_multiplier: Decimal = Decimal("2.0")
    federal_rate: Decimal = Decimal("0")
    state_rate: Decimal = Decimal("0")
    local_rate: Decimal = Decimal("0")
    pto_accrual_rate: Decimal = Decimal("0")
    pto_balance: Decimal = Decimal("0")


class EmployeeUpdate(BaseModel):
    """Partial employee update; omitted fields keep their values."""

    name: str | None = None
    rate: Decimal | None = None
    id_number: str | None = None
    address: str | None = None
    overtime_multiplier: Decimal | None = None
    holiday_multiplier: Decimal | None = None
    federal_rate: Decimal | None = None
    state_rate: Decimal | None = None
    local_rate: Decimal | None = None
    pto_accrual_rate: Decimal | None = None
    pto_balance: Decimal | None = None


class EmployeeResponse(BaseModel):
    """Schema for employee response."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    name: str
    rate: Decimal
    id_number: str
    address: str
    overtime_multiplier: Decimal
    holiday_multiplier: Decimal
    federal_rate: Decimal
    state_rate: Decimal
    local_rate: Decimal
    pto_accrual_rate: Decimal
    pto_balance: Decimal
    deductions: list[DeductionResponse]
    tax_remainders: TaxLinesSchema


# ============================================================================
# Report schemas
# ============================================================================


class YearToDateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    through_period: int
    hours: Decimal
    earnings: EarningsSchema
    gross_pay: Decimal
    taxes: TaxLinesSchema
    total_taxes: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    pto_accrued: Decimal
    wages: TaxableWagesSchema


class PayStubResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    company_name: str
    company_address: str
    company_phone: str
    employee: EmployeeResponse
    period: PayPeriodResponse
    year_to_date: YearToDateResponse


class LiabilityGroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    frequency: str
    amount: Decimal
    breakdown: dict[str, Decimal]


class TaxLiabilitiesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start_date: date
    end_date: date
    groups: list[LiabilityGroupResponse]
    total: Decimal
    additional_medicare_wages: Decimal
    additional_medicare_tax: Decimal
    deposited_941: Decimal
    unrounded_941: Decimal
    fractions_of_cents: Decimal


class CashProjectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    average_cost: Decimal
    average_hours: Decimal
    periods_this_month: int
    periods_next_month: int
    this_month_required: Decimal
    next_month_required: Decimal


# ============================================================================
# Register schemas
# ============================================================================


class TransactionCreate(BaseModel):
    """Schema for a manual register entry, used for both adds and edits."""

    entry_date: date
    description: str = Field(min_length=1)
    type: str = Field(pattern="^(debit|credit)$")
    amount: Decimal = Field(gt=0, decimal_places=2)


class RegisterEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    entry_id: str
    entry_date: date
    description: str
    debit: Decimal
    credit: Decimal
    reconciled: bool
    is_payroll: bool


class RegisterListResponse(BaseModel):
    items: list[RegisterEntryResponse]
    total: int


class PurgeRequest(BaseModel):
    cutoff: date


class PurgeResponse(BaseModel):
    purged: int


class BalanceResponse(BaseModel):
    balance: Decimal
