"""Pytest fixtures for payroll recalculation tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from payroll_recalc.calculators.period_generator import generate_base_periods
from payroll_recalc.calculators.types import (
    Employee,
    Hours,
    PayFrequency,
    PayrollSettings,
    TaxRemainders,
)
from payroll_recalc.services.payroll_service import PayrollService
from payroll_recalc.state import AppState

EMPLOYEE_ID = "emp_1"


def make_hours(regular="0", overtime="0", pto="0", holiday="0") -> Hours:
    """Hours from plain numbers."""
    return Hours(
        regular=Decimal(str(regular)),
        overtime=Decimal(str(overtime)),
        pto=Decimal(str(pto)),
        holiday=Decimal(str(holiday)),
    )


@pytest.fixture
def settings() -> PayrollSettings:
    """Bi-weekly 2024 schedule starting Monday 2024-01-01."""
    return PayrollSettings(
        tax_year=2024,
        company_name="Acme Corp",
        pay_frequency=PayFrequency.BIWEEKLY,
        first_period_start=date(2024, 1, 1),
        days_until_payday=5,
    )


@pytest.fixture
def employee() -> Employee:
    """$25/h employee with 12% federal, 5% state and 2% local."""
    return Employee(
        employee_id=EMPLOYEE_ID,
        name="Jane Doe",
        rate=Decimal("25"),
        federal_rate=Decimal("12"),
        state_rate=Decimal("5"),
        local_rate=Decimal("2"),
        tax_remainders=TaxRemainders.zero(),
    )


@pytest.fixture
def state(settings: PayrollSettings, employee: Employee) -> AppState:
    return AppState(
        settings=settings,
        employees=[employee],
        periods={employee.employee_id: generate_base_periods(settings)},
    )


@pytest.fixture
def service(state: AppState) -> PayrollService:
    return PayrollService(state)


@pytest.fixture
def full_time() -> Hours:
    """80 regular hours."""
    return make_hours(regular=80)
