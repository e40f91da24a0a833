"""Application aggregate: settings, employees, periods and cash register."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import TypeAdapter

from payroll_recalc.calculators.types import (
    ZERO,
    Employee,
    PayPeriod,
    PayrollSettings,
)
from payroll_recalc.exceptions import ReferenceNotFoundError


@dataclass(frozen=True)
class RegisterKey:
    """Identity of the register entry derived from one payroll period."""

    employee_id: str
    period: int
    tax_year: int

    @property
    def entry_id(self) -> str:
        return f"payroll-{self.employee_id}-{self.period}-{self.tax_year}"


@dataclass
class RegisterEntry:
    """A cash register line.

    Payroll-derived entries carry a payroll_key and are replaced on every
    recalculation of their period; manual entries have none.
    """

    entry_id: str
    entry_date: date
    description: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    reconciled: bool = False
    payroll_key: RegisterKey | None = None

    @property
    def is_payroll(self) -> bool:
        return self.payroll_key is not None


@dataclass
class AppState:
    """Everything the engine reads and writes, owned by one service."""

    settings: PayrollSettings
    employees: list[Employee] = field(default_factory=list)
    periods: dict[str, list[PayPeriod]] = field(default_factory=dict)
    register: list[RegisterEntry] = field(default_factory=list)

    def find_employee(self, employee_id: str) -> Employee:
        for employee in self.employees:
            if employee.employee_id == employee_id:
                return employee
        raise ReferenceNotFoundError("Employee", employee_id)

    def periods_for(self, employee_id: str) -> list[PayPeriod]:
        return self.periods.get(employee_id, [])

    def find_period(self, employee_id: str, period_number: int) -> PayPeriod:
        for period in self.periods_for(employee_id):
            if period.period == period_number:
                return period
        raise ReferenceNotFoundError("Pay period", f"{employee_id}/{period_number}")

    def find_entry(self, entry_id: str) -> RegisterEntry:
        for entry in self.register:
            if entry.entry_id == entry_id:
                return entry
        raise ReferenceNotFoundError("Register entry", entry_id)


def default_state(tax_year: int | None = None) -> AppState:
    """A fresh aggregate with default settings."""
    return AppState(settings=PayrollSettings(tax_year=tax_year or date.today().year))


_STATE_ADAPTER = TypeAdapter(AppState)


def dump_state(state: AppState) -> dict[str, Any]:
    """Serialize the aggregate to JSON-compatible primitives.

    Decimals become strings so a load/dump round trip is exact.
    """
    return _STATE_ADAPTER.dump_python(state, mode="json")


def load_state(data: dict[str, Any]) -> AppState:
    """Rebuild the aggregate from a serialized snapshot.

    Keys missing from older snapshots take their dataclass defaults.
    """
    return _STATE_ADAPTER.validate_python(data)
