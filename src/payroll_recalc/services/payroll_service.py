"""Payroll service - owns the application state and exposes its operations."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import uuid4

from payroll_recalc.calculators.money import coerce_hours, to_decimal
from payroll_recalc.calculators.period_generator import generate_base_periods
from payroll_recalc.calculators.types import (
    Deduction,
    DeductionType,
    Employee,
    Hours,
    PayPeriod,
    PayrollSettings,
)
from payroll_recalc.exceptions import ReferenceNotFoundError
from payroll_recalc.services.recalculation import RecalculationOrchestrator
from payroll_recalc.services.register_service import RegisterService, RegisterSynchronizer
from payroll_recalc.services.reporting import (
    CashProjection,
    PayStub,
    TaxLiabilities,
    YearToDate,
    calculate_liabilities,
    project_cash,
    summarize_year_to_date,
)
from payroll_recalc.state import AppState, RegisterEntry

logger = logging.getLogger(__name__)

EMPLOYEE_TEXT_FIELDS = ("name", "id_number", "address")
EMPLOYEE_DECIMAL_FIELDS = (
    "rate",
    "overtime_multiplier",
    "holiday_multiplier",
    "federal_rate",
    "state_rate",
    "local_rate",
    "pto_accrual_rate",
    "pto_balance",
)


def _employee_fields(details: Mapping[str, Any]) -> dict[str, Any]:
    """Pick editable employee fields out of details, coercing numbers."""
    fields: dict[str, Any] = {}
    for name in EMPLOYEE_TEXT_FIELDS:
        if name in details and details[name] is not None:
            fields[name] = str(details[name]).strip()
    for name in EMPLOYEE_DECIMAL_FIELDS:
        if name in details and details[name] is not None:
            fields[name] = to_decimal(details[name])
    return fields


def _period_number(period: Any) -> int:
    """Period number from loose input; unusable input names no period."""
    try:
        return int(period)
    except (TypeError, ValueError):
        raise ReferenceNotFoundError("Pay period", period) from None


class PayrollService:
    """Operations over one AppState.

    Operations:
    - employees and deductions: add/update/delete
    - generate_periods: rebuild period skeletons, keeping entered hours
    - recalculate / recalculate_period / recalculate_all_periods
    - get_year_to_date / get_pay_stub / liabilities / projections
    - register maintenance (delegated to RegisterService)

    Unknown references are logged and produce an empty result; only a
    broken rounding invariant escapes.
    """

    def __init__(self, state: AppState):
        self.state = state
        self.orchestrator = RecalculationOrchestrator(state)
        self.register = RegisterService(state)
        self.synchronizer = RegisterSynchronizer(state)

    @property
    def settings(self) -> PayrollSettings:
        return self.state.settings

    def update_settings(self, settings: PayrollSettings) -> PayrollSettings:
        """Replace payroll settings; existing periods are not recomputed."""
        self.state.settings = settings
        return settings

    # Periods

    def generate_base_periods(self) -> list[PayPeriod]:
        return generate_base_periods(self.state.settings)

    def generate_periods(self) -> dict[str, list[PayPeriod]]:
        """Regenerate every employee's periods for the configured tax year.

        Periods of the same tax year that already have hours keep their data
        and take the regenerated dates. Payroll register entries follow: kept
        periods are re-synced and entries of vanished periods are removed.
        """
        base = self.generate_base_periods()
        tax_year = self.state.settings.tax_year

        for employee in self.state.employees:
            existing = {
                p.period: p
                for p in self.state.periods_for(employee.employee_id)
                if p.tax_year == tax_year and p.has_hours
            }
            merged: list[PayPeriod] = []
            for skeleton in base:
                old = existing.get(skeleton.period)
                if old is None:
                    merged.append(skeleton)
                else:
                    merged.append(
                        replace(
                            old,
                            start_date=skeleton.start_date,
                            end_date=skeleton.end_date,
                            pay_date=skeleton.pay_date,
                        )
                    )
            self.state.periods[employee.employee_id] = merged
            self.synchronizer.prune(employee.employee_id, merged)
            for period in merged:
                self.synchronizer.sync(employee, period)

        return self.state.periods

    # Employees

    def add_employee(self, details: Mapping[str, Any]) -> Employee:
        """Create an employee with zero remainders and fresh periods."""
        employee = Employee(
            employee_id=f"emp_{uuid4().hex[:12]}",
            **{"name": "", **_employee_fields(details)},
        )
        self.state.employees.append(employee)
        self.state.periods[employee.employee_id] = self.generate_base_periods()
        logger.info("Added employee %s", employee.employee_id)
        return employee

    def update_employee(self, employee_id: str, details: Mapping[str, Any]) -> Employee | None:
        """Update profile fields; remainders and deductions are untouched."""
        try:
            employee = self.state.find_employee(employee_id)
        except ReferenceNotFoundError as e:
            logger.warning("Employee update skipped: %s", e)
            return None

        for name, value in _employee_fields(details).items():
            setattr(employee, name, value)
        return employee

    def delete_employee(self, employee_id: str) -> bool:
        try:
            employee = self.state.find_employee(employee_id)
        except ReferenceNotFoundError as e:
            logger.warning("Employee delete skipped: %s", e)
            return False

        self.state.employees.remove(employee)
        self.state.periods.pop(employee_id, None)
        self.synchronizer.prune(employee_id)
        logger.info("Deleted employee %s", employee_id)
        return True

    # Deductions

    def add_deduction(
        self,
        employee_id: str,
        name: str,
        amount: Any,
        deduction_type: str | DeductionType = DeductionType.FIXED,
        effective_date: date | None = None,
    ) -> Deduction | None:
        """Add a deduction effective from effective_date (default today)."""
        try:
            employee = self.state.find_employee(employee_id)
        except ReferenceNotFoundError as e:
            logger.warning("Deduction add skipped: %s", e)
            return None

        deduction = Deduction(
            deduction_id=f"ded_{uuid4().hex[:12]}",
            name=name,
            amount=to_decimal(amount),
            type=DeductionType(deduction_type),
            effective_date=effective_date or date.today(),
        )
        employee.deductions.append(deduction)
        return deduction

    def update_deduction(
        self,
        employee_id: str,
        deduction_id: str,
        name: str,
        amount: Any,
        deduction_type: str | DeductionType,
    ) -> bool:
        """Update a deduction in place; its effective date is kept."""
        try:
            deduction = self._find_deduction(employee_id, deduction_id)
        except ReferenceNotFoundError as e:
            logger.warning("Deduction update skipped: %s", e)
            return False

        deduction.name = name
        deduction.amount = to_decimal(amount)
        deduction.type = DeductionType(deduction_type)
        return True

    def delete_deduction(self, employee_id: str, deduction_id: str) -> bool:
        try:
            deduction = self._find_deduction(employee_id, deduction_id)
        except ReferenceNotFoundError as e:
            logger.warning("Deduction delete skipped: %s", e)
            return False

        self.state.find_employee(employee_id).deductions.remove(deduction)
        return True

    def _find_deduction(self, employee_id: str, deduction_id: str) -> Deduction:
        employee = self.state.find_employee(employee_id)
        for deduction in employee.deductions:
            if deduction.deduction_id == deduction_id:
                return deduction
        raise ReferenceNotFoundError("Deduction", deduction_id)

    # Recalculation

    def recalculate(
        self,
        employee_id: str,
        period: int,
        hours: Hours | Mapping[str, Any] | None,
    ) -> list[PayPeriod]:
        """Record hours for a period and recompute what they affect."""
        try:
            return self.orchestrator.recalculate(
                employee_id, _period_number(period), coerce_hours(hours)
            )
        except ReferenceNotFoundError as e:
            logger.warning("Recalculation skipped: %s", e)
            return []

    def recalculate_period(self, employee_id: str, period: int) -> PayPeriod | None:
        """Recompute a period from its stored hours."""
        try:
            stored = self.state.find_period(employee_id, _period_number(period))
        except ReferenceNotFoundError as e:
            logger.warning("Recalculation skipped: %s", e)
            return None

        updated = self.recalculate(employee_id, stored.period, stored.hours)
        for result in updated:
            if result.period == stored.period:
                return result
        return None

    def recalculate_all_periods(self, employee_id: str) -> list[PayPeriod]:
        """Replay the whole year from zero remainders."""
        try:
            return self.orchestrator.recalculate_all(employee_id)
        except ReferenceNotFoundError as e:
            logger.warning("Replay skipped: %s", e)
            return []

    # Reports

    def get_year_to_date(self, employee_id: str, through_period: int) -> YearToDate | None:
        try:
            self.state.find_employee(employee_id)
            through = _period_number(through_period)
        except ReferenceNotFoundError as e:
            logger.warning("Year-to-date skipped: %s", e)
            return None
        return summarize_year_to_date(
            self.state.settings, self.state.periods_for(employee_id), through
        )

    def get_pay_stub(self, employee_id: str, period: int) -> PayStub | None:
        """Pay stub for a period, with totals through that period."""
        try:
            employee = self.state.find_employee(employee_id)
            pay_period = self.state.find_period(employee_id, _period_number(period))
        except ReferenceNotFoundError as e:
            logger.warning("Pay stub skipped: %s", e)
            return None

        settings = self.state.settings
        return PayStub(
            company_name=settings.company_name,
            company_address=settings.company_address,
            company_phone=settings.company_phone,
            employee=employee,
            period=pay_period,
            year_to_date=summarize_year_to_date(
                settings, self.state.periods_for(employee_id), pay_period.period
            ),
        )

    def tax_liabilities(
        self, start_date: date, end_date: date, frequency: str | None = None
    ) -> TaxLiabilities:
        """Deposits owed across all employees for pay dates in range."""
        return calculate_liabilities(
            self.state.settings, self.state.periods, start_date, end_date, frequency
        )

    def projections(self, today: date | None = None) -> CashProjection:
        return project_cash(self.state.settings, self.state.periods, today or date.today())

    # Register

    def add_transaction(
        self, entry_date: date | None, description: str, entry_type: str, amount: Any
    ) -> RegisterEntry | None:
        return self.register.add_transaction(entry_date, description, entry_type, amount)

    def update_transaction(
        self,
        entry_id: str,
        entry_date: date | None,
        description: str,
        entry_type: str,
        amount: Any,
    ) -> RegisterEntry | None:
        return self.register.update_transaction(
            entry_id, entry_date, description, entry_type, amount
        )

    def delete_transaction(self, entry_id: str) -> bool:
        return self.register.delete_transaction(entry_id)

    def toggle_reconciled(self, entry_id: str) -> RegisterEntry | None:
        return self.register.toggle_reconciled(entry_id)

    def purge_reconciled(self, cutoff: date) -> int:
        return self.register.purge_reconciled(cutoff)

    def current_balance(self) -> Decimal:
        return self.register.current_balance()

    # Accessors

    def get_employee(self, employee_id: str) -> Employee | None:
        try:
            return self.state.find_employee(employee_id)
        except ReferenceNotFoundError:
            return None

    def list_employees(self) -> list[Employee]:
        return list(self.state.employees)

    def get_periods(self, employee_id: str) -> list[PayPeriod]:
        return list(self.state.periods_for(employee_id))

    def get_period(self, employee_id: str, period: int) -> PayPeriod | None:
        try:
            return self.state.find_period(employee_id, _period_number(period))
        except ReferenceNotFoundError:
            return None

    def get_register_entry(self, entry_id: str) -> RegisterEntry | None:
        try:
            return self.state.find_entry(entry_id)
        except ReferenceNotFoundError:
            return None

    def list_register(self) -> list[RegisterEntry]:
        """Register entries, newest first."""
        return sorted(self.state.register, key=lambda e: e.entry_date, reverse=True)
