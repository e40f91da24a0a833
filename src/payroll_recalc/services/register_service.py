"""Cash register maintenance and payroll entry synchronization."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from uuid import uuid4

from payroll_recalc.calculators.money import round_to_cents, to_decimal
from payroll_recalc.calculators.types import ZERO, Employee, PayPeriod
from payroll_recalc.exceptions import ReferenceNotFoundError
from payroll_recalc.state import AppState, RegisterEntry, RegisterKey

logger = logging.getLogger(__name__)


def employer_cost(period: PayPeriod) -> Decimal:
    """Total cash the employer pays out for a period.

    gross + SUTA + FUTA + FICA + Medicare, using the rounded tax lines.
    """
    return period.gross_pay + period.taxes.employer_cost


class RegisterSynchronizer:
    """Keeps one debit entry per payroll period in step with its cost.

    Entries are keyed by RegisterKey(employee, period, tax year), so
    recomputing a period replaces its entry instead of adding another. A
    reconciled flag set by hand survives the replacement.
    """

    def __init__(self, state: AppState):
        self.state = state

    def sync(self, employee: Employee, period: PayPeriod) -> RegisterEntry | None:
        """Replace the period's register entry; returns the new entry, if any."""
        if not self.state.settings.auto_subtraction:
            return None

        key = RegisterKey(
            employee_id=employee.employee_id,
            period=period.period,
            tax_year=period.tax_year,
        )

        reconciled = False
        kept: list[RegisterEntry] = []
        for entry in self.state.register:
            if entry.payroll_key == key:
                reconciled = reconciled or entry.reconciled
            else:
                kept.append(entry)
        self.state.register[:] = kept

        cost = employer_cost(period)
        if cost <= 0:
            return None

        entry = RegisterEntry(
            entry_id=key.entry_id,
            entry_date=period.pay_date,
            description=f"Payroll: {employee.name} - P{period.period}",
            debit=cost,
            reconciled=reconciled,
            payroll_key=key,
        )
        self.state.register.append(entry)
        return entry

    def prune(self, employee_id: str, periods: Iterable[PayPeriod] = ()) -> int:
        """Drop employee_id's payroll entries whose period is not in periods.

        With no periods every payroll entry of the employee goes.
        """
        keep = {(p.period, p.tax_year) for p in periods}
        before = len(self.state.register)
        self.state.register[:] = [
            e for e in self.state.register
            if e.payroll_key is None
            or e.payroll_key.employee_id != employee_id
            or (e.payroll_key.period, e.payroll_key.tax_year) in keep
        ]
        pruned = before - len(self.state.register)
        if pruned:
            logger.info("Removed %d stale payroll entries for %s", pruned, employee_id)
        return pruned


class RegisterService:
    """Manual register entries, reconciliation and balances."""

    def __init__(self, state: AppState):
        self.state = state

    @staticmethod
    def _validated_amount(
        entry_date: date | None, description: str, amount: object
    ) -> Decimal | None:
        """Cent amount of a manual entry, or None if the entry is invalid."""
        value = round_to_cents(to_decimal(amount))
        if value <= 0 or not description or entry_date is None:
            logger.warning("Ignoring invalid register entry %r", description)
            return None
        return value

    def add_transaction(
        self,
        entry_date: date | None,
        description: str,
        entry_type: str,
        amount: object,
    ) -> RegisterEntry | None:
        """Add a manual debit or credit.

        Non-positive amounts and missing dates or descriptions are ignored.
        """
        value = self._validated_amount(entry_date, description, amount)
        if value is None:
            return None

        is_debit = entry_type.strip().lower() == "debit"
        entry = RegisterEntry(
            entry_id=f"trans_{uuid4().hex}",
            entry_date=entry_date,
            description=description,
            debit=value if is_debit else ZERO,
            credit=ZERO if is_debit else value,
        )
        self.state.register.append(entry)
        return entry

    def update_transaction(
        self,
        entry_id: str,
        entry_date: date | None,
        description: str,
        entry_type: str,
        amount: object,
    ) -> RegisterEntry | None:
        """Edit a manual entry in place, validated like add_transaction.

        Payroll entries belong to their period and are not editable; the
        reconciled flag is kept.
        """
        try:
            entry = self.state.find_entry(entry_id)
        except ReferenceNotFoundError as e:
            logger.warning("Register edit skipped: %s", e)
            return None
        if entry.is_payroll:
            logger.warning("Register edit skipped: %s is a payroll entry", entry_id)
            return None

        value = self._validated_amount(entry_date, description, amount)
        if value is None:
            return None

        is_debit = entry_type.strip().lower() == "debit"
        entry.entry_date = entry_date
        entry.description = description
        entry.debit = value if is_debit else ZERO
        entry.credit = ZERO if is_debit else value
        return entry

    def delete_transaction(self, entry_id: str) -> bool:
        before = len(self.state.register)
        self.state.register[:] = [e for e in self.state.register if e.entry_id != entry_id]
        return len(self.state.register) < before

    def toggle_reconciled(self, entry_id: str) -> RegisterEntry | None:
        try:
            entry = self.state.find_entry(entry_id)
        except ReferenceNotFoundError as e:
            logger.warning("Reconcile toggle skipped: %s", e)
            return None
        entry.reconciled = not entry.reconciled
        return entry

    def purge_reconciled(self, cutoff: date) -> int:
        """Delete reconciled entries dated on or before cutoff."""
        before = len(self.state.register)
        self.state.register[:] = [
            e for e in self.state.register
            if e.entry_date > cutoff or not e.reconciled
        ]
        purged = before - len(self.state.register)
        if purged:
            logger.info("Purged %d reconciled register entries through %s", purged, cutoff)
        return purged

    def current_balance(self) -> Decimal:
        """Credits minus debits across the whole register."""
        return sum((e.credit - e.debit for e in self.state.register), ZERO)
