"""Recalculation orchestration: single-period edits and full replays."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from functools import reduce

from payroll_recalc.calculators.engine import CalculationResult, PayrollEngine
from payroll_recalc.calculators.types import Employee, Hours, PayPeriod, TaxRemainders
from payroll_recalc.exceptions import InvalidRecalcTransitionError
from payroll_recalc.services.register_service import RegisterSynchronizer
from payroll_recalc.state import AppState

logger = logging.getLogger(__name__)


class RecalcMode(str, Enum):
    """Recalculation modes an employee passes through."""

    IDLE = "idle"
    SINGLE_PERIOD = "single_period"
    FULL_REPLAY = "full_replay"


@dataclass(frozen=True)
class ReplayAccumulator:
    """Values threaded through a replay fold.

    history holds staged copies of the employee's periods; nothing in the
    application state changes until the fold completes.
    """

    remainders: TaxRemainders
    pto_balance: Decimal
    history: tuple[PayPeriod, ...]
    results: tuple[CalculationResult, ...] = field(default_factory=tuple)


class RecalculationOrchestrator:
    """Decides how an edit propagates and commits the outcome.

    Transitions:
    - idle -> single_period (no later period has hours)
    - idle -> full_replay (some later period has hours)
    - single_period -> idle, full_replay -> idle (on commit or failure)
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        RecalcMode.IDLE: [RecalcMode.SINGLE_PERIOD, RecalcMode.FULL_REPLAY],
        RecalcMode.SINGLE_PERIOD: [RecalcMode.IDLE],
        RecalcMode.FULL_REPLAY: [RecalcMode.IDLE],
    }

    def __init__(self, state: AppState):
        self.state = state
        self.register = RegisterSynchronizer(state)
        self._modes: dict[str, RecalcMode] = {}

    @property
    def engine(self) -> PayrollEngine:
        # Settings may change between calls
        return PayrollEngine(self.state.settings)

    def mode_for(self, employee_id: str) -> RecalcMode:
        return self._modes.get(employee_id, RecalcMode.IDLE)

    def _transition(self, employee_id: str, to_mode: RecalcMode) -> None:
        current = self.mode_for(employee_id)
        if to_mode not in self.VALID_TRANSITIONS[current]:
            raise InvalidRecalcTransitionError(employee_id, current.value, to_mode.value)
        self._modes[employee_id] = to_mode

    @staticmethod
    def choose_mode(periods: list[PayPeriod], edited_period: int) -> RecalcMode:
        """Full replay when any later period already has hours."""
        if any(p.period > edited_period and p.has_hours for p in periods):
            return RecalcMode.FULL_REPLAY
        return RecalcMode.SINGLE_PERIOD

    def recalculate(
        self, employee_id: str, period_number: int, hours: Hours
    ) -> list[PayPeriod]:
        """Apply new hours to a period and propagate the change.

        Returns every period that was recomputed. Raises
        ReferenceNotFoundError for an unknown employee or period.
        """
        employee = self.state.find_employee(employee_id)
        self.state.find_period(employee_id, period_number)
        periods = self.state.periods_for(employee_id)

        mode = self.choose_mode(periods, period_number)
        self._transition(employee_id, mode)
        try:
            if mode == RecalcMode.FULL_REPLAY:
                logger.info(
                    "Full replay for employee %s after edit to period %s",
                    employee_id,
                    period_number,
                )
                results = self.replay(employee, {period_number: hours})
            else:
                results = [self._single(employee, period_number, hours)]
            self._commit(employee, results)
        finally:
            self._modes[employee_id] = RecalcMode.IDLE

        return [r.period for r in results]

    def recalculate_all(self, employee_id: str) -> list[PayPeriod]:
        """Replay every period with hours from zero remainders."""
        employee = self.state.find_employee(employee_id)
        self._transition(employee_id, RecalcMode.FULL_REPLAY)
        try:
            results = self.replay(employee, {})
            self._commit(employee, results)
        finally:
            self._modes[employee_id] = RecalcMode.IDLE
        logger.info("Replayed %d periods for employee %s", len(results), employee_id)
        return [r.period for r in results]

    def _single(
        self, employee: Employee, period_number: int, hours: Hours
    ) -> CalculationResult:
        periods = self.state.periods_for(employee.employee_id)
        period = self.state.find_period(employee.employee_id, period_number)
        return self.engine.calculate_period(
            employee,
            period,
            hours,
            periods,
            employee.tax_remainders,
            employee.pto_balance,
            len(periods),
        )

    def replay(
        self, employee: Employee, overrides: dict[int, Hours]
    ) -> list[CalculationResult]:
        """Fold over the employee's periods in sequence order.

        Remainders restart at zero. Periods without hours are skipped unless
        their hours are being overridden, which zeroes them out.
        """
        engine = self.engine
        periods = sorted(self.state.periods_for(employee.employee_id), key=lambda p: p.period)
        periods_in_year = len(periods)

        def step(acc: ReplayAccumulator, period: PayPeriod) -> ReplayAccumulator:
            hours = overrides.get(period.period, period.hours)
            if hours.total == 0 and period.period not in overrides:
                return acc
            result = engine.calculate_period(
                employee,
                period,
                hours,
                acc.history,
                acc.remainders,
                acc.pto_balance,
                periods_in_year,
            )
            history = tuple(
                result.period if p.period == period.period else p for p in acc.history
            )
            return replace(
                acc,
                remainders=result.remainders,
                pto_balance=result.pto_balance,
                history=history,
                results=acc.results + (result,),
            )

        initial = ReplayAccumulator(
            remainders=TaxRemainders.zero(),
            pto_balance=employee.pto_balance,
            history=tuple(periods),
        )
        return list(reduce(step, periods, initial).results)

    def _commit(self, employee: Employee, results: list[CalculationResult]) -> None:
        """Write staged results, remainders and PTO back in one step."""
        if not results:
            return

        periods = self.state.periods_for(employee.employee_id)
        by_number = {r.period.period: r.period for r in results}
        periods[:] = [by_number.get(p.period, p) for p in periods]

        last = results[-1]
        employee.tax_remainders = last.remainders
        employee.pto_balance = last.pto_balance

        for result in results:
            self.register.sync(employee, result.period)
