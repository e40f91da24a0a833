"""Tests for the recalculation orchestrator.

Covers mode selection, sequential-edit isolation, replay idempotence and
staged commits.
"""

import copy
from decimal import Decimal

import pytest

from payroll_recalc.calculators.engine import PayrollEngine
from payroll_recalc.calculators.types import TaxRemainders
from payroll_recalc.exceptions import (
    InvalidRecalcTransitionError,
    PayrollError,
    RoundingInvariantViolation,
)
from payroll_recalc.services.recalculation import RecalcMode, RecalculationOrchestrator

from .conftest import EMPLOYEE_ID, make_hours


def enter_hours(orchestrator, count, hours):
    """Enter the same hours for periods 1..count in order."""
    for number in range(1, count + 1):
        orchestrator.recalculate(EMPLOYEE_ID, number, hours)


class TestModeSelection:
    """Test the single-period versus full-replay decision."""

    def test_single_period_when_later_periods_are_empty(self, state):
        periods = state.periods_for(EMPLOYEE_ID)

        assert RecalculationOrchestrator.choose_mode(periods, 1) == RecalcMode.SINGLE_PERIOD

    def test_full_replay_when_a_later_period_has_hours(self, state, full_time):
        orchestrator = RecalculationOrchestrator(state)
        enter_hours(orchestrator, 3, full_time)

        periods = state.periods_for(EMPLOYEE_ID)
        assert orchestrator.choose_mode(periods, 2) == RecalcMode.FULL_REPLAY
        assert orchestrator.choose_mode(periods, 3) == RecalcMode.SINGLE_PERIOD

    def test_mode_returns_to_idle(self, state, full_time):
        orchestrator = RecalculationOrchestrator(state)

        orchestrator.recalculate(EMPLOYEE_ID, 1, full_time)

        assert orchestrator.mode_for(EMPLOYEE_ID) == RecalcMode.IDLE

    def test_cannot_start_while_busy(self, state, full_time):
        orchestrator = RecalculationOrchestrator(state)
        orchestrator._modes[EMPLOYEE_ID] = RecalcMode.FULL_REPLAY

        with pytest.raises(InvalidRecalcTransitionError):
            orchestrator.recalculate(EMPLOYEE_ID, 1, full_time)

    def test_busy_error_is_a_payroll_error(self, state, full_time):
        orchestrator = RecalculationOrchestrator(state)
        orchestrator._modes[EMPLOYEE_ID] = RecalcMode.SINGLE_PERIOD

        with pytest.raises(PayrollError) as excinfo:
            orchestrator.recalculate(EMPLOYEE_ID, 2, full_time)

        assert excinfo.value.employee_id == EMPLOYEE_ID
        assert excinfo.value.from_mode == "single_period"


class TestSinglePeriod:
    """Test appending periods one at a time."""

    def test_returns_only_the_edited_period(self, state, full_time):
        updated = RecalculationOrchestrator(state).recalculate(EMPLOYEE_ID, 1, full_time)

        assert [p.period for p in updated] == [1]
        assert state.find_period(EMPLOYEE_ID, 1).net_pay == Decimal("1467.00")

    def test_futa_stops_at_the_wage_base(self, state, full_time):
        orchestrator = RecalculationOrchestrator(state)
        enter_hours(orchestrator, 6, full_time)

        futa = [state.find_period(EMPLOYEE_ID, n).taxes.futa for n in range(1, 7)]

        assert futa == [Decimal("12.00")] * 3 + [Decimal("6.00"), Decimal("0.00"), Decimal("0.00")]
        assert sum(futa) == Decimal("42.00")

    def test_social_security_wage_base(self, state, full_time):
        state.settings.ss_wage_base = Decimal("3000")
        orchestrator = RecalculationOrchestrator(state)
        enter_hours(orchestrator, 3, full_time)

        nets = [state.find_period(EMPLOYEE_ID, n).net_pay for n in range(1, 4)]

        assert nets == [Decimal("1467.00"), Decimal("1529.00"), Decimal("1591.00")]

    def test_gross_pay_adds_up_over_the_year(self, state, full_time):
        """26 x 80h x $25 = $52,000."""
        enter_hours(RecalculationOrchestrator(state), 26, full_time)

        total = sum(p.gross_pay for p in state.periods_for(EMPLOYEE_ID))

        assert total == Decimal("52000.00")

    def test_remainders_committed_to_employee(self, state):
        state.employees[0].rate = Decimal("20.33")
        orchestrator = RecalculationOrchestrator(state)
        enter_hours(orchestrator, 4, make_hours(regular=80))

        remainders = state.employees[0].tax_remainders
        assert remainders != TaxRemainders.zero()
        assert all(abs(value) < Decimal("0.01") for _, value in remainders.items())


class TestFullReplay:
    """Test edits to periods that have later hours."""

    def test_editing_period_five_keeps_earlier_periods(self, state, full_time):
        orchestrator = RecalculationOrchestrator(state)
        enter_hours(orchestrator, 10, full_time)
        before = copy.deepcopy(state.periods_for(EMPLOYEE_ID)[:4])

        orchestrator.recalculate(EMPLOYEE_ID, 5, make_hours(regular=40))

        assert state.periods_for(EMPLOYEE_ID)[:4] == before
        assert state.find_period(EMPLOYEE_ID, 5).gross_pay == Decimal("1000.00")

    def test_editing_period_one_replays_every_period_with_hours(self, state, full_time):
        orchestrator = RecalculationOrchestrator(state)
        enter_hours(orchestrator, 10, full_time)

        updated = orchestrator.recalculate(EMPLOYEE_ID, 1, make_hours(regular=40))

        assert [p.period for p in updated] == list(range(1, 11))

    def test_later_wage_base_follows_earlier_edit(self, state, full_time):
        """Halving period 1 leaves more FUTA base for period 4."""
        orchestrator = RecalculationOrchestrator(state)
        enter_hours(orchestrator, 5, full_time)

        orchestrator.recalculate(EMPLOYEE_ID, 1, make_hours(regular=40))

        futa = [state.find_period(EMPLOYEE_ID, n).taxes.futa for n in range(1, 6)]
        assert futa[3] == Decimal("12.00")
        assert futa[4] == Decimal("0.00")
        assert sum(futa) == Decimal("42.00")

    def test_zeroing_a_period_clears_it(self, state, full_time):
        orchestrator = RecalculationOrchestrator(state)
        enter_hours(orchestrator, 3, full_time)

        orchestrator.recalculate(EMPLOYEE_ID, 2, make_hours())

        cleared = state.find_period(EMPLOYEE_ID, 2)
        assert cleared.gross_pay == Decimal("0")
        assert cleared.taxes.total == Decimal("0")
        assert not cleared.has_hours

    def test_replay_is_idempotent(self, state, full_time):
        state.employees[0].rate = Decimal("20.33")
        orchestrator = RecalculationOrchestrator(state)
        enter_hours(orchestrator, 8, full_time)
        periods = copy.deepcopy(state.periods_for(EMPLOYEE_ID))
        remainders = state.employees[0].tax_remainders

        orchestrator.recalculate_all(EMPLOYEE_ID)
        orchestrator.recalculate_all(EMPLOYEE_ID)

        assert state.periods_for(EMPLOYEE_ID) == periods
        assert state.employees[0].tax_remainders == remainders

    def test_failed_replay_commits_nothing(self, state, full_time, monkeypatch):
        orchestrator = RecalculationOrchestrator(state)
        enter_hours(orchestrator, 5, full_time)
        before = copy.deepcopy(state.periods_for(EMPLOYEE_ID))
        register_before = copy.deepcopy(state.register)
        original = PayrollEngine.calculate_period

        def failing(self, employee, period, *args, **kwargs):
            if period.period == 4:
                raise RoundingInvariantViolation("federal", Decimal("0.01"))
            return original(self, employee, period, *args, **kwargs)

        monkeypatch.setattr(PayrollEngine, "calculate_period", failing)

        with pytest.raises(RoundingInvariantViolation):
            orchestrator.recalculate(EMPLOYEE_ID, 1, make_hours(regular=40))

        assert state.periods_for(EMPLOYEE_ID) == before
        assert state.register == register_before
        assert orchestrator.mode_for(EMPLOYEE_ID) == RecalcMode.IDLE
