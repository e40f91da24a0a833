"""Payroll recalculation services."""

from payroll_recalc.services.payroll_service import PayrollService
from payroll_recalc.services.recalculation import RecalcMode, RecalculationOrchestrator
from payroll_recalc.services.register_service import RegisterService, RegisterSynchronizer
from payroll_recalc.services.state_store import SqlStateStore, StateStore

__all__ = [
    "PayrollService",
    "RecalcMode",
    "RecalculationOrchestrator",
    "RegisterService",
    "RegisterSynchronizer",
    "SqlStateStore",
    "StateStore",
]
