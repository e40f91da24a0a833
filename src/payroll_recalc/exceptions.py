"""Exception types for the payroll recalculation engine."""

from __future__ import annotations

from decimal import Decimal


class PayrollError(Exception):
    """Base class for payroll engine errors."""


class ConfigurationMissingError(PayrollError):
    """Raised when a required payroll setting has not been configured."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"Payroll setting '{setting}' is not configured")


class ReferenceNotFoundError(PayrollError):
    """Raised when an employee, period, deduction or entry does not exist."""

    def __init__(self, kind: str, key: object):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} '{key}' not found")


class RoundingInvariantViolation(PayrollError):
    """Raised when a committed tax remainder reaches a full cent.

    This never happens for correct input; it signals a defect in the
    remainder chain and is not absorbed by the service layer.
    """

    def __init__(self, line: str, remainder: Decimal):
        self.line = line
        self.remainder = remainder
        super().__init__(
            f"Remainder for tax line '{line}' is {remainder}, expected |r| < 0.01"
        )


class InvalidRecalcTransitionError(PayrollError):
    """Raised when a recalculation starts while another is in progress."""

    def __init__(self, employee_id: str, from_mode: str, to_mode: str):
        self.employee_id = employee_id
        self.from_mode = from_mode
        self.to_mode = to_mode
        super().__init__(
            f"Employee '{employee_id}' cannot move from '{from_mode}' to '{to_mode}'"
        )
