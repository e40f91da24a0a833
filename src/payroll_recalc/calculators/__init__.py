"""Payroll calculation pipeline."""

from payroll_recalc.calculators.deduction_calculator import DeductionResult, calculate_deductions
from payroll_recalc.calculators.engine import CalculationResult, PayrollEngine
from payroll_recalc.calculators.period_generator import PeriodGenerator, generate_base_periods
from payroll_recalc.calculators.tax_calculator import TaxCalculation, TaxCalculator
from payroll_recalc.calculators.wage_base import WageBaseTracker

__all__ = [
    "PayrollEngine",
    "CalculationResult",
    "DeductionResult",
    "PeriodGenerator",
    "TaxCalculation",
    "TaxCalculator",
    "WageBaseTracker",
    "calculate_deductions",
    "generate_base_periods",
]
