"""Tests for the payroll recalculation engine."""
