"""ORM models."""

from payroll_recalc.models.app_state import AppStateRecord
from payroll_recalc.models.base import Base, TimestampMixin

__all__ = ["AppStateRecord", "Base", "TimestampMixin"]
