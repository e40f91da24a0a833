"""Persisted application state snapshot."""

from __future__ import annotations

from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from payroll_recalc.models.base import Base, TimestampMixin


class AppStateRecord(Base, TimestampMixin):
    """One serialized AppState per state key."""

    __tablename__ = "app_state"

    state_key: Mapped[str] = mapped_column(String(64), primary_key=True)
    payload: Mapped[dict[str, Any]]
