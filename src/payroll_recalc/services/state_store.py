"""Persistence of the serialized application state."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from payroll_recalc.models import AppStateRecord

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    """Loads and saves one opaque AppState snapshot."""

    async def load(self) -> dict[str, Any] | None: ...

    async def save(self, payload: dict[str, Any]) -> bool: ...

    async def ping(self) -> bool: ...


class SqlStateStore:
    """StateStore backed by the app_state table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        state_key: str = "default",
    ):
        self.session_factory = session_factory
        self.state_key = state_key

    async def load(self) -> dict[str, Any] | None:
        """Return the stored snapshot, or None when nothing was saved yet."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(AppStateRecord).where(AppStateRecord.state_key == self.state_key)
            )
            record = result.scalar_one_or_none()
            return record.payload if record is not None else None

    async def save(self, payload: dict[str, Any]) -> bool:
        """Upsert the snapshot; returns False if the write failed."""
        try:
            async with self.session_factory() as session:
                record = await session.get(AppStateRecord, self.state_key)
                if record is None:
                    session.add(AppStateRecord(state_key=self.state_key, payload=payload))
                else:
                    record.payload = payload
                await session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to save state %s", self.state_key)
            return False
        return True

    async def ping(self) -> bool:
        """Whether the database answers a trivial query."""
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        return True
