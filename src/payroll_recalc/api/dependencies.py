"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from payroll_recalc.services.payroll_service import PayrollService
from payroll_recalc.services.state_store import StateStore
from payroll_recalc.state import dump_state

logger = logging.getLogger(__name__)


class PayrollContext:
    """The one PayrollService of the app, its store and its request lock.

    Requests are serialized: reads and writes run under the same lock and
    every write saves a snapshot before the lock is released.
    """

    def __init__(self, service: PayrollService, store: StateStore):
        self.service = service
        self.store = store
        self.lock = asyncio.Lock()

    @asynccontextmanager
    async def read(self) -> AsyncIterator[PayrollService]:
        async with self.lock:
            yield self.service

    @asynccontextmanager
    async def write(self) -> AsyncIterator[PayrollService]:
        async with self.lock:
            yield self.service
            if not await self.store.save(dump_state(self.service.state)):
                logger.error("State changes were applied but not persisted")


def get_payroll_context(request: Request) -> PayrollContext:
    """Get the application's payroll context."""
    context = getattr(request.app.state, "payroll", None)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Payroll state is not loaded",
        )
    return context


def not_found(kind: str, key: object) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{kind} '{key}' not found",
    )


def bad_request(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
    )


# Type aliases for cleaner dependency injection
Payroll = Annotated[PayrollContext, Depends(get_payroll_context)]
