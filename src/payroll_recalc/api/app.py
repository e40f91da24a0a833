"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payroll_recalc.api.dependencies import PayrollContext
from payroll_recalc.api.routes import (
    employees_router,
    health_router,
    periods_router,
    register_router,
    settings_router,
)
from payroll_recalc.config import get_settings
from payroll_recalc.database import create_tables, dispose_db, init_db
from payroll_recalc.services.payroll_service import PayrollService
from payroll_recalc.services.state_store import SqlStateStore, StateStore
from payroll_recalc.state import default_state, load_state

logger = logging.getLogger(__name__)


async def load_context(store: StateStore) -> PayrollContext:
    """Build the payroll context from the stored snapshot, if any."""
    payload = await store.load()
    if payload is None:
        logger.info("No saved state found, starting with defaults")
        state = default_state()
    else:
        state = load_state(payload)
    return PayrollContext(PayrollService(state), store)


def create_app(store: StateStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Without an explicit store, the lifespan opens the configured database.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        # Startup
        owns_db = store is None
        active_store = store
        if active_store is None:
            engine, factory = init_db()
            await create_tables(engine)
            active_store = SqlStateStore(factory, get_settings().state_key)
        app.state.payroll = await load_context(active_store)
        yield
        # Shutdown
        if owns_db:
            await dispose_db()

    app = FastAPI(
        title="Payroll Recalculation API",
        description="Small-business payroll with remainder-carrying tax recalculation",
        version=get_settings().engine_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(settings_router, prefix="/api/v1")
    app.include_router(employees_router, prefix="/api/v1")
    app.include_router(periods_router, prefix="/api/v1")
    app.include_router(register_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
