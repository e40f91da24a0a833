"""API routes."""

from payroll_recalc.api.routes.employees import router as employees_router
from payroll_recalc.api.routes.health import router as health_router
from payroll_recalc.api.routes.periods import router as periods_router
from payroll_recalc.api.routes.register import router as register_router
from payroll_recalc.api.routes.settings import router as settings_router

__all__ = [
    "employees_router",
    "health_router",
    "periods_router",
    "register_router",
    "settings_router",
]
