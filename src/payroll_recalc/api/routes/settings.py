"""Payroll settings endpoints."""

from fastapi import APIRouter

from payroll_recalc.api.dependencies import Payroll
from payroll_recalc.api.schemas import PayrollSettingsSchema
from payroll_recalc.calculators.types import PayrollSettings

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=PayrollSettingsSchema)
async def get_payroll_settings(payroll: Payroll) -> PayrollSettingsSchema:
    """Current payroll settings."""
    async with payroll.read() as service:
        return PayrollSettingsSchema.model_validate(service.settings)


@router.put("", response_model=PayrollSettingsSchema)
async def replace_payroll_settings(
    payroll: Payroll, payload: PayrollSettingsSchema
) -> PayrollSettingsSchema:
    """Replace payroll settings. Periods are regenerated separately."""
    data = payload.model_dump()
    if not data["tax_frequencies"]:
        data.pop("tax_frequencies")
    async with payroll.write() as service:
        updated = service.update_settings(PayrollSettings(**data))
        return PayrollSettingsSchema.model_validate(updated)
