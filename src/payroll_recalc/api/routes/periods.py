"""Pay period, recalculation and pay stub endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query

from payroll_recalc.api.dependencies import Payroll, not_found
from payroll_recalc.api.schemas import (
    ErrorResponse,
    GeneratePeriodsResponse,
    PayPeriodResponse,
    PayStubResponse,
    PeriodListResponse,
    RecalculateRequest,
    YearToDateResponse,
)

router = APIRouter(tags=["periods"])


@router.post("/periods/generate", response_model=GeneratePeriodsResponse)
async def generate_periods(payroll: Payroll) -> GeneratePeriodsResponse:
    """Regenerate periods for every employee, keeping entered hours."""
    async with payroll.write() as service:
        periods = service.generate_periods()
        return GeneratePeriodsResponse(
            employees=len(periods),
            periods_per_employee=len(service.generate_base_periods()),
        )


@router.get(
    "/employees/{employee_id}/periods",
    response_model=PeriodListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def list_periods(
    payroll: Payroll, employee_id: Annotated[str, Path()]
) -> PeriodListResponse:
    async with payroll.read() as service:
        if service.get_employee(employee_id) is None:
            raise not_found("Employee", employee_id)
        periods = service.get_periods(employee_id)
        return PeriodListResponse(
            items=[PayPeriodResponse.model_validate(p) for p in periods],
            total=len(periods),
        )


@router.get(
    "/employees/{employee_id}/periods/{period}",
    response_model=PayPeriodResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_period(
    payroll: Payroll,
    employee_id: Annotated[str, Path()],
    period: Annotated[int, Path(ge=1)],
) -> PayPeriodResponse:
    async with payroll.read() as service:
        pay_period = service.get_period(employee_id, period)
        if pay_period is None:
            raise not_found("Pay period", f"{employee_id}/{period}")
        return PayPeriodResponse.model_validate(pay_period)


@router.put(
    "/employees/{employee_id}/periods/{period}/hours",
    response_model=PeriodListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def record_hours(
    payroll: Payroll,
    employee_id: Annotated[str, Path()],
    period: Annotated[int, Path(ge=1)],
    payload: RecalculateRequest,
) -> PeriodListResponse:
    """Record hours and return every period that was recomputed."""
    async with payroll.write() as service:
        if service.get_period(employee_id, period) is None:
            raise not_found("Pay period", f"{employee_id}/{period}")
        updated = service.recalculate(employee_id, period, payload.hours.model_dump())
        return PeriodListResponse(
            items=[PayPeriodResponse.model_validate(p) for p in updated],
            total=len(updated),
        )


@router.post(
    "/employees/{employee_id}/recalculate",
    response_model=PeriodListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def recalculate_all(
    payroll: Payroll, employee_id: Annotated[str, Path()]
) -> PeriodListResponse:
    """Replay every period with hours from zero remainders."""
    async with payroll.write() as service:
        if service.get_employee(employee_id) is None:
            raise not_found("Employee", employee_id)
        updated = service.recalculate_all_periods(employee_id)
        return PeriodListResponse(
            items=[PayPeriodResponse.model_validate(p) for p in updated],
            total=len(updated),
        )


@router.get(
    "/employees/{employee_id}/ytd",
    response_model=YearToDateResponse,
    responses={404: {"model": ErrorResponse}},
)
async def year_to_date(
    payroll: Payroll,
    employee_id: Annotated[str, Path()],
    through_period: Annotated[int, Query(ge=1)],
) -> YearToDateResponse:
    async with payroll.read() as service:
        ytd = service.get_year_to_date(employee_id, through_period)
        if ytd is None:
            raise not_found("Employee", employee_id)
        return YearToDateResponse.model_validate(ytd)


@router.get(
    "/employees/{employee_id}/periods/{period}/stub",
    response_model=PayStubResponse,
    responses={404: {"model": ErrorResponse}},
)
async def pay_stub(
    payroll: Payroll,
    employee_id: Annotated[str, Path()],
    period: Annotated[int, Path(ge=1)],
) -> PayStubResponse:
    async with payroll.read() as service:
        stub = service.get_pay_stub(employee_id, period)
        if stub is None:
            raise not_found("Pay period", f"{employee_id}/{period}")
        return PayStubResponse.model_validate(stub)
