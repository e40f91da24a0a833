"""Employee and deduction endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from payroll_recalc.api.dependencies import Payroll, not_found
from payroll_recalc.api.schemas import (
    DeductionCreate,
    DeductionResponse,
    DeductionUpdate,
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    ErrorResponse,
)

router = APIRouter(prefix="/employees", tags=["employees"])


# ============================================================================
# Employees
# ============================================================================


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(payroll: Payroll) -> list[EmployeeResponse]:
    async with payroll.read() as service:
        return [EmployeeResponse.model_validate(e) for e in service.list_employees()]


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_employee(payroll: Payroll, payload: EmployeeCreate) -> EmployeeResponse:
    """Create an employee with this year's pay periods."""
    async with payroll.write() as service:
        employee = service.add_employee(payload.model_dump())
        return EmployeeResponse.model_validate(employee)


@router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee(
    payroll: Payroll, employee_id: Annotated[str, Path()]
) -> EmployeeResponse:
    async with payroll.read() as service:
        employee = service.get_employee(employee_id)
        if employee is None:
            raise not_found("Employee", employee_id)
        return EmployeeResponse.model_validate(employee)


@router.patch(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_employee(
    payroll: Payroll,
    employee_id: Annotated[str, Path()],
    payload: EmployeeUpdate,
) -> EmployeeResponse:
    """Update profile fields. Existing periods are not recomputed."""
    async with payroll.write() as service:
        employee = service.update_employee(employee_id, payload.model_dump(exclude_none=True))
        if employee is None:
            raise not_found("Employee", employee_id)
        return EmployeeResponse.model_validate(employee)


@router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_employee(payroll: Payroll, employee_id: Annotated[str, Path()]) -> None:
    async with payroll.write() as service:
        if not service.delete_employee(employee_id):
            raise not_found("Employee", employee_id)


# ============================================================================
# Deductions
# ============================================================================


@router.post(
    "/{employee_id}/deductions",
    response_model=DeductionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def create_deduction(
    payroll: Payroll,
    employee_id: Annotated[str, Path()],
    payload: DeductionCreate,
) -> DeductionResponse:
    """Add a deduction; it applies to periods paid on or after its date."""
    async with payroll.write() as service:
        deduction = service.add_deduction(
            employee_id,
            payload.name,
            payload.amount,
            payload.type,
            payload.effective_date,
        )
        if deduction is None:
            raise not_found("Employee", employee_id)
        return DeductionResponse.model_validate(deduction)


@router.put(
    "/{employee_id}/deductions/{deduction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def update_deduction(
    payroll: Payroll,
    employee_id: Annotated[str, Path()],
    deduction_id: Annotated[str, Path()],
    payload: DeductionUpdate,
) -> None:
    async with payroll.write() as service:
        updated = service.update_deduction(
            employee_id, deduction_id, payload.name, payload.amount, payload.type
        )
        if not updated:
            raise not_found("Deduction", deduction_id)


@router.delete(
    "/{employee_id}/deductions/{deduction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_deduction(
    payroll: Payroll,
    employee_id: Annotated[str, Path()],
    deduction_id: Annotated[str, Path()],
) -> None:
    async with payroll.write() as service:
        if not service.delete_deduction(employee_id, deduction_id):
            raise not_found("Deduction", deduction_id)
