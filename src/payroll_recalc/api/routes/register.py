"""Cash register, liability and projection endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from payroll_recalc.api.dependencies import Payroll, bad_request, not_found
from payroll_recalc.api.schemas import (
    BalanceResponse,
    CashProjectionResponse,
    ErrorResponse,
    PurgeRequest,
    PurgeResponse,
    RegisterEntryResponse,
    RegisterListResponse,
    TaxLiabilitiesResponse,
    TransactionCreate,
)

router = APIRouter(tags=["register"])

INVALID_ENTRY = "Register entry needs a date, a description and a positive amount"


@router.get("/register", response_model=RegisterListResponse)
async def list_register(payroll: Payroll) -> RegisterListResponse:
    async with payroll.read() as service:
        entries = service.list_register()
        return RegisterListResponse(
            items=[RegisterEntryResponse.model_validate(e) for e in entries],
            total=len(entries),
        )


@router.post(
    "/register",
    response_model=RegisterEntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def add_transaction(
    payroll: Payroll, payload: TransactionCreate
) -> RegisterEntryResponse:
    """Add a manual debit or credit."""
    async with payroll.write() as service:
        entry = service.add_transaction(
            payload.entry_date, payload.description, payload.type, payload.amount
        )
        if entry is None:
            raise bad_request(INVALID_ENTRY)
        return RegisterEntryResponse.model_validate(entry)


@router.put(
    "/register/{entry_id}",
    response_model=RegisterEntryResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_transaction(
    payroll: Payroll, entry_id: Annotated[str, Path()], payload: TransactionCreate
) -> RegisterEntryResponse:
    """Edit a manual entry. Payroll entries follow their period and are read-only."""
    async with payroll.write() as service:
        existing = service.get_register_entry(entry_id)
        if existing is None:
            raise not_found("Register entry", entry_id)
        if existing.is_payroll:
            raise bad_request("Payroll register entries are updated by recalculation")
        entry = service.update_transaction(
            entry_id, payload.entry_date, payload.description, payload.type, payload.amount
        )
        if entry is None:
            raise bad_request(INVALID_ENTRY)
        return RegisterEntryResponse.model_validate(entry)


@router.delete(
    "/register/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_transaction(payroll: Payroll, entry_id: Annotated[str, Path()]) -> None:
    async with payroll.write() as service:
        if not service.delete_transaction(entry_id):
            raise not_found("Register entry", entry_id)


@router.post(
    "/register/{entry_id}/reconcile",
    response_model=RegisterEntryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def toggle_reconciled(
    payroll: Payroll, entry_id: Annotated[str, Path()]
) -> RegisterEntryResponse:
    async with payroll.write() as service:
        entry = service.toggle_reconciled(entry_id)
        if entry is None:
            raise not_found("Register entry", entry_id)
        return RegisterEntryResponse.model_validate(entry)


@router.post("/register/purge", response_model=PurgeResponse)
async def purge_reconciled(payroll: Payroll, payload: PurgeRequest) -> PurgeResponse:
    """Delete reconciled entries dated on or before the cutoff."""
    async with payroll.write() as service:
        return PurgeResponse(purged=service.purge_reconciled(payload.cutoff))


@router.get("/register/balance", response_model=BalanceResponse)
async def current_balance(payroll: Payroll) -> BalanceResponse:
    async with payroll.read() as service:
        return BalanceResponse(balance=service.current_balance())


@router.get("/liabilities", response_model=TaxLiabilitiesResponse)
async def tax_liabilities(
    payroll: Payroll,
    start_date: date,
    end_date: date,
    frequency: Annotated[str | None, Query()] = None,
) -> TaxLiabilitiesResponse:
    """Tax deposits owed for periods paid within the date range."""
    async with payroll.read() as service:
        liabilities = service.tax_liabilities(start_date, end_date, frequency)
        return TaxLiabilitiesResponse.model_validate(liabilities)


@router.get("/projections", response_model=CashProjectionResponse)
async def cash_projections(
    payroll: Payroll,
    today: Annotated[date | None, Query()] = None,
) -> CashProjectionResponse:
    async with payroll.read() as service:
        return CashProjectionResponse.model_validate(service.projections(today))
