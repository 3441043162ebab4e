"""pm_account REST API — custody balances, ledger and the dev faucet.

The caller is identified by the X-Caller-Address header.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from config.settings import settings
from src.pm_account.application.schemas import DepositRequest
from src.pm_account.application.service import AccountApplicationService
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_caller
from src.runtime import get_account_service

router = APIRouter(prefix="/account", tags=["account"])

Service = Annotated[AccountApplicationService, Depends(get_account_service)]
Caller = Annotated[str, Depends(get_caller)]


@router.get("/balances")
async def get_balances(caller: Caller, service: Service, request: Request) -> ApiResponse:
    return success_response(service.get_balances(caller).model_dump(), request)


@router.post("/deposit")
async def deposit(
    body: DepositRequest, caller: Caller, service: Service, request: Request
) -> ApiResponse:
    if not settings.FAUCET_ENABLED:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Faucet disabled")
    data = service.deposit(caller, body.currency, body.amount)
    return success_response(data.model_dump(), request)


@router.get("/ledger")
async def list_ledger(
    caller: Caller,
    service: Service,
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    currency: str | None = Query(None, description="Filter by currency"),
) -> ApiResponse:
    data = service.list_ledger(caller, cursor, limit, currency)
    return success_response(data.model_dump(), request)
