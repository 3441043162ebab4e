"""pm_market REST endpoints.

POST /markets                                — initialize a market (authorized agents)
GET  /markets                                — all market ids, creation order
GET  /markets/fees/claimable/{account}       — fees accrued to an account, all markets
GET  /markets/{market_id}                    — full market view
GET  /markets/{market_id}/probability        — AMM-implied probability (bps)
GET  /markets/{market_id}/reserves           — AMM reserves
GET  /markets/{market_id}/fees               — accrued fees and fee rates
GET  /markets/{market_id}/positions/{holder} — claim balances of a holder
POST /markets/{market_id}/mint               — lock collateral for both claims
POST /markets/{market_id}/assert             — assert an outcome (authorized agents)
POST /markets/{market_id}/settle             — redeem claims after resolution
POST /markets/{market_id}/buy                — buy one outcome from the AMM
POST /markets/{market_id}/claims/transfer    — move claims to another holder

The caller is identified by the X-Caller-Address header.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_caller
from src.pm_market.application.schemas import (
    AssertRequest,
    BuyRequest,
    InitializeMarketRequest,
    MintRequest,
    TransferClaimsRequest,
)
from src.pm_market.application.service import MarketApplicationService
from src.runtime import get_market_service

router = APIRouter(prefix="/markets", tags=["markets"])

Service = Annotated[MarketApplicationService, Depends(get_market_service)]
Caller = Annotated[str, Depends(get_caller)]


@router.post("", status_code=201)
async def initialize_market(
    body: InitializeMarketRequest, request: Request, caller: Caller, service: Service
) -> ApiResponse:
    result = await service.initialize_market(caller, body)
    return success_response(result.model_dump(), request)


@router.get("")
async def list_markets(request: Request, service: Service) -> ApiResponse:
    return success_response(service.list_market_ids().model_dump(), request)


@router.get("/fees/claimable/{account}")
async def get_claimable_fees(account: str, request: Request, service: Service) -> ApiResponse:
    return success_response(service.get_claimable_fees(account).model_dump(), request)


@router.get("/{market_id}")
async def get_market(market_id: str, request: Request, service: Service) -> ApiResponse:
    return success_response(service.get_market(market_id).model_dump(), request)


@router.get("/{market_id}/probability")
async def get_probability(market_id: str, request: Request, service: Service) -> ApiResponse:
    return success_response(service.get_probability(market_id).model_dump(), request)


@router.get("/{market_id}/reserves")
async def get_reserves(market_id: str, request: Request, service: Service) -> ApiResponse:
    return success_response(service.get_reserves(market_id).model_dump(), request)


@router.get("/{market_id}/fees")
async def get_fee_info(market_id: str, request: Request, service: Service) -> ApiResponse:
    return success_response(service.get_fee_info(market_id).model_dump(), request)


@router.get("/{market_id}/positions/{holder}")
async def get_positions(
    market_id: str, holder: str, request: Request, service: Service
) -> ApiResponse:
    return success_response(service.get_positions(market_id, holder).model_dump(), request)


@router.post("/{market_id}/mint")
async def mint(
    market_id: str, body: MintRequest, request: Request, caller: Caller, service: Service
) -> ApiResponse:
    result = await service.mint(caller, market_id, body.amount)
    return success_response(result.model_dump(), request)


@router.post("/{market_id}/assert")
async def assert_outcome(
    market_id: str, body: AssertRequest, request: Request, caller: Caller, service: Service
) -> ApiResponse:
    result = await service.assert_outcome(caller, market_id, body.outcome)
    return success_response(result.model_dump(), request)


@router.post("/{market_id}/settle")
async def settle(market_id: str, request: Request, caller: Caller, service: Service) -> ApiResponse:
    result = await service.settle(caller, market_id)
    return success_response(result.model_dump(), request)


@router.post("/{market_id}/buy")
async def buy(
    market_id: str, body: BuyRequest, request: Request, caller: Caller, service: Service
) -> ApiResponse:
    result = await service.buy(caller, market_id, body.buy_outcome1, body.amount, body.min_output)
    return success_response(result.model_dump(), request)


@router.post("/{market_id}/claims/transfer")
async def transfer_claims(
    market_id: str,
    body: TransferClaimsRequest,
    request: Request,
    caller: Caller,
    service: Service,
) -> ApiResponse:
    result = await service.transfer_claims(
        caller, market_id, body.outcome_index, body.recipient, body.amount
    )
    return success_response(result.model_dump(), request)
