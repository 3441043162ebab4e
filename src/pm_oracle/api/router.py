"""pm_oracle REST endpoints.

Inbound callbacks from the oracle (bearer token with role "oracle"):
POST /oracle/callbacks/resolved
POST /oracle/callbacks/disputed

Dev endpoints, only with ORACLE_DEV_ENDPOINTS_ENABLED and the in-process oracle:
GET  /oracle/assertions/{assertion_id}
POST /oracle/assertions/{assertion_id}/dispute   — caller posts the matching bond
POST /oracle/assertions/{assertion_id}/settle    — finalize after liveness
POST /oracle/assertions/{assertion_id}/resolve   — arbitrate a dispute (operator token)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from config.settings import settings
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_caller, get_oracle_caller, require_operator
from src.pm_market.application.service import MarketApplicationService
from src.pm_oracle.application.schemas import (
    AssertionDetail,
    DisputedCallbackRequest,
    ResolvedCallbackRequest,
    ResolveDisputeRequest,
)
from src.pm_oracle.infrastructure.optimistic_oracle import InMemoryOptimisticOracle
from src.runtime import get_market_service, get_runtime

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/oracle", tags=["oracle"])

Caller = Annotated[str, Depends(get_caller)]
OracleCaller = Annotated[str, Depends(get_oracle_caller)]
Operator = Annotated[str, Depends(require_operator)]
Service = Annotated[MarketApplicationService, Depends(get_market_service)]


def get_local_oracle(request: Request) -> InMemoryOptimisticOracle:
    oracle = get_runtime(request).oracle
    if not settings.ORACLE_DEV_ENDPOINTS_ENABLED or not isinstance(
        oracle, InMemoryOptimisticOracle
    ):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Oracle dev endpoints not enabled"
        )
    return oracle


LocalOracle = Annotated[InMemoryOptimisticOracle, Depends(get_local_oracle)]


@router.post("/callbacks/resolved")
async def assertion_resolved(
    body: ResolvedCallbackRequest, request: Request, caller: OracleCaller, service: Service
) -> ApiResponse:
    await service.assertion_resolved_callback(caller, body.assertion_id, body.truthful)
    return success_response({"assertion_id": body.assertion_id}, request)


@router.post("/callbacks/disputed")
async def assertion_disputed(
    body: DisputedCallbackRequest, request: Request, caller: OracleCaller, service: Service
) -> ApiResponse:
    await service.assertion_disputed_callback(caller, body.assertion_id)
    return success_response({"assertion_id": body.assertion_id}, request)


@router.get("/assertions/{assertion_id}")
async def get_assertion(assertion_id: str, request: Request, oracle: LocalOracle) -> ApiResponse:
    record = oracle.get_assertion(assertion_id)
    return success_response(AssertionDetail.from_domain(record).model_dump(), request)


@router.post("/assertions/{assertion_id}/dispute")
async def dispute_assertion(
    assertion_id: str, request: Request, caller: Caller, oracle: LocalOracle
) -> ApiResponse:
    await oracle.dispute_assertion(assertion_id, caller)
    record = oracle.get_assertion(assertion_id)
    return success_response(AssertionDetail.from_domain(record).model_dump(), request)


@router.post("/assertions/{assertion_id}/settle")
async def settle_assertion(
    assertion_id: str, request: Request, oracle: LocalOracle
) -> ApiResponse:
    await oracle.settle_assertion(assertion_id)
    record = oracle.get_assertion(assertion_id)
    return success_response(AssertionDetail.from_domain(record).model_dump(), request)


@router.post("/assertions/{assertion_id}/resolve")
async def resolve_dispute(
    assertion_id: str,
    body: ResolveDisputeRequest,
    request: Request,
    operator: Operator,
    oracle: LocalOracle,
) -> ApiResponse:
    await oracle.resolve_dispute(assertion_id, body.truthful)
    logger.info(
        "DisputeResolved: assertion=%s truthful=%s operator=%s",
        assertion_id, body.truthful, operator,
    )
    record = oracle.get_assertion(assertion_id)
    return success_response(AssertionDetail.from_domain(record).model_dump(), request)
