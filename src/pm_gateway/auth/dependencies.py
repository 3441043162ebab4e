"""FastAPI dependencies for caller identity.

get_caller: participant endpoints. Identity is established upstream
(gateway / signature check); the caller's address travels in the
X-Caller-Address header and authorization is decided by the engine.

get_oracle_caller / require_operator: privileged endpoints. These never
trust the header; they require a bearer service token (see jwt_handler).

Usage in any router:
    from src.pm_gateway.auth.dependencies import get_caller

    @router.post("/things")
    async def create(caller: Annotated[str, Depends(get_caller)]):
        ...
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.pm_common.errors import InvalidCredentialsError, OnlyOracleError, OperatorRequiredError
from src.pm_gateway.auth.jwt_handler import OPERATOR_ROLE, ORACLE_ROLE, decode_service_token

CALLER_HEADER = "X-Caller-Address"

bearer_scheme = HTTPBearer(auto_error=False)

Credentials = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


async def get_caller(
    x_caller_address: Annotated[str | None, Header(alias=CALLER_HEADER)] = None,
) -> str:
    """Return the caller address, or HTTP 401 if the header is missing/blank."""
    if x_caller_address is None or not x_caller_address.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {CALLER_HEADER} header",
        )
    return x_caller_address.strip()


def _claims(credentials: HTTPAuthorizationCredentials | None) -> dict[str, str]:
    if credentials is None:
        raise InvalidCredentialsError()
    return decode_service_token(credentials.credentials)


async def get_oracle_caller(credentials: Credentials) -> str:
    """Address from a verified oracle token. The engine still checks it is the
    configured oracle (OnlyOracleError otherwise)."""
    claims = _claims(credentials)
    if claims["role"] != ORACLE_ROLE:
        raise OnlyOracleError(claims["sub"])
    return claims["sub"]


async def require_operator(credentials: Credentials) -> str:
    """Address from a verified operator token."""
    claims = _claims(credentials)
    if claims["role"] != OPERATOR_ROLE:
        raise OperatorRequiredError(claims["sub"])
    return claims["sub"]
