"""Service token creation and verification.

Oracle callbacks and operator endpoints are not identified by the
X-Caller-Address header but by an HS256 bearer token signed with
JWT_SECRET. The token carries the caller address in `sub` and what it may
do in `role`:

    oracle    may deliver assertion callbacks (sub must be the oracle address)
    operator  may arbitrate disputes on the in-process oracle

Tokens are minted out of band, e.g. for a remote oracle deployment:
    create_service_token(settings.ORACLE_ADDRESS, ORACLE_ROLE, expires_minutes=60 * 24 * 30)
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.pm_common.errors import InvalidCredentialsError

ORACLE_ROLE = "oracle"
OPERATOR_ROLE = "operator"


def create_service_token(
    subject: str, role: str, expires_minutes: int | None = None
) -> str:
    """Issue a token for *subject* acting as *role* (default lifetime JWT_EXPIRE_MINUTES)."""
    now = datetime.now(UTC)
    lifetime = timedelta(minutes=expires_minutes or settings.JWT_EXPIRE_MINUTES)
    payload = {
        "sub": subject,
        "role": role,
        "iat": now,
        "exp": now + lifetime,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM))


def decode_service_token(token: str) -> dict[str, str]:
    """Decode and validate a service token; the caller checks the role.

    Raises:
        InvalidCredentialsError: bad signature, expired, or no sub/role claim.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],  # explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if not payload.get("sub") or not payload.get("role"):
        raise InvalidCredentialsError()
    return payload
