"""HttpOracleClient — OracleClientProtocol over the oracle service's REST API.

  GET  {base}/bonds/{currency}/minimum  -> {"minimum_bond": int}
  POST {base}/assertions                -> {"assertion_id": str}

The oracle calls back on ORACLE_CALLBACK_URL (see pm_oracle.api.router), so
the in-process callback_target is not sent over the wire.
"""

import logging
from typing import Any

import httpx

from src.pm_common.errors import OracleUnavailableError
from src.pm_oracle.domain.protocol import AssertionCallbackProtocol

logger = logging.getLogger(__name__)


class HttpOracleClient:
    def __init__(
        self,
        base_url: str,
        address: str,
        callback_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.address = address
        self._base_url = base_url.rstrip("/")
        self._callback_url = callback_url
        self._timeout = timeout
        self._transport = transport

    async def get_minimum_bond(self, currency: str) -> int:
        data = await self._request("GET", f"/bonds/{currency}/minimum")
        try:
            return int(data["minimum_bond"])
        except (KeyError, TypeError, ValueError) as exc:
            raise OracleUnavailableError(f"malformed bond quote: {data!r}") from exc

    async def assert_truth(
        self,
        *,
        claim: str,
        asserter: str,
        callback_target: AssertionCallbackProtocol,
        liveness_seconds: int,
        currency: str,
        bond: int,
        reward: int,
        identifier: str,
    ) -> str:
        payload = {
            "claim": claim,
            "asserter": asserter,
            "callback_url": self._callback_url,
            "callback_address": callback_target.address,
            "liveness_seconds": liveness_seconds,
            "currency": currency,
            "bond": bond,
            "reward": reward,
            "identifier": identifier,
        }
        data = await self._request("POST", "/assertions", json=payload)
        assertion_id = data.get("assertion_id") if isinstance(data, dict) else None
        if not isinstance(assertion_id, str) or not assertion_id:
            raise OracleUnavailableError(f"malformed assertion response: {data!r}")
        logger.info("Assertion submitted to %s: id=%s", self._base_url, assertion_id)
        return assertion_id

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                resp = await client.request(method, path, json=json)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPError as exc:
            logger.error("Oracle request failed: %s %s: %s", method, path, exc)
            raise OracleUnavailableError(str(exc) or exc.__class__.__name__) from exc
        except ValueError as exc:
            raise OracleUnavailableError(f"invalid JSON from {path}") from exc
