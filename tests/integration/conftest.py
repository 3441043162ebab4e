"""Integration-test fixtures.

Integration tests drive the full FastAPI app (routers, dependencies, error
handler, middleware) over ASGITransport against a fresh in-memory runtime:
in-process oracle, in-memory vault, no snapshot database.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient

from config.settings import settings
from src.pm_gateway.auth.dependencies import CALLER_HEADER


def as_caller(address: str) -> dict[str, str]:
    return {CALLER_HEADER: address}


@pytest.fixture
def dev_oracle(monkeypatch: pytest.MonkeyPatch) -> None:
    """Expose the in-process oracle's dispute/settle/resolve routes."""
    monkeypatch.setattr(settings, "ORACLE_DEV_ENDPOINTS_ENABLED", True)


@pytest_asyncio.fixture
async def funded_client(client: AsyncClient) -> AsyncClient:
    """Client whose agents hold 1000 ETH and 1000 USDC via the faucet."""
    for agent in ("alice", "bob", "carol"):
        for currency in ("ETH", "USDC"):
            resp = await client.post(
                "/api/v1/account/deposit",
                json={"currency": currency, "amount": 1_000},
                headers=as_caller(agent),
            )
            assert resp.status_code == 200
    return client
