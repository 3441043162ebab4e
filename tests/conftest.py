"""Shared test fixtures."""

# ruff: noqa: E402  -- JWT_SECRET must be in the environment before settings load

import os

os.environ.setdefault("JWT_SECRET", "test-only-secret")

from datetime import UTC, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import create_app
from src.pm_account.domain.vault import CollateralVault
from src.pm_gateway.auth.registry import InMemoryAgentRegistry
from src.pm_market.application.engine import MarketEngine
from src.pm_oracle.infrastructure.optimistic_oracle import InMemoryOptimisticOracle
from src.runtime import build_runtime

AGENTS = ["alice", "bob", "carol"]
STARTING_ETH = 1_000
STARTING_USDC = 1_000
LIVENESS = 3_600


class FakeClock:
    """Manually advanced clock shared by the engine and the in-process oracle."""

    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def vault() -> CollateralVault:
    v = CollateralVault()
    for agent in [*AGENTS, "mallory"]:
        v.deposit("ETH", agent, STARTING_ETH)
        v.deposit("USDC", agent, STARTING_USDC)
    return v


@pytest.fixture
def registry() -> InMemoryAgentRegistry:
    return InMemoryAgentRegistry(AGENTS)


@pytest.fixture
def oracle(vault: CollateralVault, clock: FakeClock) -> InMemoryOptimisticOracle:
    return InMemoryOptimisticOracle(vault, address="oracle", clock=clock)


def _make_engine(registry, default_oracle, vault, clock, **overrides) -> MarketEngine:
    oracle = overrides.pop("oracle", default_oracle)
    params = dict(
        address="engine",
        collateral_currency="ETH",
        bond_currency="USDC",
        liveness_seconds=LIVENESS,
        identifier="ASSERT_TRUTH",
        protocol_fee_bps=0,
        creator_fee_bps=0,
        protocol_fee_recipient="treasury",
        clock=clock,
    )
    params.update(overrides)
    return MarketEngine(registry, oracle, vault, **params)


@pytest.fixture
def engine_factory(registry, oracle, vault, clock):
    """Build an engine over the shared fixtures with overridden parameters."""

    def factory(**overrides) -> MarketEngine:
        return _make_engine(registry, oracle, vault, clock, **overrides)

    return factory


@pytest.fixture
def engine(engine_factory) -> MarketEngine:
    return engine_factory()


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client over a fresh in-memory runtime (no database)."""
    runtime = build_runtime(registry=InMemoryAgentRegistry(AGENTS), snapshots=False)
    app = create_app(runtime)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
