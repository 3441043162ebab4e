"""Process-wide wiring: vault, registry, oracle, engine and services.

build_runtime() assembles one consistent object graph from settings; the
FastAPI app keeps it on app.state and routers reach it through the
get_*_service dependencies. Tests build their own Runtime and pass it to
create_app().
"""

import logging
from dataclasses import dataclass

from fastapi import Request

from config.settings import settings
from src.pm_account.application.service import AccountApplicationService
from src.pm_account.domain.vault import CollateralVault
from src.pm_common.database import get_session_factory
from src.pm_gateway.auth.registry import InMemoryAgentRegistry
from src.pm_market.application.engine import MarketEngine
from src.pm_market.application.service import MarketApplicationService
from src.pm_market.infrastructure.persistence import MarketSnapshotRepository
from src.pm_oracle.domain.protocol import OracleClientProtocol
from src.pm_oracle.infrastructure.http_client import HttpOracleClient
from src.pm_oracle.infrastructure.optimistic_oracle import InMemoryOptimisticOracle

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    vault: CollateralVault
    registry: InMemoryAgentRegistry
    oracle: OracleClientProtocol
    engine: MarketEngine
    market_service: MarketApplicationService
    account_service: AccountApplicationService


def build_runtime(
    vault: CollateralVault | None = None,
    registry: InMemoryAgentRegistry | None = None,
    oracle: OracleClientProtocol | None = None,
    snapshots: bool | None = None,
) -> Runtime:
    vault = vault or CollateralVault()
    registry = registry or InMemoryAgentRegistry(settings.AUTHORIZED_AGENTS)
    if oracle is None:
        if settings.ORACLE_URL:
            oracle = HttpOracleClient(
                base_url=settings.ORACLE_URL,
                address=settings.ORACLE_ADDRESS,
                callback_url=settings.ORACLE_CALLBACK_URL,
                timeout=settings.ORACLE_TIMEOUT_SECONDS,
            )
            logger.info("Using HTTP oracle at %s", settings.ORACLE_URL)
        else:
            oracle = InMemoryOptimisticOracle(
                vault,
                address=settings.ORACLE_ADDRESS,
                default_minimum_bond=settings.ORACLE_MINIMUM_BOND,
            )
            logger.info("Using in-process optimistic oracle")

    engine = MarketEngine(registry, oracle, vault)

    use_snapshots = settings.SNAPSHOT_ENABLED if snapshots is None else snapshots
    if use_snapshots:
        market_service = MarketApplicationService(
            engine, MarketSnapshotRepository(), get_session_factory()
        )
    else:
        market_service = MarketApplicationService(engine)
    engine.bind_callback_target(market_service)

    return Runtime(
        vault=vault,
        registry=registry,
        oracle=oracle,
        engine=engine,
        market_service=market_service,
        account_service=AccountApplicationService(vault),
    )


def get_runtime(request: Request) -> Runtime:
    return request.app.state.runtime


def get_market_service(request: Request) -> MarketApplicationService:
    return get_runtime(request).market_service


def get_account_service(request: Request) -> AccountApplicationService:
    return get_runtime(request).account_service
