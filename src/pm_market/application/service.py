"""MarketApplicationService — thin composition layer over MarketEngine.

Every mutation goes to the engine first; once it has committed, the
market's snapshot is written through the optional repository in its own
transaction. The engine is authoritative: a snapshot write failure is
logged, never rolled back into the engine.

The service also stands in as the oracle callback target so that
resolution callbacks are persisted the same way.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.pm_market.application.engine import MarketEngine
from src.pm_market.application.schemas import (
    AssertResponse,
    BuyResponse,
    ClaimableFeesResponse,
    FeeInfoResponse,
    InitializeMarketRequest,
    InitializeMarketResponse,
    MarketDetail,
    MarketIdsResponse,
    PositionsResponse,
    ProbabilityResponse,
    ReservesResponse,
    SettleResponse,
)
from src.pm_market.domain.repository import MarketSnapshotRepositoryProtocol

logger = logging.getLogger(__name__)


class MarketApplicationService:
    def __init__(
        self,
        engine: MarketEngine,
        repo: MarketSnapshotRepositoryProtocol | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        self._engine = engine
        self._repo = repo
        self._session_factory = session_factory

    @property
    def address(self) -> str:
        return self._engine.address

    # --- reads ---

    def list_market_ids(self) -> MarketIdsResponse:
        ids = self._engine.list_market_ids()
        return MarketIdsResponse(market_ids=ids, count=len(ids))

    def get_market(self, market_id: str) -> MarketDetail:
        return MarketDetail.from_domain(self._engine.get_market(market_id))

    def get_probability(self, market_id: str) -> ProbabilityResponse:
        p1, p2 = self._engine.get_probability(market_id)
        return ProbabilityResponse(market_id=market_id, outcome1_bps=p1, outcome2_bps=p2)

    def get_reserves(self, market_id: str) -> ReservesResponse:
        r1, r2 = self._engine.get_reserves(market_id)
        return ReservesResponse(market_id=market_id, reserve1=r1, reserve2=r2)

    def get_positions(self, market_id: str, holder: str) -> PositionsResponse:
        b1, b2 = self._engine.get_positions(market_id, holder)
        return PositionsResponse(
            market_id=market_id, holder=holder, outcome1_balance=b1, outcome2_balance=b2
        )

    def get_fee_info(self, market_id: str) -> FeeInfoResponse:
        return FeeInfoResponse.from_domain(market_id, self._engine.get_fee_info(market_id))

    def get_claimable_fees(self, account: str) -> ClaimableFeesResponse:
        creator, protocol = self._engine.get_claimable_fees(account)
        return ClaimableFeesResponse(
            account=account, creator_claimable=creator, protocol_claimable=protocol
        )

    # --- mutations ---

    async def initialize_market(
        self, caller: str, req: InitializeMarketRequest
    ) -> InitializeMarketResponse:
        market_id = await self._engine.initialize_market(
            caller,
            outcome1=req.outcome1,
            outcome2=req.outcome2,
            description=req.description,
            reward=req.reward,
            required_bond=req.required_bond,
            initial_liquidity=req.initial_liquidity,
        )
        await self._persist(market_id)
        return InitializeMarketResponse(market_id=market_id)

    async def mint(self, caller: str, market_id: str, amount: int) -> MarketDetail:
        await self._engine.mint(caller, market_id, amount)
        await self._persist(market_id)
        return self.get_market(market_id)

    async def assert_outcome(self, caller: str, market_id: str, outcome: str) -> AssertResponse:
        assertion_id = await self._engine.assert_outcome(caller, market_id, outcome)
        await self._persist(market_id)
        return AssertResponse(market_id=market_id, assertion_id=assertion_id)

    async def settle(self, caller: str, market_id: str) -> SettleResponse:
        result = await self._engine.settle(caller, market_id)
        await self._persist(market_id)
        return SettleResponse.from_domain(result)

    async def buy(
        self, caller: str, market_id: str, buy_outcome1: bool, amount: int, min_output: int
    ) -> BuyResponse:
        result = await self._engine.buy(caller, market_id, buy_outcome1, amount, min_output)
        await self._persist(market_id)
        return BuyResponse.from_domain(result)

    async def transfer_claims(
        self, caller: str, market_id: str, outcome_index: int, recipient: str, amount: int
    ) -> PositionsResponse:
        await self._engine.transfer_claims(caller, market_id, outcome_index, recipient, amount)
        return self.get_positions(market_id, caller)

    # --- oracle callbacks ---

    async def assertion_resolved_callback(
        self, caller: str, assertion_id: str, truthful: bool
    ) -> None:
        market_id = self._engine.market_for_assertion(assertion_id)
        await self._engine.assertion_resolved_callback(caller, assertion_id, truthful)
        if market_id is not None:
            await self._persist(market_id)

    async def assertion_disputed_callback(self, caller: str, assertion_id: str) -> None:
        await self._engine.assertion_disputed_callback(caller, assertion_id)

    # --- persistence ---

    async def _persist(self, market_id: str) -> None:
        if self._repo is None or self._session_factory is None:
            return
        view = self._engine.get_market(market_id)
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    await self._repo.upsert_market(db, view)
        except Exception:
            logger.exception("Snapshot write failed for market %s", market_id)
