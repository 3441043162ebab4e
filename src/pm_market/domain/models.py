"""Domain models for pm_market — pure dataclasses, no business logic.

Market is the mutable arena record owned by MarketEngine. It never leaves
the engine; readers get a frozen MarketView instead.
"""

from dataclasses import dataclass, field
from datetime import datetime

from src.pm_common.enums import MarketPhase, Outcome
from src.pm_common.id_generator import ZERO_ID
from src.pm_market.domain.claim_ledger import ClaimLedger


@dataclass
class Market:
    id: str
    description: str
    outcome1: str
    outcome2: str
    creator: str
    claim1: ClaimLedger
    claim2: ClaimLedger
    reward: int
    required_bond: int
    created_at: datetime
    resolved: bool = False
    asserted_outcome_id: str = ZERO_ID
    asserted_outcome: Outcome | None = None
    active_assertion_id: str | None = None
    total_collateral: int = 0
    reserve1: int = 0
    reserve2: int = 0
    creator_fees_accrued: int = 0
    protocol_fees_accrued: int = 0
    resolved_at: datetime | None = None

    @property
    def phase(self) -> MarketPhase:
        if self.resolved:
            return MarketPhase.RESOLVED
        if self.asserted_outcome_id != ZERO_ID:
            return MarketPhase.ASSERTED
        return MarketPhase.OPEN

    def to_view(self) -> "MarketView":
        return MarketView(
            id=self.id,
            description=self.description,
            outcome1=self.outcome1,
            outcome2=self.outcome2,
            creator=self.creator,
            reward=self.reward,
            required_bond=self.required_bond,
            resolved=self.resolved,
            phase=self.phase,
            asserted_outcome_id=self.asserted_outcome_id,
            asserted_outcome=self.asserted_outcome,
            active_assertion_id=self.active_assertion_id,
            total_collateral=self.total_collateral,
            claim1_supply=self.claim1.total_supply,
            claim2_supply=self.claim2.total_supply,
            reserve1=self.reserve1,
            reserve2=self.reserve2,
            creator_fees_accrued=self.creator_fees_accrued,
            protocol_fees_accrued=self.protocol_fees_accrued,
            created_at=self.created_at,
            resolved_at=self.resolved_at,
        )


@dataclass(frozen=True)
class MarketView:
    """Read-only snapshot of a Market at the moment it was taken."""

    id: str
    description: str
    outcome1: str
    outcome2: str
    creator: str
    reward: int
    required_bond: int
    resolved: bool
    phase: MarketPhase
    asserted_outcome_id: str
    asserted_outcome: Outcome | None
    active_assertion_id: str | None
    total_collateral: int
    claim1_supply: int
    claim2_supply: int
    reserve1: int
    reserve2: int
    creator_fees_accrued: int
    protocol_fees_accrued: int
    created_at: datetime
    resolved_at: datetime | None


@dataclass(frozen=True)
class FeeInfo:
    creator: str
    creator_fees_accrued: int
    protocol_fees_accrued: int
    protocol_fee_bps: int
    creator_fee_bps: int


@dataclass(frozen=True)
class BuyResult:
    market_id: str
    buyer: str
    bought_outcome1: bool
    amount_in: int
    fee_paid: int
    output: int
    reserve1: int
    reserve2: int


@dataclass(frozen=True)
class SettlementResult:
    market_id: str
    holder: str
    outcome: Outcome
    burned1: int
    burned2: int
    payout: int


@dataclass
class MarketRegistry:
    """Key-indexed arena of markets plus the assertion-handle index."""

    markets: dict[str, Market] = field(default_factory=dict)
    order: list[str] = field(default_factory=list)
    assertions: dict[str, str] = field(default_factory=dict)
    counter: int = 0
