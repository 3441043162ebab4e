"""Pydantic schemas for pm_market API requests and responses."""

from pydantic import BaseModel, Field, field_validator

from src.pm_common.units import units_to_display
from src.pm_market.domain.models import BuyResult, FeeInfo, MarketView, SettlementResult

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class InitializeMarketRequest(BaseModel):
    outcome1: str = Field(min_length=1, max_length=256)
    outcome2: str = Field(min_length=1, max_length=256)
    description: str = Field(min_length=1, max_length=4096)
    reward: int = Field(0, ge=0, description="Bond-currency incentive paid to a truthful asserter")
    required_bond: int = Field(0, ge=0, description="Creator minimum bond for assertions")
    initial_liquidity: int = Field(0, ge=0, description="Collateral seeding both AMM reserves")

    @field_validator("outcome1", "outcome2", "description")
    @classmethod
    def encodable_text(cls, v: str) -> str:
        """Labels and description are hashed as UTF-8; lone surrogates cannot be."""
        try:
            v.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError("must be valid UTF-8 text") from None
        return v


class MintRequest(BaseModel):
    amount: int = Field(ge=0, description="Collateral to lock; mints this many of both claims")


class AssertRequest(BaseModel):
    outcome: str = Field(description="outcome1, outcome2 or 'Unresolvable' (byte-exact)")


class BuyRequest(BaseModel):
    buy_outcome1: bool
    amount: int = Field(ge=0, description="Collateral paid in, fees included")
    min_output: int = Field(0, ge=0, description="Slippage guard on claims received")


class TransferClaimsRequest(BaseModel):
    outcome_index: int = Field(ge=1, le=2)
    recipient: str = Field(min_length=1)
    amount: int = Field(ge=0)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class MarketDetail(BaseModel):
    id: str
    description: str
    outcome1: str
    outcome2: str
    creator: str
    reward: int
    required_bond: int
    resolved: bool
    phase: str
    asserted_outcome_id: str
    asserted_outcome: str | None
    active_assertion_id: str | None
    total_collateral: int
    total_collateral_display: str
    claim1_supply: int
    claim2_supply: int
    reserve1: int
    reserve2: int
    creator_fees_accrued: int
    protocol_fees_accrued: int
    created_at: str
    resolved_at: str | None

    @classmethod
    def from_domain(cls, v: MarketView) -> "MarketDetail":
        return cls(
            id=v.id,
            description=v.description,
            outcome1=v.outcome1,
            outcome2=v.outcome2,
            creator=v.creator,
            reward=v.reward,
            required_bond=v.required_bond,
            resolved=v.resolved,
            phase=v.phase.value,
            asserted_outcome_id=v.asserted_outcome_id,
            asserted_outcome=v.asserted_outcome.value if v.asserted_outcome else None,
            active_assertion_id=v.active_assertion_id,
            total_collateral=v.total_collateral,
            total_collateral_display=units_to_display(v.total_collateral),
            claim1_supply=v.claim1_supply,
            claim2_supply=v.claim2_supply,
            reserve1=v.reserve1,
            reserve2=v.reserve2,
            creator_fees_accrued=v.creator_fees_accrued,
            protocol_fees_accrued=v.protocol_fees_accrued,
            created_at=v.created_at.isoformat(),
            resolved_at=v.resolved_at.isoformat() if v.resolved_at else None,
        )


class MarketIdsResponse(BaseModel):
    market_ids: list[str]
    count: int


class InitializeMarketResponse(BaseModel):
    market_id: str


class AssertResponse(BaseModel):
    market_id: str
    assertion_id: str


class ProbabilityResponse(BaseModel):
    market_id: str
    outcome1_bps: int
    outcome2_bps: int


class ReservesResponse(BaseModel):
    market_id: str
    reserve1: int
    reserve2: int


class PositionsResponse(BaseModel):
    market_id: str
    holder: str
    outcome1_balance: int
    outcome2_balance: int


class FeeInfoResponse(BaseModel):
    market_id: str
    creator: str
    creator_fees_accrued: int
    protocol_fees_accrued: int
    protocol_fee_bps: int
    creator_fee_bps: int

    @classmethod
    def from_domain(cls, market_id: str, f: FeeInfo) -> "FeeInfoResponse":
        return cls(
            market_id=market_id,
            creator=f.creator,
            creator_fees_accrued=f.creator_fees_accrued,
            protocol_fees_accrued=f.protocol_fees_accrued,
            protocol_fee_bps=f.protocol_fee_bps,
            creator_fee_bps=f.creator_fee_bps,
        )


class ClaimableFeesResponse(BaseModel):
    account: str
    creator_claimable: int
    protocol_claimable: int


class BuyResponse(BaseModel):
    market_id: str
    buy_outcome1: bool
    amount_in: int
    fee_paid: int
    output: int
    reserve1: int
    reserve2: int

    @classmethod
    def from_domain(cls, r: BuyResult) -> "BuyResponse":
        return cls(
            market_id=r.market_id,
            buy_outcome1=r.bought_outcome1,
            amount_in=r.amount_in,
            fee_paid=r.fee_paid,
            output=r.output,
            reserve1=r.reserve1,
            reserve2=r.reserve2,
        )


class SettleResponse(BaseModel):
    market_id: str
    holder: str
    outcome: str
    burned1: int
    burned2: int
    payout: int

    @classmethod
    def from_domain(cls, r: SettlementResult) -> "SettleResponse":
        return cls(
            market_id=r.market_id,
            holder=r.holder,
            outcome=r.outcome.value,
            burned1=r.burned1,
            burned2=r.burned2,
            payout=r.payout,
        )
