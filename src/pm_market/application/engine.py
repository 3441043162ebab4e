"""MarketEngine — owner of every market record, its claim ledgers and its pool.

All mutating entry points run under a per-market asyncio.Lock (market
creation under an engine-wide lock) and validate every precondition before
the first effect, so a failed call leaves no trace. The only await inside a
lock is the oracle boundary during assert_outcome; custody movements made
before it are rolled back if it fails.

Lifecycle per market:  OPEN <-> ASSERTED -> RESOLVED
"""

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable
from datetime import datetime

from config.settings import settings
from src.pm_account.domain.vault import CollateralVault
from src.pm_clearing.domain.cpmm import probability_bps, quote_buy
from src.pm_clearing.domain.fee import split_fees
from src.pm_clearing.domain.invariants import verify_market_invariants
from src.pm_clearing.domain.settlement import compute_payout
from src.pm_common.datetime_utils import utc_now
from src.pm_common.enums import UNRESOLVABLE_LABEL, Outcome
from src.pm_common.errors import (
    ActiveAssertionExistsError,
    InsufficientOutputError,
    InvalidOutcomeError,
    InvariantViolationError,
    MarketNotFoundError,
    MarketNotResolvedError,
    MarketResolvedError,
    NothingToSettleError,
    OnlyOracleError,
    UnauthorizedError,
    UnknownAssertionError,
    ZeroAmountError,
)
from src.pm_common.id_generator import ZERO_ID, derive_market_id, outcome_id
from src.pm_gateway.auth.registry import AgentRegistryProtocol
from src.pm_market.domain.claim_ledger import ClaimLedger
from src.pm_market.domain.models import (
    BuyResult,
    FeeInfo,
    Market,
    MarketRegistry,
    MarketView,
    SettlementResult,
)
from src.pm_oracle.domain.protocol import AssertionCallbackProtocol, OracleClientProtocol

logger = logging.getLogger(__name__)


class MarketEngine:
    def __init__(
        self,
        registry: AgentRegistryProtocol,
        oracle: OracleClientProtocol,
        vault: CollateralVault,
        *,
        address: str = settings.ENGINE_ADDRESS,
        collateral_currency: str = settings.COLLATERAL_CURRENCY,
        bond_currency: str = settings.BOND_CURRENCY,
        liveness_seconds: int = settings.DEFAULT_LIVENESS_SECONDS,
        identifier: str = settings.ORACLE_IDENTIFIER,
        protocol_fee_bps: int = settings.PROTOCOL_FEE_BPS,
        creator_fee_bps: int = settings.CREATOR_FEE_BPS,
        protocol_fee_recipient: str = settings.PROTOCOL_FEE_RECIPIENT,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.address = address
        self.collateral_currency = collateral_currency
        self.bond_currency = bond_currency
        self.liveness_seconds = liveness_seconds
        self.protocol_fee_bps = protocol_fee_bps
        self.creator_fee_bps = creator_fee_bps
        self.protocol_fee_recipient = protocol_fee_recipient
        self._identifier = identifier
        self._registry = registry
        self._oracle = oracle
        self._vault = vault
        self._clock = clock
        self._callback_target: AssertionCallbackProtocol = self
        self._state = MarketRegistry()
        self._market_locks: dict[str, asyncio.Lock] = {}
        self._create_lock = asyncio.Lock()

    def bind_callback_target(self, target: AssertionCallbackProtocol) -> None:
        """Route oracle callbacks through *target* (e.g. a persisting service)."""
        self._callback_target = target

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------

    def get_market(self, market_id: str) -> MarketView:
        return self._get_market(market_id).to_view()

    def list_market_ids(self) -> list[str]:
        return list(self._state.order)

    def market_count(self) -> int:
        return len(self._state.order)

    def market_for_assertion(self, assertion_id: str) -> str | None:
        return self._state.assertions.get(assertion_id)

    def get_positions(self, market_id: str, holder: str) -> tuple[int, int]:
        market = self._get_market(market_id)
        return market.claim1.balance_of(holder), market.claim2.balance_of(holder)

    def get_reserves(self, market_id: str) -> tuple[int, int]:
        market = self._get_market(market_id)
        return market.reserve1, market.reserve2

    def get_probability(self, market_id: str) -> tuple[int, int]:
        market = self._get_market(market_id)
        return probability_bps(market.reserve1, market.reserve2)

    def get_fee_info(self, market_id: str) -> FeeInfo:
        market = self._get_market(market_id)
        return FeeInfo(
            creator=market.creator,
            creator_fees_accrued=market.creator_fees_accrued,
            protocol_fees_accrued=market.protocol_fees_accrued,
            protocol_fee_bps=self.protocol_fee_bps,
            creator_fee_bps=self.creator_fee_bps,
        )

    def get_claimable_fees(self, account: str) -> tuple[int, int]:
        """(creator fees across markets created by account, protocol fees if recipient)."""
        markets = self._state.markets.values()
        creator = sum(m.creator_fees_accrued for m in markets if m.creator == account)
        protocol = 0
        if account == self.protocol_fee_recipient:
            protocol = sum(m.protocol_fees_accrued for m in markets)
        return creator, protocol

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize_market(
        self,
        caller: str,
        outcome1: str,
        outcome2: str,
        description: str,
        reward: int,
        required_bond: int,
        initial_liquidity: int = 0,
    ) -> str:
        self._require_authorized(caller)
        _validate_labels(outcome1, outcome2)
        if not _is_utf8(description):
            raise ValueError("description must be valid UTF-8 text")
        if min(reward, required_bond, initial_liquidity) < 0:
            raise ValueError("reward, required_bond and initial_liquidity must be non-negative")

        async with self._create_lock:
            self._ensure_funds(
                caller,
                [(self.bond_currency, reward), (self.collateral_currency, initial_liquidity)],
            )

            self._state.counter += 1
            now = self._clock()
            market_id = derive_market_id(
                description, caller, self._state.counter, int(now.timestamp())
            )
            if market_id in self._state.markets:
                raise InvariantViolationError(f"market id collision: {market_id}")

            self._vault.transfer(
                self.bond_currency, caller, self.address, reward, f"MARKET_REWARD:{market_id}"
            )
            self._vault.transfer(
                self.collateral_currency, caller, self.address, initial_liquidity,
                f"SEED_LIQUIDITY:{market_id}",
            )

            market = Market(
                id=market_id,
                description=description,
                outcome1=outcome1,
                outcome2=outcome2,
                creator=caller,
                claim1=ClaimLedger(self, market_id, outcome1),
                claim2=ClaimLedger(self, market_id, outcome2),
                reward=reward,
                required_bond=required_bond,
                created_at=now,
                total_collateral=initial_liquidity,
                reserve1=initial_liquidity,
                reserve2=initial_liquidity,
            )
            self._state.markets[market_id] = market
            self._market_locks[market_id] = asyncio.Lock()
            self._state.order.append(market_id)
            verify_market_invariants(market)

        logger.info(
            "MarketInitialized: id=%s creator=%s outcomes=(%r, %r) reward=%d bond=%d liquidity=%d",
            market_id, caller, outcome1, outcome2, reward, required_bond, initial_liquidity,
        )
        return market_id

    async def mint(self, caller: str, market_id: str, amount: int) -> None:
        """Lock *amount* collateral and mint *amount* of both claims to the caller."""
        self._require_authorized(caller)
        async with self._lock_for(market_id):
            market = self._get_market(market_id)
            if market.resolved:
                raise MarketResolvedError(market_id)
            if amount <= 0:
                raise ZeroAmountError()
            self._ensure_funds(caller, [(self.collateral_currency, amount)])

            self._vault.transfer(
                self.collateral_currency, caller, self.address, amount, f"MINT:{market_id}"
            )
            market.claim1.mint(self, caller, amount)
            market.claim2.mint(self, caller, amount)
            market.total_collateral += amount
            verify_market_invariants(market)

        logger.info("TokensMinted: market=%s holder=%s amount=%d", market_id, caller, amount)

    async def assert_outcome(self, caller: str, market_id: str, asserted_label: str) -> str:
        """Submit *asserted_label* to the oracle. Returns the oracle's assertion id."""
        self._require_authorized(caller)
        async with self._lock_for(market_id):
            market = self._get_market(market_id)
            if market.resolved:
                raise MarketResolvedError(market_id)
            if market.asserted_outcome_id != ZERO_ID:
                raise ActiveAssertionExistsError(market_id)
            outcome = _classify_label(market, asserted_label)

            minimum_bond = await self._oracle.get_minimum_bond(self.bond_currency)
            bond = max(market.required_bond, minimum_bond)
            self._ensure_funds(caller, [(self.bond_currency, bond)])
            self._vault.ensure_funds(self.bond_currency, self.address, market.reward)

            claim = _claim_text(market, asserted_label, int(self._clock().timestamp()))
            ref = f"ASSERTION:{market_id}"
            oracle_address = self._oracle.address
            self._vault.transfer(self.bond_currency, caller, self.address, bond, ref)
            self._vault.transfer(
                self.bond_currency, self.address, oracle_address, bond + market.reward, ref
            )
            try:
                assertion_id = await self._oracle.assert_truth(
                    claim=claim,
                    asserter=caller,
                    callback_target=self._callback_target,
                    liveness_seconds=self.liveness_seconds,
                    currency=self.bond_currency,
                    bond=bond,
                    reward=market.reward,
                    identifier=self._identifier,
                )
                if assertion_id in self._state.assertions:
                    raise InvariantViolationError(f"oracle reused assertion id {assertion_id}")
            except BaseException:
                # Also on cancellation: the oracle never recorded the assertion.
                rollback = f"ASSERTION_ROLLBACK:{market_id}"
                self._vault.transfer(
                    self.bond_currency, oracle_address, self.address, bond + market.reward, rollback
                )
                self._vault.transfer(self.bond_currency, self.address, caller, bond, rollback)
                logger.warning("Assertion rolled back: market=%s asserter=%s", market_id, caller)
                raise

            self._state.assertions[assertion_id] = market_id
            market.active_assertion_id = assertion_id
            market.asserted_outcome_id = outcome_id(asserted_label)
            market.asserted_outcome = outcome

        logger.info(
            "MarketAsserted: market=%s asserter=%s outcome=%r assertion=%s bond=%d",
            market_id, caller, asserted_label, assertion_id, bond,
        )
        return assertion_id

    async def assertion_resolved_callback(
        self, caller: str, assertion_id: str, truthful: bool
    ) -> None:
        self._require_oracle(caller)
        market_id = self._market_id_for(assertion_id)
        async with self._lock_for(market_id):
            # Re-read under the lock: a concurrent callback may have consumed it.
            if self._state.assertions.get(assertion_id) != market_id:
                raise UnknownAssertionError(assertion_id)
            market = self._get_market(market_id)
            if market.active_assertion_id != assertion_id:
                raise InvariantViolationError(
                    f"assertion {assertion_id} is not active on market {market_id}"
                )

            del self._state.assertions[assertion_id]
            market.active_assertion_id = None
            if truthful:
                market.resolved = True
                market.resolved_at = self._clock()
            else:
                market.asserted_outcome_id = ZERO_ID
                market.asserted_outcome = None

        if truthful:
            logger.info(
                "MarketResolved: market=%s outcome=%s assertion=%s",
                market_id, market.asserted_outcome.value if market.asserted_outcome else None,
                assertion_id,
            )
        else:
            logger.info("AssertionFailed: market=%s assertion=%s", market_id, assertion_id)

    async def assertion_disputed_callback(self, caller: str, assertion_id: str) -> None:
        self._require_oracle(caller)
        market_id = self._market_id_for(assertion_id)
        logger.warning("AssertionDisputed: market=%s assertion=%s", market_id, assertion_id)

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    async def settle(self, caller: str, market_id: str) -> SettlementResult:
        """Burn the caller's redeemable claims and pay their share of collateral."""
        async with self._lock_for(market_id):
            market = self._get_market(market_id)
            if not market.resolved:
                raise MarketNotResolvedError(market_id)
            outcome = market.asserted_outcome
            if outcome is None:
                raise InvariantViolationError(f"resolved market {market_id} has no outcome")

            plan = compute_payout(
                outcome,
                balance1=market.claim1.balance_of(caller),
                balance2=market.claim2.balance_of(caller),
                supply1=market.claim1.total_supply,
                supply2=market.claim2.total_supply,
                total_collateral=market.total_collateral,
            )
            if plan.is_empty:
                raise NothingToSettleError(market_id, caller)
            if plan.payout > market.total_collateral:
                raise InvariantViolationError(
                    f"payout {plan.payout} exceeds collateral {market.total_collateral} "
                    f"on market {market_id}"
                )
            held = self._vault.balance_of(self.collateral_currency, self.address)
            if plan.payout > held:
                raise InvariantViolationError(
                    f"engine custody {held} cannot cover payout {plan.payout}"
                )

            # Effects before the outgoing transfer.
            if plan.burn1:
                market.claim1.burn(self, caller, plan.burn1)
            if plan.burn2:
                market.claim2.burn(self, caller, plan.burn2)
            market.total_collateral -= plan.payout
            self._vault.transfer(
                self.collateral_currency, self.address, caller, plan.payout,
                f"SETTLEMENT:{market_id}",
            )

        logger.info(
            "TokensSettled: market=%s holder=%s burned=(%d, %d) payout=%d",
            market_id, caller, plan.burn1, plan.burn2, plan.payout,
        )
        return SettlementResult(
            market_id=market_id,
            holder=caller,
            outcome=outcome,
            burned1=plan.burn1,
            burned2=plan.burn2,
            payout=plan.payout,
        )

    # ------------------------------------------------------------------
    # Trading venue
    # ------------------------------------------------------------------

    async def buy(
        self,
        caller: str,
        market_id: str,
        buy_outcome1: bool,
        amount: int,
        min_output: int = 0,
    ) -> BuyResult:
        """Pay *amount* collateral for directional exposure via the constant-product pool."""
        self._require_authorized(caller)
        async with self._lock_for(market_id):
            market = self._get_market(market_id)
            if market.resolved:
                raise MarketResolvedError(market_id)
            if amount <= 0:
                raise ZeroAmountError()

            fees = split_fees(amount, self.protocol_fee_bps, self.creator_fee_bps)
            if fees.net_amount == 0:
                raise InsufficientOutputError(0, min_output)
            quote = quote_buy(market.reserve1, market.reserve2, fees.net_amount, buy_outcome1)
            if quote.output < min_output or quote.output <= 0:
                raise InsufficientOutputError(quote.output, min_output)
            if quote.reserve1 * quote.reserve2 < market.reserve1 * market.reserve2:
                raise InvariantViolationError(f"constant product decreased on market {market_id}")
            self._ensure_funds(caller, [(self.collateral_currency, amount)])

            self._vault.transfer(
                self.collateral_currency, caller, self.address, amount, f"AMM_BUY:{market_id}"
            )
            market.protocol_fees_accrued += fees.protocol_fee
            market.creator_fees_accrued += fees.creator_fee
            market.total_collateral += fees.net_amount
            market.reserve1 = quote.reserve1
            market.reserve2 = quote.reserve2
            ledger = market.claim1 if buy_outcome1 else market.claim2
            ledger.mint(self, caller, quote.output)
            verify_market_invariants(market)

        logger.info(
            "OutcomeTokenBought: market=%s buyer=%s outcome1=%s in=%d fee=%d out=%d",
            market_id, caller, buy_outcome1, amount, fees.total_fee, quote.output,
        )
        return BuyResult(
            market_id=market_id,
            buyer=caller,
            bought_outcome1=buy_outcome1,
            amount_in=amount,
            fee_paid=fees.total_fee,
            output=quote.output,
            reserve1=quote.reserve1,
            reserve2=quote.reserve2,
        )

    async def transfer_claims(
        self,
        caller: str,
        market_id: str,
        outcome_index: int,
        recipient: str,
        amount: int,
    ) -> None:
        """Peer-to-peer transfer of one side's claims."""
        if outcome_index not in (1, 2):
            raise ValueError(f"outcome_index must be 1 or 2, got {outcome_index}")
        async with self._lock_for(market_id):
            market = self._get_market(market_id)
            if amount <= 0:
                raise ZeroAmountError()
            ledger = market.claim1 if outcome_index == 1 else market.claim2
            ledger.transfer(caller, recipient, amount)

        logger.info(
            "ClaimsTransferred: market=%s outcome=%d %s -> %s amount=%d",
            market_id, outcome_index, caller, recipient, amount,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_market(self, market_id: str) -> Market:
        market = self._state.markets.get(market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        return market

    def _lock_for(self, market_id: str) -> asyncio.Lock:
        """The market's lock; unknown ids raise before anything is allocated."""
        self._get_market(market_id)
        return self._market_locks[market_id]

    def _market_id_for(self, assertion_id: str) -> str:
        market_id = self._state.assertions.get(assertion_id)
        if market_id is None:
            raise UnknownAssertionError(assertion_id)
        return market_id

    def _require_authorized(self, caller: str) -> None:
        if not self._registry.is_authorized(caller):
            raise UnauthorizedError(caller)

    def _require_oracle(self, caller: str) -> None:
        if caller != self._oracle.address:
            raise OnlyOracleError(caller)

    def _ensure_funds(self, holder: str, needs: list[tuple[str, int]]) -> None:
        """Check all (currency, amount) needs at once; same-currency needs add up."""
        totals: dict[str, int] = defaultdict(int)
        for currency, amount in needs:
            totals[currency] += amount
        for currency, amount in totals.items():
            if amount > 0:
                self._vault.ensure_funds(currency, holder, amount)


def _is_utf8(text: str) -> bool:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _validate_labels(outcome1: str, outcome2: str) -> None:
    for label in (outcome1, outcome2):
        if not label or label == UNRESOLVABLE_LABEL or not _is_utf8(label):
            raise InvalidOutcomeError(label)
    if outcome1 == outcome2:
        raise InvalidOutcomeError(outcome2)


def _classify_label(market: Market, label: str) -> Outcome:
    """Byte-exact match of *label* against the market's outcomes."""
    if label == market.outcome1:
        return Outcome.FIRST
    if label == market.outcome2:
        return Outcome.SECOND
    if label == UNRESOLVABLE_LABEL:
        return Outcome.UNRESOLVABLE
    raise InvalidOutcomeError(label)


def _claim_text(market: Market, label: str, timestamp: int) -> str:
    return (
        f"As of assertion timestamp {timestamp}, the described prediction market outcome is: "
        f"{label}. The market description is: {market.description}"
    )
