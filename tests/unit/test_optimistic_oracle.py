"""Unit tests for InMemoryOptimisticOracle with a mock callback target."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pm_common.enums import AssertionStatus
from src.pm_common.errors import (
    AssertionStateError,
    InsufficientFundsError,
    UnknownAssertionError,
)
from src.pm_oracle.infrastructure.optimistic_oracle import InMemoryOptimisticOracle

BOND = 50
REWARD = 10


@pytest.fixture
def target():
    t = MagicMock()
    t.address = "engine"
    t.assertion_resolved_callback = AsyncMock()
    t.assertion_disputed_callback = AsyncMock()
    return t


async def _open_assertion(oracle, vault, target, liveness: int = 100) -> str:
    # The engine forwards bond + reward into oracle custody before asserting.
    vault.transfer("USDC", "alice", "oracle", BOND + REWARD, "ASSERTION")
    return await oracle.assert_truth(
        claim="As of ... outcome is: Yes",
        asserter="alice",
        callback_target=target,
        liveness_seconds=liveness,
        currency="USDC",
        bond=BOND,
        reward=REWARD,
        identifier="ASSERT_TRUTH",
    )


class TestAssertTruth:
    @pytest.mark.asyncio
    async def test_records_pending_assertion(self, oracle, vault, target, clock):
        aid = await _open_assertion(oracle, vault, target)
        record = oracle.get_assertion(aid)
        assert record.status is AssertionStatus.PENDING
        assert record.asserter == "alice"
        assert (record.expiration_time - clock.now).total_seconds() == 100

    @pytest.mark.asyncio
    async def test_ids_unique_for_same_claim(self, oracle, vault, target):
        a = await _open_assertion(oracle, vault, target)
        b = await _open_assertion(oracle, vault, target)
        assert a != b

    @pytest.mark.asyncio
    async def test_bond_below_minimum_rejected(self, oracle, target):
        oracle.set_minimum_bond("USDC", BOND + 1)
        assert await oracle.get_minimum_bond("USDC") == BOND + 1
        with pytest.raises(ValueError):
            await oracle.assert_truth(
                claim="c", asserter="alice", callback_target=target,
                liveness_seconds=100, currency="USDC", bond=BOND, reward=0,
                identifier="ASSERT_TRUTH",
            )

    @pytest.mark.asyncio
    async def test_unknown_assertion(self, oracle):
        with pytest.raises(UnknownAssertionError):
            oracle.get_assertion("0xdead")


class TestSettleUndisputed:
    @pytest.mark.asyncio
    async def test_cannot_settle_before_liveness(self, oracle, vault, target, clock):
        aid = await _open_assertion(oracle, vault, target)
        clock.advance(99)
        with pytest.raises(AssertionStateError):
            await oracle.settle_assertion(aid)
        target.assertion_resolved_callback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_settles_truthful_and_pays_asserter(self, oracle, vault, target, clock):
        aid = await _open_assertion(oracle, vault, target)
        clock.advance(100)

        assert await oracle.settle_assertion(aid) is True

        target.assertion_resolved_callback.assert_awaited_once_with("oracle", aid, True)
        assert oracle.get_assertion(aid).status is AssertionStatus.SETTLED_TRUE
        assert vault.balance_of("USDC", "alice") == 1_000
        assert vault.balance_of("USDC", "oracle") == 0

    @pytest.mark.asyncio
    async def test_cannot_settle_twice(self, oracle, vault, target, clock):
        aid = await _open_assertion(oracle, vault, target)
        clock.advance(100)
        await oracle.settle_assertion(aid)
        with pytest.raises(AssertionStateError):
            await oracle.settle_assertion(aid)
        assert target.assertion_resolved_callback.await_count == 1

    @pytest.mark.asyncio
    async def test_rejected_callback_leaves_assertion_pending(self, oracle, vault, target, clock):
        target.assertion_resolved_callback.side_effect = RuntimeError("target down")
        aid = await _open_assertion(oracle, vault, target)
        clock.advance(100)
        with pytest.raises(RuntimeError):
            await oracle.settle_assertion(aid)
        assert oracle.get_assertion(aid).status is AssertionStatus.PENDING
        assert vault.balance_of("USDC", "oracle") == BOND + REWARD


class TestDispute:
    @pytest.mark.asyncio
    async def test_dispute_notifies_and_takes_bond(self, oracle, vault, target):
        aid = await _open_assertion(oracle, vault, target)
        await oracle.dispute_assertion(aid, "bob")

        target.assertion_disputed_callback.assert_awaited_once_with("oracle", aid)
        record = oracle.get_assertion(aid)
        assert record.status is AssertionStatus.DISPUTED
        assert record.disputer == "bob"
        assert vault.balance_of("USDC", "bob") == 1_000 - BOND

    @pytest.mark.asyncio
    async def test_dispute_after_expiry_rejected(self, oracle, vault, target, clock):
        aid = await _open_assertion(oracle, vault, target)
        clock.advance(100)
        with pytest.raises(AssertionStateError):
            await oracle.dispute_assertion(aid, "bob")

    @pytest.mark.asyncio
    async def test_disputer_must_cover_bond(self, oracle, vault, target):
        aid = await _open_assertion(oracle, vault, target)
        with pytest.raises(InsufficientFundsError):
            await oracle.dispute_assertion(aid, "pauper")
        target.assertion_disputed_callback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disputed_cannot_settle_by_liveness(self, oracle, vault, target, clock):
        aid = await _open_assertion(oracle, vault, target)
        await oracle.dispute_assertion(aid, "bob")
        clock.advance(1_000)
        with pytest.raises(AssertionStateError):
            await oracle.settle_assertion(aid)

    @pytest.mark.asyncio
    async def test_resolved_true_pays_asserter_both_bonds(self, oracle, vault, target):
        aid = await _open_assertion(oracle, vault, target)
        await oracle.dispute_assertion(aid, "bob")
        await oracle.resolve_dispute(aid, truthful=True)

        target.assertion_resolved_callback.assert_awaited_once_with("oracle", aid, True)
        assert vault.balance_of("USDC", "alice") == 1_000 + BOND
        assert vault.balance_of("USDC", "bob") == 1_000 - BOND

    @pytest.mark.asyncio
    async def test_resolved_false_pays_disputer_and_refunds_reward(self, oracle, vault, target):
        aid = await _open_assertion(oracle, vault, target)
        await oracle.dispute_assertion(aid, "bob")
        await oracle.resolve_dispute(aid, truthful=False)

        target.assertion_resolved_callback.assert_awaited_once_with("oracle", aid, False)
        assert oracle.get_assertion(aid).status is AssertionStatus.SETTLED_FALSE
        assert vault.balance_of("USDC", "bob") == 1_000 + BOND
        assert vault.balance_of("USDC", "alice") == 1_000 - BOND - REWARD
        assert vault.balance_of("USDC", "engine") == REWARD

    @pytest.mark.asyncio
    async def test_resolve_requires_dispute(self, oracle, vault, target):
        aid = await _open_assertion(oracle, vault, target)
        with pytest.raises(AssertionStateError):
            await oracle.resolve_dispute(aid, truthful=True)
