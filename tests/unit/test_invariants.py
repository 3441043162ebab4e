from datetime import UTC, datetime

import pytest

from src.pm_clearing.domain.invariants import verify_market_invariants
from src.pm_common.errors import InvariantViolationError
from src.pm_market.domain.claim_ledger import ClaimLedger
from src.pm_market.domain.models import Market

OWNER = object()


def _make_market(supply1: int = 0, supply2: int = 0, **kwargs) -> Market:
    claim1 = ClaimLedger(OWNER, "0xm", "Yes")
    claim2 = ClaimLedger(OWNER, "0xm", "No")
    if supply1:
        claim1.mint(OWNER, "alice", supply1)
    if supply2:
        claim2.mint(OWNER, "alice", supply2)
    defaults = dict(
        id="0xm", description="d", outcome1="Yes", outcome2="No", creator="alice",
        claim1=claim1, claim2=claim2, reward=0, required_bond=0,
        created_at=datetime.now(UTC),
    )
    defaults.update(kwargs)
    return Market(**defaults)


def test_balanced_market_passes() -> None:
    market = _make_market(supply1=15, supply2=15, total_collateral=15)
    verify_market_invariants(market)


def test_reserves_count_toward_backing() -> None:
    market = _make_market(supply1=8, supply2=0, total_collateral=15, reserve1=7, reserve2=15)
    verify_market_invariants(market)


def test_negative_collateral_fails() -> None:
    market = _make_market(total_collateral=-1)
    with pytest.raises(InvariantViolationError, match="INV-1"):
        verify_market_invariants(market)


def test_negative_reserve_fails() -> None:
    market = _make_market(total_collateral=0, reserve1=-1)
    with pytest.raises(InvariantViolationError, match="INV-1"):
        verify_market_invariants(market)


def test_unbacked_claim1_fails() -> None:
    market = _make_market(supply1=16, supply2=15, total_collateral=15)
    with pytest.raises(InvariantViolationError, match="INV-2"):
        verify_market_invariants(market)


def test_unbacked_claim2_fails() -> None:
    market = _make_market(supply1=15, supply2=14, total_collateral=15)
    with pytest.raises(InvariantViolationError, match="INV-3"):
        verify_market_invariants(market)


def test_resolved_market_skips_backing_check() -> None:
    market = _make_market(supply1=5, supply2=15, total_collateral=3, resolved=True)
    verify_market_invariants(market)
