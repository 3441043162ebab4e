"""Market invariant verification after each mutation."""

import logging

from src.pm_common.errors import InvariantViolationError
from src.pm_market.domain.models import Market

logger = logging.getLogger(__name__)


def verify_market_invariants(market: Market) -> None:
    """Verify bookkeeping invariants. Raises InvariantViolationError if violated.

    INV-1: total_collateral >= 0, reserves >= 0
    INV-2: claim1 supply + reserve1 == total_collateral (unresolved markets)
    INV-3: claim2 supply + reserve2 == total_collateral (unresolved markets)

    INV-2/3 stop holding once settlement starts burning claims, so they are
    checked only before resolution.
    """
    if market.total_collateral < 0:
        raise InvariantViolationError(
            f"INV-1 market={market.id} total_collateral={market.total_collateral}"
        )
    if market.reserve1 < 0 or market.reserve2 < 0:
        raise InvariantViolationError(
            f"INV-1 market={market.id} reserves=({market.reserve1}, {market.reserve2})"
        )
    if market.resolved:
        return

    backed1 = market.claim1.total_supply + market.reserve1
    if backed1 != market.total_collateral:
        raise InvariantViolationError(
            f"INV-2 market={market.id} supply1+reserve1={backed1} "
            f"!= total_collateral={market.total_collateral}"
        )
    backed2 = market.claim2.total_supply + market.reserve2
    if backed2 != market.total_collateral:
        raise InvariantViolationError(
            f"INV-3 market={market.id} supply2+reserve2={backed2} "
            f"!= total_collateral={market.total_collateral}"
        )

    logger.debug(
        "Invariants OK: market=%s, collateral=%d, reserves=(%d, %d)",
        market.id, market.total_collateral, market.reserve1, market.reserve2,
    )
