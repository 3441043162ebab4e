"""Settlement payout — pro-rata share of the collateral pool.

Pure computation; the engine applies burns and transfers. All divisions
floor so the holder is undercounted, never overcounted. The remainder stays
in the pool and is the only intentional loss in the system.
"""

from dataclasses import dataclass

from src.pm_common.enums import Outcome
from src.pm_common.units import mul_div_down


@dataclass(frozen=True)
class PayoutPlan:
    burn1: int
    burn2: int
    payout: int

    @property
    def is_empty(self) -> bool:
        return self.burn1 == 0 and self.burn2 == 0


def compute_payout(
    outcome: Outcome,
    balance1: int,
    balance2: int,
    supply1: int,
    supply2: int,
    total_collateral: int,
) -> PayoutPlan:
    """Return what to burn and pay for one holder.

    FIRST/SECOND pay only the winning ledger; UNRESOLVABLE pays both ledgers
    against their combined supply.
    """
    if outcome is Outcome.FIRST:
        if balance1 == 0:
            return PayoutPlan(0, 0, 0)
        return PayoutPlan(balance1, 0, mul_div_down(balance1, total_collateral, supply1))

    if outcome is Outcome.SECOND:
        if balance2 == 0:
            return PayoutPlan(0, 0, 0)
        return PayoutPlan(0, balance2, mul_div_down(balance2, total_collateral, supply2))

    combined = balance1 + balance2
    if combined == 0:
        return PayoutPlan(0, 0, 0)
    payout = mul_div_down(combined, total_collateral, supply1 + supply2)
    return PayoutPlan(balance1, balance2, payout)
