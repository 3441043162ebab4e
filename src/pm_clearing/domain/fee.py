"""AMM fee calculation — applied identically to both sides of the pool."""

from dataclasses import dataclass

from src.pm_common.units import BPS_DENOMINATOR, ceil_div


def calc_fee(amount: int, fee_bps: int) -> int:
    """Ceiling division fee: the pool never under-collects."""
    if amount == 0 or fee_bps == 0:
        return 0
    return ceil_div(amount * fee_bps, BPS_DENOMINATOR)


@dataclass(frozen=True)
class FeeSplit:
    protocol_fee: int
    creator_fee: int
    net_amount: int

    @property
    def total_fee(self) -> int:
        return self.protocol_fee + self.creator_fee


def split_fees(amount: int, protocol_fee_bps: int, creator_fee_bps: int) -> FeeSplit:
    """Take protocol and creator fees from *amount*.

    Each fee is ceiled independently. If the combined fee would exceed the
    amount the net is clamped to zero and the caller rejects the trade.
    """
    protocol_fee = calc_fee(amount, protocol_fee_bps)
    creator_fee = calc_fee(amount, creator_fee_bps)
    net = amount - protocol_fee - creator_fee
    if net < 0:
        return FeeSplit(protocol_fee=0, creator_fee=0, net_amount=0)
    return FeeSplit(protocol_fee=protocol_fee, creator_fee=creator_fee, net_amount=net)
