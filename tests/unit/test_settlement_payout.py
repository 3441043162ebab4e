"""Unit tests for the pro-rata settlement payout."""

from src.pm_clearing.domain.settlement import compute_payout
from src.pm_common.enums import Outcome


class TestWinningSide:
    def test_first_pays_claim1_only(self) -> None:
        plan = compute_payout(Outcome.FIRST, 10, 7, supply1=15, supply2=15, total_collateral=15)
        assert (plan.burn1, plan.burn2, plan.payout) == (10, 0, 10)

    def test_second_pays_claim2_only(self) -> None:
        plan = compute_payout(Outcome.SECOND, 10, 7, supply1=15, supply2=15, total_collateral=15)
        assert (plan.burn1, plan.burn2, plan.payout) == (0, 7, 7)

    def test_losing_holder_has_nothing(self) -> None:
        plan = compute_payout(Outcome.FIRST, 0, 5, supply1=10, supply2=15, total_collateral=15)
        assert plan.is_empty
        assert plan.payout == 0

    def test_payout_floors(self) -> None:
        # 8 * 17 / 10 = 13.6 -> 13; the 0.6 stays in the pool
        plan = compute_payout(Outcome.FIRST, 8, 0, supply1=10, supply2=0, total_collateral=17)
        assert plan.payout == 13


class TestUnresolvable:
    def test_combined_balance_against_combined_supply(self) -> None:
        # 20 * 20 / 30 = 13.33 -> 13
        plan = compute_payout(
            Outcome.UNRESOLVABLE, 10, 10, supply1=10, supply2=20, total_collateral=20
        )
        assert (plan.burn1, plan.burn2, plan.payout) == (10, 10, 13)

    def test_one_sided_holder_still_paid(self) -> None:
        plan = compute_payout(
            Outcome.UNRESOLVABLE, 0, 10, supply1=0, supply2=10, total_collateral=7
        )
        assert (plan.burn1, plan.burn2, plan.payout) == (0, 10, 7)

    def test_empty_holder(self) -> None:
        plan = compute_payout(Outcome.UNRESOLVABLE, 0, 0, supply1=5, supply2=5, total_collateral=5)
        assert plan.is_empty
