"""Unit tests for constant-product pool pricing."""

import pytest

from src.pm_clearing.domain.cpmm import probability_bps, quote_buy, swap_output


class TestSwapOutput:
    def test_standard_swap(self) -> None:
        # 100 - ceil(100 * 100 / 150) = 100 - 67 = 33
        assert swap_output(100, 100, 50) == 33

    def test_zero_input(self) -> None:
        assert swap_output(100, 100, 0) == 0


class TestQuoteBuy:
    def test_buy_outcome1(self) -> None:
        # r2' = 15, r1' = ceil(100/15) = 7, out = 10 + 5 - 7 = 8
        q = quote_buy(10, 10, 5, buy_outcome1=True)
        assert (q.output, q.reserve1, q.reserve2) == (8, 7, 15)

    def test_buy_outcome2_is_mirror(self) -> None:
        q = quote_buy(10, 10, 5, buy_outcome1=False)
        assert (q.output, q.reserve1, q.reserve2) == (8, 15, 7)

    def test_output_includes_swap_term(self) -> None:
        q = quote_buy(1000, 1000, 990, buy_outcome1=True)
        assert q.output == 990 + swap_output(1000, 1000, 990)
        assert q.output == 1487

    def test_empty_pool_pays_one_for_one(self) -> None:
        q = quote_buy(0, 0, 10, buy_outcome1=False)
        assert (q.output, q.reserve1, q.reserve2) == (10, 10, 0)

    def test_zero_net_amount(self) -> None:
        q = quote_buy(10, 20, 0, buy_outcome1=True)
        assert (q.output, q.reserve1, q.reserve2) == (0, 10, 20)

    @pytest.mark.parametrize(
        "r1,r2,x,side",
        [(10, 10, 5, True), (7, 15, 2, True), (1000, 3, 17, False), (123, 4567, 89, True)],
    )
    def test_product_never_decreases(self, r1: int, r2: int, x: int, side: bool) -> None:
        q = quote_buy(r1, r2, x, buy_outcome1=side)
        assert q.reserve1 * q.reserve2 >= r1 * r2

    def test_collateral_conserved(self) -> None:
        # Every net unit mints one pair: bought side + its new reserve grows by x
        r1, r2, x = 400, 250, 60
        q = quote_buy(r1, r2, x, buy_outcome1=True)
        assert q.output + q.reserve1 == r1 + x
        assert q.reserve2 == r2 + x


class TestProbability:
    def test_balanced_pool(self) -> None:
        assert probability_bps(100, 100) == (5000, 5000)

    def test_outcome1_priced_by_other_reserve(self) -> None:
        # p1 = round(10000 * 300 / 400) = 7500
        assert probability_bps(100, 300) == (7500, 2500)

    def test_rounds_half_up(self) -> None:
        # 10000 * 1 / 3 = 3333.33 -> 3333; 10000 * 2 / 3 = 6666.67 -> 6667
        assert probability_bps(2, 1) == (3333, 6667)
        assert probability_bps(1, 2) == (6667, 3333)

    def test_empty_pool_reads_even(self) -> None:
        assert probability_bps(0, 0) == (5000, 5000)

    def test_sums_to_10000(self) -> None:
        for r1, r2 in [(503, 1990), (1, 999_999), (7, 17)]:
            p1, p2 = probability_bps(r1, r2)
            assert p1 + p2 == 10000
