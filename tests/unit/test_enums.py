"""Tests for pm_common.enums — values must match the snapshot table CHECK constraints."""

from src.pm_common.enums import UNRESOLVABLE_LABEL, AssertionStatus, MarketPhase, Outcome


class TestAllEnumsAreStr:
    """All enums inherit from (str, Enum) for JSON serialization."""

    def test_market_phase_is_str(self) -> None:
        assert isinstance(MarketPhase.OPEN, str)
        assert MarketPhase.ASSERTED == "ASSERTED"

    def test_outcome_is_str(self) -> None:
        assert isinstance(Outcome.FIRST, str)
        assert Outcome.UNRESOLVABLE == "UNRESOLVABLE"

    def test_assertion_status_is_str(self) -> None:
        assert AssertionStatus.SETTLED_FALSE == "SETTLED_FALSE"


class TestEnumValues:
    def test_market_phases(self) -> None:
        assert {p.value for p in MarketPhase} == {"OPEN", "ASSERTED", "RESOLVED"}

    def test_outcomes(self) -> None:
        assert {o.value for o in Outcome} == {"FIRST", "SECOND", "UNRESOLVABLE"}

    def test_unresolvable_label_is_byte_exact(self) -> None:
        assert UNRESOLVABLE_LABEL == "Unresolvable"
