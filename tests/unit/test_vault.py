"""Unit tests for CollateralVault custody accounting."""

import pytest

from src.pm_account.domain.vault import CollateralVault
from src.pm_common.errors import InsufficientFundsError, ZeroAmountError


@pytest.fixture
def vault() -> CollateralVault:
    v = CollateralVault()
    v.deposit("ETH", "alice", 100)
    return v


class TestDeposit:
    def test_deposit_credits_balance(self, vault: CollateralVault) -> None:
        assert vault.balance_of("ETH", "alice") == 100
        assert vault.balance_of("USDC", "alice") == 0

    def test_zero_deposit_rejected(self, vault: CollateralVault) -> None:
        with pytest.raises(ZeroAmountError):
            vault.deposit("ETH", "alice", 0)

    def test_deposit_recorded_without_sender(self, vault: CollateralVault) -> None:
        (entry,) = vault.entries()
        assert entry.sender is None
        assert entry.recipient == "alice"
        assert entry.reference == "DEPOSIT"
        assert entry.seq == 1


class TestTransfer:
    def test_transfer_moves_value(self, vault: CollateralVault) -> None:
        vault.transfer("ETH", "alice", "engine", 40, "MINT:0x1")
        assert vault.balance_of("ETH", "alice") == 60
        assert vault.balance_of("ETH", "engine") == 40
        assert vault.entries()[-1].reference == "MINT:0x1"

    def test_insufficient_funds_changes_nothing(self, vault: CollateralVault) -> None:
        with pytest.raises(InsufficientFundsError) as exc_info:
            vault.transfer("ETH", "alice", "engine", 101, "MINT:0x1")
        assert exc_info.value.code == 2002
        assert vault.balance_of("ETH", "alice") == 100
        assert vault.balance_of("ETH", "engine") == 0
        assert len(vault.entries()) == 1

    def test_zero_transfer_is_noop(self, vault: CollateralVault) -> None:
        vault.transfer("ETH", "bob", "engine", 0, "NOOP")
        assert len(vault.entries()) == 1

    def test_negative_transfer_rejected(self, vault: CollateralVault) -> None:
        with pytest.raises(ValueError):
            vault.transfer("ETH", "alice", "bob", -1, "BAD")

    def test_currencies_are_separate(self, vault: CollateralVault) -> None:
        with pytest.raises(InsufficientFundsError):
            vault.transfer("USDC", "alice", "bob", 1, "BOND")


class TestBalances:
    def test_balances_by_currency(self, vault: CollateralVault) -> None:
        vault.deposit("USDC", "alice", 7)
        assert vault.balances("alice").balances == {"ETH": 100, "USDC": 7}

    def test_unknown_holder_has_no_balances(self, vault: CollateralVault) -> None:
        assert vault.balances("nobody").balances == {}
