"""CollateralVault — in-process custody for collateral and bond currencies.

Every participant, the engine and the oracle hold value here. Transfers are
checked before they mutate, so a rejected transfer changes nothing.
"""

import logging
from collections import defaultdict

from src.pm_account.domain.models import AccountBalances, CustodyEntry
from src.pm_common.datetime_utils import utc_now
from src.pm_common.errors import InsufficientFundsError, ZeroAmountError

logger = logging.getLogger(__name__)


class CollateralVault:
    def __init__(self) -> None:
        self._balances: dict[tuple[str, str], int] = defaultdict(int)
        self._entries: list[CustodyEntry] = []

    def balance_of(self, currency: str, holder: str) -> int:
        return self._balances.get((currency, holder), 0)

    def balances(self, holder: str) -> AccountBalances:
        return AccountBalances(
            holder=holder,
            balances={
                currency: amount
                for (currency, owner), amount in self._balances.items()
                if owner == holder
            },
        )

    def entries(self) -> list[CustodyEntry]:
        return list(self._entries)

    def deposit(self, currency: str, holder: str, amount: int, reference: str = "DEPOSIT") -> None:
        """Credit value entering the system from outside."""
        if amount <= 0:
            raise ZeroAmountError()
        self._balances[(currency, holder)] += amount
        self._record(currency, None, holder, amount, reference)
        logger.info("Deposit: %s %d -> %s", currency, amount, holder)

    def ensure_funds(self, currency: str, holder: str, amount: int) -> None:
        available = self.balance_of(currency, holder)
        if available < amount:
            raise InsufficientFundsError(currency, required=amount, available=available)

    def transfer(
        self,
        currency: str,
        sender: str,
        recipient: str,
        amount: int,
        reference: str,
    ) -> None:
        """Move *amount* from sender to recipient. Zero is a no-op."""
        if amount < 0:
            raise ValueError(f"transfer amount must be non-negative, got {amount}")
        if amount == 0:
            return
        self.ensure_funds(currency, sender, amount)
        self._balances[(currency, sender)] -= amount
        self._balances[(currency, recipient)] += amount
        self._record(currency, sender, recipient, amount, reference)
        logger.debug("Transfer: %s %d %s -> %s (%s)", currency, amount, sender, recipient, reference)

    def _record(
        self,
        currency: str,
        sender: str | None,
        recipient: str,
        amount: int,
        reference: str,
    ) -> None:
        self._entries.append(
            CustodyEntry(
                seq=len(self._entries) + 1,
                currency=currency,
                sender=sender,
                recipient=recipient,
                amount=amount,
                reference=reference,
                created_at=utc_now(),
            )
        )
