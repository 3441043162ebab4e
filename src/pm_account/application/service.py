"""AccountApplicationService — thin composition layer over CollateralVault.

Reads balances and the custody ledger; deposit is the dev faucet that
credits value entering from outside.
"""

from src.pm_account.application.schemas import (
    BalancesResponse,
    CustodyEntryItem,
    DepositResponse,
    LedgerResponse,
    cursor_decode,
    cursor_encode,
)
from src.pm_account.domain.vault import CollateralVault


class AccountApplicationService:
    def __init__(self, vault: CollateralVault) -> None:
        self._vault = vault

    def get_balances(self, holder: str) -> BalancesResponse:
        return BalancesResponse.from_domain(self._vault.balances(holder))

    def deposit(self, holder: str, currency: str, amount: int) -> DepositResponse:
        self._vault.deposit(currency, holder, amount, reference="FAUCET")
        return DepositResponse(
            holder=holder,
            currency=currency,
            deposited=amount,
            balance=self._vault.balance_of(currency, holder),
        )

    def list_ledger(
        self,
        holder: str,
        cursor: str | None,
        limit: int,
        currency: str | None,
    ) -> LedgerResponse:
        after_seq = cursor_decode(cursor) or 0
        entries = [
            e
            for e in self._vault.entries()
            if e.seq > after_seq
            and holder in (e.sender, e.recipient)
            and (currency is None or e.currency == currency)
        ]
        has_more = len(entries) > limit
        page = entries[:limit]
        next_cursor = cursor_encode(page[-1].seq) if has_more and page else None
        return LedgerResponse(
            items=[CustodyEntryItem.from_domain(e) for e in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )
