"""ClaimLedger — fungible balances for one outcome of one market.

Only the owner handed in at construction (the MarketEngine) may mint or
burn. transfer/approve/transfer_from follow the usual fungible-token
semantics and are available to any holder.

Every method validates before mutating, so a failed call leaves the ledger
untouched and total_supply == sum(balances) holds after any sequence.
"""

from collections import defaultdict

from src.pm_common.errors import (
    InsufficientAllowanceError,
    InsufficientBalanceError,
    UnauthorizedError,
    ZeroAmountError,
)


class ClaimLedger:
    def __init__(self, owner: object, market_id: str, label: str) -> None:
        self._owner = owner
        self.market_id = market_id
        self.label = label
        self._balances: dict[str, int] = defaultdict(int)
        self._allowances: dict[tuple[str, str], int] = defaultdict(int)
        self._total_supply = 0

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, holder: str) -> int:
        return self._balances.get(holder, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def holders(self) -> list[str]:
        return [h for h, bal in self._balances.items() if bal > 0]

    # ------------------------------------------------------------------
    # Owner-only supply changes
    # ------------------------------------------------------------------

    def mint(self, minter: object, holder: str, amount: int) -> None:
        self._require_owner(minter)
        if amount <= 0:
            raise ZeroAmountError()
        self._balances[holder] += amount
        self._total_supply += amount

    def burn(self, minter: object, holder: str, amount: int) -> None:
        self._require_owner(minter)
        available = self.balance_of(holder)
        if available < amount:
            raise InsufficientBalanceError(required=amount, available=available)
        self._balances[holder] = available - amount
        self._total_supply -= amount

    def _require_owner(self, minter: object) -> None:
        if minter is not self._owner:
            raise UnauthorizedError(repr(minter))

    # ------------------------------------------------------------------
    # Holder-facing transfers
    # ------------------------------------------------------------------

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        available = self.balance_of(sender)
        if available < amount:
            raise InsufficientBalanceError(required=amount, available=available)
        self._move(sender, recipient, amount)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"allowance must be non-negative, got {amount}")
        self._allowances[(owner, spender)] = amount

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> None:
        allowed = self.allowance(owner, spender)
        if allowed < amount:
            raise InsufficientAllowanceError(required=amount, available=allowed)
        available = self.balance_of(owner)
        if available < amount:
            raise InsufficientBalanceError(required=amount, available=available)
        self._allowances[(owner, spender)] = allowed - amount
        self._move(owner, recipient, amount)

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"transfer amount must be non-negative, got {amount}")
        self._balances[sender] -= amount
        self._balances[recipient] += amount
