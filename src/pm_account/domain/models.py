"""Domain models for pm_account — pure dataclasses."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CustodyEntry:
    """One movement of value between two custody accounts."""

    seq: int
    currency: str
    sender: str | None           # None for an external deposit
    recipient: str
    amount: int
    reference: str
    created_at: datetime


@dataclass(frozen=True)
class AccountBalances:
    holder: str
    balances: dict[str, int]
