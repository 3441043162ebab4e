"""Pydantic schemas and cursor utilities for pm_account API."""

import base64
import json

from pydantic import BaseModel, Field

from src.pm_account.domain.models import AccountBalances, CustodyEntry

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_seq: int) -> str:
    """Encode a custody entry sequence number into an opaque Base64 cursor string."""
    payload = json.dumps({"seq": last_seq})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen seq. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["seq"])
    except (ValueError, KeyError, TypeError):
        return None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class DepositRequest(BaseModel):
    currency: str = Field(..., min_length=1, description="Currency code, e.g. ETH or USDC")
    amount: int = Field(..., gt=0, description="Amount to credit, smallest unit")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalancesResponse(BaseModel):
    holder: str
    balances: dict[str, int]

    @classmethod
    def from_domain(cls, b: AccountBalances) -> "BalancesResponse":
        return cls(holder=b.holder, balances=dict(b.balances))


class DepositResponse(BaseModel):
    holder: str
    currency: str
    deposited: int
    balance: int


class CustodyEntryItem(BaseModel):
    seq: int
    currency: str
    sender: str | None
    recipient: str
    amount: int
    reference: str
    created_at: str  # ISO8601 string

    @classmethod
    def from_domain(cls, e: CustodyEntry) -> "CustodyEntryItem":
        return cls(
            seq=e.seq,
            currency=e.currency,
            sender=e.sender,
            recipient=e.recipient,
            amount=e.amount,
            reference=e.reference,
            created_at=e.created_at.isoformat(),
        )


class LedgerResponse(BaseModel):
    items: list[CustodyEntryItem]
    next_cursor: str | None
    has_more: bool
