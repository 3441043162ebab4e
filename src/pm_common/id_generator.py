"""Deterministic identifiers for markets, outcomes and assertions.

All ids are 0x-prefixed sha256 hex digests (32 bytes). Market ids mix in a
monotonic counter so that two markets with the same description never
collide.
"""

import hashlib

ZERO_ID = "0x" + "00" * 32


def _digest(*parts: object) -> str:
    h = hashlib.sha256()
    for part in parts:
        encoded = str(part).encode("utf-8")
        # Length prefix keeps ("ab", "c") distinct from ("a", "bc").
        h.update(len(encoded).to_bytes(8, "big"))
        h.update(encoded)
    return "0x" + h.hexdigest()


def derive_market_id(description: str, creator: str, counter: int, timestamp: int) -> str:
    """Market id from creation inputs: description, creator, counter, timestamp."""
    return _digest("market", description, creator, counter, timestamp)


def outcome_id(label: str) -> str:
    """Hash of an outcome label. Byte-exact: "Yes" and "yes" differ."""
    return "0x" + hashlib.sha256(label.encode("utf-8")).hexdigest()


def derive_assertion_id(claim: str, asserter: str, nonce: int) -> str:
    return _digest("assertion", claim, asserter, nonce)
