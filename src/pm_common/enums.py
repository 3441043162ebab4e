"""Global enums — values are persisted in snapshot rows and API payloads."""

from enum import Enum


class MarketPhase(str, Enum):
    OPEN = "OPEN"
    ASSERTED = "ASSERTED"
    RESOLVED = "RESOLVED"


class Outcome(str, Enum):
    """Which claim an assertion names. Fixed once at assertion time."""
    FIRST = "FIRST"
    SECOND = "SECOND"
    UNRESOLVABLE = "UNRESOLVABLE"


class AssertionStatus(str, Enum):
    """Lifecycle of an assertion inside the in-process optimistic oracle."""
    PENDING = "PENDING"
    DISPUTED = "DISPUTED"
    SETTLED_TRUE = "SETTLED_TRUE"
    SETTLED_FALSE = "SETTLED_FALSE"


# Reserved label accepted by assert_outcome in addition to the two outcomes.
UNRESOLVABLE_LABEL = "Unresolvable"
