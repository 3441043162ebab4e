"""Domain models for pm_oracle."""

from dataclasses import dataclass
from datetime import datetime

from src.pm_common.enums import AssertionStatus
from src.pm_oracle.domain.protocol import AssertionCallbackProtocol


@dataclass
class AssertionRecord:
    assertion_id: str
    claim: str
    asserter: str
    callback_target: AssertionCallbackProtocol
    currency: str
    bond: int
    reward: int
    identifier: str
    asserted_at: datetime
    expiration_time: datetime
    status: AssertionStatus = AssertionStatus.PENDING
    disputer: str | None = None

    @property
    def is_final(self) -> bool:
        return self.status in (AssertionStatus.SETTLED_TRUE, AssertionStatus.SETTLED_FALSE)
