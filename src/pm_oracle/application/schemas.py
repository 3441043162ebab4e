"""Pydantic schemas for pm_oracle API."""

from pydantic import BaseModel

from src.pm_oracle.domain.models import AssertionRecord


class ResolvedCallbackRequest(BaseModel):
    assertion_id: str
    truthful: bool


class DisputedCallbackRequest(BaseModel):
    assertion_id: str


class ResolveDisputeRequest(BaseModel):
    truthful: bool


class AssertionDetail(BaseModel):
    assertion_id: str
    claim: str
    asserter: str
    callback_address: str
    currency: str
    bond: int
    reward: int
    identifier: str
    status: str
    disputer: str | None
    asserted_at: str
    expiration_time: str

    @classmethod
    def from_domain(cls, r: AssertionRecord) -> "AssertionDetail":
        return cls(
            assertion_id=r.assertion_id,
            claim=r.claim,
            asserter=r.asserter,
            callback_address=r.callback_target.address,
            currency=r.currency,
            bond=r.bond,
            reward=r.reward,
            identifier=r.identifier,
            status=r.status.value,
            disputer=r.disputer,
            asserted_at=r.asserted_at.isoformat(),
            expiration_time=r.expiration_time.isoformat(),
        )
