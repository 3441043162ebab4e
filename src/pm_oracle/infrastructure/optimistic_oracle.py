"""InMemoryOptimisticOracle — in-process stand-in for the external oracle.

Mirrors the optimistic assertion protocol:
  1. assert_truth: the asserter's bond (and the market reward) are already in
     this oracle's custody account; the assertion opens a liveness window.
  2. dispute_assertion: a disputer matches the bond before expiry. The
     callback target is notified.
  3. settle_assertion: an undisputed assertion past its liveness is truthful.
  4. resolve_dispute: arbitration outcome for a disputed assertion.

Payouts on finalization:
  truthful      -> asserter gets bond + reward (+ disputer's bond if disputed)
  not truthful  -> disputer gets both bonds; the reward goes back to the
                   callback target's custody account

The callback runs before any payout or status change, so a rejected
callback leaves the assertion exactly as it was.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from src.pm_account.domain.vault import CollateralVault
from src.pm_common.datetime_utils import utc_now
from src.pm_common.enums import AssertionStatus
from src.pm_common.errors import AssertionStateError, UnknownAssertionError
from src.pm_common.id_generator import derive_assertion_id
from src.pm_oracle.domain.models import AssertionRecord
from src.pm_oracle.domain.protocol import AssertionCallbackProtocol

logger = logging.getLogger(__name__)


class InMemoryOptimisticOracle:
    def __init__(
        self,
        vault: CollateralVault,
        address: str,
        minimum_bonds: dict[str, int] | None = None,
        default_minimum_bond: int = 0,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.address = address
        self._vault = vault
        self._minimum_bonds = dict(minimum_bonds or {})
        self._default_minimum_bond = default_minimum_bond
        self._clock = clock
        self._assertions: dict[str, AssertionRecord] = {}
        self._nonce = 0

    async def get_minimum_bond(self, currency: str) -> int:
        return self._minimum_bonds.get(currency, self._default_minimum_bond)

    def set_minimum_bond(self, currency: str, amount: int) -> None:
        self._minimum_bonds[currency] = amount

    async def assert_truth(
        self,
        *,
        claim: str,
        asserter: str,
        callback_target: AssertionCallbackProtocol,
        liveness_seconds: int,
        currency: str,
        bond: int,
        reward: int,
        identifier: str,
    ) -> str:
        minimum = await self.get_minimum_bond(currency)
        if bond < minimum:
            raise ValueError(f"bond {bond} below oracle minimum {minimum}")

        self._nonce += 1
        assertion_id = derive_assertion_id(claim, asserter, self._nonce)
        now = self._clock()
        self._assertions[assertion_id] = AssertionRecord(
            assertion_id=assertion_id,
            claim=claim,
            asserter=asserter,
            callback_target=callback_target,
            currency=currency,
            bond=bond,
            reward=reward,
            identifier=identifier,
            asserted_at=now,
            expiration_time=now + timedelta(seconds=liveness_seconds),
        )
        logger.info(
            "Assertion made: id=%s asserter=%s bond=%d liveness=%ds",
            assertion_id, asserter, bond, liveness_seconds,
        )
        return assertion_id

    def get_assertion(self, assertion_id: str) -> AssertionRecord:
        record = self._assertions.get(assertion_id)
        if record is None:
            raise UnknownAssertionError(assertion_id)
        return record

    async def dispute_assertion(self, assertion_id: str, disputer: str) -> None:
        record = self.get_assertion(assertion_id)
        if record.status is not AssertionStatus.PENDING:
            raise AssertionStateError(assertion_id, f"cannot dispute in status {record.status.value}")
        if self._clock() >= record.expiration_time:
            raise AssertionStateError(assertion_id, "liveness window has expired")
        self._vault.ensure_funds(record.currency, disputer, record.bond)

        await record.callback_target.assertion_disputed_callback(self.address, assertion_id)

        self._vault.transfer(
            record.currency, disputer, self.address, record.bond, f"DISPUTE_BOND:{assertion_id}"
        )
        record.status = AssertionStatus.DISPUTED
        record.disputer = disputer
        logger.warning("Assertion disputed: id=%s disputer=%s", assertion_id, disputer)

    async def settle_assertion(self, assertion_id: str) -> bool:
        """Finalize an undisputed assertion whose liveness has passed. Returns truthful."""
        record = self.get_assertion(assertion_id)
        if record.status is AssertionStatus.DISPUTED:
            raise AssertionStateError(assertion_id, "disputed; awaiting resolve_dispute")
        if record.is_final:
            raise AssertionStateError(assertion_id, "already settled")
        if self._clock() < record.expiration_time:
            raise AssertionStateError(assertion_id, "liveness window still open")
        await self._finalize(record, truthful=True)
        return True

    async def resolve_dispute(self, assertion_id: str, truthful: bool) -> None:
        record = self.get_assertion(assertion_id)
        if record.status is not AssertionStatus.DISPUTED:
            raise AssertionStateError(assertion_id, f"not disputed (status {record.status.value})")
        await self._finalize(record, truthful=truthful)

    async def _finalize(self, record: AssertionRecord, truthful: bool) -> None:
        target = record.callback_target
        await target.assertion_resolved_callback(self.address, record.assertion_id, truthful)

        disputed = record.disputer is not None
        bonds = record.bond * 2 if disputed else record.bond
        ref = f"ASSERTION_SETTLED:{record.assertion_id}"
        if truthful:
            self._vault.transfer(
                record.currency, self.address, record.asserter, bonds + record.reward, ref
            )
            record.status = AssertionStatus.SETTLED_TRUE
        else:
            # Only a disputed assertion can settle false, so disputer is set.
            self._vault.transfer(record.currency, self.address, record.disputer or "", bonds, ref)
            self._vault.transfer(record.currency, self.address, target.address, record.reward, ref)
            record.status = AssertionStatus.SETTLED_FALSE
        logger.info(
            "Assertion settled: id=%s truthful=%s disputed=%s",
            record.assertion_id, truthful, disputed,
        )
