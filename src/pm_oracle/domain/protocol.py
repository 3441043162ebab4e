"""Boundary contracts between the market engine and the truth-assertion oracle.

Outbound (engine -> oracle): OracleClientProtocol.
Inbound (oracle -> engine): AssertionCallbackProtocol. Callbacks must arrive
as separate invocations, never from inside assert_truth.
"""

from typing import Protocol


class AssertionCallbackProtocol(Protocol):
    address: str  # custody account that receives reward refunds

    async def assertion_resolved_callback(
        self, caller: str, assertion_id: str, truthful: bool
    ) -> None: ...

    async def assertion_disputed_callback(self, caller: str, assertion_id: str) -> None: ...


class OracleClientProtocol(Protocol):
    address: str  # custody account bond + reward are forwarded to

    async def get_minimum_bond(self, currency: str) -> int: ...

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
    ) -> str: ...
