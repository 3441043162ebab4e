"""Agent registry — the authorization predicate shared by every entry point.

The real registry (identity, attestations, names) lives outside this
service. The engine and any external trading gate only depend on
AgentRegistryProtocol.is_authorized.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from src.pm_common.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class AgentRegistryProtocol(Protocol):
    def is_authorized(self, address: str) -> bool: ...


@dataclass(frozen=True)
class Agent:
    address: str
    name: str
    registered_at: datetime


class InMemoryAgentRegistry:
    def __init__(self, addresses: list[str] | None = None) -> None:
        self._agents: dict[str, Agent] = {}
        for address in addresses or []:
            self.register_agent(address, name=address)

    def register_agent(self, address: str, name: str) -> Agent:
        """Register (or re-name) an agent. Re-registration keeps the original timestamp."""
        existing = self._agents.get(address)
        registered_at = existing.registered_at if existing else utc_now()
        agent = Agent(address=address, name=name, registered_at=registered_at)
        self._agents[address] = agent
        logger.info("Agent registered: %s (%s)", address, name)
        return agent

    def get_agent(self, address: str) -> Agent | None:
        return self._agents.get(address)

    def agent_addresses(self) -> list[str]:
        return list(self._agents)

    def is_authorized(self, address: str) -> bool:
        return address in self._agents
