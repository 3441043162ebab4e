# src/pm_market/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_market.domain.models import MarketView


class MarketSnapshotRepositoryProtocol(Protocol):
    async def upsert_market(self, db: AsyncSession, view: MarketView) -> None: ...

    async def get_market_row(
        self,
        db: AsyncSession,
        market_id: str,
    ) -> dict[str, Any] | None: ...
