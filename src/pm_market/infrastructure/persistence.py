"""MarketSnapshotRepository — concrete MarketSnapshotRepositoryProtocol.

All queries use raw text() SQL (no ORM). Snapshots are write-behind copies of
the in-memory engine state; they are never read back into the engine.
asyncpg NULL parameter pattern: CAST(:param AS TYPE) for nullable values.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.datetime_utils import utc_now
from src.pm_market.domain.models import MarketView

_UPSERT_MARKET_SQL = text("""
    INSERT INTO market_snapshots (
        id, description, outcome1, outcome2, creator, phase, resolved,
        asserted_outcome_id, asserted_outcome, active_assertion_id,
        reward, required_bond, total_collateral,
        claim1_supply, claim2_supply, reserve1, reserve2,
        creator_fees_accrued, protocol_fees_accrued,
        created_at, resolved_at, updated_at
    ) VALUES (
        :id, :description, :outcome1, :outcome2, :creator, :phase, :resolved,
        :asserted_outcome_id, CAST(:asserted_outcome AS TEXT),
        CAST(:active_assertion_id AS TEXT),
        :reward, :required_bond, :total_collateral,
        :claim1_supply, :claim2_supply, :reserve1, :reserve2,
        :creator_fees_accrued, :protocol_fees_accrued,
        :created_at, CAST(:resolved_at AS TIMESTAMPTZ), :updated_at
    )
    ON CONFLICT (id) DO UPDATE SET
        phase = EXCLUDED.phase,
        resolved = EXCLUDED.resolved,
        asserted_outcome_id = EXCLUDED.asserted_outcome_id,
        asserted_outcome = EXCLUDED.asserted_outcome,
        active_assertion_id = EXCLUDED.active_assertion_id,
        total_collateral = EXCLUDED.total_collateral,
        claim1_supply = EXCLUDED.claim1_supply,
        claim2_supply = EXCLUDED.claim2_supply,
        reserve1 = EXCLUDED.reserve1,
        reserve2 = EXCLUDED.reserve2,
        creator_fees_accrued = EXCLUDED.creator_fees_accrued,
        protocol_fees_accrued = EXCLUDED.protocol_fees_accrued,
        resolved_at = EXCLUDED.resolved_at,
        updated_at = EXCLUDED.updated_at
""")

_GET_MARKET_SQL = text("""
    SELECT id, description, outcome1, outcome2, creator, phase, resolved,
           asserted_outcome_id, asserted_outcome, active_assertion_id,
           reward, required_bond, total_collateral,
           claim1_supply, claim2_supply, reserve1, reserve2,
           creator_fees_accrued, protocol_fees_accrued,
           created_at, resolved_at, updated_at
    FROM market_snapshots
    WHERE id = :market_id
""")


def _view_to_params(view: MarketView) -> dict:
    return {
        "id": view.id,
        "description": view.description,
        "outcome1": view.outcome1,
        "outcome2": view.outcome2,
        "creator": view.creator,
        "phase": view.phase.value,
        "resolved": view.resolved,
        "asserted_outcome_id": view.asserted_outcome_id,
        "asserted_outcome": view.asserted_outcome.value if view.asserted_outcome else None,
        "active_assertion_id": view.active_assertion_id,
        "reward": view.reward,
        "required_bond": view.required_bond,
        "total_collateral": view.total_collateral,
        "claim1_supply": view.claim1_supply,
        "claim2_supply": view.claim2_supply,
        "reserve1": view.reserve1,
        "reserve2": view.reserve2,
        "creator_fees_accrued": view.creator_fees_accrued,
        "protocol_fees_accrued": view.protocol_fees_accrued,
        "created_at": view.created_at,
        "resolved_at": view.resolved_at,
        "updated_at": utc_now(),
    }


class MarketSnapshotRepository:
    async def upsert_market(self, db: AsyncSession, view: MarketView) -> None:
        await db.execute(_UPSERT_MARKET_SQL, _view_to_params(view))

    async def get_market_row(self, db: AsyncSession, market_id: str) -> dict | None:
        result = await db.execute(_GET_MARKET_SQL, {"market_id": market_id})
        row = result.mappings().first()
        return dict(row) if row is not None else None
