"""001: create market_snapshots table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE market_snapshots (
            id                      VARCHAR(66)     PRIMARY KEY,
            description             TEXT            NOT NULL,
            outcome1                TEXT            NOT NULL,
            outcome2                TEXT            NOT NULL,
            creator                 TEXT            NOT NULL,
            phase                   VARCHAR(16)     NOT NULL,
            resolved                BOOLEAN         NOT NULL DEFAULT FALSE,
            asserted_outcome_id     VARCHAR(66)     NOT NULL,
            asserted_outcome        VARCHAR(16),
            active_assertion_id     VARCHAR(66),
            reward                  NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            required_bond           NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            total_collateral        NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            claim1_supply           NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            claim2_supply           NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            reserve1                NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            reserve2                NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            creator_fees_accrued    NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            protocol_fees_accrued   NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            created_at              TIMESTAMPTZ     NOT NULL,
            resolved_at             TIMESTAMPTZ,
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_snapshots_collateral_gte_0 CHECK (total_collateral >= 0),
            CONSTRAINT ck_snapshots_reserves_gte_0   CHECK (reserve1 >= 0 AND reserve2 >= 0),
            CONSTRAINT ck_snapshots_phase CHECK (phase IN ('OPEN', 'ASSERTED', 'RESOLVED')),
            CONSTRAINT ck_snapshots_outcome CHECK (
                asserted_outcome IS NULL
                OR asserted_outcome IN ('FIRST', 'SECOND', 'UNRESOLVABLE')
            )
        );
    """)
    op.execute("CREATE INDEX idx_market_snapshots_phase ON market_snapshots (phase);")
    op.execute("CREATE INDEX idx_market_snapshots_creator ON market_snapshots (creator);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS market_snapshots CASCADE;")
