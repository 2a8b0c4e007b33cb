"""Catalog and mapping tables.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00
"""
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS resospec (
            id SERIAL PRIMARY KEY,
            fullversionstring VARCHAR(50) NOT NULL,
            resospec JSONB
        );
        """
    )
    op.execute("CREATE INDEX IF NOT EXISTS idx_resospec_version ON resospec(fullversionstring);")

    op.execute(
        """
        CREATE TABLE IF NOT EXISTS mapping (
            id SERIAL PRIMARY KEY,
            metadatassid INTEGER NOT NULL,
            mapping JSONB
        );
        """
    )
    op.execute("CREATE INDEX IF NOT EXISTS idx_mapping_ssid ON mapping(metadatassid);")


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS idx_mapping_ssid;")
    op.execute("DROP TABLE IF EXISTS mapping;")
    op.execute("DROP INDEX IF EXISTS idx_resospec_version;")
    op.execute("DROP TABLE IF EXISTS resospec;")
