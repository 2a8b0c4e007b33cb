"""Index for latest-published mapping lookups.

Revision ID: 0002_published_mapping_index
Revises: 0001_initial
Create Date: 2026-10-19 00:00:01
"""
from alembic import op

# revision identifiers, used by Alembic.
revision = "0002_published_mapping_index"
down_revision = "0001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE INDEX IF NOT EXISTS idx_mapping_published
        ON mapping(metadatassid, id DESC)
        WHERE mapping->>'datePublished' IS NOT NULL
          AND mapping->>'datePublished' <> '';
        """
    )


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS idx_mapping_published;")
