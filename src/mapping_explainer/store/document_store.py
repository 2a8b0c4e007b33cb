"""Read-only access to catalog and mapping documents."""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mapping_explainer.exceptions import UpstreamError
from mapping_explainer.models.database_models import (
    MappingVersion,
    ResoSpec,
    get_engine,
    get_session_factory,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class SpecRow:
    row_id: int
    version: Optional[str]
    document: Any


@dataclass(frozen=True)
class MappingRow:
    row_id: int
    source_id: int
    document: Any


class DocumentStore:
    """Owns the database engine for the lifetime of the process.

    Each read opens and closes its own session; nothing read is kept.
    """

    def __init__(self, database_url: Optional[str] = None, sslmode: Optional[str] = None, engine=None):
        """Initialize store.

        Args:
            database_url: SQLAlchemy connection string
            sslmode: Optional libpq ``sslmode`` passed to the driver
            engine: Pre-built engine (takes precedence over ``database_url``)
        """
        if engine is None:
            if not database_url:
                raise ValueError("database_url not provided")
            engine = get_engine(database_url, sslmode=sslmode)
        self.engine = engine
        self._session_factory = get_session_factory(engine)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    def latest_spec_row(self) -> Optional[SpecRow]:
        """Catalog row with the highest version string."""
        stmt = select(ResoSpec).order_by(ResoSpec.fullversionstring.desc()).limit(1)
        try:
            with self.session_scope() as session:
                row = session.execute(stmt).scalars().first()
                if row is None:
                    return None
                return SpecRow(row_id=row.id, version=row.fullversionstring, document=row.resospec)
        except SQLAlchemyError as e:
            logger.error("Failed to read catalog", error=str(e))
            raise UpstreamError(f"Catalog read failed: {e}") from e

    def latest_published_mapping_row(self, source_id: int) -> Optional[MappingRow]:
        """Highest-id mapping row for the source with a non-empty ``datePublished``."""
        published = MappingVersion.mapping["datePublished"].as_string()
        stmt = (
            select(MappingVersion)
            .where(MappingVersion.metadatassid == source_id)
            .where(published.isnot(None))
            .where(published != "")
            .order_by(MappingVersion.id.desc())
            .limit(1)
        )
        try:
            with self.session_scope() as session:
                row = session.execute(stmt).scalars().first()
                if row is None:
                    return None
                return MappingRow(row_id=row.id, source_id=row.metadatassid, document=row.mapping)
        except SQLAlchemyError as e:
            logger.error("Failed to read mapping", source_id=source_id, error=str(e))
            raise UpstreamError(f"Mapping read failed for source {source_id}: {e}") from e

    def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        self.engine.dispose()
        logger.info("Document store closed")
