"""Database models using SQLAlchemy ORM.

Both tables are written by the systems that own the catalog and the
mappings; this package only reads them.
"""
from typing import Optional

from sqlalchemy import JSON, Column, Integer, String, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class ResoSpec(Base):
    """One version of the standard field catalog."""

    __tablename__ = "resospec"

    id = Column(Integer, primary_key=True)
    fullversionstring = Column(String(50), nullable=False, index=True)
    resospec = Column(JSON)


class MappingVersion(Base):
    """One saved version of a data source's mapping document."""

    __tablename__ = "mapping"

    id = Column(Integer, primary_key=True)
    metadatassid = Column(Integer, nullable=False, index=True)
    mapping = Column(JSON)


def get_engine(database_url: str, sslmode: Optional[str] = None):
    """Create database engine."""
    connect_args = {"sslmode": sslmode} if sslmode else {}
    return create_engine(database_url, echo=False, pool_pre_ping=True, connect_args=connect_args)


def get_session_factory(engine):
    """Create a session factory bound to the engine."""
    return sessionmaker(bind=engine)
