"""Database engine/session helpers."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


def create_db_engine(db_url: str) -> Engine:
    """Create a SQLAlchemy engine for scripts and tests.

    In-memory SQLite URLs share one connection so every session sees the same database.
    """
    if db_url in {"sqlite://", "sqlite:///:memory:"}:
        return create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(db_url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory whose objects stay readable after commit."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
