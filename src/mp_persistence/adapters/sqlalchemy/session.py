"""SQLAlchemy adapter – SqlAlchemySessionFactory."""
from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from mp_persistence.config.settings import PersistenceSettings


class SqlAlchemySessionFactory:
    """Creates SQLAlchemy sessions from an engine URL."""

    def __init__(self, database_url: str, **engine_kwargs: Any) -> None:
        self._engine = create_engine(database_url, **engine_kwargs)
        self._session_factory = sessionmaker(self._engine, class_=Session, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: PersistenceSettings, **engine_kwargs: Any) -> "SqlAlchemySessionFactory":
        return cls(settings.database_url, echo=settings.echo, **engine_kwargs)

    @property
    def engine(self) -> Engine:
        return self._engine

    def __call__(self) -> Session:
        return self._session_factory()

    def dispose(self) -> None:
        self._engine.dispose()


__all__ = ["SqlAlchemySessionFactory"]
