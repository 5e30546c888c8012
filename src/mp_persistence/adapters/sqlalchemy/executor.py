"""SQLAlchemy adapter – SqlAlchemyQueryExecutor.

Structural queries become ``select()`` statements over a mapped class.
Text queries go through :func:`sqlalchemy.text`; ``?`` placeholders are
rewritten to named binds and ``LIMIT``/``OFFSET`` are appended.
"""
from __future__ import annotations

import itertools
import re
from typing import Any

from sqlalchemy import func, inspect, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mp_persistence.adapters.sqlalchemy.compiler import column_for, compile_predicate
from mp_persistence.kernel.errors import ExecutionError, InvalidArgumentError
from mp_persistence.kernel.query import (
    Properties,
    QueryExecutor,
    QueryHandle,
    RowCount,
    SortDirection,
    TextQueryHandle,
)
from mp_persistence.observability.logging import get_logger

logger = get_logger(__name__)

_POSITIONAL = re.compile(r"\?")


class SqlAlchemyQuery(QueryHandle[Any]):
    """Structural query compiled to a SQLAlchemy ``Select``."""

    def __init__(self, session: Session, entity: Any, echo: bool = False) -> None:
        super().__init__(entity)
        self._session = session
        self._echo = echo

    def statement(self) -> Any:
        if isinstance(self.projection, RowCount):
            stmt = select(func.count()).select_from(self.entity)
        elif isinstance(self.projection, Properties):
            stmt = select(*(column_for(self.entity, n) for n in self.projection.names))
        else:
            stmt = select(self.entity)

        for predicate in self.predicates:
            stmt = stmt.where(compile_predicate(self.entity, predicate))
        for sort in self.sorts:
            column = column_for(self.entity, sort.field)
            stmt = stmt.order_by(column.desc() if sort.direction is SortDirection.DESC else column.asc())
        if self.offset is not None:
            stmt = stmt.offset(self.offset)
        if self.limit is not None:
            stmt = stmt.limit(self.limit)
        return stmt

    def _fetch_rows(self) -> list[Any]:
        stmt = self.statement()
        if self._echo:
            logger.debug("sql.execute", statement=str(stmt))
        try:
            result = self._session.execute(stmt)
            if self.projection is None:
                return list(result.scalars().all())
            return [tuple(row) for row in result.all()]
        except SQLAlchemyError as exc:
            raise ExecutionError(f"query on {self.entity.__name__} failed", cause=exc) from exc


class SqlAlchemyTextQuery(TextQueryHandle):
    """Text query run with :meth:`Session.execute`; rows come back as tuples."""

    def __init__(self, session: Session, query_text: str, echo: bool = False) -> None:
        super().__init__(query_text)
        self._session = session
        self._echo = echo

    def compile(self) -> tuple[str, dict[str, Any]]:
        """SQL text with named binds plus the bind parameters."""
        counter = itertools.count()
        sql = _POSITIONAL.sub(lambda _: f":_p{next(counter)}", self.text)
        params: dict[str, Any] = {f"_p{i}": v for i, v in self.positional.items()}
        params.update(self.named)

        if self.offset and self.limit is None:
            raise InvalidArgumentError(
                "offset without a limit is not supported for text queries",
                detail={"query_text": self.text},
            )
        if self.limit is not None:
            sql = f"{sql.rstrip()} LIMIT :_limit OFFSET :_offset"
            params["_limit"] = self.limit
            params["_offset"] = self.offset or 0
        return sql, params

    def fetch_all(self) -> list[Any]:
        sql, params = self.compile()
        if self._echo:
            logger.debug("sql.execute", statement=sql, params=params)
        try:
            result = self._session.execute(text(sql), params)
            return [tuple(row) for row in result.all()]
        except SQLAlchemyError as exc:
            raise ExecutionError(f"text query failed: {self.text}", cause=exc) from exc

    def execute_update(self) -> int:
        sql, params = self.compile()
        if self._echo:
            logger.debug("sql.execute", statement=sql, params=params)
        try:
            return self._session.execute(text(sql), params).rowcount
        except SQLAlchemyError as exc:
            raise ExecutionError(f"update statement failed: {self.text}", cause=exc) from exc


class SqlAlchemyQueryExecutor(QueryExecutor):
    """Executor bound to one session; the caller owns the session lifecycle.

    ``save`` and ``delete`` flush but never commit.
    """

    def __init__(self, session: Session, echo: bool = False) -> None:
        self._session = session
        self._echo = echo

    def create_predicate_query(self, entity: Any) -> SqlAlchemyQuery:
        return SqlAlchemyQuery(self._session, entity, self._echo)

    def create_text_query(self, text: str) -> SqlAlchemyTextQuery:
        return SqlAlchemyTextQuery(self._session, text, self._echo)

    def id_name(self, entity: Any) -> str:
        mapper = inspect(entity)
        keys = [mapper.get_property_by_column(column).key for column in mapper.primary_key]
        if len(keys) != 1:
            raise InvalidArgumentError(
                f"{entity.__name__} has a composite primary key {keys}",
                detail={"entity": entity.__name__, "primary_key": keys},
            )
        return keys[0]

    def get(self, entity: Any, ident: Any) -> Any | None:
        try:
            return self._session.get(entity, ident)
        except SQLAlchemyError as exc:
            raise ExecutionError(f"get of {entity.__name__} {ident!r} failed", cause=exc) from exc

    def save(self, entity: Any, obj: Any) -> None:
        try:
            self._session.add(obj)
            self._session.flush()
        except SQLAlchemyError as exc:
            raise ExecutionError(f"save of {entity.__name__} failed", cause=exc) from exc

    def delete(self, entity: Any, obj: Any) -> None:
        try:
            self._session.delete(obj)
            self._session.flush()
        except SQLAlchemyError as exc:
            raise ExecutionError(f"delete of {entity.__name__} failed", cause=exc) from exc


__all__ = ["SqlAlchemyQuery", "SqlAlchemyQueryExecutor", "SqlAlchemyTextQuery"]
