"""In-memory adapter – InMemoryQueryExecutor.

Structural queries run over registered lists of objects or mappings.
Textual queries cannot be interpreted, so each query text is answered by a
registered responder.  Every execution is recorded in ``executed``, which
makes the executor usable as a test double for call-count assertions.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from typing import Any, Callable

from mp_persistence.kernel.errors import ExecutionError, InvalidArgumentError
from mp_persistence.kernel.query import (
    Properties,
    QueryExecutor,
    QueryHandle,
    RowCount,
    SortDirection,
    TextQueryHandle,
    resolve_property,
)

Responder = Callable[[TextQueryHandle], Any]


@dataclasses.dataclass(frozen=True)
class ExecutedQuery:
    """One recorded execution.

    ``kind`` is ``"structured"``, ``"text"``, ``"update"``, ``"get"``, ``"save"``
    or ``"delete"``.
    """

    kind: str
    target: Any
    projection: Any = None


def _null_first_key(value: Any) -> tuple[bool, Any]:
    return (value is not None, value)


def _slice(rows: list[Any], offset: int | None, limit: int | None) -> list[Any]:
    start = offset or 0
    end = None if limit is None else start + limit
    return rows[start:end]


class InMemoryQuery(QueryHandle[Any]):
    """Structural query evaluated with :meth:`Predicate.is_satisfied_by`."""

    def __init__(self, executor: "InMemoryQueryExecutor", entity: Any) -> None:
        super().__init__(entity)
        self._executor = executor

    def _fetch_rows(self) -> list[Any]:
        self._executor.executed.append(ExecutedQuery("structured", self.entity, self.projection))
        items = [
            item
            for item in self._executor.rows(self.entity)
            if all(p.is_satisfied_by(item) for p in self.predicates)
        ]
        if isinstance(self.projection, RowCount):
            return [(len(items),)]

        # Stable sorts applied last-key-first give primary, secondary, ... ordering.
        for sort in reversed(self.sorts):
            items.sort(
                key=lambda item, f=sort.field: _null_first_key(resolve_property(item, f)),
                reverse=sort.direction is SortDirection.DESC,
            )
        items = _slice(items, self.offset, self.limit)

        if isinstance(self.projection, Properties):
            return [tuple(resolve_property(item, n) for n in self.projection.names) for item in items]
        return items


class InMemoryTextQuery(TextQueryHandle):
    """Text query answered by the responder registered for its exact text."""

    def __init__(self, executor: "InMemoryQueryExecutor", text: str) -> None:
        super().__init__(text)
        self._executor = executor

    @property
    def values(self) -> list[Any]:
        """Positional bindings in index order."""
        return [self.positional[i] for i in sorted(self.positional)]

    def fetch_all(self) -> list[Any]:
        self._executor.executed.append(ExecutedQuery("text", self.text))
        responder = self._executor.responder_for(self.text)
        rows = responder(self) if callable(responder) else list(responder)
        return _slice(list(rows), self.offset, self.limit)

    def execute_update(self) -> int:
        self._executor.executed.append(ExecutedQuery("update", self.text))
        responder = self._executor.responder_for(self.text)
        return int(responder(self) if callable(responder) else responder)


class InMemoryQueryExecutor(QueryExecutor):
    """Dict-of-lists backed executor.

    Entities are matched by their ``id`` property unless *id_names* maps the
    entity kind to another property name.

    Example::

        executor = InMemoryQueryExecutor({"users": [{"name": "ann", "age": 31}]})
        executor.register_text("select count(*) from users ", [(1,)])
        executor.register_text("delete from users where age > ?", 2)
    """

    def __init__(
        self,
        collections: dict[Any, Iterable[Any]] | None = None,
        id_names: dict[Any, str] | None = None,
    ) -> None:
        self._collections: dict[Any, list[Any]] = {
            entity: list(items) for entity, items in (collections or {}).items()
        }
        self._id_names = dict(id_names or {})
        self._responders: dict[str, Responder | list[Any] | int] = {}
        self.executed: list[ExecutedQuery] = []
        self.created = 0

    def add_all(self, entity: Any, items: Iterable[Any]) -> None:
        self._collections.setdefault(entity, []).extend(items)

    def _collection(self, entity: Any) -> list[Any]:
        try:
            return self._collections[entity]
        except KeyError as exc:
            raise ExecutionError(f"unknown entity {entity!r}", cause=exc) from exc

    def rows(self, entity: Any) -> list[Any]:
        return list(self._collection(entity))

    def register_text(self, query_text: str, responder: Responder | list[Any] | int) -> None:
        """Answer *query_text* with fixed rows, a fixed update count, or a callable receiving the handle."""
        self._responders[query_text] = responder

    def responder_for(self, query_text: str) -> Responder | list[Any] | int:
        try:
            return self._responders[query_text]
        except KeyError as exc:
            raise ExecutionError(
                f"no responder registered for query: {query_text}", cause=exc
            ) from exc

    def create_predicate_query(self, entity: Any) -> InMemoryQuery:
        self.created += 1
        return InMemoryQuery(self, entity)

    def create_text_query(self, text: str) -> InMemoryTextQuery:
        self.created += 1
        return InMemoryTextQuery(self, text)

    # Entity operations ------------------------------------------------
    def id_name(self, entity: Any) -> str:
        return self._id_names.get(entity, "id")

    def _position(self, entity: Any, ident: Any) -> int | None:
        name = self.id_name(entity)
        for index, item in enumerate(self._collection(entity)):
            if resolve_property(item, name) == ident:
                return index
        return None

    def get(self, entity: Any, ident: Any) -> Any | None:
        self.executed.append(ExecutedQuery("get", entity))
        index = self._position(entity, ident)
        return None if index is None else self._collections[entity][index]

    def save(self, entity: Any, obj: Any) -> None:
        self.executed.append(ExecutedQuery("save", entity))
        ident = resolve_property(obj, self.id_name(entity))
        if ident is None:
            raise InvalidArgumentError(
                f"{entity!r} object has no '{self.id_name(entity)}' to save under",
                detail={"entity": repr(entity)},
            )
        items = self._collections.setdefault(entity, [])
        index = self._position(entity, ident)
        if index is None:
            items.append(obj)
        else:
            items[index] = obj

    def delete(self, entity: Any, obj: Any) -> None:
        self.executed.append(ExecutedQuery("delete", entity))
        ident = resolve_property(obj, self.id_name(entity))
        index = self._position(entity, ident)
        if index is None:
            raise ExecutionError(
                f"no stored {entity!r} with {self.id_name(entity)}={ident!r} to delete",
                detail={"identifier": ident},
            )
        del self._collections[entity][index]

    def reset(self) -> None:
        self.executed.clear()
        self.created = 0


__all__ = ["ExecutedQuery", "InMemoryQuery", "InMemoryQueryExecutor", "InMemoryTextQuery"]
