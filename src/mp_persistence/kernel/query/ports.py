"""Query execution ports: the seam between the repository and a backend.

Concrete executors live in ``adapters/memory`` and ``adapters/sqlalchemy``.
A :class:`QueryHandle` keeps its predicates, sorts, pagination, projection
and result transform as ordinary attributes so that the count shape can be
installed on a copy and the original shape restored without reflection.
"""

from __future__ import annotations

import abc
import copy
import dataclasses
from typing import Any, Callable, Generic, TypeVar

from mp_persistence.kernel.errors import InvalidArgumentError
from mp_persistence.kernel.query.predicates import Predicate
from mp_persistence.kernel.query.sort import Sort, SortDirection

T = TypeVar("T")

ResultTransform = Callable[[Any], Any]


@dataclasses.dataclass(frozen=True)
class RowCount:
    """Projection selecting the number of matching rows."""


@dataclasses.dataclass(frozen=True)
class Properties:
    """Projection selecting the named properties, one tuple per row."""

    names: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.names:
            raise InvalidArgumentError("Properties projection needs at least one name")


# ``None`` means the default whole-entity result shape.
Projection = RowCount | Properties | None


@dataclasses.dataclass(frozen=True)
class QueryShape:
    """Snapshot of the parts of a query that a count projection conflicts with."""

    projection: Projection
    result_transform: ResultTransform | None
    sorts: tuple[Sort, ...]


def _check_non_negative(name: str, value: int | None) -> None:
    if value is not None and value < 0:
        raise InvalidArgumentError(f"{name} must be >= 0, got {value}")


class QueryHandle(abc.ABC, Generic[T]):
    """Structural query over one entity kind, built through chained mutators."""

    def __init__(self, entity: Any) -> None:
        self.entity = entity
        self.predicates: list[Predicate] = []
        self.sorts: list[Sort] = []
        self.offset: int | None = None
        self.limit: int | None = None
        self.projection: Projection = None
        self.result_transform: ResultTransform | None = None

    def add_predicate(self, predicate: Predicate) -> "QueryHandle[T]":
        self.predicates.append(predicate)
        return self

    def add_sort(self, field: str, direction: SortDirection | str = SortDirection.ASC) -> "QueryHandle[T]":
        if not isinstance(direction, SortDirection):
            direction = SortDirection(direction.lower())
        self.sorts.append(Sort(field, direction))
        return self

    def set_offset(self, offset: int | None) -> "QueryHandle[T]":
        _check_non_negative("offset", offset)
        self.offset = offset
        return self

    def set_limit(self, limit: int | None) -> "QueryHandle[T]":
        _check_non_negative("limit", limit)
        self.limit = limit
        return self

    def set_projection(self, projection: Projection) -> "QueryHandle[T]":
        self.projection = projection
        return self

    def set_result_transform(self, transform: ResultTransform | None) -> "QueryHandle[T]":
        self.result_transform = transform
        return self

    # Shape snapshot ---------------------------------------------------
    def shape(self) -> QueryShape:
        return QueryShape(self.projection, self.result_transform, tuple(self.sorts))

    def restore_shape(self, shape: QueryShape) -> "QueryHandle[T]":
        self.projection = shape.projection
        self.result_transform = shape.result_transform
        self.sorts = list(shape.sorts)
        return self

    def copy(self) -> "QueryHandle[T]":
        """Shallow clone with independent predicate and sort lists."""
        clone = copy.copy(self)
        clone.predicates = list(self.predicates)
        clone.sorts = list(self.sorts)
        return clone

    # Execution --------------------------------------------------------
    @abc.abstractmethod
    def _fetch_rows(self) -> list[Any]:
        """Run the query and return raw rows (entities, tuples or a count row)."""

    def fetch_all(self) -> list[Any]:
        rows = self._fetch_rows()
        if self.result_transform is None:
            return rows
        return [self.result_transform(row) for row in rows]

    def fetch_scalar(self) -> Any:
        """First column of the first row, or ``None`` when nothing matched."""
        rows = self._fetch_rows()
        if not rows:
            return None
        return _first_column(rows[0])


class TextQueryHandle(abc.ABC):
    """Caller-written query text with positional (``?``) or named placeholders."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.positional: dict[int, Any] = {}
        self.named: dict[str, Any] = {}
        self.offset: int | None = None
        self.limit: int | None = None

    def bind_positional(self, index: int, value: Any) -> "TextQueryHandle":
        self.positional[index] = value
        return self

    def bind_named(self, name: str, value: Any) -> "TextQueryHandle":
        self.named[name] = value
        return self

    def set_offset(self, offset: int | None) -> "TextQueryHandle":
        _check_non_negative("offset", offset)
        self.offset = offset
        return self

    def set_limit(self, limit: int | None) -> "TextQueryHandle":
        _check_non_negative("limit", limit)
        self.limit = limit
        return self

    @abc.abstractmethod
    def fetch_all(self) -> list[Any]: ...

    @abc.abstractmethod
    def execute_update(self) -> int:
        """Run the text as a bulk update/delete statement; returns the affected row count."""

    def fetch_scalar(self) -> Any:
        rows = self.fetch_all()
        if not rows:
            return None
        return _first_column(rows[0])


class QueryExecutor(abc.ABC):
    """Port: creates structural and textual queries against a backing store.

    Also loads, saves and deletes single entities by identifier.
    """

    @abc.abstractmethod
    def create_predicate_query(self, entity: Any) -> QueryHandle[Any]: ...

    @abc.abstractmethod
    def create_text_query(self, text: str) -> TextQueryHandle: ...

    @abc.abstractmethod
    def id_name(self, entity: Any) -> str:
        """Name of the identifier property of *entity*."""

    @abc.abstractmethod
    def get(self, entity: Any, ident: Any) -> Any | None: ...

    @abc.abstractmethod
    def save(self, entity: Any, obj: Any) -> None:
        """Insert *obj*, or update the stored row with the same identifier."""

    @abc.abstractmethod
    def delete(self, entity: Any, obj: Any) -> None: ...


def _first_column(row: Any) -> Any:
    if isinstance(row, tuple):
        return row[0] if row else None
    return row


def with_count_shape(query: QueryHandle[T]) -> tuple[QueryHandle[T], Callable[[], QueryHandle[T]]]:
    """Derive a row-count query from *query*.

    The count query is a copy carrying the same predicates, no sorts, no
    pagination, no transform and a :class:`RowCount` projection.  The
    returned ``restore`` callable re-installs the original projection,
    transform and sort list on *query* and returns it, ready for the page
    fetch.
    """
    snapshot = query.shape()
    count_query = query.copy()
    count_query.sorts = []
    count_query.offset = None
    count_query.limit = None
    count_query.projection = RowCount()
    count_query.result_transform = None

    def restore() -> QueryHandle[T]:
        return query.restore_shape(snapshot)

    return count_query, restore


__all__ = [
    "Projection",
    "Properties",
    "QueryExecutor",
    "QueryHandle",
    "QueryShape",
    "ResultTransform",
    "RowCount",
    "TextQueryHandle",
    "with_count_shape",
]
