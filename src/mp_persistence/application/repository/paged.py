"""Application repository – PagedRepository.

Combines predicates, property filters and :class:`Page` objects into
queries against a :class:`QueryExecutor`.  Every validation failure is raised
before a query is created, so a rejected call never reaches the backend.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Generic, TypeVar

from mp_persistence.application.filtering import MatchType, PropertyFilter, build_criterion, build_from_filters
from mp_persistence.application.pagination import Page
from mp_persistence.application.repository.count import PLACEHOLDER, check_bindings, prepare_count_query
from mp_persistence.kernel.errors import (
    EntityNotFoundError,
    ExecutionError,
    InvalidArgumentError,
    UnsupportedQueryError,
)
from mp_persistence.kernel.query import (
    Comparison,
    Operator,
    Predicate,
    QueryExecutor,
    QueryHandle,
    Sort,
    SortDirection,
    TextQueryHandle,
    resolve_property,
    with_count_shape,
)
from mp_persistence.observability.logging import get_logger

T = TypeVar("T")


def _check_page_size(page: Page[Any]) -> None:
    if page.page_size <= 0:
        raise InvalidArgumentError(
            f"page_size must be > 0, got {page.page_size}",
            detail={"page_size": page.page_size},
        )


def _eq_predicates(names: Sequence[str], values: Sequence[Any]) -> list[Predicate]:
    if len(names) != len(values):
        raise InvalidArgumentError(
            f"got {len(names)} property names but {len(values)} values",
            detail={"names": list(names)},
        )
    return [Comparison(name, Operator.EQ, value) for name, value in zip(names, values)]


class PagedRepository(Generic[T]):
    """Generic query repository for one entity kind.

    Args:
        executor: Backend that creates and runs queries; borrowed per call.
        entity: Entity kind descriptor understood by *executor* (a mapped
            class for SQLAlchemy, a collection name for the in-memory backend).
    """

    def __init__(self, executor: QueryExecutor, entity: Any) -> None:
        self._executor = executor
        self._entity = entity
        self._entity_name: str = getattr(entity, "__name__", str(entity))
        self._log = get_logger(__name__, entity=self._entity_name)

    @property
    def entity(self) -> Any:
        return self._entity

    # Entity operations ------------------------------------------------
    @property
    def id_name(self) -> str:
        """Identifier property name of the entity kind."""
        return self._executor.id_name(self._entity)

    def get(self, ident: Any) -> T | None:
        return self._executor.get(self._entity, ident)

    def load(self, ident: Any) -> T:
        """Like :meth:`get`, but a missing row raises ``EntityNotFoundError``."""
        obj = self.get(ident)
        if obj is None:
            raise EntityNotFoundError(self._entity_name, ident)
        return obj

    def save(self, obj: T) -> None:
        """Insert *obj* or update the row with the same identifier."""
        self._executor.save(self._entity, obj)
        self._log.debug("entity.saved", entity_id=resolve_property(obj, self.id_name))

    def delete(self, obj: T) -> None:
        self._executor.delete(self._entity, obj)
        self._log.debug("entity.deleted", entity_id=resolve_property(obj, self.id_name))

    def delete_by_id(self, ident: Any) -> None:
        self.delete(self.load(ident))

    # Structural queries -----------------------------------------------
    def create_query(self, *predicates: Predicate) -> QueryHandle[T]:
        query: QueryHandle[T] = self._executor.create_predicate_query(self._entity)
        for predicate in predicates:
            query.add_predicate(predicate)
        return query

    def find(self, *predicates: Predicate) -> list[T]:
        return self.create_query(*predicates).fetch_all()

    def find_by(self, name: str, value: Any, match_type: MatchType = MatchType.EQ) -> list[T]:
        return self.find(build_criterion(name, value, match_type))

    def find_by_names(self, names: Sequence[str], values: Sequence[Any]) -> list[T]:
        """Rows whose every ``names[i]`` equals ``values[i]``."""
        return self.find(*_eq_predicates(names, values))

    def find_by_filters(self, filters: Iterable[PropertyFilter]) -> list[T]:
        return self.find(*build_from_filters(filters))

    def find_unique(self, *predicates: Predicate) -> T | None:
        rows = self.create_query(*predicates).set_limit(1).fetch_all()
        return rows[0] if rows else None

    def find_unique_by(self, name: str, value: Any) -> T | None:
        return self.find_unique(Comparison(name, Operator.EQ, value))

    def find_unique_by_names(self, names: Sequence[str], values: Sequence[Any]) -> T | None:
        return self.find_unique(*_eq_predicates(names, values))

    def get_all(self, order_by: str | None = None, ascending: bool = True) -> list[T]:
        query = self.create_query()
        if order_by:
            query.add_sort(order_by, SortDirection.ASC if ascending else SortDirection.DESC)
        return query.fetch_all()

    def count_result(self, query: QueryHandle[Any]) -> int:
        """Count the rows *query* matches and leave its shape as it was.

        The count runs on a copy without sorts, pagination or transform;
        the original projection, transform and sort list are restored even
        when the count fails.
        """
        count_query, restore = with_count_shape(query)
        try:
            total = count_query.fetch_scalar()
        finally:
            restore()
        return int(total) if total is not None else 0

    def find_page(self, page: Page[T], *predicates: Predicate) -> Page[T]:
        """Fill *page* with one page of rows matching all *predicates*."""
        _check_page_size(page)
        sorts: list[Sort] = page.sorts

        query = self.create_query(*predicates)
        if page.auto_count:
            page.total_count = self.count_result(query)
            self._log.debug("query.count", total_count=page.total_count)

        query.set_offset(page.first - 1).set_limit(page.page_size)
        for sort in sorts:
            query.add_sort(sort.field, sort.direction)
        page.result = query.fetch_all()
        self._log.debug(
            "query.page",
            page_no=page.page_no,
            page_size=page.page_size,
            returned=len(page.result),
        )
        return page

    def get_all_page(self, page: Page[T]) -> Page[T]:
        return self.find_page(page)

    def find_page_by(
        self,
        page: Page[T],
        name: str,
        value: Any,
        match_type: MatchType = MatchType.EQ,
    ) -> Page[T]:
        return self.find_page(page, build_criterion(name, value, match_type))

    def find_page_by_filters(self, page: Page[T], filters: Iterable[PropertyFilter]) -> Page[T]:
        return self.find_page(page, *build_from_filters(filters))

    # Textual queries --------------------------------------------------
    def create_text_query(
        self,
        query_text: str,
        *values: Any,
        params: Mapping[str, Any] | None = None,
    ) -> TextQueryHandle:
        check_bindings(query_text, values, params)
        query = self._executor.create_text_query(query_text)
        for index, value in enumerate(values):
            query.bind_positional(index, value)
        for name, value in (params or {}).items():
            query.bind_named(name, value)
        return query

    def find_by_query(self, query_text: str, *values: Any, params: Mapping[str, Any] | None = None) -> list[Any]:
        return self.create_text_query(query_text, *values, params=params).fetch_all()

    def find_unique_by_query(self, query_text: str, *values: Any, params: Mapping[str, Any] | None = None) -> Any:
        rows = self.create_text_query(query_text, *values, params=params).set_limit(1).fetch_all()
        return rows[0] if rows else None

    def batch_execute(self, statement: str, *values: Any, params: Mapping[str, Any] | None = None) -> int:
        """Run a bulk ``update``/``delete`` statement; returns the affected row count."""
        affected = self.create_text_query(statement, *values, params=params).execute_update()
        self._log.debug("query.batch", statement=statement, affected=affected)
        return affected

    def count_by_query(self, query_text: str, *values: Any, params: Mapping[str, Any] | None = None) -> int:
        """Run the derived ``select count(*)`` form of *query_text*."""
        count_text = prepare_count_query(query_text)
        if values and count_text.count(PLACEHOLDER) != query_text.count(PLACEHOLDER):
            raise UnsupportedQueryError(
                "positional placeholders outside the from clause cannot be auto counted",
                query_text=query_text,
            )
        query = self.create_text_query(count_text, *values, params=params)
        try:
            total = query.fetch_scalar()
        except Exception as exc:
            self._log.warning("query.count_failed", count_query=count_text, error=repr(exc))
            raise ExecutionError(
                f"query can't be auto counted, query is: {count_text}",
                detail={"count_query": count_text},
                cause=exc,
            ) from exc
        return int(total) if total is not None else 0

    def find_page_by_query(
        self,
        page: Page[Any],
        query_text: str,
        *values: Any,
        params: Mapping[str, Any] | None = None,
    ) -> Page[Any]:
        """Fill *page* from a textual query; the page's sort order is not applied."""
        _check_page_size(page)
        check_bindings(query_text, values, params)
        if page.auto_count:
            page.total_count = self.count_by_query(query_text, *values, params=params)
            self._log.debug("query.count", total_count=page.total_count)

        query = self.create_text_query(query_text, *values, params=params)
        query.set_offset(page.first - 1).set_limit(page.page_size)
        page.result = query.fetch_all()
        self._log.debug(
            "query.page",
            page_no=page.page_no,
            page_size=page.page_size,
            returned=len(page.result),
        )
        return page


__all__ = ["PagedRepository"]
