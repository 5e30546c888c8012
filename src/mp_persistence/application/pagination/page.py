"""Application pagination – Page.

A :class:`Page` is both the pagination request (page number, size, sort)
and its response (result slice, total count).  Page numbers start at 1.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from mp_persistence.kernel.errors import InvalidArgumentError
from mp_persistence.kernel.query import Sort, SortDirection

if TYPE_CHECKING:
    from mp_persistence.config.settings import PersistenceSettings

T = TypeVar("T")

ASC = SortDirection.ASC.value
DESC = SortDirection.DESC.value


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


class Page(Generic[T]):
    """Offset-based pagination request and result.

    ``total_count`` is ``-1`` until a count has been run.
    """

    def __init__(
        self,
        page_size: int = -1,
        *,
        page_no: int = 1,
        order_by: str | None = None,
        order: str | None = None,
        auto_count: bool = True,
    ) -> None:
        self._page_no = 1
        self._order: str | None = None
        self.page_no = page_no
        self.page_size = page_size
        self.order_by = order_by
        if order is not None:
            self.order = order
        self.auto_count = auto_count
        self.result: list[T] = []
        self.total_count: int = -1

    @classmethod
    def from_settings(cls, settings: "PersistenceSettings", **kwargs: Any) -> "Page[T]":
        """Page sized with the configured default page size."""
        return cls(settings.default_page_size, **kwargs)

    # Request ----------------------------------------------------------
    @property
    def page_no(self) -> int:
        return self._page_no

    @page_no.setter
    def page_no(self, value: int) -> None:
        self._page_no = max(1, value)

    @property
    def order(self) -> str | None:
        return self._order

    @order.setter
    def order(self, value: str | None) -> None:
        """Comma-separated ``asc``/``desc`` tokens, case-insensitive."""
        if value is None:
            self._order = None
            return
        tokens = [t.lower() for t in _split_csv(value)]
        for token in tokens:
            if token not in (ASC, DESC):
                raise InvalidArgumentError(
                    f"order token {token} is invalid",
                    detail={"token": token, "order": value},
                )
        self._order = ",".join(tokens)

    @property
    def is_order_by_set(self) -> bool:
        return bool(_split_csv(self.order_by)) and bool(_split_csv(self._order))

    @property
    def sorts(self) -> list[Sort]:
        """``(field, direction)`` pairs in declared priority order.

        Raises ``InvalidArgumentError`` when field and direction counts differ.
        """
        if not self.is_order_by_set:
            return []
        fields = _split_csv(self.order_by)
        directions = _split_csv(self._order)
        if len(fields) != len(directions):
            raise InvalidArgumentError(
                f"order has {len(directions)} directions for {len(fields)} order_by fields",
                detail={"order_by": self.order_by, "order": self._order},
            )
        return [Sort(f, SortDirection(d)) for f, d in zip(fields, directions)]

    # Fluent setters ---------------------------------------------------
    def with_page_no(self, page_no: int) -> "Page[T]":
        self.page_no = page_no
        return self

    def with_page_size(self, page_size: int) -> "Page[T]":
        self.page_size = page_size
        return self

    def with_order_by(self, order_by: str | None) -> "Page[T]":
        self.order_by = order_by
        return self

    def with_order(self, order: str | None) -> "Page[T]":
        self.order = order
        return self

    def with_auto_count(self, auto_count: bool) -> "Page[T]":
        self.auto_count = auto_count
        return self

    # Arithmetic -------------------------------------------------------
    @property
    def first(self) -> int:
        """1-based position of the first record of this page."""
        return (self._page_no - 1) * self.page_size + 1

    @property
    def total_pages(self) -> int:
        if self.total_count < 0 or self.page_size <= 0:
            return -1
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self._page_no - 1 >= 1

    @property
    def has_next(self) -> bool:
        return self._page_no + 1 <= self.total_pages

    @property
    def previous_page(self) -> int:
        return self._page_no - 1 if self.has_previous else self._page_no

    @property
    def next_page(self) -> int:
        return self._page_no + 1 if self.has_next else self._page_no

    def map(self, fn: Callable[[T], Any]) -> "Page[Any]":
        """Return a new :class:`Page` with each result transformed by *fn*."""
        mapped: Page[Any] = Page(
            self.page_size,
            page_no=self._page_no,
            order_by=self.order_by,
            order=self._order,
            auto_count=self.auto_count,
        )
        mapped.result = [fn(item) for item in self.result]
        mapped.total_count = self.total_count
        return mapped

    def __repr__(self) -> str:
        return (
            f"Page(page_no={self._page_no}, page_size={self.page_size}, "
            f"total_count={self.total_count}, results={len(self.result)})"
        )


__all__ = ["ASC", "DESC", "Page"]
