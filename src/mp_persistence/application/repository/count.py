"""Application repository – textual count-query derivation.

The derivation is textual, not a parser: it locates the ``from`` and
``order by`` keywords (case-sensitive, whole words) and keeps what lies
between them::

    select u from User as u where u.age<30 order by u.age desc
    ->  select count(*) from User as u where u.age<30
"""
from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from mp_persistence.kernel.errors import InvalidArgumentError, UnsupportedQueryError

COUNT_PREFIX = "select count(*) "
PLACEHOLDER = "?"

_FROM = re.compile(r"\bfrom\b")
_ORDER_BY = re.compile(r"\border\s+by\b")


def prepare_count_query(query_text: str) -> str:
    """Return ``select count(*) <from ... up to order by>`` for *query_text*.

    Raises:
        UnsupportedQueryError: no ``from`` keyword, or ``from`` / ``order by``
            appearing more than once (subqueries, string literals).
    """
    froms = list(_FROM.finditer(query_text))
    if not froms:
        raise UnsupportedQueryError(
            "query has no 'from' clause to count over", query_text=query_text
        )
    order_bys = list(_ORDER_BY.finditer(query_text))
    if len(froms) > 1 or len(order_bys) > 1:
        raise UnsupportedQueryError(
            "query with nested 'from' or 'order by' cannot be auto counted", query_text=query_text
        )
    end = order_bys[0].start() if order_bys else len(query_text)
    if end < froms[0].start():
        raise UnsupportedQueryError(
            "query has 'order by' before 'from'", query_text=query_text
        )
    return COUNT_PREFIX + query_text[froms[0].start():end]


def check_bindings(
    query_text: str,
    values: Sequence[Any],
    params: Mapping[str, Any] | None,
) -> None:
    """Reject positional values that outnumber the ``?`` placeholders, or mixed binding styles."""
    if values and params:
        raise InvalidArgumentError(
            "bind either positional values or named params, not both",
            detail={"query_text": query_text},
        )
    placeholders = query_text.count(PLACEHOLDER)
    if len(values) > placeholders:
        raise InvalidArgumentError(
            f"query has {placeholders} placeholders but {len(values)} values were given",
            detail={"query_text": query_text, "placeholders": placeholders, "values": len(values)},
        )


__all__ = ["COUNT_PREFIX", "PLACEHOLDER", "check_bindings", "prepare_count_query"]
