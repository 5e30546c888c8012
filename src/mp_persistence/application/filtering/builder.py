"""Application filtering – turn property filters into query predicates.

Predicates returned by :func:`build_from_filters` are meant to be ANDed by
the consuming query, while a single filter naming several properties becomes
one OR group across them::

    EQ_S_status=active  +  LIKE_S_name_OR_login=jo
    ->  status = 'active'  AND  (name LIKE '%jo%' OR login LIKE '%jo%')
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from mp_persistence.application.filtering.property_filter import MatchType, PropertyFilter
from mp_persistence.kernel.errors import InvalidArgumentError
from mp_persistence.kernel.query import Comparison, Operator, Or, Predicate

_OPERATORS: dict[MatchType, Operator] = {
    MatchType.EQ: Operator.EQ,
    MatchType.NE: Operator.NE,
    MatchType.GT: Operator.GT,
    MatchType.GE: Operator.GE,
    MatchType.LT: Operator.LT,
    MatchType.LE: Operator.LE,
    MatchType.LIKE: Operator.CONTAINS,
}


def build_criterion(name: str, value: Any, match_type: MatchType) -> Predicate:
    """Build the predicate comparing property *name* with *value*.

    ``LIKE`` matches anywhere in the property and only accepts strings.
    """
    if match_type is MatchType.LIKE and not isinstance(value, str):
        raise InvalidArgumentError(
            f"LIKE on '{name}' needs a string value, got {type(value).__name__}",
            detail={"property": name, "value_type": type(value).__name__},
        )
    return Comparison(name, _OPERATORS[match_type], value)


def build_from_filters(filters: Iterable[PropertyFilter]) -> list[Predicate]:
    """One predicate per filter; multi-property filters become an OR group."""
    predicates: list[Predicate] = []
    for f in filters:
        if not f.has_multi_properties:
            predicates.append(build_criterion(f.property_name, f.match_value, f.match_type))
            continue
        predicates.append(
            Or(tuple(build_criterion(name, f.match_value, f.match_type) for name in f.property_names))
        )
    return predicates


__all__ = ["build_criterion", "build_from_filters"]
