"""SQLAlchemy adapter – compile kernel predicates into column expressions."""
from __future__ import annotations

import operator
from typing import Any, Callable

from sqlalchemy import and_, false, inspect, not_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from mp_persistence.kernel.errors import InvalidArgumentError
from mp_persistence.kernel.query import And, Comparison, Not, Operator, Or, Predicate


def _contains(column: Any, value: Any) -> Any:
    # ``%`` and ``_`` in the value match literally
    return column.contains(value, autoescape=True)


_COMPARATORS: dict[Operator, Callable[[Any, Any], Any]] = {
    Operator.EQ: operator.eq,
    Operator.NE: operator.ne,
    Operator.GT: operator.gt,
    Operator.GE: operator.ge,
    Operator.LT: operator.lt,
    Operator.LE: operator.le,
    Operator.CONTAINS: _contains,
}


def column_for(entity: Any, name: str) -> Any:
    """Mapped attribute *name* of *entity*; unknown names are rejected."""
    if name not in inspect(entity).attrs:
        raise InvalidArgumentError(
            f"{entity.__name__} has no mapped property '{name}'",
            detail={"entity": entity.__name__, "property": name},
        )
    return getattr(entity, name)


def compile_predicate(entity: Any, predicate: Predicate) -> ColumnElement[bool]:
    if isinstance(predicate, Comparison):
        return _COMPARATORS[predicate.op](column_for(entity, predicate.name), predicate.value)
    if isinstance(predicate, And):
        clauses = [compile_predicate(entity, p) for p in predicate.predicates]
        return and_(*clauses) if clauses else true()
    if isinstance(predicate, Or):
        clauses = [compile_predicate(entity, p) for p in predicate.predicates]
        return or_(*clauses) if clauses else false()
    if isinstance(predicate, Not):
        return not_(compile_predicate(entity, predicate.predicate))
    raise InvalidArgumentError(f"unsupported predicate type {type(predicate).__name__}")


__all__ = ["column_for", "compile_predicate"]
