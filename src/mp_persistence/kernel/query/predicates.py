"""Predicate model: composable boolean conditions over entity properties.

Predicates are plain values: backends either evaluate them directly
(:meth:`Predicate.is_satisfied_by`) or compile them into their own query
language (see ``adapters/sqlalchemy``).

Example::

    adults = Comparison("age", Operator.GE, 18)
    named_jo = Comparison("name", Operator.CONTAINS, "jo") | Comparison("login", Operator.CONTAINS, "jo")
    spec = adults & named_jo
"""

from __future__ import annotations

import abc
import dataclasses
import operator as _op
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable


class Operator(str, Enum):
    """Comparison operators a single-property predicate can apply."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GE = "ge"
    LT = "lt"
    LE = "le"
    CONTAINS = "contains"


def _contains(actual: Any, expected: Any) -> bool:
    return isinstance(actual, str) and expected in actual


_EVALUATORS: dict[Operator, Callable[[Any, Any], bool]] = {
    Operator.EQ: _op.eq,
    Operator.NE: _op.ne,
    Operator.GT: _op.gt,
    Operator.GE: _op.ge,
    Operator.LT: _op.lt,
    Operator.LE: _op.le,
    Operator.CONTAINS: _contains,
}


def resolve_property(candidate: Any, name: str) -> Any:
    """Read *name* from a mapping key or an attribute; ``None`` when absent."""
    if isinstance(candidate, Mapping):
        return candidate.get(name)
    return getattr(candidate, name, None)


class Predicate(abc.ABC):
    """Abstract base for predicates; provides operator overloads."""

    @abc.abstractmethod
    def is_satisfied_by(self, candidate: Any) -> bool: ...

    # Named combinators ------------------------------------------------
    def and_(self, other: "Predicate") -> "And":
        return And((self, other))

    def or_(self, other: "Predicate") -> "Or":
        return Or((self, other))

    def not_(self) -> "Not":
        return Not(self)

    # Operator overloads -----------------------------------------------
    def __and__(self, other: "Predicate") -> "And":
        return self.and_(other)

    def __or__(self, other: "Predicate") -> "Or":
        return self.or_(other)

    def __invert__(self) -> "Not":
        return self.not_()


@dataclasses.dataclass(frozen=True)
class Comparison(Predicate):
    """``<name> <op> <value>`` against one property.

    A missing or ``None`` property never satisfies a comparison, ``NE``
    included, mirroring SQL ``NULL`` semantics.
    """

    name: str
    op: Operator
    value: Any

    def is_satisfied_by(self, candidate: Any) -> bool:
        actual = resolve_property(candidate, self.name)
        if actual is None:
            return False
        return _EVALUATORS[self.op](actual, self.value)


@dataclasses.dataclass(frozen=True)
class And(Predicate):
    """Conjunction; an empty conjunction is always satisfied."""

    predicates: tuple[Predicate, ...]

    def is_satisfied_by(self, candidate: Any) -> bool:
        return all(p.is_satisfied_by(candidate) for p in self.predicates)


@dataclasses.dataclass(frozen=True)
class Or(Predicate):
    """Disjunction; an empty disjunction is never satisfied."""

    predicates: tuple[Predicate, ...]

    def is_satisfied_by(self, candidate: Any) -> bool:
        return any(p.is_satisfied_by(candidate) for p in self.predicates)


@dataclasses.dataclass(frozen=True)
class Not(Predicate):
    """Negation of a predicate."""

    predicate: Predicate

    def is_satisfied_by(self, candidate: Any) -> bool:
        return not self.predicate.is_satisfied_by(candidate)


__all__ = [
    "And",
    "Comparison",
    "Not",
    "Operator",
    "Or",
    "Predicate",
    "resolve_property",
]
