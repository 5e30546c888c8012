"""Kernel – ORM-agnostic building blocks (errors, predicates, query ports)."""

from mp_persistence.kernel.errors import (
    BaseError,
    EntityNotFoundError,
    ExecutionError,
    FilterParseError,
    InvalidArgumentError,
    ParseError,
    UnsupportedQueryError,
)

__all__ = [
    "BaseError",
    "EntityNotFoundError",
    "ExecutionError",
    "FilterParseError",
    "InvalidArgumentError",
    "ParseError",
    "UnsupportedQueryError",
]
