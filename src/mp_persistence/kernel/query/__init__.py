"""Kernel query – predicates, sort primitives and execution ports."""
from mp_persistence.kernel.query.predicates import And, Comparison, Not, Operator, Or, Predicate, resolve_property
from mp_persistence.kernel.query.ports import (
    Projection,
    Properties,
    QueryExecutor,
    QueryHandle,
    QueryShape,
    ResultTransform,
    RowCount,
    TextQueryHandle,
    with_count_shape,
)
from mp_persistence.kernel.query.sort import Sort, SortDirection

__all__ = [
    "And",
    "Comparison",
    "Not",
    "Operator",
    "Or",
    "Predicate",
    "Projection",
    "Properties",
    "QueryExecutor",
    "QueryHandle",
    "QueryShape",
    "ResultTransform",
    "RowCount",
    "Sort",
    "SortDirection",
    "TextQueryHandle",
    "resolve_property",
    "with_count_shape",
]
