"""Application filtering – declarative filter specs and predicate building."""
from mp_persistence.application.filtering.builder import build_criterion, build_from_filters
from mp_persistence.application.filtering.property_filter import (
    DATE_FORMATS,
    OR_SEPARATOR,
    MatchType,
    PropertyFilter,
    PropertyType,
    build_property_filters,
)

__all__ = [
    "DATE_FORMATS",
    "MatchType",
    "OR_SEPARATOR",
    "PropertyFilter",
    "PropertyType",
    "build_criterion",
    "build_from_filters",
    "build_property_filters",
]
