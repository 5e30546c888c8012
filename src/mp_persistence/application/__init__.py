"""Application – filters, pagination and repositories (backend-agnostic)."""

from mp_persistence.application.filtering import (
    MatchType,
    PropertyFilter,
    PropertyType,
    build_criterion,
    build_from_filters,
    build_property_filters,
)
from mp_persistence.application.pagination import Page, Sort, SortDirection
from mp_persistence.application.repository import PagedRepository, prepare_count_query

__all__ = [
    "MatchType",
    "Page",
    "PagedRepository",
    "PropertyFilter",
    "PropertyType",
    "Sort",
    "SortDirection",
    "build_criterion",
    "build_from_filters",
    "build_property_filters",
    "prepare_count_query",
]
