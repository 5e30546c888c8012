"""Application pagination – page request/result and sort primitives."""
from mp_persistence.application.pagination.page import ASC, DESC, Page
from mp_persistence.kernel.query.sort import Sort, SortDirection

__all__ = ["ASC", "DESC", "Page", "Sort", "SortDirection"]
