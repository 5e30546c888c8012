"""Application repository – paged queries over a query executor."""
from mp_persistence.application.repository.count import check_bindings, prepare_count_query
from mp_persistence.application.repository.paged import PagedRepository

__all__ = ["PagedRepository", "check_bindings", "prepare_count_query"]
