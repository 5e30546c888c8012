"""In-memory adapter – query executor over plain Python lists."""
from mp_persistence.adapters.memory.executor import (
    ExecutedQuery,
    InMemoryQuery,
    InMemoryQueryExecutor,
    InMemoryTextQuery,
)

__all__ = ["ExecutedQuery", "InMemoryQuery", "InMemoryQueryExecutor", "InMemoryTextQuery"]
