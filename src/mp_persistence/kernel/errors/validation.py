"""Argument errors, rejected before any query reaches the executor."""

from __future__ import annotations

from typing import Any

from mp_persistence.kernel.errors.base import BaseError


class InvalidArgumentError(BaseError):
    """A caller-supplied argument violates a precondition."""

    default_code = "invalid_argument"


class UnsupportedQueryError(InvalidArgumentError):
    """Query text falls outside what the textual count derivation handles."""

    default_code = "unsupported_query"

    def __init__(self, message: str, *, query_text: str, **kwargs: Any) -> None:
        super().__init__(message, detail={"query_text": query_text}, **kwargs)
        self.query_text = query_text


__all__ = ["InvalidArgumentError", "UnsupportedQueryError"]
