"""Execution errors surfaced from the query execution backend."""

from __future__ import annotations

from typing import Any

from mp_persistence.kernel.errors.base import BaseError


class ExecutionError(BaseError):
    """The backing query engine failed; ``cause`` holds the original exception."""

    default_code = "execution_error"


class EntityNotFoundError(ExecutionError):
    """No row of ``resource`` has the identifier ``identifier``."""

    default_code = "not_found"

    def __init__(self, resource: str, identifier: Any = None, **kwargs: Any) -> None:
        msg = f"{resource} not found"
        if identifier is not None:
            msg = f"{resource} '{identifier}' not found"
        detail = {"resource": resource, "identifier": identifier}
        detail.update(kwargs.pop("detail", None) or {})
        super().__init__(msg, detail=detail, **kwargs)
        self.resource = resource
        self.identifier = identifier


__all__ = ["EntityNotFoundError", "ExecutionError"]
