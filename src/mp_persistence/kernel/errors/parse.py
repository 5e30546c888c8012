"""Parse errors: malformed filter specs and value coercion failures."""

from __future__ import annotations

from typing import Any

from mp_persistence.kernel.errors.base import BaseError


class ParseError(BaseError):
    """Untyped caller input could not be turned into a typed value."""

    default_code = "parse_error"


class FilterParseError(ParseError):
    """A filter spec string (``LIKE_S_NAME_OR_LOGINNAME``) or its value is malformed.

    ``token`` is the offending substring; ``filter_spec`` the whole spec.
    """

    default_code = "filter_parse_error"

    def __init__(
        self,
        message: str,
        *,
        filter_spec: str,
        token: str,
        **kwargs: Any,
    ) -> None:
        detail = {"filter_spec": filter_spec, "token": token}
        detail.update(kwargs.pop("detail", None) or {})
        super().__init__(message, detail=detail, **kwargs)
        self.filter_spec = filter_spec
        self.token = token


__all__ = ["FilterParseError", "ParseError"]
