"""Kernel error hierarchy and public re-export surface.

Hierarchy::

    BaseError
    ├── ParseError               (parse.py)
    │   └── FilterParseError
    ├── InvalidArgumentError     (validation.py)
    │   └── UnsupportedQueryError
    └── ExecutionError           (execution.py)
        └── EntityNotFoundError
"""

from mp_persistence.kernel.errors.base import BaseError
from mp_persistence.kernel.errors.execution import EntityNotFoundError, ExecutionError
from mp_persistence.kernel.errors.parse import FilterParseError, ParseError
from mp_persistence.kernel.errors.validation import InvalidArgumentError, UnsupportedQueryError

__all__ = [
    "BaseError",
    "EntityNotFoundError",
    "ExecutionError",
    "FilterParseError",
    "InvalidArgumentError",
    "ParseError",
    "UnsupportedQueryError",
]
