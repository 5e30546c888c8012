"""Application filtering – PropertyFilter, MatchType, PropertyType.

A filter spec packs a match type, a value type and one or more property
names into a single request-parameter-friendly string::

    LIKE_S_NAME_OR_LOGINNAME   ->  name LIKE %v%  OR  loginname LIKE %v%
    GE_D_CREATEDAT             ->  createdat >= datetime(v)
"""
from __future__ import annotations

import dataclasses
import datetime
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable

from mp_persistence.kernel.coercion import parse_bool, parse_float, parse_int
from mp_persistence.kernel.errors import FilterParseError, InvalidArgumentError

OR_SEPARATOR = "_OR_"

DATE_FORMATS: tuple[str, ...] = ("%Y-%m-%d", "%Y-%m-%d %H:%M:%S")


class MatchType(str, Enum):
    """How the property is compared with the filter value."""

    EQ = "EQ"
    NE = "NE"
    GT = "GT"
    GE = "GE"
    LT = "LT"
    LE = "LE"
    LIKE = "LIKE"


class PropertyType(Enum):
    """Scalar type the raw filter value is coerced to, keyed by its spec letter."""

    B = ("Boolean", bool)
    I = ("Integer", int)  # noqa: E741
    F = ("Float", float)
    N = ("Double", float)
    L = ("Long", int)
    S = ("String", str)
    D = ("Date", datetime.datetime)

    def __init__(self, label: str, python_type: type) -> None:
        self.label = label
        self.python_type = python_type

    def coerce(self, raw: str) -> Any:
        """Convert *raw* to this type; raises ``ValueError`` when it does not fit."""
        return _COERCERS[self](raw)


def _to_datetime(raw: str) -> datetime.datetime:
    text = raw.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"does not match any of {', '.join(DATE_FORMATS)}")


_COERCERS: dict[PropertyType, Callable[[str], Any]] = {
    PropertyType.B: parse_bool,
    PropertyType.I: parse_int,
    PropertyType.F: parse_float,
    PropertyType.N: parse_float,
    PropertyType.L: parse_int,
    PropertyType.S: lambda raw: raw,
    PropertyType.D: _to_datetime,
}


@dataclasses.dataclass(frozen=True)
class PropertyFilter:
    """One declarative predicate parsed from a filter spec and a raw value."""

    match_type: MatchType
    property_type: PropertyType
    property_names: tuple[str, ...]
    match_value: Any

    def __post_init__(self) -> None:
        if not self.property_names:
            raise InvalidArgumentError("PropertyFilter needs at least one property name")

    @classmethod
    def parse(cls, filter_spec: str, raw_value: str) -> "PropertyFilter":
        """Parse ``<MATCHTYPE>_<PROPTYPE>_<NAME>(_OR_<NAME>)*`` and coerce *raw_value*.

        Raises:
            FilterParseError: unknown match type, unknown property type,
                missing property name, or a value that does not coerce.
        """
        match_token, _, rest = filter_spec.partition("_")
        try:
            match_type = MatchType[match_token]
        except KeyError as exc:
            raise FilterParseError(
                f"Filter '{filter_spec}' has an invalid match type '{match_token}'",
                code="invalid_match_type",
                filter_spec=filter_spec,
                token=match_token,
            ) from exc

        type_token, _, names_part = rest.partition("_")
        try:
            property_type = PropertyType[type_token]
        except KeyError as exc:
            raise FilterParseError(
                f"Filter '{filter_spec}' has an invalid property type '{type_token}'",
                code="invalid_property_type",
                filter_spec=filter_spec,
                token=type_token,
            ) from exc

        names = tuple(names_part.split(OR_SEPARATOR))
        if not all(names):
            raise FilterParseError(
                f"Filter '{filter_spec}' is missing a property name",
                code="missing_property_name",
                filter_spec=filter_spec,
                token=names_part,
            )

        if raw_value is None:
            raise FilterParseError(
                f"Filter '{filter_spec}' has no value to convert to {property_type.label}",
                code="invalid_value",
                filter_spec=filter_spec,
                token="",
            )
        try:
            value = property_type.coerce(raw_value)
        except ValueError as exc:
            raise FilterParseError(
                f"Value '{raw_value}' of filter '{filter_spec}' is not a valid {property_type.label}",
                code="invalid_value",
                filter_spec=filter_spec,
                token=raw_value,
                detail={"target_type": property_type.label},
            ) from exc

        return cls(match_type, property_type, names, value)

    @property
    def property_name(self) -> str:
        """The only property name; raises when the filter names several."""
        if len(self.property_names) != 1:
            raise InvalidArgumentError(
                f"Filter compares {len(self.property_names)} properties, not exactly one",
                detail={"property_names": list(self.property_names)},
            )
        return self.property_names[0]

    @property
    def has_multi_properties(self) -> bool:
        return len(self.property_names) > 1

    @property
    def property_class(self) -> type:
        return self.property_type.python_type


def build_property_filters(params: Mapping[str, Any], prefix: str = "filter_") -> list[PropertyFilter]:
    """Collect filters from request parameters named ``<prefix><filter spec>``.

    Blank values are skipped; a list value uses its first element.

    Example::

        build_property_filters({"filter_EQ_S_name": "bob", "page": "2"})
        # -> [PropertyFilter(EQ, S, ("name",), "bob")]
    """
    filters: list[PropertyFilter] = []
    for key, value in params.items():
        if not key.startswith(prefix):
            continue
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if value is None or not str(value).strip():
            continue
        filters.append(PropertyFilter.parse(key[len(prefix):], str(value)))
    return filters

__all__ = [
    "DATE_FORMATS",
    "MatchType",
    "OR_SEPARATOR",
    "PropertyFilter",
    "PropertyType",
    "build_property_filters",
]
