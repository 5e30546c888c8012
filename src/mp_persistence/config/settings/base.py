"""Config settings – Settings base class and PersistenceSettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from mp_persistence.config.validation.errors import InvalidSettingValueError


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings."""

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass
class PersistenceSettings(Settings):
    """Settings for the query layer, read from ``MP_PERSISTENCE_*`` variables."""

    _prefix: ClassVar[str] = "MP_PERSISTENCE"

    database_url: str = "sqlite://"
    echo: bool = False
    default_page_size: int = 20
    max_page_size: int = 1000
    filter_prefix: str = "filter_"

    def _validate(self) -> None:
        if self.default_page_size <= 0:
            raise InvalidSettingValueError("default_page_size", self.default_page_size, "must be > 0")
        if self.max_page_size < self.default_page_size:
            raise InvalidSettingValueError(
                "max_page_size", self.max_page_size, "must be >= default_page_size"
            )
        if not self.filter_prefix:
            raise InvalidSettingValueError("filter_prefix", self.filter_prefix, "must not be empty")


__all__ = ["PersistenceSettings", "Settings"]
