"""Config settings – EnvSettingsLoader, DotenvSettingsLoader.

Each dataclass field of a :class:`Settings` subclass is read from
``<PREFIX>_<FIELD>`` and parsed by its annotated type.  Text that does not
parse raises :class:`InvalidSettingValueError`; booleans accept the same
strict vocabulary as filter values (``true/false``, ``yes/no``, ``1/0``,
``on/off``).
"""
from __future__ import annotations

import abc
import dataclasses
import os
import typing
from typing import Any, Callable, TypeVar

from mp_persistence.config.settings.base import Settings
from mp_persistence.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError
from mp_persistence.kernel.coercion import parse_bool, parse_float, parse_int

T = TypeVar("T", bound=Settings)

_PARSERS: dict[Any, Callable[[str], Any]] = {
    bool: parse_bool,
    int: parse_int,
    float: parse_float,
    str: lambda raw: raw,
}


def _csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parser_for(hint: Any) -> Callable[[str], Any]:
    if typing.get_origin(hint) is list:
        return _csv
    # ``X | None`` parses as ``X``
    args = [a for a in typing.get_args(hint) if a is not type(None)]
    if len(args) == 1:
        hint = args[0]
    return _PARSERS.get(hint, _PARSERS[str])


def env_key(settings_class: type[Settings], field_name: str) -> str:
    prefix = getattr(settings_class, "_prefix", "")
    return f"{prefix}_{field_name}".upper().lstrip("_")


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Load settings from OS environment variables."""

    def load(self, settings_class: type[T]) -> T:
        hints = typing.get_type_hints(settings_class)
        values: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            key = env_key(settings_class, field.name)
            raw = os.environ.get(key)
            if raw is None:
                if field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING:
                    raise MissingRequiredSettingError(key)
                continue
            try:
                values[field.name] = _parser_for(hints.get(field.name, str))(raw)
            except ValueError as exc:
                raise InvalidSettingValueError(key, raw, str(exc)) from exc

        try:
            return settings_class(**values)
        except ConfigError:
            raise
        except TypeError as exc:
            raise ConfigError(f"Failed to load {settings_class.__name__}: {exc}", cause=exc) from exc


class DotenvSettingsLoader(SettingsLoader):
    """Merge a ``.env`` file into the environment, then read it like ``EnvSettingsLoader``.

    Needs the ``dotenv`` extra (python-dotenv).
    """

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[T]) -> T:
        try:
            from dotenv import load_dotenv
        except ImportError as exc:
            raise ImportError("Install 'mp-persistence[dotenv]' to use DotenvSettingsLoader") from exc
        load_dotenv(self._env_file, override=self._override)
        return EnvSettingsLoader().load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader", "env_key"]
