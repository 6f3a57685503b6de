"""Typed readers for environment overrides."""

from __future__ import annotations

import os
from typing import Final

from .errors import InvalidConfigurationValueError

_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


def _raw(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def positive_int_env(name: str, default: int) -> int:
    """Optional positive integer override, ``default`` when unset or blank."""

    raw = _raw(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise InvalidConfigurationValueError(name, raw, "a positive integer") from exc
    if value < 1:
        raise InvalidConfigurationValueError(name, raw, "a positive integer")
    return value


def bool_env(name: str, *, default: bool = False) -> bool:
    raw = _raw(name)
    if raw is None:
        return default
    if raw.lower() in _TRUE:
        return True
    if raw.lower() in _FALSE:
        return False
    raise InvalidConfigurationValueError(name, raw, "a boolean flag")
