"""Read settings from the process environment."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return ``names`` from the environment; blank values count as missing."""

    values = {name: os.getenv(name, "") for name in names}
    missing = [name for name, value in values.items() if not value.strip()]
    if missing:
        raise MissingConfigurationError(missing)
    return values


def require_env_var(name: str) -> str:
    return require_env_vars([name])[name]


def env_flag(name: str, *, default: bool = False) -> bool:
    """Interpret ``name`` as a boolean switch such as ``DATABASE_ECHO=1``."""

    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(f"{name}={raw!r} is not a boolean flag")
