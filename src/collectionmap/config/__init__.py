"""Configuration read from the environment."""

from __future__ import annotations

from .env import env_flag, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "env_flag",
    "get_database_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
