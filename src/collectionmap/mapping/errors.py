"""Mapping configuration errors."""

from __future__ import annotations

from collectionmap.config.errors import ConfigurationError


class MappingConfigurationError(ConfigurationError):
    """Raised when type maps are missing, duplicated, ambiguous or incomplete."""
