"""DTO to entity mapping with equivalency-aware collections."""

from __future__ import annotations

from .configuration import MapperConfiguration
from .errors import MappingConfigurationError
from .mapper import Mapper
from .members import member_names
from .type_map import TypeMap

__all__ = [
    "Mapper",
    "MapperConfiguration",
    "MappingConfigurationError",
    "TypeMap",
    "member_names",
]
