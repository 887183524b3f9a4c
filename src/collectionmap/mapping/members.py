"""Discover the public members of mappable types."""

from __future__ import annotations

import dataclasses
from typing import Any

from pydantic import BaseModel

from .errors import MappingConfigurationError

COLLECTION_TYPES: tuple[type[Any], ...] = (list, tuple, set, frozenset)


def member_names(cls: type[Any]) -> tuple[str, ...]:
    """Return the mappable member names of a dataclass or pydantic model.

    Underscore-prefixed attributes are private state and never mapped.
    """

    if dataclasses.is_dataclass(cls):
        names = [item.name for item in dataclasses.fields(cls)]
    elif issubclass(cls, BaseModel):
        names = list(cls.model_fields)
    else:
        raise MappingConfigurationError(
            f"{cls.__qualname__} is neither a dataclass nor a pydantic model"
        )
    return tuple(name for name in names if not name.startswith("_"))


def default_factory[T](cls: type[T]) -> T:
    """Build an empty instance of ``cls`` without running validation."""

    if issubclass(cls, BaseModel):
        return cls.model_construct()
    return cls()


def is_collection(value: object) -> bool:
    return isinstance(value, COLLECTION_TYPES)
