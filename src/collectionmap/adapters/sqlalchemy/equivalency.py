"""Derive equivalences from SQLAlchemy primary keys."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect

from collectionmap.domain.equivalency import KeyEquivalence, key_equivalence
from collectionmap.mapping.members import member_names

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.orm import Mapper as OrmMapper

log = logging.getLogger(__name__)


def primary_key_members(entity_type: type[Any]) -> tuple[str, ...]:
    """Return the attribute names of the primary key of a mapped class.

    Unmapped classes (plain DTOs) have no primary key and yield ``()``.
    """

    mapper: OrmMapper[Any] | None = inspect(entity_type, raiseerr=False)
    if mapper is None:
        return ()
    return tuple(mapper.get_property_by_column(column).key for column in mapper.primary_key)


class PrimaryKeyEquivalenceGenerator:
    """Match DTOs to entities on the entity's primary key.

    The DTO must expose the key members under the same names, or under the names
    given in ``source_names`` (entity member -> DTO member).
    """

    def __init__(self, source_names: Mapping[str, str] | None = None) -> None:
        self.source_names = dict(source_names or {})

    def key_members(self, target_type: type[Any]) -> tuple[str, ...]:
        return primary_key_members(target_type)

    def equivalence(self, source_type: type[Any], target_type: type[Any]) -> KeyEquivalence | None:
        keys = self.key_members(target_type)
        if not keys:
            return None
        source_keys = [self.source_names.get(name, name) for name in keys]
        available = member_names(source_type)
        missing = [name for name in source_keys if name not in available]
        if missing:
            log.debug(
                "No key equivalence for %s -> %s, source lacks %s",
                source_type.__qualname__,
                target_type.__qualname__,
                ", ".join(missing),
            )
            return None
        return key_equivalence(*keys, source_names=source_keys)
