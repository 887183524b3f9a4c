"""Apply DTOs to the entity set of a SQLAlchemy session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from collectionmap.domain.capabilities import SoftDeletable
from collectionmap.domain.equivalency import KeyEquivalence
from collectionmap.mapping import MappingConfigurationError

from .equivalency import primary_key_members

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from collectionmap.mapping import Mapper, TypeMap

log = logging.getLogger(__name__)


class Persistence[TEntity]:
    """Insert, update or remove ``entity_type`` rows from DTOs.

    Changes are staged on the session. Nothing is flushed or committed here.
    """

    def __init__(self, session: Session, entity_type: type[TEntity], mapper: Mapper) -> None:
        self.session = session
        self.entity_type = entity_type
        self.mapper = mapper

    def insert_or_update(self, source: object) -> TEntity:
        """Update the entity equivalent to ``source`` or add a new one."""

        existing = self.find(source)
        if existing is not None:
            self.mapper.map_onto(source, existing)
            log.debug("Updated %s from %r", self.entity_type.__qualname__, source)
            return existing

        entity = self.mapper.map(source, self.entity_type)
        self.session.add(entity)
        log.debug("Added %s from %r", self.entity_type.__qualname__, source)
        return entity

    def remove(self, source: object) -> TEntity | None:
        """Soft-delete or delete the entity equivalent to ``source``, if any."""

        existing = self.find(source)
        if existing is None:
            return None
        if isinstance(existing, SoftDeletable):
            existing.delete()
            log.debug("Soft-deleted %s from %r", self.entity_type.__qualname__, source)
        else:
            self.session.delete(existing)
            log.debug("Deleted %s from %r", self.entity_type.__qualname__, source)
        return existing

    def find(self, source: object) -> TEntity | None:
        type_map = self._type_map(source)
        equivalence = type_map.equivalence
        if equivalence is None:
            raise MappingConfigurationError(
                f"No equivalence for {type_map!r}; configure equality_comparison() "
                "or an equivalence generator"
            )

        if (
            isinstance(equivalence, KeyEquivalence)
            and equivalence.target_names == primary_key_members(self.entity_type)
        ):
            key = equivalence.source_key(source)
            if key is None:
                return None
            return self.session.get(self.entity_type, key[0] if len(key) == 1 else key)

        with self.session.no_autoflush:
            for entity in self.session.scalars(select(self.entity_type)):
                if equivalence(source, entity):
                    return entity
        return None

    def _type_map(self, source: object) -> TypeMap[Any, TEntity]:
        return self.mapper.config.get_type_map(type(source), self.entity_type)


def persist[TEntity](
    session: Session,
    entity_type: type[TEntity],
    mapper: Mapper,
) -> Persistence[TEntity]:
    """Return a :class:`Persistence` for ``entity_type`` bound to ``session``."""
    return Persistence(session, entity_type, mapper)
