"""Explicit mapper configuration.

A :class:`MapperConfiguration` is built once by the application and handed to a
:class:`~collectionmap.mapping.mapper.Mapper`. There is no process-wide registry.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .errors import MappingConfigurationError
from .type_map import TypeMap

if TYPE_CHECKING:
    from collectionmap.domain.equivalency import EquivalenceGenerator

log = logging.getLogger(__name__)


class MapperConfiguration:
    def __init__(self) -> None:
        self._type_maps: dict[tuple[type[Any], type[Any]], TypeMap[Any, Any]] = {}
        self._collection_mappers = False
        self._equivalence_generator: EquivalenceGenerator | None = None

    def create_map[S, T](self, source_type: type[S], target_type: type[T]) -> TypeMap[S, T]:
        key = (source_type, target_type)
        if key in self._type_maps:
            raise MappingConfigurationError(
                f"Duplicate map {source_type.__qualname__} -> {target_type.__qualname__}"
            )
        type_map = TypeMap(self, source_type, target_type)
        self._type_maps[key] = type_map
        log.debug("Registered %r", type_map)
        return type_map

    def add_collection_mappers(self) -> MapperConfiguration:
        """Reconcile mapped collections by equivalence instead of replacing them."""
        self._collection_mappers = True
        return self

    def set_equivalence_generator(self, generator: EquivalenceGenerator) -> MapperConfiguration:
        """Derive equivalences for type maps without an explicit equality comparison."""
        self._equivalence_generator = generator
        return self

    @property
    def collection_mappers_enabled(self) -> bool:
        return self._collection_mappers

    @property
    def equivalence_generator(self) -> EquivalenceGenerator | None:
        return self._equivalence_generator

    @property
    def type_maps(self) -> tuple[TypeMap[Any, Any], ...]:
        return tuple(self._type_maps.values())

    def find_type_map[S, T](
        self,
        source_type: type[S],
        target_type: type[T],
    ) -> TypeMap[S, T] | None:
        for candidate in source_type.__mro__:
            type_map = self._type_maps.get((candidate, target_type))
            if type_map is not None:
                return type_map
        return None

    def get_type_map[S, T](self, source_type: type[S], target_type: type[T]) -> TypeMap[S, T]:
        type_map = self.find_type_map(source_type, target_type)
        if type_map is None:
            raise MappingConfigurationError(
                f"Missing map {source_type.__qualname__} -> {target_type.__qualname__}"
            )
        return type_map

    def type_map_for_source(self, source_type: type[Any]) -> TypeMap[Any, Any] | None:
        """Return the single type map reading from ``source_type``, if any."""
        for candidate in source_type.__mro__:
            matches = [tm for (src, _), tm in self._type_maps.items() if src is candidate]
            if len(matches) > 1:
                targets = ", ".join(sorted(tm.target_type.__qualname__ for tm in matches))
                raise MappingConfigurationError(
                    f"{source_type.__qualname__} maps to several types ({targets}); "
                    "declare the element type with for_collection()"
                )
            if matches:
                return matches[0]
        return None

    def maps_to(self, target_type: type[Any]) -> bool:
        return any(tgt is target_type for _, tgt in self._type_maps)

    def assert_configuration_is_valid(self) -> None:
        """Raise if any target member is neither mapped, resolved nor ignored."""

        problems: list[str] = []
        for type_map in self._type_maps.values():
            unmapped = type_map.unmapped_members()
            if unmapped:
                problems.append(f"{type_map!r}: {', '.join(unmapped)}")
        if problems:
            raise MappingConfigurationError("Unmapped members found:\n" + "\n".join(problems))
