"""Copy values between mapped types and reconcile nested collections."""

from __future__ import annotations

import logging
from collections.abc import MutableSequence, MutableSet
from typing import TYPE_CHECKING, Any

from collectionmap.domain.reconcile import ReconcileResult, reconcile_collection

from .members import is_collection

if TYPE_CHECKING:
    from collections.abc import Iterable

    from collectionmap.domain.equivalency import Equivalence

    from .configuration import MapperConfiguration
    from .type_map import TypeMap

log = logging.getLogger(__name__)

_MISSING = object()
_UNBUILT: Any = object()


class Mapper:
    """Apply the type maps of one :class:`MapperConfiguration`."""

    def __init__(self, config: MapperConfiguration) -> None:
        self.config = config

    def map[T](self, source: object, target_type: type[T]) -> T:
        """Build a new ``target_type`` value from ``source``."""

        type_map = self.config.get_type_map(type(source), target_type)
        target = type_map.create_target()
        self._copy(type_map, source, target)
        return target

    def map_onto[T](self, source: object, target: T) -> T:
        """Copy ``source`` onto an existing ``target`` in place and return it.

        Key members already set on ``target`` are left untouched. Members are only
        assigned when the value differs, so mapping identical values is a no-op.
        """

        type_map = self.config.get_type_map(type(source), type(target))
        self._copy(type_map, source, target)
        return target

    def map_collection[T](
        self,
        sources: Iterable[object],
        targets: MutableSequence[T] | MutableSet[T],
        element_type: type[T],
    ) -> ReconcileResult[Any, T]:
        """Make ``targets`` reflect ``sources`` and report what changed."""

        return self._map_elements(list(sources), targets, element_type)

    # Member copy --------------------------------------------------------------

    def _copy(self, type_map: TypeMap[Any, Any], source: object, target: object) -> None:
        keys = type_map.key_members
        for name in type_map.mapped_members():
            value = type_map.resolve(source, name)
            if name in keys:
                _copy_key(target, name, value)
            elif is_collection(value):
                self._copy_collection(type_map, name, value, target)
            else:
                self._copy_value(name, value, target)

    def _copy_value(self, name: str, value: object, target: object) -> None:
        if value is None:
            _assign(target, name, value)
            return
        current = getattr(target, name, None)
        if current is not None:
            nested_map = self.config.find_type_map(type(value), type(current))
            if nested_map is not None:
                self._copy(nested_map, value, current)
                return
        nested_map = self.config.type_map_for_source(type(value))
        if nested_map is not None:
            value = self.map(value, nested_map.target_type)
        _assign(target, name, value)

    def _copy_collection(
        self,
        type_map: TypeMap[Any, Any],
        name: str,
        values: Any,
        target: object,
    ) -> None:
        sources = list(values)
        current = getattr(target, name, None)
        element_type = self._element_type(type_map, name, sources, current)
        if element_type is None:
            _assign(target, name, _plain_copy(values))
            return
        if isinstance(current, MutableSequence | MutableSet):
            self._map_elements(sources, current, element_type)
            return
        # immutable or missing: reconcile a working list, then store it back
        items: list[Any] = list(current) if is_collection(current) else []
        self._map_elements(sources, items, element_type)
        _assign(target, name, _rebuild(current, items))

    def _element_type(
        self,
        type_map: TypeMap[Any, Any],
        name: str,
        sources: list[Any],
        current: Any,
    ) -> type[Any] | None:
        declared = type_map.collection_element_type(name)
        if declared is not None:
            return declared
        for item in sources:
            element_map = self.config.type_map_for_source(type(item))
            if element_map is not None:
                return element_map.target_type
        # nothing to read from the sources (e.g. all removed): look at what is there
        if is_collection(current):
            for item in current:
                if self.config.maps_to(type(item)):
                    return type(item)
        return None

    # Collections --------------------------------------------------------------

    def _map_elements[T](
        self,
        sources: list[Any],
        targets: MutableSequence[T] | MutableSet[T],
        element_type: type[T],
    ) -> ReconcileResult[Any, T]:
        maps_by_type: dict[type[Any], TypeMap[Any, T]] = {}
        for item in sources:
            if type(item) not in maps_by_type:
                maps_by_type[type(item)] = self.config.get_type_map(type(item), element_type)

        equivalences: dict[type[Any], Equivalence[Any, T]] = {}
        for source_type, type_map in maps_by_type.items():
            equivalence = type_map.equivalence
            if equivalence is None:
                return self._replace_elements(sources, targets, element_type)
            equivalences[source_type] = equivalence
        if not self.config.collection_mappers_enabled:
            return self._replace_elements(sources, targets, element_type)

        def equivalent(source: Any, target: T) -> bool:
            return equivalences[type(source)](source, target)

        def copy_fields(source: Any, target: T) -> T:
            if target is _UNBUILT:
                # each source type may bring its own construct_using factory
                target = maps_by_type[type(source)].create_target()
            return self.map_onto(source, target)

        def create_target() -> T:
            return _UNBUILT

        return reconcile_collection(
            sources,
            targets,
            equivalent=equivalent,
            copy_fields=copy_fields,
            create_target=create_target,
        )

    def _replace_elements[T](
        self,
        sources: list[Any],
        targets: MutableSequence[T] | MutableSet[T],
        element_type: type[T],
    ) -> ReconcileResult[Any, T]:
        result: ReconcileResult[Any, T] = ReconcileResult()
        result.deleted.extend(targets)
        targets.clear()
        for source in sources:
            item = self.map(source, element_type)
            if isinstance(targets, MutableSet):
                targets.add(item)
            else:
                targets.append(item)
            result.inserted.append(item)
        log.debug("Replaced collection of %s: %s", element_type.__qualname__, result.summary())
        return result


def _copy_key(target: object, name: str, value: object) -> None:
    if value is None:
        return
    if getattr(target, name, None) is None:
        setattr(target, name, value)


def _assign(target: object, name: str, value: object) -> None:
    current = getattr(target, name, _MISSING)
    if current is not _MISSING and current == value:
        return
    setattr(target, name, value)


def _plain_copy(values: Any) -> Any:
    if isinstance(values, frozenset):
        return frozenset(values)
    if isinstance(values, set):
        return set(values)
    if isinstance(values, tuple):
        return tuple(values)
    return list(values)


def _rebuild(current: object, items: list[Any]) -> Any:
    if isinstance(current, tuple):
        return tuple(items)
    if isinstance(current, frozenset):
        return frozenset(items)
    return items
