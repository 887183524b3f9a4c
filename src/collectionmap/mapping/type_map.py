"""Per type-pair mapping rules."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from collectionmap.domain.equivalency import KeyEquivalence

from .errors import MappingConfigurationError
from .members import default_factory, member_names

if TYPE_CHECKING:
    from collections.abc import Callable

    from collectionmap.domain.equivalency import Equivalence

    from .configuration import MapperConfiguration


class TypeMap[S, T]:
    """Rules for copying a ``source_type`` value onto a ``target_type`` value.

    Configured fluently, e.g.::

        config.create_map(ProductDto, Product).ignore("is_deleted").equality_comparison(
            lambda dto, entity: dto.id == entity.id
        )
    """

    def __init__(
        self,
        config: MapperConfiguration,
        source_type: type[S],
        target_type: type[T],
    ) -> None:
        self.config = config
        self.source_type = source_type
        self.target_type = target_type
        self.source_members = member_names(source_type)
        self.target_members = member_names(target_type)
        self._ignored: set[str] = set()
        self._resolvers: dict[str, Callable[[S], Any]] = {}
        self._collections: dict[str, type[Any]] = {}
        self._equivalence: Equivalence[S, T] | None = None
        self._factory: Callable[[], T] | None = None
        self._keys: set[str] = set()

    def __repr__(self) -> str:
        return f"TypeMap({self.source_type.__qualname__} -> {self.target_type.__qualname__})"

    # Fluent configuration -----------------------------------------------------

    def ignore(self, *names: str) -> TypeMap[S, T]:
        for name in names:
            self._require_target_member(name)
            self._ignored.add(name)
            self._resolvers.pop(name, None)
        return self

    def for_member(self, name: str, resolver: Callable[[S], Any]) -> TypeMap[S, T]:
        """Resolve target member ``name`` from the whole source value."""
        self._require_target_member(name)
        self._ignored.discard(name)
        self._resolvers[name] = resolver
        return self

    def for_collection(self, name: str, element_type: type[Any]) -> TypeMap[S, T]:
        """Declare the element type of a target collection member."""
        self._require_target_member(name)
        self._collections[name] = element_type
        return self

    def equality_comparison(self, equivalence: Equivalence[S, T]) -> TypeMap[S, T]:
        """Pair source and target items with ``equivalence`` inside collections."""
        self._equivalence = equivalence
        return self

    def keys(self, *names: str) -> TypeMap[S, T]:
        """Declare identity members that are only written while still unset."""
        for name in names:
            self._require_target_member(name)
            self._keys.add(name)
        return self

    def construct_using(self, factory: Callable[[], T]) -> TypeMap[S, T]:
        self._factory = factory
        return self

    def reverse_map(self) -> TypeMap[T, S]:
        return self.config.create_map(self.target_type, self.source_type)

    # Resolved rules -----------------------------------------------------------

    @property
    def equivalence(self) -> Equivalence[S, T] | None:
        if self._equivalence is not None:
            return self._equivalence
        generator = self.config.equivalence_generator
        if generator is None:
            return None
        return generator.equivalence(self.source_type, self.target_type)

    @property
    def key_members(self) -> frozenset[str]:
        """Target members that identify an item and are never overwritten once set."""
        keys = set(self._keys)
        generator = self.config.equivalence_generator
        if generator is not None:
            keys.update(generator.key_members(self.target_type))
        if isinstance(self._equivalence, KeyEquivalence):
            keys.update(self._equivalence.target_names)
        return frozenset(keys)

    def mapped_members(self) -> tuple[str, ...]:
        return tuple(
            name
            for name in self.target_members
            if name not in self._ignored and (name in self._resolvers or name in self.source_members)
        )

    def unmapped_members(self) -> tuple[str, ...]:
        return tuple(
            name
            for name in self.target_members
            if name not in self._ignored
            and name not in self._resolvers
            and name not in self.source_members
        )

    def resolve(self, source: S, name: str) -> Any:
        resolver = self._resolvers.get(name)
        if resolver is not None:
            return resolver(source)
        return getattr(source, name)

    def collection_element_type(self, name: str) -> type[Any] | None:
        return self._collections.get(name)

    def create_target(self) -> T:
        if self._factory is not None:
            return self._factory()
        return default_factory(self.target_type)

    def _require_target_member(self, name: str) -> None:
        if name not in self.target_members:
            raise MappingConfigurationError(
                f"{self.target_type.__qualname__} has no member named {name!r}"
            )
