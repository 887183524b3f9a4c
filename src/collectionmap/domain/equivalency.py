"""Equivalence predicates used to pair source items with existing targets."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


type Equivalence[S, T] = Callable[[S, T], bool]


class EquivalenceGenerator(Protocol):
    """Derive a default equivalence for a type pair (e.g. from ORM primary keys)."""

    def key_members(self, target_type: type[Any]) -> tuple[str, ...]: ...

    def equivalence(
        self,
        source_type: type[Any],
        target_type: type[Any],
    ) -> Equivalence[Any, Any] | None: ...


class KeyEquivalence:
    """Match when every key attribute of the target equals the source's.

    A source whose key is unset (``None``) never matches: it describes a new item.
    """

    __slots__ = ("source_names", "target_names")

    def __init__(self, target_names: Sequence[str], source_names: Sequence[str] | None = None):
        if not target_names:
            raise ValueError("key equivalence needs at least one key member")
        resolved_source = tuple(source_names) if source_names is not None else tuple(target_names)
        if len(resolved_source) != len(target_names):
            raise ValueError("source and target key members must have the same length")
        self.target_names = tuple(target_names)
        self.source_names = resolved_source

    def __call__(self, source: object, target: object) -> bool:
        for source_name, target_name in zip(self.source_names, self.target_names, strict=True):
            value = getattr(source, source_name, None)
            if value is None or value != getattr(target, target_name, None):
                return False
        return True

    def source_key(self, source: object) -> tuple[Any, ...] | None:
        """Return the source's key values, or ``None`` while any of them is unset."""

        values = tuple(getattr(source, name, None) for name in self.source_names)
        if any(value is None for value in values):
            return None
        return values

    def __repr__(self) -> str:
        pairs = ", ".join(
            f"{source}={target}" if source != target else target
            for source, target in zip(self.source_names, self.target_names, strict=True)
        )
        return f"KeyEquivalence({pairs})"


def key_equivalence(
    *target_names: str,
    source_names: Sequence[str] | None = None,
) -> KeyEquivalence:
    """Build a key-equality predicate over the given attribute names."""

    return KeyEquivalence(target_names, source_names)
