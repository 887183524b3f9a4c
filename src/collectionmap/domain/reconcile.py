"""Reconcile a target collection against a sequence of source items.

Responsibilities:
- pair every existing target with at most one equivalent source item
- update matched targets in place, so their identity survives the call
- create one target per unmatched source item
- soft-delete orphaned targets that support it, remove the others

The reconciler performs no I/O. Persisting the mutated collection is left to the
caller (usually by committing the surrounding unit of work).
"""

from __future__ import annotations

import logging
from collections.abc import MutableSet
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .capabilities import SoftDeletable

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, MutableSequence

    from .equivalency import Equivalence

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconcileResult[S, T]:
    """Outcome of one reconciliation run."""

    updated: list[tuple[S, T]] = field(default_factory=list)
    inserted: list[T] = field(default_factory=list)
    deleted: list[T] = field(default_factory=list)
    soft_deleted: list[T] = field(default_factory=list)

    @property
    def orphaned(self) -> list[T]:
        return [*self.deleted, *self.soft_deleted]

    @property
    def changed(self) -> bool:
        """Whether the collection gained, lost or flagged any item."""
        return bool(self.inserted or self.deleted or self.soft_deleted)

    def summary(self) -> str:
        return (
            f"updated={len(self.updated)} inserted={len(self.inserted)} "
            f"deleted={len(self.deleted)} soft_deleted={len(self.soft_deleted)}"
        )


def reconcile_collection[S, T](
    sources: Iterable[S],
    targets: MutableSequence[T] | MutableSet[T],
    *,
    equivalent: Equivalence[S, T],
    copy_fields: Callable[[S, T], T],
    create_target: Callable[[], T],
) -> ReconcileResult[S, T]:
    """Make ``targets`` hold one item per source, matching items via ``equivalent``.

    Each target, in iteration order, claims the first equivalent source that has
    not been claimed yet. Ambiguous predicates are not detected: whichever target
    comes first wins. Errors raised by ``equivalent`` or ``copy_fields`` propagate
    and leave the collection partially reconciled.
    """

    result: ReconcileResult[S, T] = ReconcileResult()
    pending = list(sources)
    consumed = [False] * len(pending)
    orphans: list[T] = []

    for target in list(targets):
        index = _first_match(pending, consumed, target, equivalent)
        if index is None:
            orphans.append(target)
            continue
        consumed[index] = True
        source = pending[index]
        copy_fields(source, target)
        result.updated.append((source, target))

    for index, source in enumerate(pending):
        if consumed[index]:
            continue
        target = copy_fields(source, create_target())
        _add(targets, target)
        result.inserted.append(target)

    for orphan in orphans:
        if isinstance(orphan, SoftDeletable):
            orphan.delete()
            result.soft_deleted.append(orphan)
        else:
            _remove(targets, orphan)
            result.deleted.append(orphan)

    log.debug("Reconciled collection: %s", result.summary())
    return result


def _first_match[S, T](
    pending: list[S],
    consumed: list[bool],
    target: T,
    equivalent: Equivalence[S, T],
) -> int | None:
    for index, source in enumerate(pending):
        if consumed[index]:
            continue
        if equivalent(source, target):
            return index
    return None


def _add[T](targets: MutableSequence[T] | MutableSet[T], item: T) -> None:
    if isinstance(targets, MutableSet):
        targets.add(item)
    else:
        targets.append(item)


def _remove[T](targets: MutableSequence[T] | MutableSet[T], item: T) -> None:
    if isinstance(targets, MutableSet):
        targets.discard(item)
        return
    # remove by identity; entities may define value equality
    for index, existing in enumerate(targets):
        if existing is item:
            del targets[index]
            return
