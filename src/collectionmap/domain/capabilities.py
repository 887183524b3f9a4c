"""Optional capabilities a mapped target type can declare."""

from __future__ import annotations

from abc import ABC, abstractmethod


class SoftDeletable(ABC):
    """Target that is flagged as removed instead of being dropped from its collection.

    Entities opt in by subclassing. Reconciliation detects the capability with
    ``isinstance`` and calls :meth:`delete` on orphaned items, leaving them in the
    collection so the flag change is persisted as an update.
    """

    __slots__ = ()

    @abstractmethod
    def delete(self) -> None:
        """Transition the item into its logically deleted state."""
        ...
