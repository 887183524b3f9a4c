"""Domain core: the collection reconciler and its contracts."""

from __future__ import annotations

from .capabilities import SoftDeletable
from .equivalency import Equivalence, EquivalenceGenerator, KeyEquivalence, key_equivalence
from .reconcile import ReconcileResult, reconcile_collection

__all__ = [
    "Equivalence",
    "EquivalenceGenerator",
    "KeyEquivalence",
    "ReconcileResult",
    "SoftDeletable",
    "key_equivalence",
    "reconcile_collection",
]
