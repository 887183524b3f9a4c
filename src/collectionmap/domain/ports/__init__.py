"""Ports implemented by persistence adapters."""

from __future__ import annotations

from .persistence import PersistenceContext
from .unit_of_work import UnitOfWork

__all__ = ["PersistenceContext", "UnitOfWork"]
