"""SQLAlchemy adapter package for collectionmap."""

from __future__ import annotations

from .equivalency import PrimaryKeyEquivalenceGenerator, primary_key_members
from .persistence import Persistence, persist
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "Persistence",
    "PrimaryKeyEquivalenceGenerator",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "configured_engine",
    "is_started",
    "persist",
    "primary_key_members",
    "shutdown",
    "startup",
]
