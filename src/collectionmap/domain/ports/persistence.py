"""Ports for applying DTOs to persisted entity sets."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PersistenceContext[TSource, TEntity](Protocol):
    """Insert, update or remove entities of one type from DTOs.

    Implementations stage changes only; committing them is the unit of work's job.
    """

    def insert_or_update(self, source: TSource) -> TEntity: ...

    def remove(self, source: TSource) -> TEntity | None: ...
