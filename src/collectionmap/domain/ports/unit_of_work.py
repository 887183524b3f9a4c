"""Unit-of-work abstraction around one persistence session."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from collectionmap.mapping import Mapper

    from .persistence import PersistenceContext


@runtime_checkable
class UnitOfWork(Protocol):
    """Transactional boundary for staged inserts, updates and deletions."""

    def __enter__(self) -> UnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def persist[TEntity](
        self,
        entity_type: type[TEntity],
        mapper: Mapper,
    ) -> PersistenceContext[Any, TEntity]: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
