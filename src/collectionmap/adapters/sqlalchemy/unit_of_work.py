"""Unit of work that applies mapped DTOs inside one SQLAlchemy session."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from collectionmap.config.storage import get_database_config

from .persistence import Persistence

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy import MetaData
    from sqlalchemy.engine import Engine

    from collectionmap.mapping import Mapper

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """The adapter was used before ``startup()`` or a session is in the wrong state."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    factory: sessionmaker[Session] | None = field(default=None, repr=False)

    def configure(self, engine: Engine) -> None:
        self.engine = engine
        # committed entities stay readable after the block, e.g. to return generated ids
        self.factory = sessionmaker(bind=engine, expire_on_commit=False)

    def reset(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.factory = None

    def session_factory(self) -> sessionmaker[Session]:
        if self.factory is None:
            raise StartupError(
                "collectionmap SQLAlchemy adapter is not started; "
                "call collectionmap.adapters.sqlalchemy.startup() first"
            )
        return self.factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    metadata: MetaData | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to ``engine`` or to an engine built from configuration.

    Without an explicit engine, ``database_uri`` or else :func:`get_database_config`
    decides where to connect. When ``metadata`` is given its tables are created on
    the engine (existing tables are kept).
    """

    if _STATE.engine is not None and not force:
        raise StartupError("SQLAlchemy adapter already started; pass force=True to rebind")

    if engine is None:
        config = get_database_config()
        engine = create_engine(database_uri or config.uri, echo=config.echo)
    if metadata is not None:
        log.info("Creating %d table(s) on %s", len(metadata.tables), engine.url)
        metadata.create_all(engine)

    _STATE.configure(engine)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the bound engine; mainly for tests and application teardown."""
    _STATE.reset()


class SqlAlchemyUnitOfWork:
    """One session per ``with`` block; rolled back when the block raises.

    Nothing is committed implicitly. Call :meth:`commit` inside the block::

        with SqlAlchemyUnitOfWork() as uow:
            uow.persist(Product, mapper).insert_or_update(dto)
            uow.commit()
    """

    def __init__(self) -> None:
        self._factory = _STATE.session_factory()
        self._session: Session | None = None
        self._contexts: dict[tuple[type[Any], int], Persistence[Any]] = {}

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already active")
        self._session = self._factory()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                log.debug("Rolling back unit of work after %s", exc_type.__name__)
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._contexts.clear()
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session is only available inside the with block")
        return self._session

    def persist[TEntity](self, entity_type: type[TEntity], mapper: Mapper) -> Persistence[TEntity]:
        key = (entity_type, id(mapper))
        context = self._contexts.get(key)
        if context is None:
            context = Persistence(self.session, entity_type, mapper)
            self._contexts[key] = context
        return context

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from collectionmap.domain.ports import UnitOfWork

    _uow_check: UnitOfWork = SqlAlchemyUnitOfWork()
