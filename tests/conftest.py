from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from collectionmap.adapters.sqlalchemy import (
    PrimaryKeyEquivalenceGenerator,
    SqlAlchemyUnitOfWork,
    shutdown,
    startup,
)
from collectionmap.mapping import Mapper, MapperConfiguration
from tests.support.catalog import (
    HardDeleteProduct,
    HardDeleteProductDto,
    HardDeleteThing,
    HardDeleteThingDto,
    SoftDeleteProduct,
    SoftDeleteProductDto,
    SoftDeleteThing,
    SoftDeleteThingDto,
    Thing,
    ThingDto,
    ThingModel,
)
from tests.support.mappings import create_all_tables, mapper_registry, start_mappers

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyUnitOfWork]]:
    startup(engine=sqlite_engine, metadata=mapper_registry.metadata, force=True)

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def catalog_config() -> MapperConfiguration:
    start_mappers()
    config = MapperConfiguration()
    config.add_collection_mappers()
    config.set_equivalence_generator(PrimaryKeyEquivalenceGenerator())
    config.create_map(ThingDto, Thing).reverse_map()
    config.create_map(ThingModel, Thing)
    config.create_map(SoftDeleteThingDto, SoftDeleteThing)
    config.create_map(SoftDeleteProductDto, SoftDeleteProduct).ignore(
        "is_deleted"
    ).equality_comparison(lambda dto, entity: dto.id == entity.id)
    config.create_map(SoftDeleteThing, SoftDeleteThingDto)
    config.create_map(SoftDeleteProduct, SoftDeleteProductDto)
    config.create_map(HardDeleteThingDto, HardDeleteThing).reverse_map()
    config.create_map(HardDeleteProductDto, HardDeleteProduct).reverse_map()
    return config


@pytest.fixture
def catalog_mapper(catalog_config: MapperConfiguration) -> Mapper:
    return Mapper(catalog_config)
