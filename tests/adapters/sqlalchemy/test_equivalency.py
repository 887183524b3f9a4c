from __future__ import annotations

from dataclasses import dataclass

import pytest

from collectionmap.adapters.sqlalchemy import PrimaryKeyEquivalenceGenerator, primary_key_members
from collectionmap.domain import KeyEquivalence
from tests.support.catalog import SoftDeleteProduct, Thing, ThingDto
from tests.support.mappings import start_mappers


@dataclass
class TitleOnlyDto:
    title: str | None = None


@dataclass
class ExternalThingDto:
    thing_id: int | None = None
    title: str | None = None


@pytest.fixture(autouse=True)
def mapped_catalog() -> None:
    start_mappers()


def test_primary_key_members_of_mapped_and_plain_types() -> None:
    assert primary_key_members(Thing) == ("id",)
    assert primary_key_members(SoftDeleteProduct) == ("id",)
    assert primary_key_members(ThingDto) == ()


def test_generator_builds_key_equivalence_for_mapped_targets() -> None:
    generator = PrimaryKeyEquivalenceGenerator()

    equivalence = generator.equivalence(ThingDto, Thing)

    assert isinstance(equivalence, KeyEquivalence)
    assert equivalence.target_names == ("id",)
    assert equivalence(ThingDto(id=1), Thing(id=1, title="other"))
    assert not equivalence(ThingDto(id=None), Thing(id=None))


def test_generator_skips_unmapped_targets_and_keyless_sources() -> None:
    generator = PrimaryKeyEquivalenceGenerator()

    assert generator.equivalence(Thing, ThingDto) is None
    assert generator.equivalence(TitleOnlyDto, Thing) is None


def test_generator_honours_renamed_source_keys() -> None:
    generator = PrimaryKeyEquivalenceGenerator(source_names={"id": "thing_id"})

    equivalence = generator.equivalence(ExternalThingDto, Thing)

    assert equivalence is not None
    assert equivalence(ExternalThingDto(thing_id=4), Thing(id=4))
    assert not equivalence(ExternalThingDto(thing_id=4), Thing(id=5))
