"""Entities and DTOs shared by the persistence tests."""

# switch off type warnings because of default_factory=list
# pyright: reportUnknownVariableType=false

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel

from collectionmap.domain import SoftDeletable


@dataclass(eq=False, kw_only=True)
class Thing:
    id: int | None = None
    title: str | None = None

    def __str__(self) -> str:
        return self.title or ""


@dataclass(kw_only=True)
class ThingDto:
    id: int | None = None
    title: str | None = None


class ThingModel(BaseModel):
    """Boundary payload for things, validated on input."""

    id: int | None = None
    title: str


@dataclass(eq=False, kw_only=True)
class SoftDeleteProduct(SoftDeletable):
    id: int | None = None
    name: str | None = None
    is_deleted: bool = False

    def delete(self) -> None:
        self.is_deleted = True


@dataclass(eq=False, kw_only=True)
class SoftDeleteThing:
    id: int | None = None
    title: str | None = None
    products: list[SoftDeleteProduct] = field(default_factory=list)


@dataclass(kw_only=True)
class SoftDeleteProductDto:
    id: int | None = None
    name: str | None = None


@dataclass(kw_only=True)
class SoftDeleteThingDto:
    id: int | None = None
    title: str | None = None
    products: list[SoftDeleteProductDto] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class HardDeleteProduct:
    id: int | None = None
    name: str | None = None


@dataclass(eq=False, kw_only=True)
class HardDeleteThing:
    id: int | None = None
    title: str | None = None
    products: list[HardDeleteProduct] = field(default_factory=list)


@dataclass(kw_only=True)
class HardDeleteProductDto:
    id: int | None = None
    name: str | None = None


@dataclass(kw_only=True)
class HardDeleteThingDto:
    id: int | None = None
    title: str | None = None
    products: list[HardDeleteProductDto] = field(default_factory=list)
