# storefront/schemas/catalog.py
from typing import Literal

from sqlmodel import SQLModel, Field

SpecialOptionId = Literal["local-store", "home-pickup", "online-order"]
IconType = Literal["Store", "Home", "Online"]


class CatalogItem(SQLModel):
    """
    A purchasable catalog entry. Loaded once at startup, never mutated.
    """

    id: str
    name: str
    price: float = Field(ge=0)
    image: str
    weight: str | None = None
    pack_size: str | None = None


class Category(SQLModel):
    id: str
    name: str
    items: list[CatalogItem] = []


class SpecialOption(SQLModel):
    """
    A non-catalog service request. `price` is a display placeholder only;
    the real price is agreed out-of-band.
    """

    id: SpecialOptionId
    name: str
    description: str
    icon_type: IconType
    price: str
    image: str | None = None


class CategoryRead(SQLModel):
    """Category listing without items."""

    id: str
    name: str
    item_count: int


class CatalogPage(SQLModel):
    """
    One page of the browsing grid.

    `entries` mixes special options and catalog items when no category
    is selected (special options first).
    """

    category_id: str | None
    search: str
    page: int
    total_pages: int
    total_entries: int
    entries: list[SpecialOption | CatalogItem]
