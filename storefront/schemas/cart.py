# storefront/schemas/cart.py
from sqlmodel import SQLModel, Field

from storefront.schemas.catalog import CatalogItem
from storefront.schemas.special_order import SpecialRequest


class CartLine(SQLModel):
    """
    One line of the cart.

    Catalog lines carry the item's price; special-option lines carry
    price 0 and the request in `special_data`.
    """

    id: str
    name: str
    price: float = Field(default=0, ge=0)
    image: str | None = None
    weight: str | None = None
    pack_size: str | None = None
    quantity: int = Field(ge=1)
    special_data: SpecialRequest | None = None

    @classmethod
    def from_catalog_item(cls, item: CatalogItem, quantity: int) -> "CartLine":
        return cls(
            id=item.id,
            name=item.name,
            price=item.price,
            image=item.image,
            weight=item.weight,
            pack_size=item.pack_size,
            quantity=quantity,
        )

    @property
    def line_total(self) -> float:
        if self.special_data is not None:
            return 0.0
        return self.price * self.quantity


class CartItemCreate(SQLModel):
    """
    Payload for adding a catalog item.

    When quantity is omitted the item's pending picker quantity is used.
    """

    item_id: str
    quantity: int | None = Field(default=None, gt=0)


class CartItemUpdate(SQLModel):
    """Relative quantity change for a cart line."""

    delta: int


class PendingQuantityUpdate(SQLModel):
    """Relative change of the picker quantity shown next to a catalog item."""

    delta: int


class PendingQuantityRead(SQLModel):
    item_id: str
    quantity: int


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartLine]
    total_quantity: int
    total_price: float
    cart_open: bool
