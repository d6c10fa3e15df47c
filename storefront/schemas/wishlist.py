# storefront/schemas/wishlist.py
from typing import Annotated, Literal, Union

from pydantic import ConfigDict, Field, TypeAdapter, field_validator
from sqlmodel import SQLModel

from storefront.schemas.order import ContactDetails, ContactMethod

WishlistCategory = Literal["Local Store", "Online", "Home Pickup"]

# Optional fields each category is allowed to carry.
CATEGORY_FIELDS: dict[str, tuple[str, ...]] = {
    "Online": ("link",),
    "Local Store": ("store_address", "store_phone"),
    "Home Pickup": ("pickup_address", "pickup_phone"),
}


class UserDetails(ContactDetails):
    """
    Buyer details handed from the catalog flow to the wishlist flow.
    """

    model_config = ConfigDict(extra="ignore")

    preferred_contact: ContactMethod | None = None
    feedback: str | None = None

    @field_validator("name", "phone", "address")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


# -------- Finalized items (one variant per category) --------


class WishlistItemBase(SQLModel):
    item_name: str
    quantity: str
    weight: str


class OnlineWishlistItem(WishlistItemBase):
    category: Literal["Online"] = "Online"
    link: str | None = None


class LocalStoreWishlistItem(WishlistItemBase):
    category: Literal["Local Store"] = "Local Store"
    store_address: str | None = None
    store_phone: str | None = None


class HomePickupWishlistItem(WishlistItemBase):
    category: Literal["Home Pickup"] = "Home Pickup"
    pickup_address: str | None = None
    pickup_phone: str | None = None


WishlistItem = Annotated[
    Union[OnlineWishlistItem, LocalStoreWishlistItem, HomePickupWishlistItem],
    Field(discriminator="category"),
]

_WISHLIST_ITEM = TypeAdapter(WishlistItem)


class WishlistItemCreate(SQLModel):
    """
    Wishlist item form. Carries every category's optional fields;
    `finalize()` keeps only the chosen category's non-blank ones.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    item_name: str
    quantity: str
    weight: str
    category: WishlistCategory
    link: str | None = None
    store_address: str | None = None
    store_phone: str | None = None
    pickup_address: str | None = None
    pickup_phone: str | None = None

    @field_validator("item_name")
    @classmethod
    def item_name_required(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Item name is required")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Quantity is required")
        if not v.isdigit() or int(v) < 1:
            raise ValueError("Quantity must be a whole number of at least 1")
        return v

    @field_validator("weight")
    @classmethod
    def weight_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Weight is required")
        return v

    def finalize(self):
        """Return the category variant with irrelevant and blank fields dropped."""
        data: dict[str, str] = {
            "item_name": self.item_name,
            "quantity": self.quantity,
            "weight": self.weight,
            "category": self.category,
        }
        for name in CATEGORY_FIELDS[self.category]:
            value = getattr(self, name)
            if value and value.strip():
                data[name] = value.strip()
        return _WISHLIST_ITEM.validate_python(data)


class WishlistSubmission(SQLModel):
    """
    Write-once record handed to the submission sink.
    """

    user_details: UserDetails
    items: list[WishlistItem]


class WishlistSubmit(SQLModel):
    feedback: str | None = None


class WishlistRead(SQLModel):
    """
    Current state of the wishlist page.
    """

    user_details: UserDetails
    items: list[WishlistItem]
    errors: dict[str, str]
    is_submitting: bool
    succeeded: bool
    error_message: str | None = None
