# storefront/schemas/special_order.py
"""
Special-order request variants.

Each special option has its own request model declaring exactly the fields
it requires. `SpecialRequest` is the tagged union over them, discriminated
by `kind`, and is what a special cart line carries as `special_data`.
"""
from typing import Annotated, Any, Literal, Union

from pydantic import AnyUrl, ConfigDict, Field, TypeAdapter, ValidationError, ValidationInfo, field_validator
from sqlmodel import SQLModel

from storefront.schemas.catalog import SpecialOption

# field -> (message, minimum length after trimming)
_REQUIRED_RULES: dict[str, tuple[str, int]] = {
    "item_name": ("Item name is required", 1),
    "total_weight": ("Total weight is required", 1),
    "quantity": ("Quantity is required", 1),
    "store_address": ("Store address is required", 5),
    "store_phone": ("Store phone number is required", 10),
    "home_address": ("Home address is required", 5),
    "home_phone": ("Home phone number is required", 10),
    "online_link": ("Online link is required", 5),
}

_URL = TypeAdapter(AnyUrl)


class SpecialRequestBase(SQLModel):
    """
    Fields shared by every special request.

    Unknown keys are ignored so the intake form can post its full field set
    and only the selected option's fields are validated.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    item_name: str
    quantity: str

    @field_validator(*_REQUIRED_RULES, check_fields=False)
    @classmethod
    def required(cls, v: str, info: ValidationInfo) -> str:
        message, min_length = _REQUIRED_RULES[info.field_name]
        v = v.strip()
        if len(v) < min_length:
            raise ValueError(message)
        return v


class LocalStoreRequest(SpecialRequestBase):
    kind: Literal["local-store"] = "local-store"
    total_weight: str
    store_address: str
    store_phone: str


class HomePickupRequest(SpecialRequestBase):
    kind: Literal["home-pickup"] = "home-pickup"
    total_weight: str
    home_address: str
    home_phone: str


class OnlineOrderRequest(SpecialRequestBase):
    kind: Literal["online-order"] = "online-order"
    online_link: str

    @field_validator("online_link")
    @classmethod
    def well_formed_url(cls, v: str) -> str:
        try:
            _URL.validate_python(v)
        except ValidationError:
            raise ValueError("Please enter a valid URL")
        return v


SpecialRequest = Annotated[
    Union[LocalStoreRequest, HomePickupRequest, OnlineOrderRequest],
    Field(discriminator="kind"),
]

SPECIAL_REQUEST_MODELS: dict[str, type[SpecialRequestBase]] = {
    "local-store": LocalStoreRequest,
    "home-pickup": HomePickupRequest,
    "online-order": OnlineOrderRequest,
}


def required_fields(option_id: str | None) -> tuple[str, ...]:
    """Required form fields for an option id; empty when nothing is selected."""
    model = SPECIAL_REQUEST_MODELS.get(option_id) if option_id else None
    if model is None:
        return ()
    return tuple(name for name in model.model_fields if name != "kind")


# -------- API payloads --------


class SpecialOptionSelect(SQLModel):
    """Select a special option, or clear the selection with null."""

    option_id: str | None = None


class SpecialOrderSubmit(SQLModel):
    """Raw intake form values, keyed by field name."""

    values: dict[str, Any] = {}


class IntakeRead(SQLModel):
    option: SpecialOption | None
    is_open: bool
    required_fields: list[str]
    errors: dict[str, str]
