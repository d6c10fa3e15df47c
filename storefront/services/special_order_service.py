# storefront/services/special_order_service.py
from pydantic import ValidationError

from storefront.core.validation import FieldErrors, field_errors
from storefront.schemas.cart import CartLine
from storefront.schemas.catalog import SpecialOption
from storefront.schemas.special_order import (
    SPECIAL_REQUEST_MODELS,
    IntakeRead,
    required_fields,
)
from storefront.services.cart_service import CartEngine

PLACEHOLDER_IMAGE = "/placeholder.png"


class SpecialOptionIntake:
    """
    Request form for a special option.

    The required-field set comes from the selected option's request
    variant and is re-derived on every selection change, together with
    dropping any errors left over from the previous option.
    """

    def __init__(self, cart: CartEngine):
        self.cart = cart
        self.option: SpecialOption | None = None
        self.is_open = False
        self.errors: FieldErrors = {}

    @property
    def required_fields(self) -> tuple[str, ...]:
        return required_fields(self.option.id if self.option else None)

    def select(self, option: SpecialOption | None) -> None:
        self.option = option
        self.errors = {}
        self.is_open = option is not None

    def close(self) -> None:
        self.is_open = False
        self.errors = {}

    def submit(self, values: dict) -> CartLine | None:
        """
        Validate the form against the current option only.

        Returns the cart line that was added, or None when nothing is
        selected or validation failed (see `errors`). The cart is only
        touched on success.
        """
        if self.option is None:
            return None

        # The selected option decides the variant, not the posted values.
        values = {k: v for k, v in values.items() if k != "kind"}
        model = SPECIAL_REQUEST_MODELS[self.option.id]
        try:
            request = model.model_validate(values)
        except ValidationError as e:
            self.errors = field_errors(e)
            return None

        self.errors = {}
        line = CartLine(
            id=self.option.id,
            name=self.option.name,
            price=0,
            image=self.option.image or PLACEHOLDER_IMAGE,
            quantity=1,
            special_data=request,
        )
        added = self.cart.add_item(line, 1)
        self.is_open = False
        return added

    def read(self) -> IntakeRead:
        return IntakeRead(
            option=self.option,
            is_open=self.is_open,
            required_fields=list(self.required_fields),
            errors=self.errors,
        )
