# storefront/schemas/order.py
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel

from storefront.schemas.cart import CartLine

ContactMethod = Literal["Text", "WhatsApp", "Call", "Email"]
CheckoutState = Literal["idle", "collecting", "submitting", "succeeded"]


class ContactDetails(SQLModel):
    """
    Buyer contact fields shared by orders and wishlists.
    """

    name: str
    email: EmailStr
    phone: str
    address: str

    @field_validator("feedback", check_fields=False)
    @classmethod
    def normalize_feedback(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class BuyerDetails(ContactDetails):
    """
    Order confirmation form.

    Rules:
      - name cannot be empty
      - email must be a valid EmailStr
      - phone at least 10 characters
      - address at least 5 characters
      - preferred_contact one of Text / WhatsApp / Call / Email
    """

    model_config = ConfigDict(extra="forbid")

    preferred_contact: ContactMethod
    feedback: str | None = None

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("phone")
    @classmethod
    def phone_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 10:
            raise ValueError("Phone number must be at least 10 digits")
        return v

    @field_validator("address")
    @classmethod
    def address_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 5:
            raise ValueError("Please enter a valid address")
        return v


class OrderSubmission(BuyerDetails):
    """
    Write-once record handed to the submission sink.
    """

    cart: list[CartLine]
    order_date: datetime

    @property
    def total_amount(self) -> float:
        return sum(line.line_total for line in self.cart)


class SubmissionResult(SQLModel):
    """
    Outcome reported by the submission sink. There is no partial success.
    """

    success: bool
    message: str


class CheckoutRead(SQLModel):
    """
    Current state of the order confirmation flow.
    """

    state: CheckoutState
    cart_count: int
    errors: dict[str, str]
    last_result: SubmissionResult | None = None
