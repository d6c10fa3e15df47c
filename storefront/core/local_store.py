# storefront/core/local_store.py
"""
Per-visitor durable local state.

Mirrors browser localStorage: string keys, JSON-serialized values, read at
page entry and written at defined transition points of the flows.
"""
import json
from typing import Any

from storefront.schemas.wishlist import UserDetails

CART_KEY = "cart"
ORDER_DETAILS_KEY = "orderDetails"
USER_DETAILS_KEY = "userDetails"


class LocalStore:
    """In-memory key/value store holding JSON strings."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get_item(self, key: str) -> Any | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set_item(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class BuyerDetailsHandoff:
    """
    Typed bridge carrying buyer details from the catalog flow to the
    wishlist flow. The local store is only the transport.
    """

    def __init__(self, store: LocalStore):
        self.store = store

    def publish(self, details: UserDetails) -> None:
        self.store.set_item(USER_DETAILS_KEY, details.model_dump(mode="json"))

    def receive(self) -> UserDetails | None:
        raw = self.store.get_item(USER_DETAILS_KEY)
        if raw is None:
            return None
        return UserDetails.model_validate(raw)

    def clear(self) -> None:
        self.store.remove_item(USER_DETAILS_KEY)
