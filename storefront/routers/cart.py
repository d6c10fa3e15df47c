# storefront/routers/cart.py
from fastapi import APIRouter, Depends

from storefront.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartSummary,
    PendingQuantityRead,
    PendingQuantityUpdate,
)
from storefront.services.storefront_service import StorefrontSession
from storefront.sessions import get_storefront

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartSummary)
def get_my_cart(session: StorefrontSession = Depends(get_storefront)):
    """
    Get the current cart summary.
    """
    return session.cart_summary()


@router.post("/items", response_model=CartSummary)
def add_to_cart(
    payload: CartItemCreate,
    session: StorefrontSession = Depends(get_storefront),
):
    """
    Add a catalog item to the cart and open the cart view.

    Without `quantity` the item's picker quantity is used.
    """
    return session.add_catalog_item(payload.item_id, payload.quantity)


@router.post("/items/{item_id}/pending-quantity", response_model=PendingQuantityRead)
def adjust_pending_quantity(
    item_id: str,
    payload: PendingQuantityUpdate,
    session: StorefrontSession = Depends(get_storefront),
):
    """
    Move the picker quantity shown next to a catalog item (never below 1).
    """
    quantity = session.adjust_pending_quantity(item_id, payload.delta)
    return PendingQuantityRead(item_id=item_id, quantity=quantity)


@router.patch("/items/{item_id}", response_model=CartSummary)
def update_cart_item(
    item_id: str,
    payload: CartItemUpdate,
    session: StorefrontSession = Depends(get_storefront),
):
    """
    Change a line's quantity by `delta`. Reaching 0 removes the line.
    """
    return session.update_quantity(item_id, payload.delta)


@router.delete("/items/{item_id}", response_model=CartSummary)
def remove_cart_item(
    item_id: str,
    session: StorefrontSession = Depends(get_storefront),
):
    """
    Remove a line from the cart.
    """
    return session.remove_item(item_id)


@router.post("/close", response_model=CartSummary)
def close_cart(session: StorefrontSession = Depends(get_storefront)):
    """
    Close the cart view.
    """
    return session.close_cart()
