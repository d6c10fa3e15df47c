# storefront/routers/orders.py
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from storefront.schemas.order import CheckoutRead
from storefront.services.storefront_service import StorefrontSession
from storefront.sessions import get_storefront

router = APIRouter(prefix="/checkout", tags=["Orders"])


@router.get("", response_model=CheckoutRead)
def get_checkout(session: StorefrontSession = Depends(get_storefront)):
    """
    Current state of the order confirmation flow.
    """
    return session.checkout.read()


@router.post("/begin", response_model=CheckoutRead)
def begin_checkout(session: StorefrontSession = Depends(get_storefront)):
    """
    Open the order confirmation step.

    - 400 if the cart is empty.
    - The cart snapshot is saved to local state under `cart`.
    """
    return session.begin_checkout()


@router.post("/cancel", response_model=CheckoutRead)
def cancel_checkout(session: StorefrontSession = Depends(get_storefront)):
    """
    Abandon the confirmation step. The cart is kept.
    """
    return session.checkout.cancel()


@router.post("/submit", response_model=CheckoutRead)
async def submit_order(
    payload: dict[str, Any] = Body(...),
    session: StorefrontSession = Depends(get_storefront),
):
    """
    Submit buyer details and send the order.

    Responses:
      - 422 with per-field messages when the details are invalid
      - 409 when not collecting (e.g. a submission is already pending)
      - 200 otherwise; `last_result` tells success or failure, and on
        failure the flow is back in `collecting` for a retry
    """
    read = await session.checkout.submit(payload)
    if read.errors:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Order validation failed", "fields": read.errors},
        )
    return read


@router.post("/dismiss", response_model=CheckoutRead)
def dismiss_confirmation(session: StorefrontSession = Depends(get_storefront)):
    """
    Close the success confirmation before it closes itself.
    """
    return session.checkout.dismiss()
