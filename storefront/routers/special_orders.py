# storefront/routers/special_orders.py
from fastapi import APIRouter, Depends, HTTPException, status

from storefront.schemas.cart import CartSummary
from storefront.schemas.special_order import (
    IntakeRead,
    SpecialOptionSelect,
    SpecialOrderSubmit,
)
from storefront.services.storefront_service import StorefrontSession
from storefront.sessions import get_storefront

router = APIRouter(prefix="/special-orders", tags=["Special orders"])


@router.get("", response_model=IntakeRead)
def get_intake(session: StorefrontSession = Depends(get_storefront)):
    """
    Current intake form: selected option, required fields, field errors.
    """
    return session.intake.read()


@router.post("/select", response_model=IntakeRead)
def select_option(
    payload: SpecialOptionSelect,
    session: StorefrontSession = Depends(get_storefront),
):
    """
    Select a special option (or clear with null).

    The required-field set is re-derived and stale errors are dropped.
    """
    session.select_special_option(payload.option_id)
    return session.intake.read()


@router.post("/submit", response_model=CartSummary)
def submit_special_order(
    payload: SpecialOrderSubmit,
    session: StorefrontSession = Depends(get_storefront),
):
    """
    Validate the request against the selected option and add it to the cart.

    Errors:
      - 400 if no option is selected
      - 422 with per-field messages if a required field is missing
    """
    if session.intake.option is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No special option selected",
        )

    line = session.submit_special_order(payload.values)
    if line is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": "Special order validation failed",
                "fields": session.intake.errors,
            },
        )
    return session.cart_summary()


@router.post("/close", response_model=IntakeRead)
def close_intake(session: StorefrontSession = Depends(get_storefront)):
    """
    Dismiss the intake form without touching the cart.
    """
    session.intake.close()
    return session.intake.read()
