# storefront/routers/wishlist.py
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from storefront.schemas.wishlist import UserDetails, WishlistRead, WishlistSubmit
from storefront.services.storefront_service import StorefrontSession
from storefront.services.wishlist_service import WishlistPipeline
from storefront.sessions import get_storefront

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


def _redirect(pipeline: WishlistPipeline) -> RedirectResponse | None:
    if pipeline.redirect_to is None:
        return None
    return RedirectResponse(
        url=pipeline.redirect_to,
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    )


@router.put("/details", response_model=UserDetails, response_model_exclude_none=True)
def hand_off_details(
    payload: UserDetails,
    session: StorefrontSession = Depends(get_storefront),
):
    """
    Store the buyer's details for the wishlist page (written by the
    catalog flow before navigating to the wishlist).
    """
    session.start_wishlist(payload)
    return payload


@router.get("", response_model=WishlistRead, response_model_exclude_none=True)
def enter_wishlist(session: StorefrontSession = Depends(get_storefront)):
    """
    Open the wishlist page.

    Without handed-off buyer details the page is unreachable: 307
    redirect to the catalog entry point.
    """
    pipeline = session.enter_wishlist()
    redirect = _redirect(pipeline)
    if redirect:
        return redirect
    return pipeline.read()


@router.post("/items", response_model=WishlistRead, response_model_exclude_none=True)
def add_wishlist_item(
    payload: dict[str, Any] = Body(...),
    session: StorefrontSession = Depends(get_storefront),
):
    """
    Add an item. Only the chosen category's optional fields are kept.

    422 with per-field messages when validation fails.
    """
    pipeline = session.enter_wishlist()
    redirect = _redirect(pipeline)
    if redirect:
        return redirect

    if not pipeline.add_item(payload):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Wishlist item validation failed", "fields": pipeline.errors},
        )
    return pipeline.read()


@router.delete("/items/{index}", response_model=WishlistRead, response_model_exclude_none=True)
def remove_wishlist_item(
    index: int,
    session: StorefrontSession = Depends(get_storefront),
):
    """
    Remove the item at `index` (0-based).
    """
    pipeline = session.enter_wishlist()
    redirect = _redirect(pipeline)
    if redirect:
        return redirect

    pipeline.remove_item(index)
    return pipeline.read()


@router.post("/submit", response_model=WishlistRead, response_model_exclude_none=True)
async def submit_wishlist(
    payload: WishlistSubmit,
    session: StorefrontSession = Depends(get_storefront),
):
    """
    Send the wishlist with optional feedback.

    On failure `error_message` is set and items are kept for a retry.
    On success the visitor is sent back to the catalog after 3 seconds.
    """
    pipeline = session.enter_wishlist()
    redirect = _redirect(pipeline)
    if redirect:
        return redirect

    return await pipeline.submit(payload.feedback)
