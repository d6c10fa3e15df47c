# storefront/services/storefront_service.py
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status

from storefront.core.local_store import BuyerDetailsHandoff, LocalStore
from storefront.core.scheduler import Scheduler
from storefront.repositories.catalog_repo import CatalogRepository
from storefront.schemas.cart import CartLine, CartSummary
from storefront.schemas.catalog import CatalogItem
from storefront.schemas.wishlist import UserDetails
from storefront.services.cart_service import CartEngine
from storefront.services.order_service import OrderConfirmationFlow
from storefront.services.special_order_service import SpecialOptionIntake
from storefront.services.submission_service import SubmissionService
from storefront.services.wishlist_service import WishlistPipeline


class StorefrontSession:
    """
    Everything one visitor's browser would hold.

    Responsibilities:
      - own the local store, cart engine, intake form and checkout flow
      - keep the "cart view open" contract: every successful add opens it,
        starting checkout closes it
      - keep the per-item picker quantity used by the next add
      - hand buyer details to the wishlist flow and create its page
    """

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        sink: SubmissionService,
        scheduler: Scheduler,
    ):
        self.id = uuid.uuid4().hex
        self.created_at = datetime.now(timezone.utc)
        self.catalog_repo = catalog_repo
        self.sink = sink
        self.scheduler = scheduler

        self.store = LocalStore()
        self.handoff = BuyerDetailsHandoff(self.store)
        self.cart = CartEngine()
        self.cart_open = False
        self.pending_quantities: dict[str, int] = {}
        self.intake = SpecialOptionIntake(self.cart)
        self.checkout = OrderConfirmationFlow(self.cart, self.store, sink, scheduler)
        self.wishlist: WishlistPipeline | None = None

    # ---- internal helpers ----

    def _get_valid_item(self, item_id: str) -> CatalogItem:
        item = self.catalog_repo.get_item(item_id)
        if item is not None:
            return item
        if self.catalog_repo.get_special_option(item_id) is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Special options need request details; use the special order form",
            )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Item not found",
        )

    def _ensure_cart_editable(self) -> None:
        # The order in flight was built from the cart; a success clears it.
        if self.checkout.state == "submitting":
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Cart is locked while the order is being submitted",
            )

    @property
    def is_submitting(self) -> bool:
        wishlist_busy = self.wishlist is not None and self.wishlist.is_submitting
        return self.checkout.state == "submitting" or wishlist_busy

    # ---- cart ----

    def cart_summary(self) -> CartSummary:
        return self.cart.summary(cart_open=self.cart_open)

    def pending_quantity(self, item_id: str) -> int:
        return self.pending_quantities.get(item_id, 1)

    def adjust_pending_quantity(self, item_id: str, delta: int) -> int:
        """Move the picker quantity next to a catalog item, never below 1."""
        self._get_valid_item(item_id)
        quantity = max(1, self.pending_quantity(item_id) + delta)
        self.pending_quantities[item_id] = quantity
        return quantity

    def add_catalog_item(self, item_id: str, quantity: int | None = None) -> CartSummary:
        """
        Add a catalog item using the explicit quantity, or the picker
        quantity when none is given. The picker resets to 1 afterwards.
        """
        item = self._get_valid_item(item_id)
        self._ensure_cart_editable()
        self.cart.add_item(item, quantity or self.pending_quantity(item_id))
        self.pending_quantities[item_id] = 1
        self.cart_open = True
        return self.cart_summary()

    def update_quantity(self, item_id: str, delta: int) -> CartSummary:
        self._ensure_cart_editable()
        self.cart.update_quantity(item_id, delta)
        return self.cart_summary()

    def remove_item(self, item_id: str) -> CartSummary:
        self._ensure_cart_editable()
        self.cart.remove_item(item_id)
        return self.cart_summary()

    def close_cart(self) -> CartSummary:
        self.cart_open = False
        return self.cart_summary()

    # ---- special orders ----

    def select_special_option(self, option_id: str | None) -> None:
        option = None
        if option_id is not None:
            option = self.catalog_repo.get_special_option(option_id)
            if option is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Special option not found",
                )
        self.intake.select(option)

    def submit_special_order(self, values: dict) -> CartLine | None:
        self._ensure_cart_editable()
        line = self.intake.submit(values)
        if line is not None:
            self.cart_open = True
        return line

    # ---- checkout ----

    def begin_checkout(self):
        read = self.checkout.begin()
        self.cart_open = False
        return read

    # ---- wishlist ----

    def start_wishlist(self, details: UserDetails) -> None:
        """Upstream handoff: publish buyer details for the wishlist page."""
        if self.wishlist is not None and self.wishlist.is_submitting:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Wishlist submission already in progress",
            )
        self.handoff.publish(details)
        self.close_wishlist()

    def enter_wishlist(self) -> WishlistPipeline:
        """
        Open the wishlist page. Reuses the current page while it is still
        usable; otherwise reads the handoff again.
        """
        if self.wishlist is None or self.wishlist.redirect_to is not None:
            self.close_wishlist()
            self.wishlist = WishlistPipeline(self.handoff, self.sink, self.scheduler)
        return self.wishlist

    def close_wishlist(self) -> None:
        if self.wishlist is not None:
            self.wishlist.close()
            self.wishlist = None
