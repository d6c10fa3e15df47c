# storefront/services/order_service.py
import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from storefront.core.local_store import CART_KEY, ORDER_DETAILS_KEY, LocalStore
from storefront.core.scheduler import ScheduledTask, Scheduler
from storefront.core.validation import FieldErrors, field_errors
from storefront.schemas.order import (
    BuyerDetails,
    CheckoutRead,
    CheckoutState,
    OrderSubmission,
    SubmissionResult,
)
from storefront.services.cart_service import CartEngine
from storefront.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)

# Delay before a successful confirmation closes itself
SUCCESS_DISMISS_SECONDS = 3.0

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


class OrderConfirmationFlow:
    """
    Checkout dialog state machine:

      idle       -> collecting            (begin, cart not empty)
      collecting -> idle                  (cancel)
      collecting -> submitting            (submit, valid buyer details)
      submitting -> succeeded             (sink reports success)
      submitting -> collecting            (sink reports failure, retry allowed)
      succeeded  -> idle                  (after SUCCESS_DISMISS_SECONDS, or dismiss)

    Invalid transitions raise 409.
    """

    def __init__(
        self,
        cart: CartEngine,
        store: LocalStore,
        sink: SubmissionService,
        scheduler: Scheduler,
    ):
        self.cart = cart
        self.store = store
        self.sink = sink
        self.scheduler = scheduler

        self.state: CheckoutState = "idle"
        self.errors: FieldErrors = {}
        self.buyer: BuyerDetails | None = None
        self.last_result: SubmissionResult | None = None
        self._reset_task: ScheduledTask | None = None

    # -------- Transitions --------

    def begin(self) -> CheckoutRead:
        """
        Open the confirmation dialog and persist the current cart so a
        reload does not lose it.
        """
        if self.state == "submitting":
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Order submission already in progress",
            )
        if len(self.cart) == 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )
        if self.state == "succeeded":
            self.dismiss()

        self.store.set_item(CART_KEY, self.cart.snapshot())
        self.state = "collecting"
        self.errors = {}
        return self.read()

    def cancel(self) -> CheckoutRead:
        """Abandon the dialog. The cart is left untouched."""
        if self.state == "submitting":
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Cannot cancel while the order is being submitted",
            )
        if self.state == "succeeded":
            return self.dismiss()

        self.state = "idle"
        self.errors = {}
        return self.read()

    async def submit(self, form: dict) -> CheckoutRead:
        """
        Validate buyer details and hand the order to the submission sink.

        Steps:
          1. Only allowed while collecting (also blocks duplicate submits).
          2. Validate the form; on error stay in collecting with field errors.
          3. Build the write-once OrderSubmission from a copy of the cart.
          4. Call the sink off the event loop.
          5. Success → persist orderDetails, clear cart, schedule reset.
             Failure → keep cart and form, back to collecting.
        """
        if self.state != "collecting":
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Cannot submit order while {self.state}",
            )

        try:
            buyer = BuyerDetails.model_validate(form)
        except ValidationError as e:
            self.errors = field_errors(e)
            return self.read()

        if len(self.cart) == 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        self.errors = {}
        self.buyer = buyer
        submission = OrderSubmission.model_validate(
            {
                **buyer.model_dump(),
                "cart": [line.model_copy(deep=True) for line in self.cart.lines],
                "order_date": datetime.now(timezone.utc),
            }
        )

        self.state = "submitting"
        self.last_result = None
        try:
            result = await run_in_threadpool(self.sink.submit_order, submission)
        except Exception:
            logger.exception("Error submitting order")
            result = SubmissionResult(success=False, message=UNEXPECTED_ERROR_MESSAGE)

        self.last_result = result
        if not result.success:
            logger.error(f"Failed to submit order: {result.message}")
            self.state = "collecting"
            return self.read()

        self.store.set_item(ORDER_DETAILS_KEY, submission.model_dump(mode="json"))
        self.cart.clear()
        self.state = "succeeded"
        self._reset_task = self.scheduler.call_later(SUCCESS_DISMISS_SECONDS, self._auto_reset)
        return self.read()

    def dismiss(self) -> CheckoutRead:
        """Leave the success state early; the pending reset never fires."""
        if self.state == "succeeded":
            if self._reset_task is not None:
                self._reset_task.cancel()
                self._reset_task = None
            self._reset()
        return self.read()

    # -------- Helpers --------

    def _auto_reset(self) -> None:
        self._reset_task = None
        if self.state == "succeeded":
            self._reset()

    def _reset(self) -> None:
        self.state = "idle"
        self.errors = {}
        self.buyer = None
        self.last_result = None

    def read(self) -> CheckoutRead:
        return CheckoutRead(
            state=self.state,
            cart_count=len(self.cart),
            errors=self.errors,
            last_result=self.last_result,
        )
