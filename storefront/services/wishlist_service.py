# storefront/services/wishlist_service.py
import logging

from fastapi import HTTPException, status
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from storefront.core.local_store import BuyerDetailsHandoff
from storefront.core.scheduler import ScheduledTask, Scheduler
from storefront.core.validation import FieldErrors, field_errors
from storefront.schemas.order import SubmissionResult
from storefront.schemas.wishlist import (
    WishlistItemCreate,
    WishlistRead,
    WishlistSubmission,
)
from storefront.services.order_service import SUCCESS_DISMISS_SECONDS, UNEXPECTED_ERROR_MESSAGE
from storefront.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)

# Where the visitor is sent when the wishlist is unreachable or done
ENTRY_POINT = "/"


class WishlistPipeline:
    """
    Wishlist page for one visit.

    Buyer details are read from the handoff exactly once, at construction.
    Without them the pipeline is unreachable and only reports a redirect.
    """

    def __init__(
        self,
        handoff: BuyerDetailsHandoff,
        sink: SubmissionService,
        scheduler: Scheduler,
    ):
        self.handoff = handoff
        self.sink = sink
        self.scheduler = scheduler

        self.user_details = handoff.receive()
        self.items: list = []
        self.errors: FieldErrors = {}
        self.is_submitting = False
        self.succeeded = False
        self.error_message: str | None = None
        self.redirect_to: str | None = None if self.user_details else ENTRY_POINT
        self._redirect_task: ScheduledTask | None = None

    def add_item(self, form: dict) -> bool:
        """
        Validate and append one item, normalized to its category.
        Returns False (with field errors) when validation fails.
        """
        try:
            payload = WishlistItemCreate.model_validate(form)
        except ValidationError as e:
            self.errors = field_errors(e)
            return False

        self.errors = {}
        self.items.append(payload.finalize())
        return True

    def remove_item(self, index: int) -> None:
        if not 0 <= index < len(self.items):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Wishlist item not found",
            )
        del self.items[index]

    async def submit(self, feedback: str | None = None) -> WishlistRead:
        """
        Send buyer details (with optional feedback) and every item.

        Success → handoff cleared, redirect to the entry point after
        SUCCESS_DISMISS_SECONDS. Failure → items and details kept, message
        exposed for retry.
        """
        if self.is_submitting:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Wishlist submission already in progress",
            )
        if self.succeeded:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Wishlist already submitted",
            )
        if not self.items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Wishlist is empty",
            )

        details = self.user_details.model_copy(
            update={"feedback": (feedback or "").strip() or None}
        )
        submission = WishlistSubmission(user_details=details, items=list(self.items))

        self.is_submitting = True
        self.error_message = None
        try:
            result = await run_in_threadpool(self.sink.submit_wishlist, submission)
        except Exception:
            logger.exception("Error submitting wishlist")
            result = SubmissionResult(success=False, message=UNEXPECTED_ERROR_MESSAGE)
        finally:
            self.is_submitting = False

        if not result.success:
            logger.error(f"Failed to submit wishlist: {result.message}")
            self.error_message = result.message
            return self.read()

        self.handoff.clear()
        self.succeeded = True
        self._redirect_task = self.scheduler.call_later(SUCCESS_DISMISS_SECONDS, self._finish)
        return self.read()

    def close(self) -> None:
        """Discard the page; a pending redirect must not fire afterwards."""
        if self._redirect_task is not None:
            self._redirect_task.cancel()
            self._redirect_task = None

    def _finish(self) -> None:
        self._redirect_task = None
        self.redirect_to = ENTRY_POINT

    def read(self) -> WishlistRead:
        return WishlistRead(
            user_details=self.user_details,
            items=self.items,
            errors=self.errors,
            is_submitting=self.is_submitting,
            succeeded=self.succeeded,
            error_message=self.error_message,
        )
