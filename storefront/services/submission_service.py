# storefront/services/submission_service.py
import logging

from storefront.core.email_client import Attachment, EmailClient, SMTPVerificationError
from storefront.core.spreadsheet import build_workbook
from storefront.schemas.order import ContactDetails, OrderSubmission, SubmissionResult
from storefront.schemas.wishlist import WishlistSubmission

logger = logging.getLogger(__name__)

ORDER_SUBJECT = "New Order Submission"
WISHLIST_SUBJECT = "New Wishlist Submission"

WISHLIST_COLUMNS: dict[str, str] = {
    "item_name": "Item Name",
    "quantity": "Quantity",
    "weight": "Weight",
    "category": "Category",
    "link": "Link",
    "store_address": "Store Address",
    "store_phone": "Store Phone",
    "pickup_address": "Pickup Address",
    "pickup_phone": "Pickup Phone",
}


class SubmissionService:
    """
    Outbound channel for finished orders and wishlists.

    Responsibilities:
      - Render the line items into an .xlsx attachment
      - Verify the mail relay before sending
      - Compose a plain-text summary and mail it to the operator

    Every failure (export, verification, send) is collapsed into
    SubmissionResult(success=False, message=...). Nothing is raised to
    the caller.
    """

    def __init__(self, email_client: EmailClient, recipient: str | None):
        self.email_client = email_client
        self.recipient = recipient

    # -------- Public operations --------

    def submit_order(self, order: OrderSubmission) -> SubmissionResult:
        try:
            workbook = build_workbook("Order", self._order_rows(order))
            self._verify()
            self.email_client.send_email(
                to_email=self.recipient,
                subject=ORDER_SUBJECT,
                text_body=self._order_text(order),
                attachments=[Attachment("order.xlsx", workbook)],
            )
        except Exception as e:
            logger.error(f"Error in submit_order: {e}")
            return SubmissionResult(
                success=False,
                message=f"Failed to submit order: {_describe(e)}",
            )

        logger.info(f"Order from {order.email} sent ({len(order.cart)} lines)")
        return SubmissionResult(success=True, message="Order submitted successfully!")

    def submit_wishlist(self, wishlist: WishlistSubmission) -> SubmissionResult:
        try:
            workbook = build_workbook("Wishlist", self._wishlist_rows(wishlist))
            self._verify()
            self.email_client.send_email(
                to_email=self.recipient,
                subject=WISHLIST_SUBJECT,
                text_body=self._wishlist_text(wishlist),
                attachments=[Attachment("wishlist.xlsx", workbook)],
            )
        except Exception as e:
            logger.error(f"Error in submit_wishlist: {e}")
            return SubmissionResult(
                success=False,
                message=f"Failed to submit wishlist: {_describe(e)}",
            )

        logger.info(
            f"Wishlist from {wishlist.user_details.email} sent ({len(wishlist.items)} items)"
        )
        return SubmissionResult(success=True, message="Wishlist submitted successfully!")

    # -------- Helpers --------

    def _verify(self) -> None:
        try:
            self.email_client.verify()
        except SMTPVerificationError as e:
            raise SMTPVerificationError(f"SMTP verification failed: {e}") from e

    def _order_rows(self, order: OrderSubmission) -> list[dict]:
        rows: list[dict] = []
        for line in order.cart:
            row = {
                "Item Name": line.name,
                "Quantity": line.quantity,
                "Price": line.price,
                "Total": line.price * line.quantity,
            }
            if line.special_data is not None:
                row["Special Data"] = line.special_data.model_dump_json()
            rows.append(row)
        return rows

    def _wishlist_rows(self, wishlist: WishlistSubmission) -> list[dict]:
        rows: list[dict] = []
        for item in wishlist.items:
            data = item.model_dump(exclude_none=True)
            rows.append({WISHLIST_COLUMNS[k]: v for k, v in data.items()})
        return rows

    def _order_text(self, order: OrderSubmission) -> str:
        lines = [
            "A new order has been submitted with the following details:",
            "",
            *_customer_block("Customer Information", order),
            f"Delivery Address: {order.address}",
            f"Preferred Contact Method: {order.preferred_contact}",
            f"Order Date: {order.order_date.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}",
            "",
            "Order Summary:",
            "-------------",
            f"Total Items: {len(order.cart)}",
            f"Total Amount: ${order.total_amount:.2f}",
            "",
            *_feedback_block("Customer Feedback", order.feedback),
            "Please find the complete order details attached as an Excel file.",
        ]
        return "\n".join(lines) + "\n"

    def _wishlist_text(self, wishlist: WishlistSubmission) -> str:
        details = wishlist.user_details
        lines = [
            "A new wishlist has been submitted with the following details:",
            "",
            *_customer_block("User Information", details),
            f"Address: {details.address}",
        ]
        if details.preferred_contact:
            lines.append(f"Preferred Contact Method: {details.preferred_contact}")
        lines += [
            "",
            f"Number of items in wishlist: {len(wishlist.items)}",
            "",
            *_feedback_block("User Feedback", details.feedback),
            "Please find the complete wishlist attached as an Excel file.",
        ]
        return "\n".join(lines) + "\n"


def _customer_block(title: str, details: ContactDetails) -> list[str]:
    return [
        f"{title}:",
        "-" * (len(title) + 1),
        f"Name: {details.name}",
        f"Email: {details.email}",
        f"Phone: {details.phone}",
    ]


def _feedback_block(title: str, feedback: str | None) -> list[str]:
    if not feedback:
        return []
    return [f"{title}:", "-" * (len(title) + 1), feedback, ""]


def _describe(e: Exception) -> str:
    return str(e) or "Unknown error occurred"
