# storefront/core/email_client.py
from __future__ import annotations

"""
SMTP relay client for the storefront.

Responsibilities:
  - Open a connection to the relay configured in Settings (SSL or STARTTLS).
  - Verify the relay before anything is sent (connect + login).
  - Send a plain-text message with optional file attachments.

Typical .env configuration (Gmail example with App Password):

    SMTP_HOST=smtp.gmail.com
    SMTP_PORT=465
    SMTP_USER=orders@example.com
    SMTP_PASS=<app password>
    SMTP_USE_SSL=true
    SMTP_USE_TLS=false
    EMAIL_FROM=orders@example.com
    EMAIL_TO=owner@example.com
"""

import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from storefront.core.config import Settings

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class SMTPVerificationError(Exception):
    """Raised when the relay cannot be reached or rejects the credentials."""


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    mime_type: str = XLSX_MIME_TYPE


class EmailClient:
    """
    Thin wrapper around smtplib bound to one relay configuration.

    Usage in services:
        client = EmailClient(get_settings())
        client.verify()
        client.send_email(
            to_email="owner@example.com",
            subject="New Order Submission",
            text_body="...",
            attachments=[Attachment("order.xlsx", workbook_bytes)],
        )
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def from_header(self) -> str:
        address = self.settings.EMAIL_FROM or self.settings.SMTP_USER or ""
        if address and self.settings.EMAIL_FROM_NAME:
            return f"{self.settings.EMAIL_FROM_NAME} <{address}>"
        return address

    def _create_smtp_client(self) -> smtplib.SMTP:
        """
        Create and return an SMTP client configured for TLS or SSL.

        Priority:
          - If SMTP_USE_SSL is True → use smtplib.SMTP_SSL (e.g., Gmail on 465).
          - Else → use smtplib.SMTP + optional STARTTLS if SMTP_USE_TLS is True.
        """
        s = self.settings
        if not s.SMTP_HOST:
            raise RuntimeError("SMTP_HOST is not configured. Please set it in .env.")

        if s.SMTP_USE_SSL:
            server: smtplib.SMTP = smtplib.SMTP_SSL(
                s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT
            )
        else:
            server = smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT)
            if s.SMTP_USE_TLS:
                server.starttls()

        return server

    def _open(self) -> smtplib.SMTP:
        """Connect and authenticate. Any failure is a verification failure."""
        s = self.settings
        if not (s.SMTP_USER and s.SMTP_PASS):
            raise SMTPVerificationError(
                "SMTP credentials are missing. Please set SMTP_USER and SMTP_PASS in .env."
            )

        try:
            server = self._create_smtp_client()
        except (OSError, smtplib.SMTPException, RuntimeError) as e:
            raise SMTPVerificationError(str(e) or e.__class__.__name__) from e

        try:
            server.login(s.SMTP_USER, s.SMTP_PASS)
        except (OSError, smtplib.SMTPException) as e:
            _quit(server)
            raise SMTPVerificationError(str(e) or e.__class__.__name__) from e

        return server

    def verify(self) -> None:
        """
        Check that the relay is reachable and accepts our credentials.

        Raises
        ------
        SMTPVerificationError:
            If credentials are missing, the connection fails, or login is rejected.
        """
        server = self._open()
        try:
            server.noop()
        finally:
            _quit(server)

    def send_email(
        self,
        to_email: str | None,
        subject: str,
        text_body: str,
        attachments: list[Attachment] | tuple[Attachment, ...] = (),
    ) -> None:
        """
        Send an email to a single recipient.

        Raises
        ------
        RuntimeError:
            If the recipient address is missing.
        SMTPVerificationError:
            If the relay cannot be opened.
        smtplib.SMTPException:
            If the underlying send fails.
        """
        if not to_email:
            raise RuntimeError("Recipient address is not configured. Please set EMAIL_TO in .env.")

        msg = EmailMessage()
        msg["From"] = self.from_header
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content(text_body)

        for attachment in attachments:
            maintype, _, subtype = attachment.mime_type.partition("/")
            msg.add_attachment(
                attachment.content,
                maintype=maintype,
                subtype=subtype,
                filename=attachment.filename,
            )

        server = self._open()
        try:
            server.send_message(msg)
        finally:
            _quit(server)


def _quit(server: smtplib.SMTP) -> None:
    try:
        server.quit()
    except (OSError, smtplib.SMTPException):
        # Connection is being torn down anyway.
        pass
