"""
Email Delivery Module
Sends the finished report to the requester. The SMTP transport handles
retries; the dispatcher itself makes a single attempt.
"""

import re
import smtplib
import logging
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart

from company_snapshot.errors import DeliveryError, TransportError
from company_snapshot.services import EmailTransport

logger = logging.getLogger(__name__)

SMTP_HOST = "smtp.gmail.com"
SMTP_PORT = 587
MAX_RETRIES = 3

SUBJECT_TEMPLATE = "Company Snapshot Report: {company_name}"

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def build_subject(company_name: str) -> str:
    return SUBJECT_TEMPLATE.format(company_name=company_name)


class SmtpTransport:
    """Plain-text email over SMTP with STARTTLS (Gmail App Password by default)."""

    def __init__(
        self,
        username: str,
        password: str,
        sender_address: str = "",
        sender_name: str = "Company Snapshot",
        host: str = SMTP_HOST,
        port: int = SMTP_PORT,
        timeout: int = 30,
    ):
        self.username = username
        self.password = password
        self.sender_address = sender_address or username
        self.sender_name = sender_name
        self.host = host
        self.port = port
        self.timeout = timeout

    def _build_message(self, to: list[str], subject: str, body: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = f"{self.sender_name} <{self.sender_address}>"
        msg["To"] = ", ".join(to)
        msg["Subject"] = subject
        msg.attach(MIMEText(body, "plain"))
        return msg

    def send_email(self, to: list[str], subject: str, body: str) -> None:
        """
        Send an email, retrying transient SMTP errors.

        Raises:
            TransportError: If the message could not be sent.
        """
        msg = self._build_message(to, subject, body)
        recipients = ", ".join(to)

        last_error = None
        for attempt in range(1, MAX_RETRIES + 1):
            try:
                logger.info(f"Send attempt {attempt}/{MAX_RETRIES} to {recipients}...")
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                    server.ehlo()
                    server.starttls()
                    server.ehlo()
                    server.login(self.username, self.password)
                    server.send_message(msg)

                logger.info(f"Email sent successfully to {recipients}")
                return

            except smtplib.SMTPAuthenticationError as e:
                last_error = f"Authentication failed: {e}. Check your SMTP username and password."
                logger.error(last_error)
                break  # Don't retry auth failures
            except smtplib.SMTPRecipientsRefused as e:
                last_error = f"Recipient refused: {e}"
                logger.error(last_error)
                break  # Don't retry recipient errors
            except (smtplib.SMTPException, OSError) as e:
                last_error = f"SMTP error (attempt {attempt}): {e}"
                logger.warning(last_error)

        raise TransportError(last_error)


def deliver_report(
    recipient: str,
    company_name: str,
    report: str,
    transport: EmailTransport,
) -> None:
    """
    Email the report to a single recipient.

    Raises:
        DeliveryError: If the address is invalid or the transport fails.
    """
    recipient = (recipient or "").strip()
    if not _EMAIL_RE.match(recipient):
        raise DeliveryError(f"Invalid recipient email address: {recipient!r}")

    subject = build_subject(company_name)
    try:
        transport.send_email(to=[recipient], subject=subject, body=report)
    except Exception as e:
        raise DeliveryError(f"Failed to send report to {recipient}: {e}") from e

    logger.info(f"Report for {company_name} delivered to {recipient}")
