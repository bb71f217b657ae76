"""
Notification tool: send an HTML email through a pluggable provider (SMTP by default).
Provider faults surface as DeliveryFailure. No retry.
"""
import logging
import re
import smtplib
from email.message import EmailMessage
from typing import Optional, Protocol

from pydantic import BaseModel, Field

from app.config import Settings
from tools.base import ErrorKind, ToolError, ToolResult, ToolSpec

logger = logging.getLogger(__name__)

TOOL_NAME = "send_mail"
HTML_MIME_TYPE = "text/html"

_ADDRESS_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class SendMailInput(BaseModel):
    """Input for email: recipient address, subject line, HTML body."""
    recipient: str = Field(description="Recipient email address")
    subject: str = Field(description="Email subject")
    text: str = Field(description="Email body as HTML")


class NotificationProvider(Protocol):
    def send(self, recipient: str, subject: str, body: str, mime_type: str = HTML_MIME_TYPE) -> None:
        ...


class SmtpProvider:
    """Sends through an SMTP relay. Raises on any delivery fault."""

    def __init__(
        self,
        host: Optional[str],
        port: int = 587,
        sender: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender or username
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpProvider":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.mail_sender,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.http_timeout,
        )

    def send(self, recipient: str, subject: str, body: str, mime_type: str = HTML_MIME_TYPE) -> None:
        if not self.host or not self.sender:
            raise ToolError(
                ErrorKind.DELIVERY_FAILURE, "Mail is not configured. Set SMTP_HOST and MAIL_SENDER in .env."
            )
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = recipient
        msg["Subject"] = subject
        maintype, subtype = mime_type.split("/", 1)
        if maintype == "text":
            msg.set_content(body, subtype=subtype)
        else:
            msg.set_content(body.encode("utf-8"), maintype=maintype, subtype=subtype)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(msg)


def _validate(recipient: str, subject: str, text: str) -> Optional[str]:
    # Header values must be single-line.
    if any(c in (recipient or "") + (subject or "") for c in "\r\n"):
        return "Recipient and subject must not contain line breaks."
    if not recipient or not _ADDRESS_RE.match(recipient.strip()):
        return "Recipient must be a valid email address."
    if not subject or not subject.strip():
        return "Subject must not be empty."
    if not text or not text.strip():
        return "Email body must not be empty."
    return None


def send_mail_impl(
    recipient: str,
    subject: str,
    text: str,
    provider: NotificationProvider,
) -> ToolResult:
    """Validate and hand off to the provider. The confirmation echoes recipient and subject verbatim."""
    problem = _validate(recipient, subject, text)
    if problem:
        return ToolResult.error(ErrorKind.INVALID_INPUT, problem)
    try:
        provider.send(recipient.strip(), subject, text, mime_type=HTML_MIME_TYPE)
    except ToolError as e:
        logger.warning("send_mail failed: %s", e.message)
        return ToolResult.error(ErrorKind.DELIVERY_FAILURE, e.message)
    except Exception as e:
        logger.warning("send_mail failed: %s", str(e)[:200])
        return ToolResult.error(ErrorKind.DELIVERY_FAILURE, f"Failed to send email: {e}")
    return ToolResult.ok(f"Email was sent to {recipient} with subject: {subject}.")


def get_send_mail_spec(settings: Settings, provider: Optional[NotificationProvider] = None) -> ToolSpec:
    provider = provider or SmtpProvider.from_settings(settings)

    def handler(recipient: str, subject: str, text: str) -> ToolResult:
        return send_mail_impl(recipient, subject, text, provider)

    return ToolSpec(
        name=TOOL_NAME,
        description=(
            "Send an email. Input: recipient (address), subject, text (HTML body). "
            "Returns a confirmation message."
        ),
        args_schema=SendMailInput,
        handler=handler,
    )
