"""
Notification Service
Sends account emails (welcome, password reset) through fastapi-mail

In development, or when no SMTP host is configured, messages are written
to the log instead of being sent. Delivery is best-effort: failures are
logged and never propagate to the request that triggered them.
"""
import asyncio
import logging
from typing import Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from fastapi_mail.errors import ConnectionErrors
from fastapi_mail.schemas import MultipartSubtypeEnum

from desiconnect.core.config import Settings, settings as default_settings
from desiconnect.domain.workflow import UserRole

logger = logging.getLogger(__name__)

PORTAL_NAMES = {
    UserRole.CUSTOMER: "Customer Account",
    UserRole.SELLER: "Seller Dashboard",
    UserRole.ADMIN: "Admin Dashboard",
}

HTML_LAYOUT = (
    '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
    '<h2 style="color: #FF6B35;">{title}</h2>'
    "{paragraphs}"
    "<p>Thank you,<br>DesiConnect Team</p>"
    "</div>"
)


def build_connection_config(config: Settings) -> ConnectionConfig:
    """Map SMTP settings onto a fastapi-mail connection"""
    return ConnectionConfig(
        MAIL_USERNAME=config.SMTP_USER,
        MAIL_PASSWORD=config.SMTP_PASSWORD,
        MAIL_FROM=config.EMAIL_FROM,
        MAIL_FROM_NAME="DesiConnect",
        MAIL_SERVER=config.SMTP_HOST,
        MAIL_PORT=config.SMTP_PORT,
        MAIL_STARTTLS=config.SMTP_USE_TLS,
        MAIL_SSL_TLS=config.SMTP_USE_SSL,
        USE_CREDENTIALS=bool(config.SMTP_USER),
        TIMEOUT=10,
    )


class NotificationService:
    """
    Builds and delivers account emails

    Usage:
        notifier = NotificationService()
        notifier.send_welcome_email("seller@desiconnect.com", "Asha", UserRole.SELLER)
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    @property
    def delivery_enabled(self) -> bool:
        return self.config.is_production and bool(self.config.SMTP_HOST)

    def send_password_reset_email(self, email: str, name: Optional[str], password: str, role: UserRole) -> bool:
        portal = PORTAL_NAMES[UserRole(role)]
        name = name or email
        text = (
            f"Hello {name},\n\n"
            f"We received a request to reset your password for your DesiConnect {portal}.\n\n"
            f"Your new temporary password is: {password}\n\n"
            "Please use this password to log in and update your password immediately.\n\n"
            "If you did not request this password reset, please contact our support team.\n\n"
            "Thank you,\nDesiConnect Team"
        )
        html = HTML_LAYOUT.format(
            title="DesiConnect Password Reset",
            paragraphs=(
                f"<p>Hello {name},</p>"
                f"<p>We received a request to reset your password for your DesiConnect {portal}.</p>"
                f"<p>Your new temporary password is: <strong>{password}</strong></p>"
                "<p>Please use this password to log in and update your password immediately.</p>"
                "<p>If you did not request this password reset, please contact our support team.</p>"
            ),
        )
        return self._send(email, "Your DesiConnect Password Reset", text, html)

    def send_welcome_email(self, email: str, name: Optional[str], role: UserRole) -> bool:
        portal = PORTAL_NAMES[UserRole(role)]
        name = name or email
        text = (
            f"Hello {name},\n\n"
            f"Welcome to DesiConnect! Your {portal} has been successfully created.\n\n"
            "Thank you for joining our platform. We're excited to have you as part of our community.\n\n"
            "If you have any questions, please contact our support team.\n\n"
            "Thank you,\nDesiConnect Team"
        )
        html = HTML_LAYOUT.format(
            title="Welcome to DesiConnect",
            paragraphs=(
                f"<p>Hello {name},</p>"
                f"<p>Welcome to DesiConnect! Your {portal} has been successfully created.</p>"
                "<p>Thank you for joining our platform. We're excited to have you as part of our community.</p>"
                "<p>If you have any questions, please contact our support team.</p>"
            ),
        )
        return self._send(email, "Welcome to DesiConnect", text, html)

    def _send(self, to: str, subject: str, text: str, html: str) -> bool:
        """
        Deliver one message as HTML with a plain-text alternative

        Returns:
            True if the message was sent (or logged in development)
        """
        if not self.delivery_enabled:
            logger.info(f"Email notification (not sent) to={to} subject={subject!r}\n{text}\n{html}")
            return True

        message = MessageSchema(
            subject=subject,
            recipients=[to],
            body=html,
            subtype=MessageType.html,
            alternative_body=text,
            multipart_subtype=MultipartSubtypeEnum.alternative,
        )

        try:
            # Endpoints are sync and run in worker threads without an event loop
            asyncio.run(FastMail(build_connection_config(self.config)).send_message(message))
        except (ConnectionErrors, OSError) as e:
            logger.error(f"Failed to send email to {to}: {e}")
            return False

        logger.info(f"Email sent to {to}: {subject}")
        return True
