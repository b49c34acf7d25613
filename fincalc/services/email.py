"""
Subscription emails via SendGrid.

Bodies are rendered from the Jinja2 templates in ui/templates/emails. Without
a SENDGRID_API_KEY the rendered message is written to the log instead.
"""

import logging
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Content, Email, Mail, To

from fincalc.config import get_settings

logger = logging.getLogger(__name__)

EMAIL_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "ui" / "templates" / "emails"


class EmailService:
    """Sends subscriber emails, or logs them when SendGrid is off."""

    def __init__(self):
        settings = get_settings()
        self.app_name = settings.app_name
        self.sender = Email(settings.sendgrid_from_email, settings.sendgrid_from_name)
        self.frontend_url = settings.frontend_url.rstrip("/")
        self.templates = Environment(
            loader=FileSystemLoader(EMAIL_TEMPLATE_DIR),
            autoescape=select_autoescape(["html"]),
        )
        self.client = (
            SendGridAPIClient(settings.sendgrid_api_key)
            if settings.sendgrid_api_key
            else None
        )

    def render(self, template: str, **context) -> tuple:
        """Render the .txt and .html variants of an email template."""
        context.setdefault("app_name", self.app_name)
        text_body = self.templates.get_template(f"{template}.txt").render(**context)
        html_body = self.templates.get_template(f"{template}.html").render(**context)
        return text_body, html_body

    def _deliver(self, to_email: str, subject: str, text_body: str, html_body: str) -> bool:
        if self.client is None:
            logger.info(f"[EMAIL - Console Mode] To: {to_email} | {subject}\n{text_body}")
            return True

        message = Mail(from_email=self.sender, to_emails=To(to_email), subject=subject)
        message.add_content(Content("text/plain", text_body))
        message.add_content(Content("text/html", html_body))

        try:
            response = self.client.send(message)
        except Exception as e:
            logger.error(f"Error sending email to {to_email}: {e}")
            return False

        if not 200 <= response.status_code < 300:
            logger.error(f"SendGrid rejected email to {to_email}: {response.status_code}")
            return False

        logger.info(f"Email sent to {to_email}")
        return True

    def send_subscription_email(
        self,
        to_email: str,
        source: Optional[str] = None,
        page_path: Optional[str] = None,
    ) -> bool:
        """
        Confirm a new subscription.

        Args:
            to_email: Subscriber's email address
            source: Calculator or widget the email was captured from
            page_path: Page the subscriber was on, linked back in the email

        Returns:
            True if handed to SendGrid (or logged), False on failure
        """
        link = f"{self.frontend_url}{page_path or '/'}"
        text_body, html_body = self.render("subscribed", source=source, link=link)
        return self._deliver(
            to_email, f"You're subscribed to {self.app_name}", text_body, html_body
        )


# Singleton instance
_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """Get the email service singleton."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
