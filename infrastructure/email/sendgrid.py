"""SendGrid implementation of EmailProvider.

Talks to the SendGrid v3 HTTP API through the shared async HttpClient.
HTML bodies are rendered from Jinja2 templates under templates/emails;
a plain-text alternative is always sent alongside.
"""

import os
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import EmailSettings
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)

_SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"
_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "templates",
    "emails",
)


class SendGridEmailProvider:
    def __init__(
        self,
        settings: EmailSettings,
        http_client: HttpClient,
        app_name: str = "Storefront",
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._app_name = app_name
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    async def _send(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: Optional[str] = None,
    ) -> bool:
        if not self._settings.sendgrid_api_key:
            log.error("email_send_failed", reason="api_key_not_configured")
            return False

        content = [{"type": "text/plain", "value": text_body}]
        if html_body:
            content.append({"type": "text/html", "value": html_body})

        payload: dict = {
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {
                "email": self._settings.email_from,
                "name": self._settings.email_from_name,
            },
            "subject": subject,
            "content": content,
        }
        headers = {
            "Authorization": f"Bearer {self._settings.sendgrid_api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._http.post(
                _SENDGRID_API_URL, json=payload, headers=headers
            )
            if response.status_code in (200, 201, 202):
                log.info("email_sent_success", to_email=to_email, subject=subject)
                return True
            log.error(
                "email_send_failed",
                to_email=to_email,
                subject=subject,
                status_code=response.status_code,
                response=response.text[:200],
            )
            return False
        except Exception as e:
            log.error(
                "email_send_error",
                to_email=to_email,
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    def _render(self, template_name: str, **context) -> str:
        template = self._jinja.get_template(template_name)
        return template.render(app_name=self._app_name, **context)

    async def send_confirmation_email(
        self, email: str, username: str, confirmation_url: str
    ) -> bool:
        subject = "Please confirm your email!"
        text_body = (
            f"Hello {username},\n\n"
            f"Please click the following link to confirm your email: "
            f"{confirmation_url}\n\n"
            f"The link expires in 24 hours."
        )
        html_body = self._render(
            "confirm_email.html", username=username, confirmation_url=confirmation_url
        )
        return await self._send(email, subject, text_body, html_body)

    async def send_password_reset_email(
        self, email: str, username: str, reset_url: str
    ) -> bool:
        subject = "Password Reset Request"
        text_body = (
            "You are receiving this email because you (or someone else) has "
            "requested the reset of a password. Please make a PUT request to:"
            f"\n\n{reset_url}\n\n"
            "The link expires in 10 minutes."
        )
        html_body = self._render(
            "password_reset.html", username=username, reset_url=reset_url
        )
        return await self._send(email, subject, text_body, html_body)

    async def send_password_changed_email(self, email: str, username: str) -> bool:
        subject = "Password Changed Successfully"
        text_body = "Your password has been changed successfully."
        html_body = self._render("password_changed.html", username=username)
        return await self._send(email, subject, text_body, html_body)

    async def send_cancellation_email(self, email: str, username: str) -> bool:
        subject = "Sorry to see you go!"
        text_body = f"Goodbye, {username}. We hope to see you back soon."
        html_body = self._render("account_deleted.html", username=username)
        return await self._send(email, subject, text_body, html_body)
