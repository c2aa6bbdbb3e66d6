"""SMTP mailer (aiosmtplib) for invitation and welcome emails."""

from __future__ import annotations

import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, formatdate, make_msgid

import aiosmtplib

from app.core.config import Settings
from app.domain.enums import Role
from app.infrastructure.exceptions import MailDeliveryError
from app.infrastructure.external.email.templates import (
    EmailTemplateRenderer,
    RenderedEmail,
)
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

_ROLE_DISPLAY = {Role.PASTEUR.value: "Pasteur"}


def role_display(role: str) -> str:
    """Human label used in invitation copy ("Pasteur" or "Équipe Média")."""
    return _ROLE_DISPLAY.get(role, "Équipe Média")


class SmtpMailer:
    """Sends templated multipart emails through the configured SMTP relay."""

    def __init__(self, settings: Settings, renderer: EmailTemplateRenderer | None = None) -> None:
        self._settings = settings
        self._renderer = renderer or EmailTemplateRenderer()

    @property
    def configured(self) -> bool:
        return bool(self._settings.smtp_user and self._settings.smtp_pass.get_secret_value())

    def _client(self) -> aiosmtplib.SMTP:
        s = self._settings
        return aiosmtplib.SMTP(
            hostname=s.smtp_host,
            port=s.smtp_port,
            timeout=s.smtp_timeout_seconds,
            start_tls=s.smtp_use_tls,
        )

    def _build_message(self, to: str, rendered: RenderedEmail) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = rendered.subject
        msg["From"] = formataddr((self._settings.mail_from_name, self._settings.smtp_user))
        msg["To"] = to
        msg["Date"] = formatdate(localtime=False)
        msg["Message-ID"] = make_msgid()
        msg.attach(MIMEText(rendered.text, "plain", "utf-8"))
        msg.attach(MIMEText(rendered.html, "html", "utf-8"))
        return msg

    async def _send(self, to: str, template_key: str, **context) -> None:
        rendered = self._renderer.render(
            template_key,
            app_name=self._settings.app_name,
            year=utc_now().year,
            **context,
        )
        msg = self._build_message(to, rendered)
        try:
            async with self._client() as smtp:
                await smtp.login(
                    self._settings.smtp_user,
                    self._settings.smtp_pass.get_secret_value(),
                )
                await smtp.send_message(msg)
        except aiosmtplib.SMTPException as e:
            logger.error("Failed to send %s email to %s: %s", template_key, to, e)
            raise MailDeliveryError(to, f"Failed to send {template_key} email") from e
        except OSError as e:
            logger.error("SMTP connection failed for %s email: %s", template_key, e)
            raise MailDeliveryError(to, f"Failed to send {template_key} email") from e
        logger.info("Email %s sent to %s (%s)", template_key, to, msg["Message-ID"])

    async def send_invitation(
        self, email: str, display_name: str, role: str, invite_token: str
    ) -> None:
        deep_link = self._settings.generate_deep_link("reset-password", {"token": invite_token})
        await self._send(
            email,
            "invitation",
            display_name=display_name,
            role_display=role_display(role),
            deep_link=deep_link,
        )

    async def send_welcome(self, email: str, display_name: str) -> None:
        await self._send(email, "welcome", display_name=display_name)

    async def verify_connection(self) -> bool:
        """Return True when the relay accepts a connection and login."""
        if not self.configured:
            return False
        try:
            async with self._client() as smtp:
                await smtp.login(
                    self._settings.smtp_user,
                    self._settings.smtp_pass.get_secret_value(),
                )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.warning("SMTP connection check failed: %s", e)
            return False
        return True
