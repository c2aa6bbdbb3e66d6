"""Email: SMTP mailer and Jinja templates."""

from app.infrastructure.external.email.smtp_mailer import SmtpMailer, role_display
from app.infrastructure.external.email.templates import EmailTemplateRenderer

__all__ = ["EmailTemplateRenderer", "SmtpMailer", "role_display"]
