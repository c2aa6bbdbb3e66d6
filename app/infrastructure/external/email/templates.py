"""Email templates: template key -> subject/text/html (Jinja).

Context for every template: display_name, app_name, year, plus the
template-specific values (role_display, deep_link).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jinja2 import Environment, Template

_INVITATION_SUBJECT = "Invitation - {{ role_display }} sur voice of faith"

_INVITATION_TEXT = """Bonjour {{ display_name }},

Vous avez été invité(e) à rejoindre la plateforme {{ app_name }} en tant que {{ role_display }}.

Pour activer votre compte :
1. Téléchargez l'application mobile {{ app_name }}
2. Utilisez ce lien : {{ deep_link }}
3. Définissez votre mot de passe
4. Complétez votre profil

Ce lien est valide pendant 7 jours.

Si vous n'avez pas demandé cette invitation, veuillez ignorer cet email.

Cordialement,
L'équipe {{ app_name }}
"""

_INVITATION_HTML = """<!DOCTYPE html>
<html>
<head>
  <style>
    body { font-family: 'Arial', sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f5f6fa; }
    .header { background-color: #2E4FE8; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }
    .content { background-color: white; padding: 30px; border-radius: 0 0 10px 10px; }
    .button { display: inline-block; padding: 15px 30px; background-color: #FFC107; color: white; text-decoration: none; border-radius: 8px; font-weight: bold; margin: 20px 0; }
    .footer { text-align: center; padding: 20px; color: #666; font-size: 12px; }
  </style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>Bienvenue dans l'équipe !</h1></div>
    <div class="content">
      <h2>Bonjour {{ display_name }},</h2>
      <p>Vous avez été invité(e) à rejoindre la plateforme {{ app_name }} en tant que <strong>{{ role_display }}</strong>.</p>
      <p>Pour activer votre compte et définir votre mot de passe, veuillez :</p>
      <ol>
        <li>Télécharger l'application mobile {{ app_name }}</li>
        <li>Cliquer sur le bouton ci-dessous ou copier le lien</li>
        <li>Définir votre mot de passe</li>
        <li>Compléter votre profil</li>
      </ol>
      <center><a href="{{ deep_link }}" class="button">Activer mon compte</a></center>
      <p style="margin-top: 20px; padding: 15px; background-color: #f5f6fa; border-radius: 8px;">
        <strong>Lien direct :</strong><br>
        <code style="color: #2E4FE8; word-break: break-all;">{{ deep_link }}</code>
      </p>
      <p><strong>Note :</strong> Si le lien ne fonctionne pas, copiez-le et ouvrez-le depuis l'application mobile.</p>
      <p>Ce lien est valide pendant 7 jours.</p>
      <p>Si vous n'avez pas demandé cette invitation, veuillez ignorer cet email.</p>
      <p style="margin-top: 30px;">Cordialement,<br><strong>L'équipe {{ app_name }}</strong></p>
    </div>
    <div class="footer">
      <p>Cet email a été envoyé automatiquement, merci de ne pas répondre.</p>
      <p>&copy; {{ year }} {{ app_name }}. Tous droits réservés.</p>
    </div>
  </div>
</body>
</html>
"""

_WELCOME_SUBJECT = "Bienvenue sur {{ app_name }} ! 🙏"

_WELCOME_TEXT = """Bienvenue {{ display_name }} !

Merci d'avoir rejoint notre communauté {{ app_name }}.
Nous sommes ravis de vous compter parmi nous.
N'hésitez pas à explorer l'application et à profiter de tous nos contenus.

Que Dieu vous bénisse !
"""

_WELCOME_HTML = """<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <h2 style="color: #2E4FE8;">Bienvenue {{ display_name }} !</h2>
    <p>Merci d'avoir rejoint notre communauté {{ app_name }}.</p>
    <p>Nous sommes ravis de vous compter parmi nous.</p>
    <p>N'hésitez pas à explorer l'application et à profiter de tous nos contenus.</p>
    <p>Que Dieu vous bénisse !</p>
  </div>
</body>
</html>
"""

# key -> (subject, text, html)
_DEFAULT_TEMPLATES: dict[str, tuple[str, str, str]] = {
    "invitation": (_INVITATION_SUBJECT, _INVITATION_TEXT, _INVITATION_HTML),
    "welcome": (_WELCOME_SUBJECT, _WELCOME_TEXT, _WELCOME_HTML),
}


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    text: str
    html: str


class EmailTemplateRenderer:
    """Renders subject, text and HTML bodies for an email template key."""

    def __init__(
        self,
        templates: dict[str, tuple[str, str, str]] | None = None,
    ) -> None:
        """Initialize with optional template dict; falls back to _DEFAULT_TEMPLATES."""
        self._templates = templates or _DEFAULT_TEMPLATES
        text_env = Environment(autoescape=False)
        html_env = Environment(autoescape=True)
        self._compiled: dict[str, tuple[Template, Template, Template]] = {}
        for key, (subject, text, html) in self._templates.items():
            self._compiled[key] = (
                text_env.from_string(subject),
                text_env.from_string(text),
                html_env.from_string(html),
            )

    def render(self, template_key: str, **context: Any) -> RenderedEmail:
        """Render all parts for the template key. Raises KeyError if key unknown."""
        if template_key not in self._compiled:
            raise KeyError(f"Unknown email template: {template_key}")
        subject_tpl, text_tpl, html_tpl = self._compiled[template_key]
        return RenderedEmail(
            subject=subject_tpl.render(**context).strip(),
            text=text_tpl.render(**context),
            html=html_tpl.render(**context),
        )
