"""External gateway ports: identity provider, object storage, push, mail.

Protocols define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.identity import (
        IdentityResult,
        IdentityUser,
        SignInTokens,
        TokenClaims,
    )


class IIdentityProvider(Protocol):
    """Managed identity service. Never raises for provider-side failures."""

    async def get_user_by_email(self, email: str) -> IdentityResult[IdentityUser]: ...

    async def create_user(
        self, email: str, password: str, display_name: str | None = None
    ) -> IdentityResult[IdentityUser]: ...

    async def update_password(self, uid: str, password: str) -> IdentityResult[None]: ...

    async def delete_user(self, uid: str) -> IdentityResult[None]: ...

    async def sign_in_with_password(
        self, email: str, password: str
    ) -> IdentityResult[SignInTokens]: ...

    async def refresh_token(self, refresh_token: str) -> IdentityResult[SignInTokens]: ...

    async def verify_id_token(self, token: str) -> IdentityResult[TokenClaims]: ...

    async def create_custom_token(self, uid: str) -> IdentityResult[str]: ...


class IObjectStorage(Protocol):
    """Public object storage for uploaded media."""

    async def upload(
        self, content: bytes, filename: str, content_type: str, folder: str
    ) -> str:
        """Store content under folder with a random name; return its public URL."""

    async def delete(self, url: str) -> bool:
        """Delete the object behind a public URL; False when it does not exist."""


class IPushGateway(Protocol):
    """Push notification fan-out."""

    async def send_to_topic(
        self, topic: str, title: str, body: str, data: dict[str, str] | None = None
    ) -> str: ...

    async def send_to_token(
        self, token: str, title: str, body: str, data: dict[str, str] | None = None
    ) -> str: ...

    async def send_to_all(
        self, title: str, body: str, data: dict[str, str] | None = None
    ) -> str: ...

    async def subscribe_to_topic(self, tokens: list[str], topic: str) -> None: ...


class IMailer(Protocol):
    """Transactional email."""

    async def send_invitation(
        self, email: str, display_name: str, role: str, invite_token: str
    ) -> None: ...

    async def send_welcome(self, email: str, display_name: str) -> None: ...

    async def verify_connection(self) -> bool: ...
