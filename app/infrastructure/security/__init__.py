"""Security: Firebase custom-token signing."""

from app.infrastructure.security.jwt import create_custom_token

__all__ = ["create_custom_token"]
