"""Auth API schemas."""

from pydantic import EmailStr, Field

from app.schemas._base import CamelModel


class LoginRequest(CamelModel):
    """Request body for POST /auth/login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(CamelModel):
    """Request body for POST /auth/refresh."""

    refresh_token: str = Field(..., min_length=1)


class CustomTokenRequest(CamelModel):
    """Request body for POST /auth/generate-custom-token."""

    uid: str = Field(..., min_length=1)


class ResetPasswordRequest(CamelModel):
    """Request body for POST /auth/reset-password (invite redemption).

    Password length is checked by the service so the error names the rule.
    """

    token: str
    new_password: str


class VerifyTokenRequest(CamelModel):
    """Request body for POST /auth/verify-token."""

    token: str = ""


class FcmTokenRequest(CamelModel):
    """Request body for PUT /auth/fcm-token."""

    fcm_token: str = Field(..., min_length=1)
