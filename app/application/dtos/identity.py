"""DTOs for the identity provider port.

Every identity operation returns an IdentityResult instead of raising a
provider-specific error, so services branch on an explicit error code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class IdentityErrorCode(str, Enum):
    """Failure reasons an identity operation can report."""

    EMAIL_EXISTS = "EMAIL_EXISTS"
    EMAIL_NOT_FOUND = "EMAIL_NOT_FOUND"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    USER_DISABLED = "USER_DISABLED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INVALID_TOKEN = "INVALID_TOKEN"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class IdentityResult(Generic[T]):
    """Tagged result: ok with a value, or failed with an error code and message."""

    ok: bool
    value: T | None = None
    error: IdentityErrorCode | None = None
    message: str = ""

    @classmethod
    def success(cls, value: T | None = None) -> "IdentityResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: IdentityErrorCode, message: str = "") -> "IdentityResult[T]":
        return cls(ok=False, error=error, message=message or error.value)


@dataclass(frozen=True)
class IdentityUser:
    """Identity record (no credential material)."""

    uid: str
    email: str
    display_name: str | None = None
    disabled: bool = False


@dataclass(frozen=True)
class SignInTokens:
    """Tokens returned by password sign-in or refresh."""

    id_token: str
    refresh_token: str
    expires_in: int
    uid: str


@dataclass(frozen=True)
class TokenClaims:
    """Verified ID-token claims."""

    uid: str
    email: str | None
    raw: dict[str, Any]
