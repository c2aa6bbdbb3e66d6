"""Application DTOs (no dependency on HTTP or SDK types)."""

from app.application.dtos.identity import (
    IdentityErrorCode,
    IdentityResult,
    IdentityUser,
    SignInTokens,
    TokenClaims,
)
from app.application.dtos.pagination import PageRequest
from app.application.dtos.uploads import UploadedFile
from app.application.dtos.user import CurrentUser

__all__ = [
    "CurrentUser",
    "IdentityErrorCode",
    "IdentityResult",
    "IdentityUser",
    "PageRequest",
    "SignInTokens",
    "TokenClaims",
    "UploadedFile",
]
