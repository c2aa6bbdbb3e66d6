"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import (
    AudioCategory,
    DonationType,
    PaymentMethod,
    PostCategory,
    PostType,
    Role,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ConflictException,
    ExternalServiceException,
    ResourceNotFoundException,
    ValidationException,
    VoiceOfFaithException,
)

__all__ = [
    # Enums
    "AudioCategory",
    "DonationType",
    "PaymentMethod",
    "PostCategory",
    "PostType",
    "Role",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "ConflictException",
    "ExternalServiceException",
    "ResourceNotFoundException",
    "ValidationException",
    "VoiceOfFaithException",
]
