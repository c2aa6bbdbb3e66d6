"""Pydantic request/response schemas for the API."""

from app.schemas.auth import (
    CustomTokenRequest,
    FcmTokenRequest,
    LoginRequest,
    RefreshRequest,
    ResetPasswordRequest,
    VerifyTokenRequest,
)
from app.schemas.content import AudioUpdate, PostUpdate, SermonUpdate
from app.schemas.donations import DonationCreate
from app.schemas.health import HealthResponse, ServiceStatus
from app.schemas.live import LiveNotifyRequest, LiveStatusUpdate
from app.schemas.users import InviteUserRequest, UpdateRoleRequest

__all__ = [
    "AudioUpdate",
    "CustomTokenRequest",
    "DonationCreate",
    "FcmTokenRequest",
    "HealthResponse",
    "InviteUserRequest",
    "LiveNotifyRequest",
    "LiveStatusUpdate",
    "LoginRequest",
    "PostUpdate",
    "RefreshRequest",
    "ResetPasswordRequest",
    "SermonUpdate",
    "ServiceStatus",
    "UpdateRoleRequest",
    "VerifyTokenRequest",
]
