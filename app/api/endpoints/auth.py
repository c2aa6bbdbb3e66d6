"""Auth API: login, token refresh, logout, invite redemption, current user."""

from fastapi import APIRouter, Request

from app.api.dependencies import ContainerDep, CurrentUserDep
from app.core.limiter import limit_auth
from app.schemas.auth import (
    CustomTokenRequest,
    FcmTokenRequest,
    LoginRequest,
    RefreshRequest,
    ResetPasswordRequest,
    VerifyTokenRequest,
)

router = APIRouter()


@router.post("/login")
@limit_auth
async def login(request: Request, body: LoginRequest, container: ContainerDep):
    """Email/password sign-in (rate-limited per client address)."""
    return await container.auth.login(body.email, body.password)


@router.post("/refresh")
async def refresh(body: RefreshRequest, container: ContainerDep):
    return await container.auth.refresh(body.refresh_token)


@router.post("/logout")
async def logout(user: CurrentUserDep, container: ContainerDep):
    return await container.auth.logout(user)


@router.post("/generate-custom-token")
async def generate_custom_token(
    body: CustomTokenRequest, user: CurrentUserDep, container: ContainerDep
):
    return await container.auth.generate_custom_token(body.uid, user=user)


@router.post("/reset-password")
async def reset_password(body: ResetPasswordRequest, container: ContainerDep):
    """Set the password of an invited account from its invitation token."""
    return await container.auth.reset_password(body.token, body.new_password)


@router.post("/verify-token")
async def verify_token(body: VerifyTokenRequest, container: ContainerDep):
    """Check an invitation token without consuming it."""
    return await container.auth.verify_token(body.token)


@router.get("/me")
async def me(user: CurrentUserDep, container: ContainerDep):
    return await container.auth.me(user)


@router.put("/fcm-token")
async def update_fcm_token(body: FcmTokenRequest, user: CurrentUserDep, container: ContainerDep):
    """Register the device for push notifications."""
    return await container.users.update_fcm_token(user.uid, body.fcm_token)
