"""Auth service: password sign-in, token refresh, logout and invite redemption."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from app.application.dtos.identity import IdentityErrorCode
from app.application.dtos.user import CurrentUser
from app.application.services.authorization_service import AuthorizationService
from app.core.constants import COLLECTION_USERS
from app.domain.exceptions import (
    AuthenticationException,
    ExternalServiceException,
    ResourceNotFoundException,
    ValidationException,
    VoiceOfFaithException,
)
from app.shared.utils.datetime import parse_datetime, utc_now

if TYPE_CHECKING:
    from app.application.interfaces import (
        IDocumentStore,
        IIdentityProvider,
        IMailer,
        ISnapshot,
    )
    from app.core.config import Settings

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

_LOGIN_ERRORS = {
    IdentityErrorCode.EMAIL_NOT_FOUND: "Email not found",
    IdentityErrorCode.INVALID_PASSWORD: "Invalid password",
    IdentityErrorCode.INVALID_CREDENTIALS: "Invalid email or password",
    IdentityErrorCode.USER_DISABLED: "User account disabled",
}


class AuthService:
    """Session operations backed by the identity provider and the users collection."""

    def __init__(
        self,
        db: "IDocumentStore",
        settings: "Settings",
        *,
        identity: "IIdentityProvider",
        mailer: "IMailer",
        authz: AuthorizationService | None = None,
    ) -> None:
        self.db = db
        self.settings = settings
        self.identity = identity
        self.mailer = mailer
        self.authz = authz or AuthorizationService()

    @property
    def users(self):
        return self.db.collection(COLLECTION_USERS)

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Sign in with email/password and return tokens plus the profile.

        Raises:
            AuthenticationException: Provider rejected the credentials.
            ResourceNotFoundException: Identity exists but has no profile.
        """
        result = await self.identity.sign_in_with_password(email.strip().lower(), password)
        if not result.ok:
            message = _LOGIN_ERRORS.get(result.error)
            if message is None:
                logger.warning("Login failed for %s: %s", email, result.message)
                message = "Login failed"
            raise AuthenticationException(message)
        tokens = result.value

        snap = await self.users.document(tokens.uid).get()
        if snap is None:
            raise ResourceNotFoundException("User profile", tokens.uid, "User profile not found")
        profile = snap.to_dict()
        await self.users.document(tokens.uid).update({"lastLogin": utc_now()})

        return {
            "success": True,
            "message": "Login successful",
            "token": tokens.id_token,
            "refreshToken": tokens.refresh_token,
            "expiresIn": tokens.expires_in,
            "user": {
                "uid": tokens.uid,
                "email": profile.get("email"),
                "displayName": profile.get("displayName"),
                "role": profile.get("role"),
                "photoUrl": profile.get("photoUrl"),
                "needsPasswordReset": bool(profile.get("needsPasswordReset")),
            },
        }

    async def refresh(self, refresh_token: str) -> dict[str, Any]:
        if not refresh_token:
            raise ValidationException("Refresh token required", field="refreshToken")
        result = await self.identity.refresh_token(refresh_token)
        if not result.ok:
            raise AuthenticationException("Token refresh failed")
        tokens = result.value
        return {
            "success": True,
            "token": tokens.id_token,
            "refreshToken": tokens.refresh_token,
            "expiresIn": tokens.expires_in,
        }

    async def logout(self, user: CurrentUser) -> dict[str, Any]:
        """Forget the device token so the user stops receiving pushes."""
        await self.users.document(user.uid).update({"fcmToken": None, "lastLogout": utc_now()})
        return {"success": True, "message": "Logged out successfully"}

    async def generate_custom_token(self, uid: str, *, user: CurrentUser) -> dict[str, Any]:
        """Mint a custom sign-in token; non-admins may only mint their own."""
        if not uid:
            raise ValidationException("User UID required", field="uid")
        self.authz.require_owner_or_admin(uid, user, "custom token", "generate")
        result = await self.identity.create_custom_token(uid)
        if not result.ok:
            raise ExternalServiceException("Identity", result.message)
        return {"success": True, "customToken": result.value}

    def _invite_expired(self, profile: dict[str, Any]) -> bool:
        ttl_days = self.settings.invite_token_ttl_days
        if ttl_days is None:
            return False
        raw = profile.get("inviteResendAt") or profile.get("invitedAt")
        if raw is None:
            return False
        try:
            issued = parse_datetime(raw)
        except (TypeError, ValueError):
            logger.warning("Unreadable invitation date %r; treating invitation as expired", raw)
            return True
        return utc_now() - issued > timedelta(days=ttl_days)

    async def _find_pending_invite(self, token: str) -> ISnapshot | None:
        """Profile still awaiting a password for this token, unless the invitation expired."""
        if not token:
            return None
        matches = await (
            self.users.where("inviteToken", "==", token)
            .where("needsPasswordReset", "==", True)
            .limit(1)
            .get()
        )
        if not matches or self._invite_expired(matches[0].to_dict()):
            return None
        return matches[0]

    async def reset_password(self, token: str, new_password: str) -> dict[str, Any]:
        """Redeem an invitation token: set the password and activate the profile.

        The token must match a profile that still needs a password reset.
        When invite_token_ttl_days is set, tokens older than that are rejected.

        Raises:
            ValidationException: Password shorter than 6 characters.
            ResourceNotFoundException: "Invalid or expired token".
        """
        if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="newPassword",
            )
        snap = await self._find_pending_invite(token)
        if snap is None:
            raise ResourceNotFoundException("Token", None, "Invalid or expired token")
        profile = snap.to_dict()
        result = await self.identity.update_password(snap.id, new_password)
        if not result.ok:
            if result.error == IdentityErrorCode.WEAK_PASSWORD:
                raise ValidationException("Password is too weak", field="newPassword")
            raise ExternalServiceException("Identity", result.message)

        await self.users.document(snap.id).update(
            {
                "needsPasswordReset": False,
                "inviteToken": None,
                "passwordResetAt": utc_now(),
            }
        )
        try:
            await self.mailer.send_welcome(profile.get("email"), profile.get("displayName") or "")
        except VoiceOfFaithException as e:
            logger.warning("Welcome email to %s not sent: %s", profile.get("email"), e.message)
        return {"success": True, "message": "Password reset successfully"}

    async def verify_token(self, token: str) -> dict[str, Any]:
        """Check an invitation token without consuming it.

        Valid exactly when reset_password would accept it.
        """
        snap = await self._find_pending_invite(token)
        if snap is None:
            return {"valid": False, "error": "Invalid token"}
        data = snap.to_dict()
        return {
            "valid": True,
            "user": {
                "uid": snap.id,
                "email": data.get("email"),
                "displayName": data.get("displayName"),
                "role": data.get("role"),
            },
        }

    async def me(self, user: CurrentUser) -> dict[str, Any]:
        return {"success": True, "user": {"uid": user.uid, **user.profile}}
