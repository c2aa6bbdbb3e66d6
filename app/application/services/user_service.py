"""User service: staff invitations, role management and device tokens.

An invited account moves from "invited" (needsPasswordReset true, an
inviteToken set) to "active" once the invitee sets a password through the
reset-password flow in AuthService.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.application.dtos.identity import IdentityErrorCode
from app.application.dtos.user import CurrentUser
from app.application.services.content_service import ContentService, snapshot_to_dict
from app.core.constants import BROADCAST_TOPIC, COLLECTION_USERS, DESCENDING
from app.domain.enums import INVITABLE_ROLES, Role
from app.domain.exceptions import (
    ConflictException,
    ExternalServiceException,
    ResourceNotFoundException,
    ValidationException,
    VoiceOfFaithException,
)
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_random_password, generate_token
from app.shared.utils.sanitization import sanitize_text

if TYPE_CHECKING:
    from app.application.interfaces import (
        IDocumentStore,
        IIdentityProvider,
        IMailer,
        IPushGateway,
    )
    from app.core.config import Settings

logger = logging.getLogger(__name__)

_ABSENT = (IdentityErrorCode.USER_NOT_FOUND, IdentityErrorCode.EMAIL_NOT_FOUND)


class UserService(ContentService):
    """Owns the `users` collection and the matching identity accounts."""

    collection_name = COLLECTION_USERS
    resource_name = "User"

    def __init__(
        self,
        db: "IDocumentStore",
        settings: "Settings",
        *,
        identity: "IIdentityProvider",
        mailer: "IMailer",
        push: "IPushGateway | None" = None,
    ) -> None:
        super().__init__(db, settings, push=push)
        self.identity = identity
        self.mailer = mailer

    async def invite(
        self,
        *,
        email: str,
        role: str,
        display_name: str,
        inviter: CurrentUser,
    ) -> dict[str, Any]:
        """Create an identity and an invited profile, then email the invite link.

        Steps run in order: identity, profile, email. When a later step fails
        the invite_consistency_policy decides whether earlier steps are undone
        ("compensate") or left in place ("best_effort"); the error is re-raised
        either way.

        Raises:
            ValidationException: Role is not pasteur or media.
            ConflictException: An identity with this email already exists.
            ExternalServiceException: Identity provider failure.
        """
        if role not in INVITABLE_ROLES:
            raise ValidationException("Role must be either pasteur or media", field="role")
        email = email.strip().lower()
        name = sanitize_text(display_name) or ""

        existing = await self.identity.get_user_by_email(email)
        if existing.ok:
            raise ConflictException("User with this email already exists")
        if existing.error not in _ABSENT:
            raise ExternalServiceException("Identity", existing.message)

        created = await self.identity.create_user(email, generate_random_password(12), name)
        if not created.ok:
            if created.error == IdentityErrorCode.EMAIL_EXISTS:
                raise ConflictException("User with this email already exists")
            raise ExternalServiceException("Identity", created.message)
        uid = created.value.uid

        invite_token = generate_token()
        now = utc_now()
        profile_written = False
        try:
            await self.collection.document(uid).set(
                {
                    "email": email,
                    "displayName": name,
                    "role": role,
                    "photoUrl": None,
                    "fcmToken": None,
                    "createdAt": now,
                    "needsPasswordReset": True,
                    "inviteToken": invite_token,
                    "invitedBy": inviter.uid,
                    "invitedAt": now,
                }
            )
            profile_written = True
            await self.mailer.send_invitation(email, name, role, invite_token)
        except VoiceOfFaithException:
            if self.settings.invite_consistency_policy == "compensate":
                await self._undo_invite(uid, profile_written)
            else:
                logger.warning(
                    "Invite for %s left partially applied (profile written: %s)",
                    uid,
                    profile_written,
                )
            raise

        logger.info("User %s invited as %s by %s", uid, role, inviter.uid)
        return {"success": True, "message": "User invited successfully", "userId": uid}

    async def _undo_invite(self, uid: str, profile_written: bool) -> None:
        if profile_written:
            try:
                await self.collection.document(uid).delete()
            except VoiceOfFaithException as e:
                logger.error("Could not remove profile %s during rollback: %s", uid, e.message)
        result = await self.identity.delete_user(uid)
        if not result.ok:
            logger.error("Could not remove identity %s during rollback: %s", uid, result.message)

    async def list_users(
        self, *, role: str | None = None, page: int = 1, limit: int | None = None
    ) -> dict[str, Any]:
        req = self.page_request(page, limit)
        query = self.collection
        if role:
            query = query.where("role", "==", role)
        users, pagination = await self._paginate(
            query.order_by("createdAt", DESCENDING), req, count_query=query
        )
        return {"success": True, "users": users, "pagination": pagination}

    async def get_user(self, user_id: str) -> dict[str, Any]:
        snap = await self._get_snapshot(user_id)
        return {"success": True, "user": snapshot_to_dict(snap)}

    async def update_role(self, user_id: str, role: str) -> dict[str, Any]:
        """Set the role; setting the same role twice is a no-op apart from updatedAt."""
        if role not in Role.values():
            raise ValidationException("Invalid role", field="role")
        updated = await self.collection.document(user_id).update(
            {"role": role, "updatedAt": utc_now()}
        )
        if not updated:
            raise ResourceNotFoundException(self.resource_name, user_id)
        return {"success": True, "message": "User role updated successfully"}

    async def resend_invitation(self, user_id: str) -> dict[str, Any]:
        """Issue a fresh invite token (the old one stops matching) and re-send the email."""
        data = (await self._get_snapshot(user_id)).to_dict()
        invite_token = generate_token()
        await self.collection.document(user_id).update(
            {
                "inviteToken": invite_token,
                "needsPasswordReset": True,
                "inviteResendAt": utc_now(),
            }
        )
        await self.mailer.send_invitation(
            data.get("email"), data.get("displayName") or "", data.get("role"), invite_token
        )
        return {"success": True, "message": "Invitation resent successfully"}

    async def delete_user(self, user_id: str) -> dict[str, Any]:
        """Delete the identity, then the profile."""
        result = await self.identity.delete_user(user_id)
        if not result.ok:
            if result.error == IdentityErrorCode.USER_NOT_FOUND:
                raise ResourceNotFoundException(self.resource_name, user_id)
            raise ExternalServiceException("Identity", result.message)
        await self.collection.document(user_id).delete()
        return {"success": True, "message": "User deleted successfully"}

    async def update_fcm_token(self, uid: str, token: str) -> dict[str, Any]:
        """Store the device token and subscribe it to the broadcast topic."""
        if not token or not token.strip():
            raise ValidationException("FCM token is required", field="fcmToken")
        token = token.strip()
        if not await self.collection.document(uid).update(
            {"fcmToken": token, "fcmTokenUpdatedAt": utc_now()}
        ):
            raise ResourceNotFoundException(self.resource_name, uid)
        if self.push is not None:
            try:
                await self.push.subscribe_to_topic([token], BROADCAST_TOPIC)
            except VoiceOfFaithException as e:
                if self.settings.notification_failure_policy == "raise":
                    raise ExternalServiceException("Notification", e.message) from e
                logger.warning("Could not subscribe device of %s to %s: %s", uid, BROADCAST_TOPIC, e.message)
        return {"success": True, "message": "FCM token updated successfully"}
