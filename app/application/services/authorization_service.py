"""Authorization rules: role gates and ownership checks.

Route-level gates (admin, moderator) live in the API dependencies; this
module holds the ownership rule shared by every content service: a
mutation is allowed iff the caller owns the resource or is admin.
"""

from __future__ import annotations

from app.application.dtos.user import CurrentUser
from app.domain.enums import MODERATOR_ROLES, Role
from app.domain.exceptions import AuthorizationException


class AuthorizationService:
    """Role and ownership checks; stateless."""

    @staticmethod
    def is_admin(user: CurrentUser) -> bool:
        return user.role == Role.ADMIN.value

    @staticmethod
    def is_moderator(user: CurrentUser) -> bool:
        return user.role in MODERATOR_ROLES

    def require_admin(self, user: CurrentUser) -> None:
        """Raise AuthorizationException unless the caller is admin."""
        if not self.is_admin(user):
            raise AuthorizationException("Admin access required")

    def require_moderator(self, user: CurrentUser) -> None:
        """Raise AuthorizationException unless the caller is admin, pasteur or media."""
        if not self.is_moderator(user):
            raise AuthorizationException("Moderator access required")

    def can_modify(self, owner_id: str | None, user: CurrentUser) -> bool:
        """Return True if the caller owns the resource or is admin."""
        return self.is_admin(user) or (owner_id is not None and owner_id == user.uid)

    def require_owner_or_admin(
        self,
        owner_id: str | None,
        user: CurrentUser,
        resource: str,
        action: str,
    ) -> None:
        """Raise AuthorizationException if the caller may not mutate the resource.

        Args:
            owner_id: Uploader/author id stored on the resource.
            user: Caller.
            resource: Resource kind for the error details (e.g. 'audio').
            action: Attempted action (e.g. 'update', 'delete').
        """
        if not self.can_modify(owner_id, user):
            raise AuthorizationException(
                f"You do not have permission to {action} this {resource}",
                resource=resource,
                action=action,
            )
