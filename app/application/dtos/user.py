"""DTOs for the authenticated caller (no dependency on the HTTP layer)."""

from dataclasses import dataclass, field
from typing import Any

from app.domain.enums import MODERATOR_ROLES, Role


@dataclass(frozen=True)
class CurrentUser:
    """Caller resolved from a verified bearer token plus its profile document."""

    uid: str
    email: str | None
    role: str
    display_name: str | None = None
    profile: dict[str, Any] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def is_moderator(self) -> bool:
        return self.role in MODERATOR_ROLES
