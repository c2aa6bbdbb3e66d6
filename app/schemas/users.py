"""Admin user-management schemas."""

from pydantic import EmailStr, Field

from app.schemas._base import CamelModel


class InviteUserRequest(CamelModel):
    """Request body for POST /admin/users/invite."""

    email: EmailStr
    role: str = Field(..., description="pasteur or media")
    display_name: str = Field(..., min_length=2, max_length=100)


class UpdateRoleRequest(CamelModel):
    """Request body for PUT /admin/users/{id}/role."""

    role: str = Field(..., description="user, pasteur, media or admin")
