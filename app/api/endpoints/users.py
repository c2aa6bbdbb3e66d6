"""Admin user management: invitations, roles, deletion."""

from fastapi import APIRouter, Query

from app.api.dependencies import AdminDep, ContainerDep
from app.schemas.users import InviteUserRequest, UpdateRoleRequest

router = APIRouter()


@router.post("/invite", status_code=201)
async def invite_user(body: InviteUserRequest, admin: AdminDep, container: ContainerDep):
    """Create an invited pasteur/media account and email the invitation link."""
    return await container.users.invite(
        email=body.email,
        role=body.role,
        display_name=body.display_name,
        inviter=admin,
    )


@router.get("")
async def list_users(
    admin: AdminDep,
    container: ContainerDep,
    role: str | None = None,
    page: int = Query(1),
    limit: int | None = Query(None),
):
    return await container.users.list_users(role=role, page=page, limit=limit)


@router.get("/{user_id}")
async def get_user(user_id: str, admin: AdminDep, container: ContainerDep):
    return await container.users.get_user(user_id)


@router.put("/{user_id}/role")
async def update_role(
    user_id: str, body: UpdateRoleRequest, admin: AdminDep, container: ContainerDep
):
    return await container.users.update_role(user_id, body.role)


@router.post("/{user_id}/resend")
async def resend_invitation(user_id: str, admin: AdminDep, container: ContainerDep):
    return await container.users.resend_invitation(user_id)


@router.delete("/{user_id}")
async def delete_user(user_id: str, admin: AdminDep, container: ContainerDep):
    return await container.users.delete_user(user_id)
