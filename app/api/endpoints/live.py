"""Live-stream status API (status is public, changes are admin-only)."""

from fastapi import APIRouter

from app.api.dependencies import AdminDep, ContainerDep
from app.schemas.live import LiveNotifyRequest, LiveStatusUpdate

router = APIRouter()


@router.get("/status")
async def get_live_status(container: ContainerDep):
    return await container.live.get_status()


@router.put("/status")
async def update_live_status(body: LiveStatusUpdate, admin: AdminDep, container: ContainerDep):
    """Start or stop the live stream; starting notifies all users."""
    return await container.live.update_status(
        is_live=body.is_live,
        live_youtube_url=body.live_youtube_url,
        live_title=body.live_title,
        user=admin,
    )


@router.post("/notify")
async def send_live_notification(
    body: LiveNotifyRequest, admin: AdminDep, container: ContainerDep
):
    return await container.live.notify(title=body.title, body=body.body)
