"""Admin statistics API."""

from fastapi import APIRouter, Query

from app.api.dependencies import AdminDep, ContainerDep
from app.shared.utils.datetime import utc_now

router = APIRouter()


@router.get("/overview")
async def overview(admin: AdminDep, container: ContainerDep):
    return await container.stats.overview()


@router.get("/audios")
async def audio_stats(admin: AdminDep, container: ContainerDep, period: int = Query(30)):
    """Audio statistics over the last `period` days."""
    return await container.stats.audio_stats(period)


@router.get("/users")
async def user_stats(admin: AdminDep, container: ContainerDep):
    return await container.stats.user_stats()


@router.get("/engagement")
async def engagement(admin: AdminDep, container: ContainerDep):
    return await container.stats.engagement()


@router.get("/report")
async def monthly_report(
    admin: AdminDep,
    container: ContainerDep,
    year: int | None = None,
    month: int | None = None,
):
    """Monthly activity report; defaults to the current month."""
    now = utc_now()
    return await container.stats.monthly_report(year or now.year, month or now.month)
