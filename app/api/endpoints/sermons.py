"""Sermon API: image + PDF upload, date-filtered listing, stats."""

from datetime import datetime

from fastapi import APIRouter, File, Form, Query, UploadFile

from app.api.dependencies import ContainerDep, ModeratorDep, read_upload
from app.schemas.content import SermonUpdate

router = APIRouter()


@router.post("", status_code=201)
async def create_sermon(
    user: ModeratorDep,
    container: ContainerDep,
    title: str = Form(..., min_length=3, max_length=200),
    date: datetime = Form(...),
    image: UploadFile | None = File(None),
    pdf: UploadFile | None = File(None),
):
    return await container.sermons.create(
        title=title,
        date=date,
        image=await read_upload("image", image),
        pdf=await read_upload("pdf", pdf),
        user=user,
    )


@router.get("")
async def list_sermons(
    container: ContainerDep,
    year: int | None = Query(None, ge=2000, le=2100),
    month: int | None = Query(None, ge=1, le=12),
    page: int = Query(1),
    limit: int | None = Query(None),
):
    return await container.sermons.list_all(year=year, month=month, page=page, limit=limit)


@router.get("/stats")
async def sermon_stats(
    container: ContainerDep, year: int | None = Query(None, ge=2000, le=2100)
):
    return await container.sermons.stats(year=year)


@router.get("/{sermon_id}")
async def get_sermon(sermon_id: str, container: ContainerDep):
    return await container.sermons.get(sermon_id)


@router.put("/{sermon_id}")
async def update_sermon(
    sermon_id: str, body: SermonUpdate, user: ModeratorDep, container: ContainerDep
):
    return await container.sermons.update(sermon_id, title=body.title, date=body.date, user=user)


@router.delete("/{sermon_id}")
async def delete_sermon(sermon_id: str, user: ModeratorDep, container: ContainerDep):
    return await container.sermons.delete(sermon_id, user=user)


@router.post("/{sermon_id}/download")
async def download_sermon(sermon_id: str, container: ContainerDep):
    return await container.sermons.increment_downloads(sermon_id)
