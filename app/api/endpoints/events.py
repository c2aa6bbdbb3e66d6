"""Event API: multipart create/update with optional image and daily summaries."""

from datetime import datetime

from fastapi import APIRouter, File, Form, Query, UploadFile

from app.api.dependencies import ContainerDep, ModeratorDep, read_upload

router = APIRouter()


@router.post("", status_code=201)
async def create_event(
    user: ModeratorDep,
    container: ContainerDep,
    title: str = Form(..., min_length=3, max_length=200),
    description: str = Form(..., min_length=1),
    start_date: datetime = Form(..., alias="startDate"),
    end_date: datetime = Form(..., alias="endDate"),
    location: str = Form(..., min_length=1),
    daily_summaries: str | None = Form(None, alias="dailySummaries"),
    image: UploadFile | None = File(None),
):
    """Create an event; dailySummaries is a JSON array of {date, summary}."""
    return await container.events.create(
        title=title,
        description=description,
        start_date=start_date,
        end_date=end_date,
        location=location,
        daily_summaries=daily_summaries,
        image=await read_upload("image", image),
        user=user,
    )


@router.get("")
async def list_events(
    container: ContainerDep,
    upcoming: bool = False,
    page: int = Query(1),
    limit: int | None = Query(None),
):
    return await container.events.list_all(upcoming=upcoming, page=page, limit=limit)


@router.get("/{event_id}")
async def get_event(event_id: str, container: ContainerDep):
    return await container.events.get(event_id)


@router.put("/{event_id}")
async def update_event(
    event_id: str,
    user: ModeratorDep,
    container: ContainerDep,
    title: str | None = Form(None, min_length=3, max_length=200),
    description: str | None = Form(None),
    start_date: datetime | None = Form(None, alias="startDate"),
    end_date: datetime | None = Form(None, alias="endDate"),
    location: str | None = Form(None),
    daily_summaries: str | None = Form(None, alias="dailySummaries"),
    image: UploadFile | None = File(None),
):
    return await container.events.update(
        event_id,
        title=title,
        description=description,
        start_date=start_date,
        end_date=end_date,
        location=location,
        daily_summaries=daily_summaries,
        image=await read_upload("image", image),
        user=user,
    )


@router.delete("/{event_id}")
async def delete_event(event_id: str, user: ModeratorDep, container: ContainerDep):
    return await container.events.delete(event_id, user=user)
