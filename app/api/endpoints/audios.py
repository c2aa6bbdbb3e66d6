"""Audio API: multipart upload, listing and play/download counters."""

from fastapi import APIRouter, File, Form, Query, UploadFile

from app.api.dependencies import ContainerDep, ModeratorDep, read_upload
from app.schemas.content import AudioUpdate

router = APIRouter()


@router.post("", status_code=201)
async def create_audio(
    user: ModeratorDep,
    container: ContainerDep,
    title: str = Form(..., min_length=3, max_length=200),
    category: str = Form(...),
    description: str | None = Form(None, max_length=1000),
    audio: UploadFile | None = File(None),
    thumbnail: UploadFile | None = File(None),
):
    """Upload an audio file (and optional thumbnail); notifies all users."""
    return await container.audios.create(
        title=title,
        category=category,
        description=description,
        audio=await read_upload("audio", audio),
        thumbnail=await read_upload("thumbnail", thumbnail),
        user=user,
    )


@router.get("")
async def list_audios(
    container: ContainerDep,
    category: str | None = None,
    page: int = Query(1),
    limit: int | None = Query(None),
):
    return await container.audios.list_all(category=category, page=page, limit=limit)


@router.get("/{audio_id}")
async def get_audio(audio_id: str, container: ContainerDep):
    return await container.audios.get(audio_id)


@router.put("/{audio_id}")
async def update_audio(
    audio_id: str, body: AudioUpdate, user: ModeratorDep, container: ContainerDep
):
    return await container.audios.update(
        audio_id, title=body.title, description=body.description, user=user
    )


@router.delete("/{audio_id}")
async def delete_audio(audio_id: str, user: ModeratorDep, container: ContainerDep):
    return await container.audios.delete(audio_id, user=user)


@router.post("/{audio_id}/play")
async def play_audio(audio_id: str, container: ContainerDep):
    return await container.audios.increment_plays(audio_id)


@router.post("/{audio_id}/download")
async def download_audio(audio_id: str, container: ContainerDep):
    return await container.audios.increment_downloads(audio_id)
