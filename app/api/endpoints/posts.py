"""Post API: image/video posts, views and likes."""

from fastapi import APIRouter, File, Form, Query, UploadFile

from app.api.dependencies import ContainerDep, ModeratorDep, read_upload
from app.schemas.content import PostUpdate

router = APIRouter()


@router.post("", status_code=201)
async def create_post(
    user: ModeratorDep,
    container: ContainerDep,
    type: str = Form(...),
    category: str = Form(...),
    content: str = Form(...),
    media: UploadFile | None = File(None),
):
    return await container.posts.create(
        type=type,
        category=category,
        content=content,
        media=await read_upload("media", media),
        user=user,
    )


@router.get("")
async def list_posts(
    container: ContainerDep,
    category: str | None = None,
    author_id: str | None = Query(None, alias="authorId"),
    page: int = Query(1),
    limit: int | None = Query(None),
):
    return await container.posts.list_all(
        category=category, author_id=author_id, page=page, limit=limit
    )


@router.get("/{post_id}")
async def get_post(post_id: str, container: ContainerDep):
    """Return a post and count the view."""
    return await container.posts.get(post_id)


@router.put("/{post_id}")
async def update_post(post_id: str, body: PostUpdate, user: ModeratorDep, container: ContainerDep):
    return await container.posts.update(post_id, content=body.content, user=user)


@router.delete("/{post_id}")
async def delete_post(post_id: str, user: ModeratorDep, container: ContainerDep):
    return await container.posts.delete(post_id, user=user)


@router.post("/{post_id}/like")
async def like_post(post_id: str, container: ContainerDep):
    return await container.posts.like(post_id)
