"""Presentation-layer dependency injection.

Routes receive the Container built at startup (app.state.container) and the
caller resolved from the bearer token. No adapter is constructed here.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.dtos.uploads import UploadedFile
from app.application.dtos.user import CurrentUser
from app.core.constants import COLLECTION_USERS
from app.core.container import Container
from app.domain.exceptions import (
    AuthenticationException,
    ConfigurationException,
    ResourceNotFoundException,
)

_http_bearer = HTTPBearer(auto_error=False)


def get_container(request: Request) -> Container:
    """Container built by the lifespan."""
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise ConfigurationException("Application container is not initialized")
    return container


ContainerDep = Annotated[Container, Depends(get_container)]


async def _resolve_user(container: Container, token: str) -> CurrentUser:
    result = await container.identity.verify_id_token(token)
    if not result.ok:
        raise AuthenticationException("Invalid or expired token")
    claims = result.value
    snap = await container.db.collection(COLLECTION_USERS).document(claims.uid).get()
    if snap is None:
        raise ResourceNotFoundException("User", claims.uid)
    profile = snap.to_dict()
    return CurrentUser(
        uid=claims.uid,
        email=claims.email or profile.get("email"),
        role=profile.get("role") or "user",
        display_name=profile.get("displayName"),
        profile=profile,
    )


async def get_current_user(
    container: ContainerDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> CurrentUser:
    """Verify the bearer ID token and load the caller's profile.

    Raises:
        AuthenticationException: Missing or invalid token (401).
        ResourceNotFoundException: Token is valid but no profile exists (404).
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("No token provided")
    return await _resolve_user(container, credentials.credentials)


async def get_current_user_optional(
    container: ContainerDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> CurrentUser | None:
    """Caller if a valid token with a profile is present; else None."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await _resolve_user(container, credentials.credentials)
    except (AuthenticationException, ResourceNotFoundException):
        return None


async def require_admin(
    container: ContainerDep,
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    container.authz.require_admin(user)
    return user


async def require_moderator(
    container: ContainerDep,
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    container.authz.require_moderator(user)
    return user


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
OptionalUserDep = Annotated[CurrentUser | None, Depends(get_current_user_optional)]
AdminDep = Annotated[CurrentUser, Depends(require_admin)]
ModeratorDep = Annotated[CurrentUser, Depends(require_moderator)]


async def read_upload(field: str, upload: UploadFile | None) -> UploadedFile | None:
    """Read a multipart file into memory; None when the part is absent or empty."""
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    await upload.close()
    return UploadedFile(
        field=field,
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        content=content,
    )
