"""Album endpoints. Reads are open to any authenticated user; changes are owner-or-admin."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from smanzy.api.v1.auth import AuthContext, get_current_user
from smanzy.core.database import get_db
from smanzy.schemas.album import (
    AlbumCreateRequest,
    AlbumMediaRequest,
    AlbumResponse,
    AlbumUpdateRequest,
)
from smanzy.schemas.common import MessageResponse
from smanzy.services import albums as album_service

router = APIRouter()


@router.post("", response_model=AlbumResponse, status_code=status.HTTP_201_CREATED)
def create_album(
    body: AlbumCreateRequest,
    ctx: Annotated[AuthContext, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> AlbumResponse:
    album = album_service.create_album(db, ctx.user, body.title, body.description)
    return AlbumResponse.model_validate(album)


@router.get("", response_model=list[AlbumResponse])
def list_my_albums(
    ctx: Annotated[AuthContext, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[AlbumResponse]:
    """Albums owned by the caller."""
    return [AlbumResponse.model_validate(a) for a in album_service.list_user_albums(db, ctx.user)]


@router.get("/{album_id}", response_model=AlbumResponse)
def get_album(
    album_id: int,
    _ctx: Annotated[AuthContext, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> AlbumResponse:
    return AlbumResponse.model_validate(album_service.get_album(db, album_id))


@router.put("/{album_id}", response_model=AlbumResponse)
def update_album(
    album_id: int,
    body: AlbumUpdateRequest,
    ctx: Annotated[AuthContext, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> AlbumResponse:
    album = album_service.get_album(db, album_id)
    album = album_service.update_album(db, ctx.user, album, body.title, body.description)
    return AlbumResponse.model_validate(album)


@router.delete("/{album_id}", response_model=MessageResponse)
def delete_album(
    album_id: int,
    ctx: Annotated[AuthContext, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    permanent: Annotated[bool, Query(description="Remove the row instead of soft delete")] = False,
) -> MessageResponse:
    album = album_service.get_album(db, album_id)
    album_service.delete_album(db, ctx.user, album, permanent=permanent)
    return MessageResponse(message="Album deleted successfully")


@router.post("/{album_id}/media", response_model=AlbumResponse)
def add_media_to_album(
    album_id: int,
    body: AlbumMediaRequest,
    ctx: Annotated[AuthContext, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> AlbumResponse:
    album = album_service.get_album(db, album_id)
    album = album_service.add_media_to_album(db, ctx.user, album, body.media_id)
    return AlbumResponse.model_validate(album)


@router.delete("/{album_id}/media", response_model=AlbumResponse)
def remove_media_from_album(
    album_id: int,
    body: AlbumMediaRequest,
    ctx: Annotated[AuthContext, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> AlbumResponse:
    album = album_service.get_album(db, album_id)
    album = album_service.remove_media_from_album(db, ctx.user, album, body.media_id)
    return AlbumResponse.model_validate(album)
