"""Media endpoints: public listing and files, authenticated upload/read, owner-or-admin edit/delete."""

import json
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from smanzy.api.v1.auth import AuthContext, get_current_user
from smanzy.core.database import get_db
from smanzy.core.errors import InvalidInputError
from smanzy.schemas.common import MessageResponse
from smanzy.schemas.media import MediaListResponse, MediaResponse, MediaUpdateRequest
from smanzy.services import media as media_service
from smanzy.services.media import UploadedFile
from smanzy.services.ownership import ensure_can_mutate
from smanzy.services.storage import LocalStorage, get_storage

router = APIRouter()


def _is_upload_file(obj: object) -> bool:
    """True if obj is an uploaded file (UploadFile or file-like with filename and read)."""
    if isinstance(obj, UploadFile):
        return True
    return (
        hasattr(obj, "read")
        and callable(getattr(obj, "read", None))
        and hasattr(obj, "filename")
    )


async def _read_update_body(request: Request) -> tuple[str | None, UploadedFile | None]:
    """
    Parse PUT /media/{id}: JSON {"filename"} or multipart with optional
    'filename' and 'file' fields. Returns (new filename, replacement file).
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type == "application/json":
        try:
            body = MediaUpdateRequest.model_validate(await request.json())
        except (json.JSONDecodeError, ValidationError) as e:
            raise InvalidInputError("Invalid input.") from e
        return body.filename, None
    if content_type == "multipart/form-data":
        form = await request.form()
        filename = form.get("filename")
        if filename is not None and not isinstance(filename, str):
            raise InvalidInputError("'filename' must be a text field.")
        file = form.get("file")
        upload = None
        if file is not None and _is_upload_file(file):
            upload = UploadedFile(
                filename=file.filename or "",
                content_type=getattr(file, "content_type", None),
                file=file.file,
            )
        return filename, upload
    raise HTTPException(
        status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        detail="Content-Type must be application/json or multipart/form-data.",
    )


@router.get("", response_model=MediaListResponse)
def list_media(
    db: Annotated[Session, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=media_service.MAX_PAGE_SIZE)] = media_service.DEFAULT_PAGE_SIZE,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> MediaListResponse:
    """Public, newest-first listing of all media. No authentication required."""
    items, total = media_service.list_public_media(db, limit=limit, offset=offset)
    return MediaListResponse(
        files=[MediaResponse.model_validate(m) for m in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/files/{name}")
def serve_file(
    name: str,
    storage: Annotated[LocalStorage, Depends(get_storage)],
) -> FileResponse:
    """Serve a stored file by its stored name. Public; rejects anything but a bare file name."""
    return FileResponse(media_service.media_file_path(storage, name))


@router.post("", response_model=MediaResponse, status_code=status.HTTP_201_CREATED)
def upload_media(
    file: Annotated[UploadFile, File(description="File to upload")],
    ctx: Annotated[AuthContext, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[LocalStorage, Depends(get_storage)],
) -> MediaResponse:
    """Upload a file as multipart/form-data field 'file'. The caller becomes its owner."""
    upload = UploadedFile(filename=file.filename or "", content_type=file.content_type, file=file.file)
    media = media_service.upload_media(db, storage, ctx.user, upload)
    return MediaResponse.model_validate(media)


@router.get("/{media_id}")
def get_media_file(
    media_id: int,
    _ctx: Annotated[AuthContext, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[LocalStorage, Depends(get_storage)],
) -> FileResponse:
    """Download the file content. Any authenticated user may read any media."""
    media = media_service.get_media(db, media_id)
    path = media_service.media_file_path(storage, media.stored_name)
    return FileResponse(path, media_type=media.mime_type, filename=media.filename)


@router.get("/{media_id}/details", response_model=MediaResponse)
def get_media_details(
    media_id: int,
    _ctx: Annotated[AuthContext, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MediaResponse:
    return MediaResponse.model_validate(media_service.get_media(db, media_id))


@router.put("/{media_id}", response_model=MediaResponse)
async def update_media(
    media_id: int,
    request: Request,
    ctx: Annotated[AuthContext, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[LocalStorage, Depends(get_storage)],
) -> MediaResponse:
    """
    Rename and/or replace a media file. Owner or admin only.

    - **JSON body**: `{"filename": "new-name.jpg"}`
    - **Multipart**: optional `filename` text field and optional `file` to replace the content.
    """
    media = await run_in_threadpool(media_service.get_media, db, media_id)
    ensure_can_mutate(media, ctx.user)
    filename, upload = await _read_update_body(request)
    media = await run_in_threadpool(
        media_service.update_media,
        db,
        storage,
        ctx.user,
        media,
        filename,
        upload,
    )
    return MediaResponse.model_validate(media)


@router.delete("/{media_id}", response_model=MessageResponse)
def delete_media(
    media_id: int,
    ctx: Annotated[AuthContext, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[LocalStorage, Depends(get_storage)],
) -> MessageResponse:
    """Delete a media item and its file. Owner or admin only."""
    media = media_service.get_media(db, media_id)
    media_service.delete_media(db, storage, ctx.user, media)
    return MessageResponse(message="Media deleted successfully")
