"""Media uploads, metadata, replacement and deletion."""

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import BinaryIO, NamedTuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from smanzy.core.config import settings
from smanzy.core.errors import InternalError, InvalidInputError, NotFoundError
from smanzy.models import Media, User
from smanzy.services.ownership import ensure_can_mutate
from smanzy.services.storage import LocalStorage, make_stored_name

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 1000


class UploadedFile(NamedTuple):
    """Framework-independent view of an uploaded file."""

    filename: str
    content_type: str | None
    file: BinaryIO


def media_url(stored_name: str) -> str:
    return f"{settings.API_V1_PREFIX}/media/files/{stored_name}"


def media_type(mime_type: str | None) -> str:
    """Coarse type from the MIME major type: image, video, audio or file."""
    major = (mime_type or "").split("/", 1)[0].lower()
    return major if major in ("image", "video", "audio") else "file"


def _save_upload(storage: LocalStorage, owner_id: int, upload: UploadedFile) -> tuple[str, int]:
    if not upload.filename:
        raise InvalidInputError("No file uploaded.")
    stored_name = make_stored_name(owner_id, upload.filename)
    try:
        size = storage.save(stored_name, upload.file)
    except OSError as e:
        logger.exception("Failed to write upload %s", stored_name)
        raise InternalError("Failed to save file.") from e
    return stored_name, size


def upload_media(session: Session, storage: LocalStorage, owner: User, upload: UploadedFile) -> Media:
    """
    Store the file, then create its record.

    If the record cannot be written the stored file is deleted again so no
    orphaned file is left behind.
    """
    stored_name, size = _save_upload(storage, owner.id, upload)
    media = Media(
        owner_id=owner.id,
        filename=upload.filename,
        stored_name=stored_name,
        url=media_url(stored_name),
        type=media_type(upload.content_type),
        mime_type=upload.content_type,
        size=size,
    )
    session.add(media)
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to save media record for %s; removing file", stored_name)
        storage.remove_quietly(stored_name)
        raise InternalError("Failed to save media record.") from e
    session.refresh(media)
    logger.info("User id=%s uploaded media id=%s (%s bytes)", owner.id, media.id, size)
    return media


def list_public_media(
    session: Session,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> tuple[list[Media], int]:
    """Newest first. Returns (page, total count of active media)."""
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    offset = max(0, offset)
    query = session.query(Media).filter(Media.deleted_at.is_(None))
    total = query.count()
    items = query.order_by(Media.created_at.desc(), Media.id.desc()).limit(limit).offset(offset).all()
    return items, total


def get_media(session: Session, media_id: int) -> Media:
    media = (
        session.query(Media)
        .filter(Media.id == media_id, Media.deleted_at.is_(None))
        .first()
    )
    if media is None:
        raise NotFoundError("Media not found.")
    return media


def media_file_path(storage: LocalStorage, stored_name: str) -> Path:
    """Path of a stored file. A missing file is logged and reported as 404."""
    path = storage.path_for(stored_name)
    if not path.is_file():
        logger.warning("Stored file %s is missing from %s", stored_name, storage.base_path)
        raise NotFoundError("File not found.")
    return path


def update_media(
    session: Session,
    storage: LocalStorage,
    user: User,
    media: Media,
    filename: str | None = None,
    upload: UploadedFile | None = None,
) -> Media:
    """
    Rename and/or replace the file of media. Owner or admin only.

    A replacement is written before the record is updated; the old file is
    removed only after the commit succeeds, the new one if it fails.
    """
    ensure_can_mutate(media, user)

    old_stored_name = None
    new_stored_name = None
    if upload is not None:
        new_stored_name, size = _save_upload(storage, media.owner_id, upload)
        old_stored_name = media.stored_name
        media.stored_name = new_stored_name
        media.url = media_url(new_stored_name)
        media.mime_type = upload.content_type
        media.type = media_type(upload.content_type)
        media.size = size

    if filename is not None and filename.strip():
        media.filename = filename.strip()

    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to update media id=%s", media.id)
        if new_stored_name:
            storage.remove_quietly(new_stored_name)
        raise InternalError("Failed to update media.") from e

    if old_stored_name:
        storage.remove_quietly(old_stored_name)
    session.refresh(media)
    return media


def delete_media(session: Session, storage: LocalStorage, user: User, media: Media) -> None:
    """Soft-delete media and remove its file (best effort). Owner or admin only."""
    ensure_can_mutate(media, user)
    media.deleted_at = datetime.now(UTC)
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to delete media id=%s", media.id)
        raise InternalError("Failed to delete media record.") from e
    storage.remove_quietly(media.stored_name)
    logger.info("User id=%s deleted media id=%s", user.id, media.id)
