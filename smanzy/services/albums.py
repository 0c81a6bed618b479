"""Albums: named, user-owned collections of media."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from smanzy.core.errors import InvalidInputError, NotFoundError
from smanzy.models import Album, User
from smanzy.services.media import get_media
from smanzy.services.ownership import ensure_can_mutate

logger = logging.getLogger(__name__)


def create_album(session: Session, owner: User, title: str, description: str = "") -> Album:
    title = (title or "").strip()
    if not title:
        raise InvalidInputError("Album title is required.")
    album = Album(owner_id=owner.id, title=title, description=description or "")
    session.add(album)
    session.commit()
    session.refresh(album)
    logger.info("User id=%s created album id=%s", owner.id, album.id)
    return album


def get_album(session: Session, album_id: int) -> Album:
    album = (
        session.query(Album)
        .filter(Album.id == album_id, Album.deleted_at.is_(None))
        .first()
    )
    if album is None:
        raise NotFoundError("Album not found.")
    return album


def list_user_albums(session: Session, user: User) -> list[Album]:
    return (
        session.query(Album)
        .filter(Album.owner_id == user.id, Album.deleted_at.is_(None))
        .order_by(Album.id)
        .all()
    )


def update_album(
    session: Session,
    user: User,
    album: Album,
    title: str | None = None,
    description: str | None = None,
) -> Album:
    """Change title and/or description. Owner or admin only."""
    ensure_can_mutate(album, user)
    if title is not None:
        title = title.strip()
        if not title:
            raise InvalidInputError("Album title must not be empty.")
        album.title = title
    if description is not None:
        album.description = description
    session.commit()
    session.refresh(album)
    return album


def delete_album(session: Session, user: User, album: Album, permanent: bool = False) -> None:
    """
    Soft-delete album, or with permanent=True drop its media links and the
    row itself. Owner or admin only. Media files are never touched.
    """
    ensure_can_mutate(album, user)
    album_id = album.id
    if permanent:
        album.media.clear()
        session.delete(album)
    else:
        album.deleted_at = datetime.now(UTC)
    session.commit()
    logger.info(
        "User id=%s %s album id=%s",
        user.id,
        "permanently deleted" if permanent else "deleted",
        album_id,
    )


def add_media_to_album(session: Session, user: User, album: Album, media_id: int) -> Album:
    """Add an active media item to album. Adding one already present is a no-op."""
    ensure_can_mutate(album, user)
    media = get_media(session, media_id)
    if media not in album.media:
        album.media.append(media)
        session.commit()
        session.refresh(album)
    return album


def remove_media_from_album(session: Session, user: User, album: Album, media_id: int) -> Album:
    """Remove a media item from album. Removing one not present is a no-op."""
    ensure_can_mutate(album, user)
    member = next((m for m in album.media if m.id == media_id), None)
    if member is not None:
        album.media.remove(member)
        session.commit()
        session.refresh(album)
    return album
