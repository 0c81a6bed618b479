"""SQLAlchemy ORM models."""

from smanzy.models.album import Album, album_media
from smanzy.models.base import Base
from smanzy.models.media import Media
from smanzy.models.user import Role, User, user_roles

__all__ = ["Album", "Base", "Media", "Role", "User", "album_media", "user_roles"]
