"""ORM model for albums (named collections of media)."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from smanzy.models.base import Base, SoftDeleteMixin, TimestampMixin

album_media = Table(
    "album_media",
    Base.metadata,
    Column("album_id", Integer, ForeignKey("albums.id", ondelete="CASCADE"), primary_key=True),
    Column("media_id", Integer, ForeignKey("media.id", ondelete="CASCADE"), primary_key=True),
)


class Album(TimestampMixin, SoftDeleteMixin, Base):
    """Album owned by one user. A media item can be in any number of albums."""

    __tablename__ = "albums"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")

    media = relationship("Media", secondary=album_media, lazy="selectin", order_by="Media.id")

    @property
    def active_media(self) -> list:
        """Member media that are not soft-deleted."""
        return [m for m in self.media if m.deleted_at is None]
