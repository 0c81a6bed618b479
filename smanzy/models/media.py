"""ORM model for uploaded media files."""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String

from smanzy.models.base import Base, SoftDeleteMixin, TimestampMixin


class Media(TimestampMixin, SoftDeleteMixin, Base):
    """
    Metadata for one file stored under UPLOAD_DIR.

    filename is the client's original name; stored_name is the unique name on
    disk and the last path segment of url. owner_id never changes.
    """

    __tablename__ = "media"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    filename = Column(String(512), nullable=False)
    stored_name = Column(String(255), nullable=False, unique=True)
    url = Column(String(1024), nullable=False)
    type = Column(String(32), nullable=False, default="file")
    mime_type = Column(String(255), nullable=True)
    size = Column(BigInteger, nullable=False, default=0)
