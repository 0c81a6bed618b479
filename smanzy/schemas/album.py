"""Request/response schemas for album endpoints."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from smanzy.schemas.media import MediaResponse


class AlbumCreateRequest(BaseModel):
    title: str = Field(..., max_length=255)
    description: str = Field(default="", max_length=10_000)


class AlbumUpdateRequest(BaseModel):
    """Omitted fields are left unchanged."""

    title: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=10_000)


class AlbumMediaRequest(BaseModel):
    media_id: int = Field(..., ge=1)


class AlbumResponse(BaseModel):
    """Album with its (non-deleted) media files."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    title: str
    description: str
    media_files: list[MediaResponse] = Field(
        default_factory=list,
        validation_alias=AliasChoices("active_media", "media_files"),
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None
