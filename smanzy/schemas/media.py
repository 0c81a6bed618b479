"""Request/response schemas for media endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MediaResponse(BaseModel):
    """Media metadata."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    filename: str
    stored_name: str
    url: str
    type: str
    mime_type: str | None = None
    size: int = Field(..., ge=0, description="File size in bytes")
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MediaListResponse(BaseModel):
    """Paginated public media listing."""

    files: list[MediaResponse]
    total: int = Field(..., ge=0)
    limit: int
    offset: int


class MediaUpdateRequest(BaseModel):
    """JSON body for PUT /media/{id}. Use multipart to replace the file itself."""

    filename: str | None = Field(default=None, max_length=512)
