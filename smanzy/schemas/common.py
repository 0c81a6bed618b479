"""Shared response schemas."""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    message: str = Field(..., description="Human-readable result")


class ErrorResponse(BaseModel):
    """Body of every error response."""

    detail: str | list = Field(..., description="Error message or validation errors")
    code: str = Field(..., description="Stable error code, e.g. invalid_token")
