"""Pydantic request/response schemas."""

from smanzy.schemas.album import (
    AlbumCreateRequest,
    AlbumMediaRequest,
    AlbumResponse,
    AlbumUpdateRequest,
)
from smanzy.schemas.auth import (
    LoginRequest,
    ProfileUpdateRequest,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    RoleRequest,
    TokenPair,
    UserResponse,
    UsersListResponse,
    UserUpdateRequest,
)
from smanzy.schemas.common import ErrorResponse, MessageResponse
from smanzy.schemas.health import HealthResponse
from smanzy.schemas.media import MediaListResponse, MediaResponse, MediaUpdateRequest

__all__ = [
    "AlbumCreateRequest",
    "AlbumMediaRequest",
    "AlbumResponse",
    "AlbumUpdateRequest",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "MediaListResponse",
    "MediaResponse",
    "MediaUpdateRequest",
    "MessageResponse",
    "ProfileUpdateRequest",
    "RefreshRequest",
    "RegisterRequest",
    "RegisterResponse",
    "RoleRequest",
    "TokenPair",
    "UserResponse",
    "UserUpdateRequest",
    "UsersListResponse",
]
