"""Request/response schemas for auth, profile and user admin endpoints."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ProfileFields(BaseModel):
    """Optional profile attributes shared by registration and updates."""

    phone: str | None = Field(default=None, max_length=32)
    age: int | None = Field(default=None, ge=0, le=150)
    address: str | None = Field(default=None, max_length=512)
    city: str | None = Field(default=None, max_length=255)
    country: str | None = Field(default=None, max_length=255)


class RegisterRequest(ProfileFields):
    """Registration payload. Email format and password policy are checked by the service."""

    email: str = Field(..., max_length=255, description="Email address")
    password: str = Field(..., max_length=128, description="Password")
    name: str = Field(..., max_length=255, description="Display name")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., max_length=255, description="Email address")
    password: str = Field(..., max_length=128, description="Password")


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, description="JWT refresh token")


class TokenPair(BaseModel):
    """Access and refresh tokens returned after login, registration or refresh."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Seconds until the access token expires")


class UserResponse(BaseModel):
    """User as returned to clients (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    phone: str | None = None
    age: int | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    roles: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("role_names", "roles"),
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RegisterResponse(TokenPair):
    """Response for POST /auth/register: the new user plus a token pair."""

    user: UserResponse


class ProfileUpdateRequest(ProfileFields):
    """Fields a user may change on their own record. Omitted fields are left as is."""

    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)
    name: str | None = Field(default=None, max_length=255)


class UserUpdateRequest(ProfileUpdateRequest):
    """Admin update of any user; same fields as a profile update."""


class RoleRequest(BaseModel):
    role_name: str = Field(..., min_length=1, max_length=64, description="Role name")


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserResponse]
    total: int
