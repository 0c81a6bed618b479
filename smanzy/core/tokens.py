"""JWT access/refresh token creation and validation."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Literal

import jwt
from pydantic import BaseModel, ValidationError

from smanzy.core.config import settings
from smanzy.core.errors import ExpiredTokenError, InvalidTokenError
from smanzy.schemas.auth import TokenPair

if TYPE_CHECKING:
    from smanzy.models.user import User

TokenType = Literal["access", "refresh"]

REQUIRED_CLAIMS = ["sub", "iss", "iat", "exp", "type"]


class TokenClaims(BaseModel):
    """Decoded token payload. ``roles`` is a snapshot taken at issuance."""

    sub: str
    email: str
    name: str
    roles: list[str]
    iss: str
    iat: int
    exp: int
    type: TokenType
    jti: str

    @property
    def user_id(self) -> int:
        return int(self.sub)


def _lifetime(token_type: TokenType) -> timedelta:
    if token_type == "access":
        return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)


def create_token(user: "User", token_type: TokenType, now: datetime | None = None) -> str:
    """Create a signed JWT of the given type for user."""
    issued_at = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "roles": user.role_names,
        "iss": settings.JWT_ISSUER,
        "iat": issued_at,
        "exp": issued_at + _lifetime(token_type),
        "type": token_type,
        "jti": secrets.token_hex(16),
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def issue_token_pair(user: "User", now: datetime | None = None) -> TokenPair:
    """Issue a fresh access + refresh token pair for user."""
    issued_at = now or datetime.now(UTC)
    return TokenPair(
        access_token=create_token(user, "access", now=issued_at),
        refresh_token=create_token(user, "refresh", now=issued_at),
        token_type="bearer",
        expires_in=int(_lifetime("access").total_seconds()),
    )


def decode_token(token: str, expected_type: TokenType) -> TokenClaims:
    """
    Validate token and return its claims.

    Raises ExpiredTokenError when the signature is valid but exp has passed,
    InvalidTokenError for anything else (bad signature, algorithm other than
    the configured one, wrong issuer, wrong token type, malformed payload).
    """
    try:
        header = jwt.get_unverified_header(token)
    except jwt.PyJWTError as e:
        raise InvalidTokenError() from e
    if header.get("alg") != settings.JWT_ALGORITHM:
        raise InvalidTokenError()

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as e:
        raise ExpiredTokenError() from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError() from e

    if payload.get("type") != expected_type:
        raise InvalidTokenError("Invalid token type.")
    try:
        claims = TokenClaims.model_validate(payload)
    except ValidationError as e:
        raise InvalidTokenError("Invalid token payload.") from e
    if not claims.sub.isdigit():
        raise InvalidTokenError("Invalid token payload.")
    return claims
