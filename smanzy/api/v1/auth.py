"""Register/login/refresh routes and auth dependencies (get_current_user, require_role)."""

from dataclasses import dataclass
from typing import Annotated, Callable

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from smanzy.core.database import get_db
from smanzy.core.errors import ForbiddenError, UnauthorizedError
from smanzy.core.tokens import TokenClaims, decode_token
from smanzy.models import User
from smanzy.schemas.auth import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    TokenPair,
    UserResponse,
)
from smanzy.services import accounts
from smanzy.services.identity import ADMIN_ROLE, find_by_id, has_role

router = APIRouter()
security = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    """
    The authenticated caller for one request.

    user is re-loaded from the database on every request, so its roles are the
    current ones; claims.roles is only the snapshot taken when the token was issued.
    """

    user: User
    claims: TokenClaims

    @property
    def user_id(self) -> int:
        return self.user.id


def _bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str:
    """The token from an 'Authorization: Bearer <token>' header, exactly."""
    if credentials is None or credentials.scheme != "Bearer":
        raise UnauthorizedError("Not authenticated.")
    token = credentials.credentials
    if not token or token != token.strip() or " " in token:
        raise UnauthorizedError("Not authenticated.")
    return token


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> AuthContext:
    """
    Dependency: require a valid Bearer access token for an existing, active user.

    Raises UnauthorizedError (401) when the header is missing or malformed,
    the token is invalid, expired or a refresh token, or the user was deleted
    after the token was issued.
    """
    claims = decode_token(_bearer_token(credentials), expected_type="access")
    user = find_by_id(db, claims.user_id)
    if user is None:
        raise UnauthorizedError("User not found.")
    return AuthContext(user=user, claims=claims)


def require_role(role_name: str) -> Callable[..., AuthContext]:
    """Dependency factory: require the authenticated user to currently hold role_name (403 otherwise)."""

    def dependency(
        ctx: Annotated[AuthContext, Depends(get_current_user)],
    ) -> AuthContext:
        if not has_role(ctx.user, role_name):
            raise ForbiddenError(f"Role '{role_name}' required.")
        return ctx

    return dependency


require_admin = require_role(ADMIN_ROLE)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> RegisterResponse:
    """Create an account with the 'user' role and return it with a token pair."""
    user, tokens = accounts.register(db, body)
    return RegisterResponse(user=UserResponse.model_validate(user), **tokens.model_dump())


@router.post("/login", response_model=TokenPair)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenPair:
    """
    Authenticate with email and password; returns access and refresh tokens.
    Include the access token in the Authorization header as: Bearer <access_token>
    """
    return accounts.login(db, body.email, body.password)


@router.post("/refresh", response_model=TokenPair)
def refresh(
    body: RefreshRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenPair:
    """Exchange a refresh token for a new access and refresh token pair."""
    return accounts.refresh(db, body.refresh_token)
