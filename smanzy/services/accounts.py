"""Account lifecycle: registration, login, token refresh and profile updates."""

import logging
from functools import lru_cache
from typing import Any

from sqlalchemy.orm import Session

from smanzy.core.errors import InvalidCredentialsError, UnauthorizedError
from smanzy.core.security import hash_password, verify_password
from smanzy.core.tokens import decode_token, issue_token_pair
from smanzy.models import User
from smanzy.schemas.auth import RegisterRequest, TokenPair
from smanzy.services import identity

logger = logging.getLogger(__name__)


@lru_cache
def _dummy_hash() -> str:
    """A real bcrypt digest at the configured cost, checked against when the email is unknown."""
    return hash_password("not-a-real-password")


def register(session: Session, body: RegisterRequest) -> tuple[User, TokenPair]:
    """
    Validate input, create the user with the default role and issue tokens.

    Raises InvalidInputError for a malformed email, short password or empty
    name; DuplicateEmailError if the email is taken.
    """
    email = identity.validate_email(body.email)
    identity.validate_password(body.password)
    name = identity.validate_name(body.name)

    user = identity.create_identity(
        session,
        email=email,
        password=body.password,
        name=name,
        **body.model_dump(include=set(identity.PROFILE_FIELDS)),
    )
    return user, issue_token_pair(user)


def login(session: Session, email: str, password: str) -> TokenPair:
    """
    Authenticate by email and password.

    Unknown email, deleted account and wrong password all raise the same
    InvalidCredentialsError; only the log tells them apart.
    """
    user = identity.find_by_email(session, email)
    if user is None:
        # An unknown email costs one bcrypt check, like a wrong password.
        verify_password(password, _dummy_hash())
        logger.info("Login failed: no active user for the given email")
        raise InvalidCredentialsError()
    if not verify_password(password, user.password_hash):
        logger.info("Login failed: wrong password for user id=%s", user.id)
        raise InvalidCredentialsError()
    logger.info("Login succeeded for user id=%s", user.id)
    return issue_token_pair(user)


def refresh(session: Session, refresh_token: str) -> TokenPair:
    """Exchange a valid refresh token for a new access + refresh pair."""
    claims = decode_token(refresh_token, expected_type="refresh")
    user = identity.find_by_id(session, claims.user_id)
    if user is None:
        logger.info("Refresh rejected: user id=%s no longer active", claims.sub)
        raise UnauthorizedError("User not found.")
    return issue_token_pair(user)


def update_profile(session: Session, user: User, changes: dict[str, Any]) -> User:
    """Apply changes to the caller's own record."""
    return identity.update_identity(session, user, changes)
