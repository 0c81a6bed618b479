"""Identity and role store: users, roles and the user_roles association."""

import logging
import re
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from smanzy.core.config import settings
from smanzy.core.errors import DuplicateEmailError, InvalidInputError
from smanzy.core.security import BCRYPT_MAX_BYTES, hash_password
from smanzy.models import Album, Media, Role, User, album_media

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "user"
ADMIN_ROLE = "admin"

PROFILE_FIELDS = ("phone", "age", "address", "city", "country")

# One @, no whitespace, a dot in the domain.
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    """Emails are compared and stored lowercased."""
    return email.strip().lower()


def validate_email(email: str) -> str:
    """Return the normalized email or raise InvalidInputError."""
    normalized = normalize_email(email or "")
    if not normalized or not EMAIL_PATTERN.match(normalized):
        raise InvalidInputError("A valid email address is required.")
    return normalized


def validate_password(password: str) -> None:
    """Length in characters within the configured range, and at most 72 bytes as UTF-8."""
    password = password or ""
    if not (settings.PASSWORD_MIN_LENGTH <= len(password) <= settings.PASSWORD_MAX_LENGTH):
        raise InvalidInputError(
            f"Password must be between {settings.PASSWORD_MIN_LENGTH} and "
            f"{settings.PASSWORD_MAX_LENGTH} characters."
        )
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise InvalidInputError(f"Password must not exceed {BCRYPT_MAX_BYTES} bytes.")


def validate_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise InvalidInputError("Name is required.")
    return name


def validate_role_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise InvalidInputError("Role name is required.")
    return name


def get_or_create_role(session: Session, name: str) -> Role:
    """Return the role called name, adding it to the session if missing (no commit)."""
    role = session.query(Role).filter(Role.name == name).first()
    if role is None:
        role = Role(name=name)
        session.add(role)
        session.flush()
        logger.info("Created role %s", name)
    return role


def ensure_roles(session: Session, names: Iterable[str]) -> list[Role]:
    """
    First-or-create each named role and commit.

    Idempotent: run once at startup before serving traffic.
    """
    roles = [get_or_create_role(session, name) for name in names]
    session.commit()
    return roles


def find_by_email(session: Session, email: str, include_deleted: bool = False) -> User | None:
    query = session.query(User).filter(User.email == normalize_email(email))
    if not include_deleted:
        query = query.filter(User.deleted_at.is_(None))
    return query.order_by(User.id.desc()).first()


def find_by_id(session: Session, user_id: int, include_deleted: bool = False) -> User | None:
    query = session.query(User).filter(User.id == user_id)
    if not include_deleted:
        query = query.filter(User.deleted_at.is_(None))
    return query.first()


def list_users(session: Session) -> list[User]:
    return session.query(User).filter(User.deleted_at.is_(None)).order_by(User.id).all()


def has_role(user: User, role_name: str) -> bool:
    """Exact, case-sensitive match against the user's loaded roles."""
    return role_name in user.role_names


def _commit(session: Session) -> None:
    """Commit, mapping an email uniqueness violation to DuplicateEmailError."""
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise DuplicateEmailError() from e
    except SQLAlchemyError:
        session.rollback()
        raise


def create_identity(
    session: Session,
    email: str,
    password: str,
    name: str,
    **profile: Any,
) -> User:
    """
    Create a user with the default role.

    The user row and its role association are committed together; on failure
    neither is persisted. Raises DuplicateEmailError if an active user already
    has the email.
    """
    email = normalize_email(email)
    if find_by_email(session, email) is not None:
        raise DuplicateEmailError()

    user = User(
        email=email,
        password_hash=hash_password(password),
        name=name.strip(),
        **{k: v for k, v in profile.items() if k in PROFILE_FIELDS},
    )
    user.roles.append(get_or_create_role(session, DEFAULT_ROLE))
    session.add(user)
    _commit(session)
    session.refresh(user)
    logger.info("Created user id=%s", user.id)
    return user


def update_identity(session: Session, user: User, changes: dict[str, Any]) -> User:
    """
    Apply changes to user. email/password/name set to None are ignored;
    profile fields set to None are cleared. Email changes are re-checked for
    uniqueness and password changes are re-hashed.
    """
    email = changes.get("email")
    if email is not None:
        email = validate_email(email)
        if email != user.email:
            existing = find_by_email(session, email)
            if existing is not None and existing.id != user.id:
                raise DuplicateEmailError()
            user.email = email

    password = changes.get("password")
    if password is not None:
        validate_password(password)
        user.password_hash = hash_password(password)

    name = changes.get("name")
    if name is not None:
        user.name = validate_name(name)

    for field in PROFILE_FIELDS:
        if field in changes:
            setattr(user, field, changes[field])

    _commit(session)
    session.refresh(user)
    return user


def assign_role(session: Session, user: User, role_name: str) -> User:
    """Give user the role. No-op if already held; unknown role names are created."""
    role_name = validate_role_name(role_name)
    if has_role(user, role_name):
        return user
    user.roles.append(get_or_create_role(session, role_name))
    session.commit()
    session.refresh(user)
    logger.info("Assigned role %s to user id=%s", role_name, user.id)
    return user


def remove_role(session: Session, user: User, role_name: str) -> User:
    """Take the role away from user. No-op if not held."""
    role_name = validate_role_name(role_name)
    role = next((r for r in user.roles if r.name == role_name), None)
    if role is None:
        return user
    user.roles.remove(role)
    session.commit()
    session.refresh(user)
    logger.info("Removed role %s from user id=%s", role_name, user.id)
    return user


def soft_delete_identity(session: Session, user: User) -> None:
    user.deleted_at = datetime.now(UTC)
    session.commit()
    logger.info("Soft-deleted user id=%s", user.id)


def hard_delete_identity(session: Session, user: User) -> list[str]:
    """
    Permanently remove user with their role links, albums and media rows.

    Returns the stored names of the removed media so the caller can delete
    the files.
    """
    media_rows = session.query(Media).filter(Media.owner_id == user.id).all()
    stored_names = [m.stored_name for m in media_rows]
    media_ids = [m.id for m in media_rows]
    album_ids = [row.id for row in session.query(Album.id).filter(Album.owner_id == user.id)]

    if media_ids:
        session.execute(album_media.delete().where(album_media.c.media_id.in_(media_ids)))
    if album_ids:
        session.execute(album_media.delete().where(album_media.c.album_id.in_(album_ids)))
    session.query(Album).filter(Album.owner_id == user.id).delete(synchronize_session=False)
    session.query(Media).filter(Media.owner_id == user.id).delete(synchronize_session=False)
    user_id = user.id
    session.delete(user)
    session.commit()
    logger.info("Permanently deleted user id=%s (media=%s, albums=%s)", user_id, len(media_ids), len(album_ids))
    return stored_names
