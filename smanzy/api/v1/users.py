"""User administration (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from smanzy.api.v1.auth import require_admin
from smanzy.core.database import get_db
from smanzy.core.errors import NotFoundError
from smanzy.models import User
from smanzy.schemas.auth import RoleRequest, UserResponse, UsersListResponse, UserUpdateRequest
from smanzy.services import identity
from smanzy.services.storage import LocalStorage, get_storage

router = APIRouter(dependencies=[Depends(require_admin)])


def _get_user_or_404(db: Session, user_id: int, include_deleted: bool = False) -> User:
    user = identity.find_by_id(db, user_id, include_deleted=include_deleted)
    if user is None:
        raise NotFoundError("User not found.")
    return user


@router.get("", response_model=UsersListResponse)
def list_users(
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    users = identity.list_users(db)
    return UsersListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        total=len(users),
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    return UserResponse.model_validate(_get_user_or_404(db, user_id))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    user = _get_user_or_404(db, user_id)
    user = identity.update_identity(db, user, body.model_dump(exclude_unset=True))
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[LocalStorage, Depends(get_storage)],
    permanent: Annotated[bool, Query(description="Purge instead of soft delete")] = False,
) -> Response:
    """
    Soft-delete a user (default) or, with permanent=true, purge the user and
    everything they own. Purge also works on already soft-deleted users.
    """
    user = _get_user_or_404(db, user_id, include_deleted=permanent)
    if permanent:
        for stored_name in identity.hard_delete_identity(db, user):
            storage.remove_quietly(stored_name)
    else:
        identity.soft_delete_identity(db, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/roles", response_model=UserResponse)
def assign_role(
    user_id: int,
    body: RoleRequest,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Give the user a role. Assigning a role the user already holds changes nothing."""
    user = identity.assign_role(db, _get_user_or_404(db, user_id), body.role_name)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}/roles", response_model=UserResponse)
def remove_role(
    user_id: int,
    body: RoleRequest,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Take a role away from the user. Removing a role the user does not hold changes nothing."""
    user = identity.remove_role(db, _get_user_or_404(db, user_id), body.role_name)
    return UserResponse.model_validate(user)
