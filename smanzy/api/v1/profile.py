"""Current user's own profile."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smanzy.api.v1.auth import AuthContext, get_current_user
from smanzy.core.database import get_db
from smanzy.schemas.auth import ProfileUpdateRequest, UserResponse
from smanzy.services import accounts

router = APIRouter()


@router.get("", response_model=UserResponse)
def get_profile(
    ctx: Annotated[AuthContext, Depends(get_current_user)],
) -> UserResponse:
    return UserResponse.model_validate(ctx.user)


@router.put("", response_model=UserResponse)
def update_profile(
    body: ProfileUpdateRequest,
    ctx: Annotated[AuthContext, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """
    Update the caller's own record. Only fields present in the body change.
    A new email must not belong to another active user; a new password is re-hashed.
    """
    user = accounts.update_profile(db, ctx.user, body.model_dump(exclude_unset=True))
    return UserResponse.model_validate(user)
