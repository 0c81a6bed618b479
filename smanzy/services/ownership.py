"""Owner-or-admin rule for mutating owned resources (media, albums)."""

import logging
from typing import Protocol

from smanzy.core.errors import ForbiddenError
from smanzy.models import User
from smanzy.services.identity import ADMIN_ROLE, has_role

logger = logging.getLogger(__name__)


class OwnedResource(Protocol):
    id: int
    owner_id: int


def can_mutate(resource: OwnedResource, user: User) -> bool:
    """True if user owns resource or holds the admin role."""
    return resource.owner_id == user.id or has_role(user, ADMIN_ROLE)


def ensure_can_mutate(resource: OwnedResource, user: User) -> None:
    """Raise ForbiddenError unless can_mutate. Call before any write."""
    if not can_mutate(resource, user):
        logger.info(
            "Denied mutation of %s id=%s by user id=%s",
            type(resource).__name__,
            resource.id,
            user.id,
        )
        raise ForbiddenError()
