"""API v1 routes."""

from fastapi import APIRouter

from smanzy.api.v1 import albums, auth, health, media, profile, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(profile.router, prefix="/profile", tags=["profile"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(media.router, prefix="/media", tags=["media"])
router.include_router(albums.router, prefix="/albums", tags=["albums"])
