"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import analytics, archive, auth, health, stories

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(stories.router, prefix="/stories", tags=["stories"])
router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
router.include_router(archive.router, prefix="/archive", tags=["archive"])
