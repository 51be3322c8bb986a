"""API routes."""

from fastapi import APIRouter

from app.api.v1 import health, users, work_items
from app.api.v1.auth import router as auth_router

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(work_items.router, prefix="/workitems", tags=["workitems"])

__all__ = ["auth_router", "router"]
