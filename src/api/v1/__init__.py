"""
API v1 package.

Contains the user and connection routes of the matching API.
"""

from fastapi import APIRouter

from src.api.v1.connections import router as connections_router
from src.api.v1.users import router as users_router

router = APIRouter()
router.include_router(users_router)
router.include_router(connections_router)

__all__ = ["router"]
