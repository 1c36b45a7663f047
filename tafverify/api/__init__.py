"""API routers for the TAF verification service."""

from fastapi import APIRouter

from tafverify.config import settings

from .decode import router as decode_router
from .health import router as health_router
from .verification import router as verification_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(decode_router)
api_router.include_router(verification_router)

if settings.debug_endpoints:
    from .debug import router as debug_router

    api_router.include_router(debug_router)

__all__ = ["api_router"]
