from fastapi import APIRouter

from .timeline import router as timeline_router

api_router = APIRouter(prefix="/api")
api_router.include_router(timeline_router)

__all__ = ["api_router"]
