from fastapi import APIRouter

from .projects import router as projects_router
from .staff import router as staff_router
from .casts import router as casts_router
from .schedules import router as schedules_router
from .scenes import router as scenes_router
from .timeline import router as timeline_router

api_router = APIRouter(prefix="/api")
api_router.include_router(projects_router)
api_router.include_router(staff_router)
api_router.include_router(casts_router)
api_router.include_router(schedules_router)
api_router.include_router(scenes_router)
api_router.include_router(timeline_router)

__all__ = ["api_router"]
