"""Central API router aggregating all domain routers."""

from fastapi import APIRouter

from academy.auth.router import router as auth_router
from academy.group.router import router as group_router
from academy.health.router import router as health_router
from academy.program.router import router as program_router
from academy.user.router import router as user_router

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(program_router)
api_router.include_router(group_router)
