from fastapi import APIRouter

from deploytree.routers.deployments import router as deployments_router
from deploytree.routers.health import router as health_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health_router)
api_router.include_router(deployments_router)
