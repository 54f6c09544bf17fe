from fastapi import APIRouter

from src.api.endpoints import health, style

router = APIRouter()
router.include_router(health.router, tags=["health"])
router.include_router(style.router, tags=["style-transfer"])
