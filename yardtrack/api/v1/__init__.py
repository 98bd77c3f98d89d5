"""API v1 routes."""

from fastapi import APIRouter

from yardtrack.api.v1 import auth, health, movements, units, users, vehicles

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(units.router, prefix="/units", tags=["units"])
router.include_router(vehicles.router, prefix="/vehicles", tags=["vehicles"])
router.include_router(movements.router, prefix="/movements", tags=["movements"])
