"""Versioned API router."""

from fastapi import APIRouter

from . import (
    admin_vehicle_bookings,
    auth,
    health,
    pricing,
    pricing_configs,
    users,
    vehicle_bookings,
    vehicles,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(vehicles.router, prefix="/vehicles", tags=["vehicles"])
router.include_router(
    pricing_configs.router, prefix="/pricing-configs", tags=["pricing-configs"]
)
router.include_router(pricing.router, prefix="/pricing", tags=["pricing"])
router.include_router(
    vehicle_bookings.router, prefix="/vehicle-bookings", tags=["vehicle-bookings"]
)
router.include_router(
    admin_vehicle_bookings.router,
    prefix="/admin/vehicle-bookings",
    tags=["admin"],
)

__all__ = ["router"]
