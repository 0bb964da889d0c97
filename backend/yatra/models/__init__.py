"""ORM models package export."""

from yatra.models.audit_event import AuditEvent
from yatra.models.pricing import (
    DiscountPricing,
    DiscountSource,
    DiscountValueType,
    DriverPricing,
    PricingConfig,
    PricingConfigType,
    SeasonalPricing,
)
from yatra.models.tour_guide_pricing import TourGuidePricing
from yatra.models.user import User, UserRole, UserStatus
from yatra.models.vehicle import TourType, Vehicle, VehicleStatus, VehicleType
from yatra.models.vehicle_booking import RentalStatus, VehicleBooking

__all__ = [
    "AuditEvent",
    "DiscountPricing",
    "DiscountSource",
    "DiscountValueType",
    "DriverPricing",
    "PricingConfig",
    "PricingConfigType",
    "SeasonalPricing",
    "TourGuidePricing",
    "User",
    "UserRole",
    "UserStatus",
    "TourType",
    "Vehicle",
    "VehicleStatus",
    "VehicleType",
    "RentalStatus",
    "VehicleBooking",
]
