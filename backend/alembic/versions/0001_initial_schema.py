"""Initial booking and pricing schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

JSONB_TYPE = postgresql.JSONB().with_variant(sa.JSON(), "sqlite")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    user_role_enum = sa.Enum("ADMIN", "CUSTOMER", name="userrole")
    user_status_enum = sa.Enum("ACTIVE", "SUSPENDED", name="userstatus")
    vehicle_type_enum = sa.Enum(
        "CAR", "SUV", "JEEP", "VAN", "BUS", "MOTORBIKE", name="vehicletype"
    )
    vehicle_status_enum = sa.Enum(
        "AVAILABLE", "BOOKED", "MAINTENANCE", "INACTIVE", name="vehiclestatus"
    )
    tour_type_enum = sa.Enum("CITY", "HIGHWAY", "MOUNTAIN", "OFF_ROAD", name="tourtype")
    config_type_enum = sa.Enum("SEASONAL", "DRIVER", "DISCOUNT", name="pricingconfigtype")
    discount_source_enum = sa.Enum("COUPON", "LONG_TERM", name="discountsource")
    discount_value_type_enum = sa.Enum("PERCENTAGE", "FIXED", name="discountvaluetype")
    rental_status_enum = sa.Enum(
        "PENDING", "CONFIRMED", "ACTIVE", "COMPLETED", "CANCELLED", name="rentalstatus"
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=240), nullable=False),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("status", user_status_enum, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("vehicle_type", vehicle_type_enum, nullable=False),
        sa.Column("brand", sa.String(length=120), nullable=False),
        sa.Column("model", sa.String(length=120)),
        sa.Column("seat_capacity", sa.Integer()),
        sa.Column("price_per_day", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_quantity", sa.Integer(), nullable=False),
        sa.Column("status", vehicle_status_enum, nullable=False),
        sa.Column("city", sa.String(length=120), nullable=False),
        sa.Column("region", sa.String(length=120)),
        sa.Column("description", sa.String(length=2048)),
        *_timestamps(),
    )

    op.create_table(
        "pricing_configs",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("type", config_type_enum, nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("description", sa.String(length=1024)),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column("valid_from", sa.DateTime(timezone=True)),
        sa.Column("valid_until", sa.DateTime(timezone=True)),
        sa.Column("vehicle_types", JSONB_TYPE, nullable=False),
        sa.Column("regions", JSONB_TYPE, nullable=False),
        sa.Column("tour_type", tour_type_enum),
        sa.Column("price_multiplier", sa.Numeric(6, 3)),
        sa.Column("base_driver_rate", sa.Numeric(12, 2)),
        sa.Column("price_per_km", sa.Numeric(10, 2)),
        sa.Column("terrain_multiplier", sa.Numeric(6, 3)),
        sa.Column("code", sa.String(length=64)),
        sa.Column("discount_source", discount_source_enum),
        sa.Column("discount_value", sa.Numeric(12, 2)),
        sa.Column("discount_value_type", discount_value_type_enum),
        sa.Column("max_discount", sa.Numeric(12, 2)),
        sa.Column("min_booking_amount", sa.Numeric(12, 2)),
        sa.Column("min_days", sa.Integer()),
        sa.Column("usage_limit", sa.Integer()),
        sa.Column("usage_count", sa.Integer()),
        sa.Column("per_user_limit", sa.Integer()),
        *_timestamps(),
    )
    op.create_index("ix_pricing_configs_code", "pricing_configs", ["code"])

    op.create_table(
        "vehicle_bookings",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("booking_code", sa.String(length=64), nullable=False, unique=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "vehicle_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("vehicles.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("status", rental_status_enum, nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_days", sa.Integer(), nullable=False),
        sa.Column("number_of_vehicles", sa.Integer(), nullable=False),
        sa.Column("destination", sa.String(length=255)),
        sa.Column("pickup_location", sa.String(length=255)),
        sa.Column("dropoff_location", sa.String(length=255)),
        sa.Column("estimated_distance_km", sa.Numeric(10, 2)),
        sa.Column("tour_type", tour_type_enum),
        sa.Column("seasonal_multiplier", sa.Numeric(6, 3), nullable=False),
        sa.Column("price_per_day_at_booking", sa.Numeric(12, 2), nullable=False),
        sa.Column("vehicle_base_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("needs_driver", sa.Boolean(), nullable=False),
        sa.Column("number_of_drivers", sa.Integer(), nullable=False),
        sa.Column("base_driver_rate", sa.Numeric(12, 2)),
        sa.Column("distance_charge", sa.Numeric(12, 2), nullable=False),
        sa.Column("terrain_charge", sa.Numeric(12, 2), nullable=False),
        sa.Column("driver_total_amount", sa.Numeric(12, 2)),
        sa.Column("applied_discounts", JSONB_TYPE, nullable=False),
        sa.Column("discount_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("coupon_code", sa.String(length=64)),
        sa.Column("gross_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("advance_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("remaining_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("special_requests", sa.String(length=2048)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_by", sa.String(length=240)),
        sa.Column("cancellation_reason", sa.String(length=1024)),
        sa.Column("refund_amount", sa.Numeric(12, 2)),
        sa.Column("refund_percentage", sa.Integer()),
        sa.Column("refund_policy", sa.String(length=64)),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index(
        "ix_vehicle_bookings_coupon_code", "vehicle_bookings", ["coupon_code"]
    )
    op.create_index(
        "ix_vehicle_bookings_vehicle_dates",
        "vehicle_bookings",
        ["vehicle_id", "start_date", "end_date"],
    )

    op.create_table(
        "tour_guide_pricing",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("tour_id", sa.Uuid(as_uuid=True)),
        sa.Column("price_per_participant", sa.Numeric(12, 2), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "ix_tour_guide_pricing_tour_id", "tour_guide_pricing", ["tour_id"]
    )

    op.create_table(
        "audit_events",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
        ),
        sa.Column("event_type", sa.String(length=120), nullable=False),
        sa.Column("description", sa.String(length=1024)),
        sa.Column("payload", sa.JSON()),
        sa.Column("ip_address", sa.String(length=64)),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )


def downgrade() -> None:
    op.drop_table("audit_events")
    op.drop_index("ix_tour_guide_pricing_tour_id", table_name="tour_guide_pricing")
    op.drop_table("tour_guide_pricing")
    op.drop_index("ix_vehicle_bookings_vehicle_dates", table_name="vehicle_bookings")
    op.drop_index("ix_vehicle_bookings_coupon_code", table_name="vehicle_bookings")
    op.drop_table("vehicle_bookings")
    op.drop_index("ix_pricing_configs_code", table_name="pricing_configs")
    op.drop_table("pricing_configs")
    op.drop_table("vehicles")
    op.drop_table("users")

    bind = op.get_bind()
    for name in (
        "rentalstatus",
        "discountvaluetype",
        "discountsource",
        "pricingconfigtype",
        "tourtype",
        "vehiclestatus",
        "vehicletype",
        "userstatus",
        "userrole",
    ):
        sa.Enum(name=name).drop(bind, checkfirst=True)
