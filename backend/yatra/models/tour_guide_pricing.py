"""Guide pricing for tour bookings."""
from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import Boolean, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from yatra.db.base import Base
from yatra.models.mixins import TimestampMixin


class TourGuidePricing(TimestampMixin, Base):
    """Per-participant guide price, either for one tour or the default."""

    __tablename__ = "tour_guide_pricing"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    tour_id: Mapped[uuid.UUID | None] = mapped_column(index=True)
    price_per_participant: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
