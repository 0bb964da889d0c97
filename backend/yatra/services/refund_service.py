"""Cancellation refund policy."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from yatra.core.clock import coerce_utc, utcnow
from yatra.core.money import ZERO, money_str, to_decimal, to_money


class RefundPolicy(str, enum.Enum):
    """Refund tiers keyed by cancellation lead time."""

    CANCEL_7_DAYS_BEFORE = "CANCEL_7_DAYS_BEFORE"
    CANCEL_3_TO_6_DAYS = "CANCEL_3_TO_6_DAYS"
    CANCEL_1_TO_2_DAYS = "CANCEL_1_TO_2_DAYS"
    NO_REFUND = "NO_REFUND"


@dataclass(slots=True, frozen=True)
class _Tier:
    min_lead: timedelta
    percentage: int
    policy: RefundPolicy
    reason: str


# ordered from the longest lead time down; the first matching tier wins
_TIERS: tuple[_Tier, ...] = (
    _Tier(
        timedelta(days=7),
        90,
        RefundPolicy.CANCEL_7_DAYS_BEFORE,
        "Booking cancelled 7 or more days before trip start. Eligible for 90% refund.",
    ),
    _Tier(
        timedelta(days=3),
        50,
        RefundPolicy.CANCEL_3_TO_6_DAYS,
        "Booking cancelled 3-6 days before trip start. Eligible for 50% refund.",
    ),
    _Tier(
        timedelta(days=1),
        25,
        RefundPolicy.CANCEL_1_TO_2_DAYS,
        "Booking cancelled 1-2 days before trip start. Eligible for 25% refund.",
    ),
)

_NO_REFUND_REASON = (
    "Booking cancelled on or after trip start date. No refund applicable."
)
_LATE_NOTICE_REASON = (
    "Booking cancelled less than 1 day before trip start. No refund applicable."
)


@dataclass(slots=True, frozen=True)
class RefundDecision:
    """Outcome of applying the refund policy to a booking."""

    refund_percentage: int
    refund_amount: Decimal
    reason: str
    policy: RefundPolicy
    days_until_start: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "refund_percentage": self.refund_percentage,
            "refund_amount": money_str(self.refund_amount),
            "reason": self.reason,
            "policy": self.policy.value,
            "days_until_start": self.days_until_start,
        }


def compute_refund(
    *,
    start_date: datetime,
    total_price: Decimal,
    now: datetime | None = None,
) -> RefundDecision:
    """Map the lead time before ``start_date`` to a refund tier.

    Tier boundaries are inclusive and compared against the exact lead time:
    seven days exactly earns 90%, six days and 23 hours earns 50%.
    ``days_until_start`` is the lead time rounded up to whole days.
    """
    now = coerce_utc(now or utcnow())
    lead = coerce_utc(start_date) - now
    days_until_start = math.ceil(lead / timedelta(days=1))

    percentage, policy = 0, RefundPolicy.NO_REFUND
    reason = _LATE_NOTICE_REASON if lead > timedelta(0) else _NO_REFUND_REASON
    for tier in _TIERS:
        if lead >= tier.min_lead:
            percentage, policy, reason = tier.percentage, tier.policy, tier.reason
            break

    amount = to_money(to_decimal(total_price) * percentage / Decimal("100"))
    if amount < 0:
        amount = ZERO
    return RefundDecision(
        refund_percentage=percentage,
        refund_amount=amount,
        reason=reason,
        policy=policy,
        days_until_start=days_until_start,
    )
