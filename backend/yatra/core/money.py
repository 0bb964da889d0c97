"""Decimal helpers shared by the pricing services."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

MONEY_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Decimal | float | int | str | None) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_money(value: Decimal | float | int | str | None) -> Decimal:
    return to_decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def money_str(value: Decimal) -> str:
    return f"{to_money(value):.2f}"


def display_amount(value: Decimal | float | int) -> str:
    """Render an amount without trailing zeros, e.g. ``5000`` or ``12.5``."""
    normalized = to_decimal(value).normalize()
    return format(normalized, "f")
