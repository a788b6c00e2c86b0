"""Conversion from major-unit amounts to gateway minor units."""

from decimal import ROUND_HALF_UP, Decimal


def to_minor_units(amount: Decimal, minimum: int) -> int:
    """Round to whole cents (half-up) and never go below the provider minimum."""
    cents = int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(cents, minimum)
