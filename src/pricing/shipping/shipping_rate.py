"""Shipping rate aggregate — a subtotal range mapped to a percentage rate."""

from decimal import Decimal as D

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Decimal

from pricing.domain import pricing


@pricing.aggregate
class ShippingRate:
    min_price = Decimal(required=True)
    max_price = Decimal()  # open-ended top tier
    percentage_rate = Decimal(required=True)  # fraction of subtotal
    is_active = Boolean(default=True)

    @invariant.post
    def range_must_not_be_inverted(self):
        if self.max_price is not None and self.min_price is not None and self.max_price < self.min_price:
            raise ValidationError({"max_price": ["Maximum price must not be below the minimum price"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, min_price, max_price, percentage_rate, is_active=True):
        errors: dict[str, list[str]] = {}
        if D(min_price) < 0:
            errors["min_price"] = ["Minimum price cannot be negative"]
        if max_price is not None and D(max_price) < D(min_price):
            errors["max_price"] = ["Maximum price must not be below the minimum price"]
        if D(percentage_rate) < 0:
            errors["percentage_rate"] = ["Percentage rate cannot be negative"]
        if errors:
            raise ValidationError(errors)

        return cls(
            min_price=min_price,
            max_price=max_price,
            percentage_rate=percentage_rate,
            is_active=is_active,
        )

    def covers(self, subtotal: D) -> bool:
        return self.min_price <= subtotal and (self.max_price is None or subtotal <= self.max_price)
