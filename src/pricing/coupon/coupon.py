"""Coupon code aggregate.

A coupon is redeemable while it is active, not past its expiry date and
still has uses left. The minimum cart value is checked by the client
against its own subtotal, so it is only carried here.
"""

from datetime import UTC, date, datetime
from decimal import Decimal as D
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Date, Decimal, Integer, String

from pricing.domain import pricing


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@pricing.aggregate
class CouponCode:
    code = String(required=True, max_length=50)
    discount_type = String(required=True, choices=DiscountType)
    discount_value = Decimal(required=True)  # fraction for percentage coupons, amount for fixed ones
    min_cart_value = Decimal(default=D("0"))
    max_uses = Integer()
    uses_count = Integer(default=0)
    expiry_date = Date()
    is_active = Boolean(default=True)

    @invariant.post
    def uses_must_not_exceed_limit(self):
        if self.max_uses is not None and self.uses_count is not None and self.uses_count > self.max_uses:
            raise ValidationError({"uses_count": ["Coupon has no uses left"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        code,
        discount_type,
        discount_value,
        min_cart_value=D("0"),
        max_uses=None,
        expiry_date=None,
        is_active=True,
    ):
        errors: dict[str, list[str]] = {}
        if not code or not code.strip():
            errors["code"] = ["Coupon code is required"]
        if D(discount_value) < 0:
            errors["discount_value"] = ["Discount value cannot be negative"]
        if DiscountType(discount_type) == DiscountType.PERCENTAGE and D(discount_value) > 1:
            errors.setdefault("discount_value", []).append("Percentage discounts are fractions between 0 and 1")
        if max_uses is not None and max_uses < 0:
            errors["max_uses"] = ["Maximum uses cannot be negative"]
        if errors:
            raise ValidationError(errors)

        return cls(
            code=code.strip(),
            discount_type=DiscountType(discount_type).value,
            discount_value=discount_value,
            min_cart_value=min_cart_value or D("0"),
            max_uses=max_uses,
            expiry_date=expiry_date,
            is_active=is_active,
        )

    # -------------------------------------------------------------------
    # Redemption
    # -------------------------------------------------------------------
    def is_redeemable(self, today: date | None = None) -> bool:
        today = today or datetime.now(UTC).date()
        if not self.is_active:
            return False
        if self.expiry_date is not None and self.expiry_date < today:
            return False
        if self.max_uses is not None and self.uses_count >= self.max_uses:
            return False
        return True

    def record_use(self) -> None:
        self.uses_count += 1
