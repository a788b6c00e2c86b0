from checkout.coupons.application import CouponApplier, discount_for

__all__ = ["CouponApplier", "discount_for"]
