"""Pricing API routers."""

from pricing.api.routes import coupon_router, feature_router, shipping_router, tax_router

__all__ = ["coupon_router", "feature_router", "shipping_router", "tax_router"]
