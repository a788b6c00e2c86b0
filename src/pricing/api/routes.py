"""FastAPI routes for the Pricing domain — taxes, shipping rates, coupons and feature settings."""

from fastapi import APIRouter, HTTPException
from protean.utils.globals import current_domain

from pricing.api.schemas import (
    CouponCodeResponse,
    FeatureSettingsResponse,
    ShippingRateResponse,
    StatusResponse,
    TaxFeeResponse,
)
from pricing.coupon.redemption import UseCoupon, find_redeemable
from pricing.shipping.management import active_shipping_rates
from pricing.tax.management import active_tax_fees
from shared.config import get_settings

# ---------------------------------------------------------------------------
# Tax Fee Router
# ---------------------------------------------------------------------------
tax_router = APIRouter(prefix="/tax-fees", tags=["tax-fees"])


@tax_router.get("/active", response_model=list[TaxFeeResponse])
async def list_active_tax_fees() -> list[TaxFeeResponse]:
    return [
        TaxFeeResponse(id=str(fee.id), name=fee.name, rate=fee.rate, is_active=fee.is_active)
        for fee in active_tax_fees()
    ]


# ---------------------------------------------------------------------------
# Shipping Rate Router
# ---------------------------------------------------------------------------
shipping_router = APIRouter(prefix="/shipping-rates", tags=["shipping-rates"])


@shipping_router.get("/active", response_model=list[ShippingRateResponse])
async def list_active_shipping_rates() -> list[ShippingRateResponse]:
    return [
        ShippingRateResponse(
            id=str(rate.id),
            min_price=rate.min_price,
            max_price=rate.max_price,
            percentage_rate=rate.percentage_rate,
            is_active=rate.is_active,
        )
        for rate in active_shipping_rates()
    ]


# ---------------------------------------------------------------------------
# Coupon Code Router
# ---------------------------------------------------------------------------
coupon_router = APIRouter(prefix="/coupon-codes", tags=["coupon-codes"])


@coupon_router.get("/{code}", response_model=CouponCodeResponse)
async def get_coupon_by_code(code: str) -> CouponCodeResponse:
    """Return a coupon only while it can still be redeemed."""
    coupon = find_redeemable(code)
    if coupon is None:
        raise HTTPException(status_code=404, detail="Coupon not found")
    return CouponCodeResponse(
        id=str(coupon.id),
        code=coupon.code,
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
        min_cart_value=coupon.min_cart_value,
        max_uses=coupon.max_uses,
        uses_count=coupon.uses_count,
        expiry_date=coupon.expiry_date,
    )


@coupon_router.put("/use/{coupon_id}", response_model=StatusResponse)
async def use_coupon(coupon_id: str) -> StatusResponse:
    current_domain.process(UseCoupon(coupon_id=coupon_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Feature Settings Router
# ---------------------------------------------------------------------------
feature_router = APIRouter(prefix="/feature-settings", tags=["feature-settings"])


@feature_router.get("", response_model=FeatureSettingsResponse)
async def get_feature_settings() -> FeatureSettingsResponse:
    settings = get_settings()
    return FeatureSettingsResponse(
        enable_tax_purchase=settings.ENABLE_TAX_PURCHASE,
        enable_shipping_by_price_zone=settings.ENABLE_SHIPPING_BY_PRICE_ZONE,
        enable_discount_coupons=settings.ENABLE_DISCOUNT_COUPONS,
    )
