"""Pydantic response schemas for the Pricing API.

These are external contracts, kept separate from the aggregates.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class TaxFeeResponse(BaseModel):
    id: str
    name: str
    rate: Decimal
    is_active: bool


class ShippingRateResponse(BaseModel):
    id: str
    min_price: Decimal
    max_price: Decimal | None = None
    percentage_rate: Decimal
    is_active: bool


class CouponCodeResponse(BaseModel):
    id: str
    code: str
    discount_type: str
    discount_value: Decimal
    min_cart_value: Decimal
    max_uses: int | None = None
    uses_count: int
    expiry_date: date | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "7f6c1b9e-0000-4000-8000-000000000001",
                    "code": "WELCOME10",
                    "discount_type": "percentage",
                    "discount_value": "0.10",
                    "min_cart_value": "20.00",
                    "max_uses": 100,
                    "uses_count": 3,
                    "expiry_date": None,
                }
            ]
        }
    }


class FeatureSettingsResponse(BaseModel):
    enable_tax_purchase: bool
    enable_shipping_by_price_zone: bool
    enable_discount_coupons: bool


class StatusResponse(BaseModel):
    status: str = "ok"
