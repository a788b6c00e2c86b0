"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal commands.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class OrderItemSchema(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)
    price: Decimal = Field(ge=0)
    type: str = "retail"


class GuestInfoSchema(BaseModel):
    name: str
    email: str
    phone: str | None = None


class GuestAddressSchema(BaseModel):
    address_name: str
    street_name: str
    house_number: str
    postcode: str
    city: str
    province: str
    province_id: str | None = None


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    user_id: str | None = None
    address_id: str | None = None
    guest_info: GuestInfoSchema | None = None
    guest_address: GuestAddressSchema | None = None
    cart_items: list[OrderItemSchema]
    coupon_code: str | None = None
    coupon_id: str | None = None
    tax_fee: Decimal = Decimal("0")
    shipping_fee: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    total_amount: Decimal

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "user-001",
                    "address_id": "addr-001",
                    "cart_items": [{"product_id": "prod-001", "quantity": 2, "price": "10.00", "type": "retail"}],
                    "coupon_code": None,
                    "coupon_id": None,
                    "tax_fee": "4.20",
                    "shipping_fee": "1.00",
                    "discount": "0",
                    "total_amount": "25.20",
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class OrderResponse(BaseModel):
    id: str
    user_id: str | None = None
    address_id: str | None = None
    guest_info: GuestInfoSchema | None = None
    guest_address: GuestAddressSchema | None = None
    items: list[OrderItemSchema]
    coupon_code: str | None = None
    coupon_id: str | None = None
    tax_fee: Decimal
    shipping_fee: Decimal
    discount: Decimal
    total_amount: Decimal
    payment_status: str
    created_at: datetime
