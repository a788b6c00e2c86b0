"""FastAPI routes for the Ordering domain."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    CreateOrderRequest,
    GuestAddressSchema,
    GuestInfoSchema,
    OrderIdResponse,
    OrderItemSchema,
    OrderResponse,
)
from ordering.order.creation import CreateOrder
from ordering.order.order import Order

order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def create_order(body: CreateOrderRequest) -> OrderIdResponse:
    command = CreateOrder(
        user_id=body.user_id,
        address_id=body.address_id,
        guest_info=json.dumps(body.guest_info.model_dump()) if body.guest_info else None,
        guest_address=json.dumps(body.guest_address.model_dump()) if body.guest_address else None,
        cart_items=json.dumps([item.model_dump(mode="json") for item in body.cart_items]),
        coupon_code=body.coupon_code,
        coupon_id=body.coupon_id,
        tax_fee=body.tax_fee,
        shipping_fee=body.shipping_fee,
        discount=body.discount,
        total_amount=body.total_amount,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=order_id)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    return OrderResponse(
        id=str(order.id),
        user_id=order.user_id,
        address_id=order.address_id,
        guest_info=GuestInfoSchema(**order.guest_info.to_dict()) if order.guest_info else None,
        guest_address=GuestAddressSchema(**order.guest_address.to_dict()) if order.guest_address else None,
        items=[
            OrderItemSchema(product_id=str(item.product_id), quantity=item.quantity, price=item.price, type=item.type)
            for item in order.items
        ],
        coupon_code=order.coupon_code,
        coupon_id=order.coupon_id,
        tax_fee=order.tax_fee,
        shipping_fee=order.shipping_fee,
        discount=order.discount,
        total_amount=order.total_amount,
        payment_status=order.payment_status,
        created_at=order.created_at,
    )
