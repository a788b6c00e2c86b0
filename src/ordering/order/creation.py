"""Order creation — command and handler."""

import json

from protean import handle
from protean.fields import Decimal, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class CreateOrder:
    user_id = Identifier()
    address_id = Identifier()
    guest_info = Text()  # JSON: {name, email, phone}
    guest_address = Text()  # JSON: address dict
    cart_items = Text(required=True)  # JSON: list of {product_id, quantity, price, type}
    coupon_code = String(max_length=50)
    coupon_id = Identifier()
    tax_fee = Decimal()
    shipping_fee = Decimal()
    discount = Decimal()
    total_amount = Decimal(required=True)


def _load(value):
    return json.loads(value) if isinstance(value, str) else value


@ordering.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        order = Order.create(
            items_data=_load(command.cart_items),
            total_amount=command.total_amount,
            user_id=command.user_id,
            address_id=command.address_id,
            guest_info=_load(command.guest_info),
            guest_address=_load(command.guest_address),
            coupon_code=command.coupon_code,
            coupon_id=command.coupon_id,
            tax_fee=command.tax_fee,
            shipping_fee=command.shipping_fee,
            discount=command.discount,
        )
        current_domain.repository_for(Order).add(order)
        logger.info(
            "order_created",
            order_id=str(order.id),
            guest=order.is_guest,
            total_amount=str(order.total_amount),
            item_count=len(order.items),
        )
        return str(order.id)
