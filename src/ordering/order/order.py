"""Order aggregate — the durable record of a paid checkout."""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP
from decimal import Decimal as D
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Decimal, HasMany, Identifier, Integer, String, ValueObject

from ordering.domain import ordering

_CENT = D("0.01")


class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class GuestInfo:
    name = String(required=True, max_length=255)
    email = String(required=True, max_length=255)
    phone = String(max_length=50)


@ordering.value_object(part_of="Order")
class GuestAddress:
    """Where a guest order ships to, captured as typed at checkout."""

    address_name = String(required=True, max_length=100)
    street_name = String(required=True, max_length=255)
    house_number = String(required=True, max_length=20)
    postcode = String(required=True, max_length=20)
    city = String(required=True, max_length=100)
    province = String(required=True, max_length=100)
    province_id = Identifier()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Decimal(required=True, min_value=0)
    type = String(max_length=20, default="retail")

    @property
    def line_total(self) -> D:
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    user_id = Identifier()
    address_id = Identifier()
    guest_info = ValueObject(GuestInfo)
    guest_address = ValueObject(GuestAddress)
    items = HasMany(OrderItem)
    coupon_code = String(max_length=50)
    coupon_id = Identifier()
    tax_fee = Decimal(default=D("0"))
    shipping_fee = Decimal(default=D("0"))
    discount = Decimal(default=D("0"))
    total_amount = Decimal(required=True)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.COMPLETED.value)
    created_at = DateTime()

    @invariant.post
    def total_amount_must_not_be_negative(self):
        if self.total_amount is not None and self.total_amount < 0:
            raise ValidationError({"total_amount": ["Total amount cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, items_data, total_amount, **details):
        """Build an order from the checkout snapshot.

        ``items_data`` is a list of ``{product_id, quantity, price, type}``
        dicts. The customer is either a member (``user_id`` plus
        ``address_id``) or a guest (``guest_info`` plus ``guest_address``).
        ``total_amount`` must equal the item lines plus tax and shipping
        minus the discount, floored at zero.
        """
        errors: dict[str, list[str]] = {}

        items_data = list(items_data or [])
        if not items_data:
            errors["cart_items"] = ["An order needs at least one item"]
        elif any(int(item.get("quantity") or 0) < 1 for item in items_data):
            errors["cart_items"] = ["Item quantities must be at least 1"]

        is_member_order = bool(details.get("user_id")) and bool(details.get("address_id"))
        is_guest_order = bool(details.get("guest_info")) and bool(details.get("guest_address"))
        if not (is_member_order or is_guest_order):
            errors["customer"] = ["Either a user with an address or guest details with an address is required"]

        total_amount = D(total_amount)
        if total_amount < 0:
            errors["total_amount"] = ["Total amount cannot be negative"]
        elif "cart_items" not in errors:
            expected = expected_total(
                items_data,
                tax_fee=details.get("tax_fee"),
                shipping_fee=details.get("shipping_fee"),
                discount=details.get("discount"),
            )
            if _to_cents(total_amount) != _to_cents(expected):
                errors["total_amount"] = [
                    f"Total amount does not match the order lines (expected {_to_cents(expected)})"
                ]

        if errors:
            raise ValidationError(errors)

        guest_info = details.pop("guest_info", None)
        guest_address = details.pop("guest_address", None)
        order = cls(
            total_amount=total_amount,
            guest_info=GuestInfo(**guest_info) if isinstance(guest_info, dict) else guest_info,
            guest_address=GuestAddress(**guest_address) if isinstance(guest_address, dict) else guest_address,
            created_at=datetime.now(UTC),
            **{key: value for key, value in details.items() if value is not None},
        )
        for item in items_data:
            order.add_items(
                OrderItem(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                    price=D(str(item["price"])),
                    type=item.get("type") or "retail",
                )
            )
        return order

    @property
    def subtotal(self) -> D:
        return sum((item.line_total for item in self.items), D("0"))

    @property
    def is_guest(self) -> bool:
        return self.user_id is None


def expected_total(items_data, tax_fee=None, shipping_fee=None, discount=None) -> D:
    """Line totals plus tax and shipping minus the discount, never below zero."""
    subtotal = sum((D(str(item["price"])) * int(item["quantity"]) for item in items_data), D("0"))
    total = subtotal + D(str(tax_fee or 0)) + D(str(shipping_fee or 0)) - D(str(discount or 0))
    return max(D("0"), total)


def _to_cents(amount: D) -> D:
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)
