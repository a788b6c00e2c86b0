from decimal import Decimal

import pytest
from ordering.order.order import GuestAddress, GuestInfo, Order, PaymentStatus
from protean.exceptions import ValidationError

ITEMS = [
    {"product_id": "lamp", "quantity": 2, "price": Decimal("10.00"), "type": "retail"},
    {"product_id": "sofa", "quantity": 1, "price": Decimal("50.00"), "type": "retail"},
]
GUEST = GuestInfo(name="Piet", email="piet@example.com")
GUEST_ADDRESS = GuestAddress(
    address_name="Home",
    street_name="Oudegracht",
    house_number="12",
    postcode="3511 AB",
    city="Utrecht",
    province="Utrecht",
)


class TestOrderCreation:
    def test_member_order(self):
        order = Order.create(ITEMS, Decimal("70.00"), user_id="user-ana", address_id="addr-1")

        assert not order.is_guest
        assert order.subtotal == Decimal("70.00")
        assert order.payment_status == PaymentStatus.COMPLETED.value
        assert [item.line_total for item in order.items] == [Decimal("20.00"), Decimal("50.00")]

    def test_guest_order(self):
        order = Order.create(ITEMS, Decimal("70.00"), guest_info=GUEST, guest_address=GUEST_ADDRESS)

        assert order.is_guest
        assert order.guest_address.city == "Utrecht"

    def test_needs_items(self):
        with pytest.raises(ValidationError) as exc:
            Order.create([], Decimal("0"), user_id="user-ana", address_id="addr-1")
        assert "cart_items" in exc.value.messages

    def test_quantities_must_be_positive(self):
        items = [{"product_id": "lamp", "quantity": 0, "price": Decimal("10.00")}]

        with pytest.raises(ValidationError) as exc:
            Order.create(items, Decimal("0"), user_id="user-ana", address_id="addr-1")
        assert "cart_items" in exc.value.messages

    def test_needs_a_customer_and_an_address(self):
        with pytest.raises(ValidationError) as exc:
            Order.create(ITEMS, Decimal("70.00"), user_id="user-ana", guest_address=GUEST_ADDRESS)
        assert "customer" in exc.value.messages

    def test_total_cannot_be_negative(self):
        with pytest.raises(ValidationError) as exc:
            Order.create(ITEMS, Decimal("-1"), user_id="user-ana", address_id="addr-1")
        assert "total_amount" in exc.value.messages


class TestOrderTotal:
    def test_fees_and_discount_are_part_of_the_total(self):
        order = Order.create(
            ITEMS,
            Decimal("78.70"),
            user_id="user-ana",
            address_id="addr-1",
            tax_fee=Decimal("14.70"),
            shipping_fee=Decimal("3.50"),
            discount=Decimal("9.50"),
        )

        assert order.total_amount == Decimal("78.70")
        assert order.discount == Decimal("9.50")

    def test_total_must_match_the_lines(self):
        with pytest.raises(ValidationError) as exc:
            Order.create(ITEMS, Decimal("1.00"), user_id="user-ana", address_id="addr-1", tax_fee=Decimal("14.70"))

        assert exc.value.messages["total_amount"] == ["Total amount does not match the order lines (expected 84.70)"]

    def test_discount_larger_than_the_lines_floors_at_zero(self):
        order = Order.create(
            [{"product_id": "lamp", "quantity": 1, "price": Decimal("10.00")}],
            Decimal("0"),
            user_id="user-ana",
            address_id="addr-1",
            discount=Decimal("25.00"),
        )

        assert order.total_amount == Decimal("0")
        assert order.items[0].type == "retail"

    def test_sub_cent_differences_are_tolerated(self):
        order = Order.create(ITEMS, Decimal("70.004"), user_id="user-ana", address_id="addr-1")

        assert order.subtotal == Decimal("70.00")
