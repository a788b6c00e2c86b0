from decimal import Decimal

import pytest
from checkout.cart.actions import (
    AddItem,
    ClearCart,
    RemoveItem,
    SetCouponCode,
    SetCouponStatus,
    SetDiscount,
    SetShippingFee,
    SetTaxFee,
    UpdateQuantity,
)
from checkout.cart.reducer import reduce
from checkout.cart.state import EMPTY_CART, CartItem, CouponStatus, ItemType


def _item(product_id="lamp", price="10.00", item_type=ItemType.RETAIL, stamp=1):
    return CartItem(
        id=f"{product_id}-{item_type.value}-{stamp}",
        product_id=product_id,
        name=product_id.title(),
        price=Decimal(price),
        type=item_type,
    )


def _apply(*actions, state=EMPTY_CART):
    for action in actions:
        state = reduce(state, action)
    return state


def _check_totals(state):
    assert state.subtotal == sum((item.price * item.quantity for item in state.items), Decimal("0"))
    assert state.item_count == sum(item.quantity for item in state.items)


class TestAddItem:
    def test_new_item_starts_at_quantity_one(self):
        state = _apply(AddItem(_item()))

        assert len(state.items) == 1
        assert state.items[0].quantity == 1
        assert state.subtotal == Decimal("10.00")
        assert state.item_count == 1

    def test_same_product_and_type_accumulates(self):
        state = _apply(AddItem(_item(stamp=1)), AddItem(_item(stamp=2)))

        assert len(state.items) == 1
        assert state.items[0].quantity == 2
        assert state.items[0].id == "lamp-retail-1"

    def test_same_product_with_other_type_is_a_separate_line(self):
        state = _apply(
            AddItem(_item()),
            AddItem(_item(price="7.50", item_type=ItemType.WHOLESALE)),
        )

        assert [item.type for item in state.items] == [ItemType.RETAIL, ItemType.WHOLESALE]
        assert state.subtotal == Decimal("17.50")

    def test_two_units_at_ten_make_twenty(self):
        state = _apply(AddItem(_item()), AddItem(_item()))

        assert state.subtotal == Decimal("20.00")
        assert state.total == Decimal("20.00")


class TestUpdateQuantity:
    def test_sets_quantity(self):
        state = _apply(AddItem(_item()), UpdateQuantity("lamp-retail-1", 5))

        assert state.items[0].quantity == 5
        assert state.subtotal == Decimal("50.00")
        assert state.item_count == 5

    def test_zero_removes_the_line(self):
        state = _apply(AddItem(_item()), UpdateQuantity("lamp-retail-1", 0))

        assert state.items == ()
        assert state.subtotal == 0

    def test_negative_is_clamped_and_removes_the_line(self):
        state = _apply(AddItem(_item()), AddItem(_item("sofa", "50.00")), UpdateQuantity("lamp-retail-1", -3))

        assert [item.product_id for item in state.items] == ["sofa"]
        assert state.subtotal == Decimal("50.00")


class TestRemoveItem:
    def test_removes_the_line(self):
        state = _apply(AddItem(_item()), AddItem(_item("sofa", "50.00")), RemoveItem("lamp-retail-1"))

        assert [item.product_id for item in state.items] == ["sofa"]

    def test_unknown_id_is_ignored(self):
        before = _apply(AddItem(_item()))
        after = reduce(before, RemoveItem("missing"))

        assert after == before


class TestDerivedAmounts:
    def test_derived_fields_hold_after_every_action(self):
        actions = [
            AddItem(_item()),
            AddItem(_item("sofa", "49.99")),
            AddItem(_item()),
            UpdateQuantity("sofa-retail-1", 3),
            AddItem(_item("table", "100.00")),
            RemoveItem("lamp-retail-1"),
            UpdateQuantity("table-retail-1", -1),
            AddItem(_item("lamp", "10.00", stamp=9)),
        ]
        state = EMPTY_CART
        for action in actions:
            state = reduce(state, action)
            _check_totals(state)

        assert state.item_count == 4
        assert state.subtotal == Decimal("159.97")

    def test_total_adds_fees_and_subtracts_discount(self):
        state = _apply(
            AddItem(_item()),
            AddItem(_item()),
            SetTaxFee(Decimal("4.20")),
            SetShippingFee(Decimal("2.00")),
            SetDiscount(Decimal("5.00")),
        )

        assert state.total == Decimal("21.20")

    def test_total_is_never_negative(self):
        state = _apply(
            AddItem(_item()),
            SetTaxFee(Decimal("1.00")),
            SetShippingFee(Decimal("1.00")),
            SetDiscount(Decimal("100.00")),
        )

        assert state.total == 0

    def test_fee_actions_keep_the_same_items(self):
        state = _apply(AddItem(_item()))

        for action in (
            SetTaxFee(Decimal("1")),
            SetShippingFee(Decimal("1")),
            SetDiscount(Decimal("1")),
            SetCouponCode("TENPCT", "coupon-ten"),
            SetCouponStatus(CouponStatus.VALID),
        ):
            assert reduce(state, action).items is state.items


class TestCoupons:
    def test_coupon_code_and_status_are_set_independently(self):
        state = _apply(AddItem(_item()), SetCouponCode("TENPCT", "coupon-ten"))

        assert state.coupon_code == "TENPCT"
        assert state.coupon_id == "coupon-ten"
        assert state.coupon_status is None

        state = reduce(state, SetCouponStatus(CouponStatus.VALID))
        assert state.coupon_status == CouponStatus.VALID
        assert state.coupon_code == "TENPCT"

    def test_clear_cart_resets_items_and_coupon_together(self):
        state = _apply(
            AddItem(_item()),
            SetCouponCode("TENPCT", "coupon-ten"),
            SetCouponStatus(CouponStatus.VALID),
            SetDiscount(Decimal("1.00")),
            SetTaxFee(Decimal("2.10")),
            ClearCart(),
        )

        assert state == EMPTY_CART
        assert state.coupon_code is None
        assert state.coupon_id is None
        assert state.coupon_status is None


def test_unknown_action_is_rejected():
    with pytest.raises(TypeError):
        reduce(EMPTY_CART, object())
