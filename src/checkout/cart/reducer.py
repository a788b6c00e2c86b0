"""Pure cart reducer.

``reduce(state, action)`` never touches storage or the clock: it applies the
action's own field updates and then recomputes the derived amounts exactly
once. Persistence is the job of ``checkout.cart.store.CartStore``.
"""

from decimal import Decimal

from checkout.cart.actions import (
    AddItem,
    CartAction,
    ClearCart,
    RemoveItem,
    SetCouponCode,
    SetCouponStatus,
    SetDiscount,
    SetShippingFee,
    SetTaxFee,
    UpdateQuantity,
)
from checkout.cart.state import EMPTY_CART, CartState


def _add_item(state: CartState, action: AddItem) -> CartState:
    new_item = action.item
    for index, item in enumerate(state.items):
        if item.product_id == new_item.product_id and item.type == new_item.type:
            bumped = item.model_copy(update={"quantity": item.quantity + 1})
            items = state.items[:index] + (bumped,) + state.items[index + 1 :]
            return state.model_copy(update={"items": items})
    return state.model_copy(update={"items": state.items + (new_item.model_copy(update={"quantity": 1}),)})


def _remove_item(state: CartState, action: RemoveItem) -> CartState:
    items = tuple(item for item in state.items if item.id != action.item_id)
    return state.model_copy(update={"items": items})


def _update_quantity(state: CartState, action: UpdateQuantity) -> CartState:
    quantity = max(0, action.quantity)
    items = []
    for item in state.items:
        if item.id == action.item_id:
            if quantity == 0:
                continue
            item = item.model_copy(update={"quantity": quantity})
        items.append(item)
    return state.model_copy(update={"items": tuple(items)})


def _set_tax_fee(state: CartState, action: SetTaxFee) -> CartState:
    return state.model_copy(update={"tax_fee": Decimal(action.amount)})


def _set_shipping_fee(state: CartState, action: SetShippingFee) -> CartState:
    return state.model_copy(update={"shipping_fee": Decimal(action.amount)})


def _set_discount(state: CartState, action: SetDiscount) -> CartState:
    return state.model_copy(update={"discount": Decimal(action.amount)})


def _set_coupon_code(state: CartState, action: SetCouponCode) -> CartState:
    return state.model_copy(update={"coupon_code": action.code, "coupon_id": action.coupon_id})


def _set_coupon_status(state: CartState, action: SetCouponStatus) -> CartState:
    return state.model_copy(update={"coupon_status": action.status})


def _clear_cart(state: CartState, action: ClearCart) -> CartState:
    return EMPTY_CART


_HANDLERS = {
    AddItem: _add_item,
    RemoveItem: _remove_item,
    UpdateQuantity: _update_quantity,
    SetTaxFee: _set_tax_fee,
    SetShippingFee: _set_shipping_fee,
    SetDiscount: _set_discount,
    SetCouponCode: _set_coupon_code,
    SetCouponStatus: _set_coupon_status,
    ClearCart: _clear_cart,
}


def recalculate(state: CartState) -> CartState:
    """Recompute subtotal, total and item count from the lines and the current fees."""
    subtotal = sum((item.line_total for item in state.items), Decimal("0"))
    total = max(Decimal("0"), subtotal + state.tax_fee + state.shipping_fee - state.discount)
    return state.model_copy(
        update={
            "subtotal": subtotal,
            "total": total,
            "item_count": sum(item.quantity for item in state.items),
        }
    )


def reduce(state: CartState, action: CartAction) -> CartState:
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown cart action {type(action).__name__}")
    return recalculate(handler(state, action))
