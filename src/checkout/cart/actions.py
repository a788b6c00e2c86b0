"""Actions accepted by the cart reducer."""

from dataclasses import dataclass
from decimal import Decimal

from checkout.cart.state import CartItem, CouponStatus


@dataclass(frozen=True)
class AddItem:
    """Add one unit; ``item.id`` is only used when a new line is created."""

    item: CartItem


@dataclass(frozen=True)
class RemoveItem:
    item_id: str


@dataclass(frozen=True)
class UpdateQuantity:
    item_id: str
    quantity: int


@dataclass(frozen=True)
class SetTaxFee:
    amount: Decimal


@dataclass(frozen=True)
class SetShippingFee:
    amount: Decimal


@dataclass(frozen=True)
class SetDiscount:
    amount: Decimal


@dataclass(frozen=True)
class SetCouponCode:
    code: str | None
    coupon_id: str | None = None


@dataclass(frozen=True)
class SetCouponStatus:
    status: CouponStatus | None


@dataclass(frozen=True)
class ClearCart:
    pass


CartAction = (
    AddItem
    | RemoveItem
    | UpdateQuantity
    | SetTaxFee
    | SetShippingFee
    | SetDiscount
    | SetCouponCode
    | SetCouponStatus
    | ClearCart
)
