from checkout.cart.state import EMPTY_CART, CartItem, CartState, CouponStatus, ItemType, Product
from checkout.cart.store import CART_STORAGE_KEY, CartStore

__all__ = [
    "CART_STORAGE_KEY",
    "EMPTY_CART",
    "CartItem",
    "CartState",
    "CartStore",
    "CouponStatus",
    "ItemType",
    "Product",
]
