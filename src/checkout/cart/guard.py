"""Type-consistency check performed before adding a product to the cart."""

from checkout.cart.state import CartState, ItemType, Product
from checkout.cart.store import CartStore
from checkout.domain import logger
from checkout.errors import MixedCartError


def conflicting_type(state: CartState, item_type: ItemType) -> ItemType | None:
    """Return the cart's current type when it differs from ``item_type``."""
    current = state.item_type
    if current is not None and current != ItemType(item_type):
        return current
    return None


def add_product(
    store: CartStore,
    product: Product,
    item_type: ItemType = ItemType.RETAIL,
    confirm_clear: bool = False,
) -> CartState:
    """Add one unit of ``product``, keeping every line of the cart the same type.

    A conflicting type raises ``MixedCartError`` unless the caller has the
    customer's confirmation to empty the cart first.
    """
    item_type = ItemType(item_type)
    current = conflicting_type(store.state, item_type)
    if current is not None:
        if not confirm_clear:
            raise MixedCartError(current.value, item_type.value)
        logger.info("cart_cleared_for_type_change", previous_type=current.value, new_type=item_type.value)
        store.clear()
    return store.add_item(product, item_type)
