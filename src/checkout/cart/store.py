"""CartStore: the single owner of cart state.

Wraps the pure reducer with persistence and change notification. Every
dispatch writes the full snapshot to durable storage under ``cartState``;
storage failures are logged and the in-memory state stays authoritative.
"""

import time
from collections.abc import Callable

from pydantic import ValidationError as PydanticValidationError

from checkout.cart.actions import (
    AddItem,
    CartAction,
    ClearCart,
    RemoveItem,
    UpdateQuantity,
)
from checkout.cart.reducer import recalculate, reduce
from checkout.cart.state import EMPTY_CART, CartItem, CartState, ItemType, Product
from checkout.domain import logger
from checkout.storage.port import StorageError, StoragePort

CART_STORAGE_KEY = "cartState"

Listener = Callable[[CartState, CartState], None]


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class CartStore:
    def __init__(
        self,
        storage: StoragePort,
        state: CartState = EMPTY_CART,
        clock: Callable[[], int] = _epoch_millis,
    ) -> None:
        self.storage = storage
        self._state = state
        self._clock = clock
        self._listeners: list[Listener] = []

    @classmethod
    def load(cls, storage: StoragePort, **kwargs) -> "CartStore":
        """Hydrate from storage, starting empty when nothing usable is stored.

        The remembered coupon status is dropped so the code gets validated
        again against current prices, and the totals are recomputed from the
        stored lines.
        """
        state = EMPTY_CART
        try:
            raw = storage.get(CART_STORAGE_KEY)
        except StorageError as exc:
            logger.warning("cart_snapshot_unreadable", error=str(exc))
            raw = None

        if raw:
            try:
                state = recalculate(
                    CartState.model_validate_json(raw).model_copy(update={"coupon_status": None})
                )
            except PydanticValidationError as exc:
                logger.warning("cart_snapshot_invalid", error_count=exc.error_count())
                state = EMPTY_CART

        return cls(storage, state=state, **kwargs)

    @property
    def state(self) -> CartState:
        return self._state

    def dispatch(self, action: CartAction) -> CartState:
        previous = self._state
        self._state = reduce(previous, action)
        self._persist()
        for listener in list(self._listeners):
            listener(previous, self._state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a ``(previous, current)`` listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------
    # Action creators
    # -------------------------------------------------------------------
    def add_item(self, product: Product, item_type: ItemType = ItemType.RETAIL) -> CartState:
        item_type = ItemType(item_type)
        item = CartItem(
            id=f"{product.product_id}-{item_type.value}-{self._clock()}",
            product_id=product.product_id,
            name=product.name,
            description=product.description,
            image_url=product.image_url,
            price=product.price_for(item_type),
            type=item_type,
        )
        return self.dispatch(AddItem(item=item))

    def remove_item(self, item_id: str) -> CartState:
        return self.dispatch(RemoveItem(item_id=item_id))

    def update_quantity(self, item_id: str, quantity: int) -> CartState:
        return self.dispatch(UpdateQuantity(item_id=item_id, quantity=quantity))

    def clear(self) -> CartState:
        return self.dispatch(ClearCart())

    def _persist(self) -> None:
        try:
            self.storage.set(CART_STORAGE_KEY, self._state.model_dump_json())
        except StorageError as exc:
            logger.error("cart_persist_failed", error=str(exc))
