"""PendingOrder: the durable record written before payment confirmation.

It is the only state that survives a bank redirect: the callback reads it
back from session storage to create the order, and deletes it once the
order exists.
"""

from decimal import Decimal

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from checkout.domain import logger
from checkout.storage.port import StoragePort

PENDING_ORDER_KEY = "pendingOrder"


class PendingOrderItem(BaseModel):
    product_id: str
    quantity: int
    price: Decimal
    type: str


class GuestInfo(BaseModel):
    name: str
    email: str
    phone: str | None = None


class GuestAddress(BaseModel):
    address_name: str
    street_name: str
    house_number: str
    postcode: str
    city: str
    province: str
    province_id: str | None = None


class PendingOrder(BaseModel):
    user_id: str | None = None
    total_amount: Decimal
    address_id: str | None = None
    cart_items: list[PendingOrderItem] = Field(default_factory=list)
    coupon_code: str | None = None
    coupon_id: str | None = None
    tax_fee: Decimal = Decimal("0")
    shipping_fee: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    guest_info: GuestInfo | None = None
    guest_address: GuestAddress | None = None

    @property
    def is_guest(self) -> bool:
        return self.user_id is None


class PendingOrderStore:
    """Single-slot access to the pending order; a save overwrites any stale record."""

    def __init__(self, storage: StoragePort) -> None:
        self.storage = storage

    def save(self, pending: PendingOrder) -> None:
        self.storage.set(PENDING_ORDER_KEY, pending.model_dump_json())

    def load(self) -> PendingOrder | None:
        raw = self.storage.get(PENDING_ORDER_KEY)
        if not raw:
            return None
        try:
            return PendingOrder.model_validate_json(raw)
        except PydanticValidationError as exc:
            logger.error("pending_order_unreadable", error_count=exc.error_count())
            return None

    def discard(self) -> None:
        self.storage.remove(PENDING_ORDER_KEY)
