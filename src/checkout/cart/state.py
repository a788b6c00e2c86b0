"""Cart value objects: products, cart lines and the cart snapshot."""

from decimal import Decimal
from enum import Enum

from protean.exceptions import ValidationError
from pydantic import BaseModel, ConfigDict, Field


class ItemType(str, Enum):
    RETAIL = "retail"
    WHOLESALE = "wholesale"
    OFFER = "offer"


class CouponStatus(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    MIN_CART_VALUE = "min_cart_value"


class Product(BaseModel):
    """A catalogue product as shown on the storefront."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str
    description: str = ""
    image_url: str | None = None
    retail_price: Decimal
    wholesale_price: Decimal | None = None
    offer_price: Decimal | None = None

    def price_for(self, item_type: ItemType) -> Decimal:
        price = {
            ItemType.RETAIL: self.retail_price,
            ItemType.WHOLESALE: self.wholesale_price,
            ItemType.OFFER: self.offer_price,
        }[ItemType(item_type)]
        if price is None:
            raise ValidationError({"type": [f"{self.name} is not sold as {ItemType(item_type).value}"]})
        return price


class CartItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    product_id: str
    name: str
    description: str = ""
    image_url: str | None = None
    price: Decimal
    type: ItemType = ItemType.RETAIL
    quantity: int = Field(default=1, ge=1)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class CartState(BaseModel):
    """Immutable cart snapshot.

    ``items`` is a tuple so that actions which leave the lines alone keep the
    very same object; observers compare it by identity to detect item changes.
    """

    model_config = ConfigDict(frozen=True)

    items: tuple[CartItem, ...] = ()
    subtotal: Decimal = Decimal("0")
    tax_fee: Decimal = Decimal("0")
    shipping_fee: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    item_count: int = 0
    coupon_code: str | None = None
    coupon_id: str | None = None
    coupon_status: CouponStatus | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_type(self) -> ItemType | None:
        """The type shared by every line, or None for an empty cart."""
        return self.items[0].type if self.items else None


EMPTY_CART = CartState()
