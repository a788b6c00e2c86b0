"""Ports to the storefront services the checkout depends on.

All calls are coroutines. Implementations live in
``checkout.adapters.http`` (the storefront API) and
``checkout.services.fakes`` (in-memory, for tests and local runs).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from checkout.payment.pending import PendingOrder


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------
class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class ShippingTier:
    min_price: Decimal
    max_price: Decimal | None
    percentage_rate: Decimal

    def covers(self, subtotal: Decimal) -> bool:
        return self.min_price <= subtotal and (self.max_price is None or subtotal <= self.max_price)


@dataclass(frozen=True)
class Coupon:
    id: str
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    min_cart_value: Decimal = Decimal("0")


@dataclass(frozen=True)
class Province:
    id: str
    name: str


@dataclass(frozen=True)
class AddressDraft:
    """Address fields as typed into the checkout form."""

    address_name: str = ""
    street_name: str = ""
    house_number: str = ""
    postcode: str = ""
    city: str = ""
    province: str = ""


@dataclass(frozen=True)
class Address:
    id: str
    address_name: str
    street_name: str
    house_number: str
    postcode: str
    city: str
    province_id: str
    province: str | None = None


@dataclass(frozen=True)
class PaymentIntent:
    client_secret: str
    amount: int
    currency: str
    intent_id: str | None = None


@dataclass(frozen=True)
class BillingDetails:
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: dict = field(default_factory=dict)


class ConfirmationStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REDIRECT = "redirect"
    PENDING = "pending"  # accepted, still settling with the bank


# Provider intent statuses for a payment that was accepted but has not settled.
SETTLING_STATUSES = frozenset({"processing", "requires_action"})


@dataclass(frozen=True)
class Confirmation:
    status: ConfirmationStatus
    redirect_url: str | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class OrderReceipt:
    order_id: str


# ---------------------------------------------------------------------------
# Ports
# ---------------------------------------------------------------------------
class FeeService(ABC):
    @abstractmethod
    async def get_active_tax_rate(self) -> Decimal | None:
        """The active tax rate as a fraction, or None when no tax applies."""
        ...

    @abstractmethod
    async def get_active_shipping_tiers(self) -> list[ShippingTier]: ...


class CouponService(ABC):
    @abstractmethod
    async def lookup(self, code: str) -> Coupon | None:
        """Return the redeemable coupon for ``code``, or None when there is none."""
        ...

    @abstractmethod
    async def mark_used(self, coupon_id: str) -> None: ...


class AddressService(ABC):
    @abstractmethod
    async def list(self, user_id: str) -> list[Address]: ...

    @abstractmethod
    async def create(self, user_id: str, draft: AddressDraft, province_id: str) -> Address: ...


class ProvinceService(ABC):
    @abstractmethod
    async def list(self) -> list[Province]: ...


class PaymentProvider(ABC):
    @abstractmethod
    async def create_intent(self, amount: Decimal, currency: str) -> PaymentIntent:
        """Create an intent for a major-unit ``amount``."""
        ...

    @abstractmethod
    async def confirm(
        self,
        client_secret: str,
        payment_method: str,
        billing_details: BillingDetails,
        return_url: str,
    ) -> Confirmation: ...

    @abstractmethod
    async def retrieve_intent(self, client_secret: str) -> str:
        """Return the provider's status string for the intent, e.g. ``succeeded`` or ``processing``."""
        ...


class OrderService(ABC):
    @abstractmethod
    async def create(self, pending: PendingOrder) -> OrderReceipt: ...
