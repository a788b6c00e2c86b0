"""In-memory service implementations for tests and local runs.

Each fake can be told to fail, so the checkout's degraded paths can be
exercised without a server.
"""

from decimal import Decimal
from urllib.parse import urlencode
from uuid import uuid4

from checkout.errors import ServiceUnavailableError
from checkout.payment.pending import PendingOrder
from checkout.services.ports import (
    Address,
    AddressDraft,
    AddressService,
    BillingDetails,
    Confirmation,
    ConfirmationStatus,
    Coupon,
    CouponService,
    FeeService,
    OrderReceipt,
    OrderService,
    PaymentIntent,
    PaymentProvider,
    Province,
    ProvinceService,
    ShippingTier,
)

REDIRECT_METHODS = frozenset({"ideal", "klarna", "bancontact"})


class FakeFeeService(FeeService):
    def __init__(self, tax_rate: Decimal | None = None, tiers: list[ShippingTier] | None = None) -> None:
        self.tax_rate = tax_rate
        self.tiers = list(tiers or [])
        self.fail = False
        self.calls: list[str] = []

    async def get_active_tax_rate(self) -> Decimal | None:
        self.calls.append("get_active_tax_rate")
        if self.fail:
            raise ServiceUnavailableError("Tax fees unavailable")
        return self.tax_rate

    async def get_active_shipping_tiers(self) -> list[ShippingTier]:
        self.calls.append("get_active_shipping_tiers")
        if self.fail:
            raise ServiceUnavailableError("Shipping rates unavailable")
        return list(self.tiers)


class FakeCouponService(CouponService):
    def __init__(self, coupons: list[Coupon] | None = None) -> None:
        self.coupons = {coupon.code: coupon for coupon in coupons or []}
        self.lookups: list[str] = []
        self.used: list[str] = []
        self.fail_lookup = False
        self.fail_mark_used = False

    async def lookup(self, code: str) -> Coupon | None:
        self.lookups.append(code)
        if self.fail_lookup:
            raise ServiceUnavailableError("Coupon lookup unavailable")
        return self.coupons.get(code)

    async def mark_used(self, coupon_id: str) -> None:
        if self.fail_mark_used:
            raise ServiceUnavailableError("Coupon usage not recorded")
        self.used.append(coupon_id)


class FakeProvinceService(ProvinceService):
    def __init__(self, provinces: list[Province] | None = None) -> None:
        self.provinces = list(provinces or [])

    async def list(self) -> list[Province]:
        return list(self.provinces)


class FakeAddressService(AddressService):
    def __init__(self, addresses: dict[str, list[Address]] | None = None) -> None:
        self.addresses = {user_id: list(items) for user_id, items in (addresses or {}).items()}
        self.fail = False

    async def list(self, user_id: str) -> list[Address]:
        return list(self.addresses.get(user_id, []))

    async def create(self, user_id: str, draft: AddressDraft, province_id: str) -> Address:
        if self.fail:
            raise ServiceUnavailableError("Address could not be saved")
        address = Address(
            id=str(uuid4()),
            address_name=draft.address_name,
            street_name=draft.street_name,
            house_number=draft.house_number,
            postcode=draft.postcode,
            city=draft.city,
            province_id=province_id,
            province=draft.province,
        )
        self.addresses.setdefault(user_id, []).insert(0, address)
        return address


class FakePaymentProvider(PaymentProvider):
    """Cards settle during confirmation unless ``settle_later`` is set; bank methods redirect back."""

    def __init__(self) -> None:
        self.should_succeed = True
        self.failure_reason = "Your card was declined."
        self.fail_retrieve = False
        self.settle_later = False
        self.intents: dict[str, PaymentIntent] = {}
        self.statuses: dict[str, str] = {}
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Your card was declined.") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def create_intent(self, amount: Decimal, currency: str) -> PaymentIntent:
        self.calls.append({"method": "create_intent", "amount": amount, "currency": currency})
        intent_id = f"pi_fake{uuid4().hex[:16]}"
        intent = PaymentIntent(
            client_secret=f"{intent_id}_secret_{uuid4().hex[:12]}",
            amount=int(amount * 100),
            currency=currency,
            intent_id=intent_id,
        )
        self.intents[intent.client_secret] = intent
        self.statuses[intent.client_secret] = "requires_payment_method"
        return intent

    async def confirm(
        self,
        client_secret: str,
        payment_method: str,
        billing_details: BillingDetails,
        return_url: str,
    ) -> Confirmation:
        self.calls.append(
            {
                "method": "confirm",
                "client_secret": client_secret,
                "payment_method": payment_method,
                "billing_details": billing_details,
            }
        )
        if client_secret not in self.intents:
            raise ServiceUnavailableError("No such payment intent", status_code=502)

        if not self.should_succeed:
            status = "requires_payment_method"
        elif self.settle_later:
            status = "processing"
        else:
            status = "succeeded"
        self.statuses[client_secret] = status

        if payment_method in REDIRECT_METHODS:
            query = urlencode(
                {
                    "payment_intent": self.intents[client_secret].intent_id,
                    "payment_intent_client_secret": client_secret,
                    "redirect_status": "succeeded" if self.should_succeed else "failed",
                }
            )
            return Confirmation(ConfirmationStatus.REDIRECT, redirect_url=f"{return_url}?{query}")

        if status == "processing":
            return Confirmation(ConfirmationStatus.PENDING)
        if status == "succeeded":
            return Confirmation(ConfirmationStatus.SUCCEEDED)
        return Confirmation(ConfirmationStatus.FAILED, error_message=self.failure_reason)

    async def retrieve_intent(self, client_secret: str) -> str:
        self.calls.append({"method": "retrieve_intent", "client_secret": client_secret})
        if self.fail_retrieve or client_secret not in self.statuses:
            raise ServiceUnavailableError("Payment intent could not be retrieved", status_code=502)
        return self.statuses[client_secret]


class FakeOrderService(OrderService):
    def __init__(self) -> None:
        self.orders: dict[str, PendingOrder] = {}
        self.fail = False

    async def create(self, pending: PendingOrder) -> OrderReceipt:
        if self.fail:
            raise ServiceUnavailableError("Order service unavailable", status_code=503)
        order_id = str(uuid4())
        self.orders[order_id] = pending.model_copy(deep=True)
        return OrderReceipt(order_id=order_id)

