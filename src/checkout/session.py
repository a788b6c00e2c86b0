"""CheckoutSession: wires the checkout components for one storefront session.

The cart lives for the whole session and is only torn down by
``sign_out()`` or a confirmed payment; the checkout flow is reopened for
each checkout attempt.
"""

from dataclasses import dataclass

from checkout.cart.store import CartStore
from checkout.coupons.application import CouponApplier, Notifier, log_notice
from checkout.domain import logger
from checkout.features import FeatureFlags
from checkout.fees.orchestrator import FeeOrchestrator
from checkout.flow.steps import CheckoutFlow, CustomerAccount
from checkout.payment.bridge import PaymentBridge
from checkout.payment.callback import PaymentCallback
from checkout.payment.finalizer import OrderFinalizer
from checkout.payment.pending import PendingOrderStore
from checkout.services.ports import (
    AddressService,
    CouponService,
    FeeService,
    OrderService,
    PaymentProvider,
    ProvinceService,
)
from checkout.storage.port import StoragePort
from shared.config import get_settings


@dataclass
class Services:
    fees: FeeService
    coupons: CouponService
    addresses: AddressService
    provinces: ProvinceService
    payments: PaymentProvider
    orders: OrderService


class CheckoutSession:
    def __init__(
        self,
        services: Services,
        durable_storage: StoragePort,
        session_storage: StoragePort,
        features: FeatureFlags | None = None,
        customer: CustomerAccount | None = None,
        notifier: Notifier = log_notice,
    ) -> None:
        settings = get_settings()
        self.services = services
        self.features = features or FeatureFlags.from_settings(settings)
        self.currency = settings.CURRENCY
        self.return_url = settings.PAYMENT_RETURN_URL

        self.cart = CartStore.load(durable_storage)
        self.pending_orders = PendingOrderStore(session_storage)
        self.coupons = CouponApplier(self.cart, services.coupons, notifier)
        self.fees = FeeOrchestrator(self.cart, services.fees, self.coupons)
        self.flow = CheckoutFlow(services.addresses, services.provinces, customer)
        self.finalizer = OrderFinalizer(services.orders, services.coupons, self.pending_orders, self.cart, self.flow)
        self.bridge = PaymentBridge(
            cart=self.cart,
            flow=self.flow,
            provider=services.payments,
            pending_orders=self.pending_orders,
            finalizer=self.finalizer,
            features=self.features,
            currency=self.currency,
            return_url=self.return_url,
        )

    def start(self) -> None:
        """Begin keeping fees in sync with the cart. Needs a running event loop."""
        self.fees.start()

    def open_checkout(self) -> None:
        self.flow.open()

    def payment_callback(self) -> PaymentCallback:
        """A fresh one-shot handler for a single return navigation."""
        return PaymentCallback(self.services.payments, self.pending_orders, self.finalizer)

    def sign_in(self, customer: CustomerAccount) -> None:
        self.flow.customer = customer
        self.flow.open()

    def sign_out(self) -> None:
        """Forget the customer and tear down cart and pending payment state."""
        logger.info("session_signed_out", user_id=self.flow.customer.id if self.flow.customer else None)
        self.flow.customer = None
        self.flow.saved_addresses = []
        self.flow.open()
        self.pending_orders.discard()
        self.cart.clear()
