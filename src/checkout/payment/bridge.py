"""PaymentBridge: first phase of a payment attempt.

Creates the intent, writes the PendingOrder to session storage and only
then asks the provider to confirm. Card payments finish in place; bank
methods hand back a redirect and are completed by ``PaymentCallback``.
"""

from decimal import Decimal

from protean.exceptions import ValidationError

from checkout.cart.store import CartStore
from checkout.domain import logger
from checkout.errors import CheckoutInProgressError, ServiceUnavailableError
from checkout.features import FeatureFlags
from checkout.flow.steps import CheckoutFlow, CheckoutStep
from checkout.money import ZERO
from checkout.payment.finalizer import OrderFinalizer
from checkout.payment.outcome import PENDING_MESSAGE, OutcomeStatus, PaymentOutcome
from checkout.payment.pending import PendingOrder, PendingOrderItem, PendingOrderStore
from checkout.services.ports import ConfirmationStatus, PaymentProvider
from checkout.storage.port import StorageError


class PaymentBridge:
    def __init__(
        self,
        cart: CartStore,
        flow: CheckoutFlow,
        provider: PaymentProvider,
        pending_orders: PendingOrderStore,
        finalizer: OrderFinalizer,
        features: FeatureFlags,
        currency: str,
        return_url: str,
    ) -> None:
        self.cart = cart
        self.flow = flow
        self.provider = provider
        self.pending_orders = pending_orders
        self.finalizer = finalizer
        self.features = features
        self.currency = currency
        self.return_url = return_url
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def charged_fees(self) -> tuple[Decimal, Decimal, Decimal]:
        """Tax, shipping and discount as they count towards the payable amount."""
        state = self.cart.state
        features = self.features
        return (
            state.tax_fee if features.enable_tax_purchase else ZERO,
            state.shipping_fee if features.enable_shipping_by_price_zone else ZERO,
            state.discount if features.enable_discount_coupons else ZERO,
        )

    def payable_amount(self) -> Decimal:
        tax_fee, shipping_fee, discount = self.charged_fees()
        return max(ZERO, self.cart.state.subtotal + tax_fee + shipping_fee - discount)

    def build_pending_order(self) -> PendingOrder:
        state = self.cart.state
        tax_fee, shipping_fee, discount = self.charged_fees()
        with_coupon = self.features.enable_discount_coupons
        return PendingOrder(
            user_id=self.flow.customer.id if self.flow.is_authenticated else None,
            total_amount=max(ZERO, state.subtotal + tax_fee + shipping_fee - discount),
            address_id=self.flow.address_id if self.flow.is_authenticated else None,
            cart_items=[
                PendingOrderItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=item.price,
                    type=item.type.value,
                )
                for item in state.items
            ],
            coupon_code=state.coupon_code if with_coupon else None,
            coupon_id=state.coupon_id if with_coupon else None,
            tax_fee=tax_fee,
            shipping_fee=shipping_fee,
            discount=discount,
            guest_info=None if self.flow.is_authenticated else self.flow.guest_info,
            guest_address=None if self.flow.is_authenticated else self.flow.guest_address,
        )

    async def pay(self, payment_method: str = "card") -> PaymentOutcome:
        """Run one payment attempt; a second call while one is outstanding is refused."""
        if self._in_flight:
            raise CheckoutInProgressError("A payment is already being processed")
        if self.flow.step != CheckoutStep.PAYMENT:
            raise ValidationError({"step": [f"Checkout is at {self.flow.step.value}, not payment"]})
        if self.cart.state.is_empty:
            raise ValidationError({"cart": ["Your cart is empty"]})

        self._in_flight = True
        try:
            return await self._pay(payment_method)
        finally:
            self._in_flight = False

    async def _pay(self, payment_method: str) -> PaymentOutcome:
        pending = self.build_pending_order()

        try:
            intent = await self.provider.create_intent(pending.total_amount, self.currency)
        except ServiceUnavailableError as exc:
            logger.error("payment_intent_failed", error=str(exc))
            return PaymentOutcome(OutcomeStatus.DECLINED, message="Payment could not be started. Please try again.")

        try:
            self.pending_orders.save(pending)
        except StorageError as exc:
            logger.error("pending_order_save_failed", error=str(exc))
            return PaymentOutcome(OutcomeStatus.DECLINED, message="Payment could not be started. Please try again.")

        try:
            confirmation = await self.provider.confirm(
                intent.client_secret,
                payment_method,
                self.flow.billing_details(),
                self.return_url,
            )
        except ServiceUnavailableError as exc:
            logger.error("payment_confirmation_failed", error=str(exc))
            return PaymentOutcome(OutcomeStatus.DECLINED, message="Payment could not be confirmed. Please try again.")

        if confirmation.status == ConfirmationStatus.REDIRECT:
            logger.info("payment_redirect", payment_method=payment_method)
            return PaymentOutcome(OutcomeStatus.REDIRECT, redirect_url=confirmation.redirect_url)

        if confirmation.status == ConfirmationStatus.PENDING:
            logger.info("payment_pending", payment_method=payment_method)
            return PaymentOutcome(OutcomeStatus.PENDING, message=PENDING_MESSAGE)

        if confirmation.status == ConfirmationStatus.FAILED:
            logger.info("payment_declined", payment_method=payment_method, reason=confirmation.error_message)
            return PaymentOutcome(OutcomeStatus.DECLINED, message=confirmation.error_message or "Payment failed")

        return await self.finalizer.finalize(pending)
