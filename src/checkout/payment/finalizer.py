"""Second phase of a payment: turn a confirmed payment into an order."""

from checkout.cart.store import CartStore
from checkout.domain import logger
from checkout.errors import ServiceUnavailableError
from checkout.flow.steps import CheckoutFlow, CheckoutStep
from checkout.payment.outcome import ORDER_FAILED_MESSAGE, OutcomeStatus, PaymentOutcome
from checkout.payment.pending import PendingOrder, PendingOrderStore
from checkout.services.ports import CouponService, OrderService


class OrderFinalizer:
    """Shared by the in-page confirmation and the redirect callback.

    The pending order and the cart are only cleared once the order exists.
    Whatever goes wrong while creating it, the payment has already been
    taken, so both are kept for support to recover.
    """

    def __init__(
        self,
        orders: OrderService,
        coupons: CouponService,
        pending_orders: PendingOrderStore,
        cart: CartStore,
        flow: CheckoutFlow | None = None,
    ) -> None:
        self.orders = orders
        self.coupons = coupons
        self.pending_orders = pending_orders
        self.cart = cart
        self.flow = flow

    async def finalize(self, pending: PendingOrder) -> PaymentOutcome:
        try:
            receipt = await self.orders.create(pending)
        except Exception as exc:
            logger.critical(
                "order_creation_failed_after_payment",
                user_id=pending.user_id,
                guest=pending.is_guest,
                total_amount=str(pending.total_amount),
                error=repr(exc),
                exc_info=True,
            )
            return PaymentOutcome(OutcomeStatus.ORDER_FAILED, message=ORDER_FAILED_MESSAGE)

        if pending.coupon_id:
            try:
                await self.coupons.mark_used(pending.coupon_id)
            except ServiceUnavailableError as exc:
                logger.warning("coupon_mark_used_failed", coupon_id=pending.coupon_id, error=str(exc))

        self.pending_orders.discard()
        self.cart.clear()
        if self.flow is not None and self.flow.step == CheckoutStep.PAYMENT:
            self.flow.mark_success()

        logger.info("order_finalized", order_id=receipt.order_id, total_amount=str(pending.total_amount))
        return PaymentOutcome(OutcomeStatus.SUCCEEDED, order_id=receipt.order_id)
