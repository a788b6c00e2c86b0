"""Coupon application against the current cart subtotal."""

from collections.abc import Callable
from decimal import Decimal

from protean.exceptions import ValidationError

from checkout.cart.actions import SetCouponCode, SetCouponStatus, SetDiscount
from checkout.cart.state import CouponStatus
from checkout.cart.store import CartStore
from checkout.domain import logger
from checkout.errors import ServiceUnavailableError
from checkout.money import ZERO, to_money
from checkout.services.ports import Coupon, CouponService, DiscountType

Notifier = Callable[[str, str], None]


def log_notice(level: str, message: str) -> None:
    logger.info("coupon_notice", level=level, message=message)


def discount_for(coupon: Coupon, subtotal: Decimal) -> Decimal:
    if coupon.discount_type == DiscountType.PERCENTAGE:
        amount = subtotal * coupon.discount_value
    else:
        amount = coupon.discount_value
    return max(ZERO, to_money(amount))


class CouponApplier:
    def __init__(self, store: CartStore, coupons: CouponService, notifier: Notifier = log_notice) -> None:
        self.store = store
        self.coupons = coupons
        self.notifier = notifier
        self._revision = 0

    async def apply(self, code: str, show_alerts: bool = True) -> CouponStatus | None:
        """Validate ``code`` and update discount, code and status in the cart.

        Re-applying the code that already carries a status is a no-op. A
        failed lookup counts as an unknown code. When another apply or a
        removal happens while the lookup is in flight, nothing is written
        and ``None`` is returned.
        """
        code = (code or "").strip()
        if not code:
            raise ValidationError({"coupon_code": ["Enter a coupon code"]})

        state = self.store.state
        if code == state.coupon_code and state.coupon_status is not None:
            return state.coupon_status

        self._revision += 1
        revision = self._revision
        before = (state.coupon_code, state.coupon_status)

        try:
            coupon = await self.coupons.lookup(code)
        except ServiceUnavailableError as exc:
            logger.warning("coupon_lookup_failed", code=code, error=str(exc))
            coupon = None

        if self._superseded(revision, before):
            logger.info("coupon_lookup_superseded", code=code)
            return None

        subtotal = self.store.state.subtotal
        if coupon is None:
            self._reject(CouponStatus.INVALID)
            if show_alerts:
                self.notifier("error", "Invalid coupon code")
            return CouponStatus.INVALID

        if subtotal < coupon.min_cart_value:
            self._reject(CouponStatus.MIN_CART_VALUE)
            if show_alerts:
                self.notifier("error", f"A minimum cart value of {coupon.min_cart_value} is required for this coupon")
            return CouponStatus.MIN_CART_VALUE

        discount = discount_for(coupon, subtotal)
        self.store.dispatch(SetCouponCode(code=code, coupon_id=coupon.id))
        self.store.dispatch(SetDiscount(amount=discount))
        self.store.dispatch(SetCouponStatus(status=CouponStatus.VALID))
        logger.info("coupon_applied", code=code, discount=str(discount))
        if show_alerts:
            self.notifier("success", "Coupon applied")
        return CouponStatus.VALID

    def remove(self) -> None:
        self._revision += 1
        self.store.dispatch(SetCouponCode(code=None, coupon_id=None))
        self.store.dispatch(SetDiscount(amount=ZERO))
        self.store.dispatch(SetCouponStatus(status=None))

    def _superseded(self, revision: int, before: tuple) -> bool:
        state = self.store.state
        return revision != self._revision or (state.coupon_code, state.coupon_status) != before

    def _reject(self, status: CouponStatus) -> None:
        self.store.dispatch(SetCouponCode(code=None, coupon_id=None))
        self.store.dispatch(SetDiscount(amount=ZERO))
        self.store.dispatch(SetCouponStatus(status=status))
