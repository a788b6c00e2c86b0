"""FeeOrchestrator: keeps tax, shipping and discount in line with the subtotal.

Runs whenever the cart's item list changes. Each run is a fire-and-forget
task tagged with a generation number; a run only writes its results while
no newer run has started, so slow responses never overwrite fresher ones.
"""

import asyncio
from collections.abc import Callable
from decimal import Decimal

from checkout.cart.actions import SetCouponStatus, SetDiscount, SetShippingFee, SetTaxFee
from checkout.cart.state import CartState
from checkout.cart.store import CartStore
from checkout.coupons.application import CouponApplier
from checkout.domain import logger
from checkout.money import ZERO, to_money
from checkout.services.ports import FeeService, ShippingTier


def matching_tier(tiers: list[ShippingTier], subtotal: Decimal) -> ShippingTier | None:
    """First tier covering ``subtotal``, in the order the service returned them."""
    return next((tier for tier in tiers if tier.covers(subtotal)), None)


class FeeOrchestrator:
    def __init__(self, store: CartStore, fees: FeeService, coupons: CouponApplier) -> None:
        self.store = store
        self.fees = fees
        self.coupons = coupons
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        self._unsubscribe: Callable[[], None] | None = None

    def start(self) -> None:
        """Subscribe to cart changes and schedule an initial run. Needs a running event loop."""
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_change)
        self.schedule()

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def schedule(self) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self.refresh())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait until every scheduled run has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def refresh(self) -> None:
        self._generation += 1
        generation = self._generation
        subtotal = self.store.state.subtotal

        rate, tiers = await asyncio.gather(
            self.fees.get_active_tax_rate(),
            self.fees.get_active_shipping_tiers(),
            return_exceptions=True,
        )
        if generation != self._generation:
            logger.debug("fee_run_superseded", generation=generation)
            return

        self.store.dispatch(SetTaxFee(amount=self._tax_fee(subtotal, rate)))
        self.store.dispatch(SetShippingFee(amount=self._shipping_fee(subtotal, tiers)))
        await self._sync_coupon()

    def _on_change(self, previous: CartState, current: CartState) -> None:
        if previous.items is not current.items:
            self.schedule()

    @staticmethod
    def _tax_fee(subtotal: Decimal, rate: Decimal | None | BaseException) -> Decimal:
        if isinstance(rate, BaseException):
            logger.warning("tax_rate_unavailable", error=repr(rate))
            return ZERO
        return to_money(subtotal * rate) if rate is not None else ZERO

    @staticmethod
    def _shipping_fee(subtotal: Decimal, tiers: list[ShippingTier] | BaseException) -> Decimal:
        if isinstance(tiers, BaseException):
            logger.warning("shipping_rates_unavailable", error=repr(tiers))
            return ZERO
        tier = matching_tier(tiers, subtotal)
        return to_money(subtotal * tier.percentage_rate) if tier is not None else ZERO

    async def _sync_coupon(self) -> None:
        """Re-apply the remembered code against the new subtotal, without alerts."""
        state = self.store.state
        if not state.coupon_code:
            if state.discount != ZERO:
                self.store.dispatch(SetDiscount(amount=ZERO))
            return

        if state.coupon_status is not None:
            self.store.dispatch(SetCouponStatus(status=None))
        await self.coupons.apply(state.coupon_code, show_alerts=False)
