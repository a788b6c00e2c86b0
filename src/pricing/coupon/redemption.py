"""Coupon redemption — lookup by code and usage recording."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from pricing.coupon.coupon import CouponCode
from pricing.domain import logger, pricing


@pricing.command(part_of="CouponCode")
class UseCoupon:
    """Record that a coupon was used by a placed order."""

    coupon_id = Identifier(required=True)


@pricing.command_handler(part_of=CouponCode)
class CouponRedemptionHandler:
    @handle(UseCoupon)
    def use_coupon(self, command):
        repo = current_domain.repository_for(CouponCode)
        coupon = repo.get(command.coupon_id)
        coupon.record_use()
        repo.add(coupon)
        logger.info("coupon_used", coupon_id=str(coupon.id), uses_count=coupon.uses_count)


def find_redeemable(code: str) -> CouponCode | None:
    """Return the redeemable coupon for ``code``, or None."""
    matches = current_domain.repository_for(CouponCode)._dao.query.filter(code=code).all().items
    return next((coupon for coupon in matches if coupon.is_redeemable()), None)
