"""Coupon code management — command and handler."""

from decimal import Decimal as D

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Date, Decimal, Integer, String
from protean.utils.globals import current_domain

from pricing.coupon.coupon import CouponCode, DiscountType
from pricing.domain import pricing


@pricing.command(part_of="CouponCode")
class CreateCouponCode:
    code = String(required=True, max_length=50)
    discount_type = String(required=True, choices=DiscountType)
    discount_value = Decimal(required=True)
    min_cart_value = Decimal(default=D("0"))
    max_uses = Integer()
    expiry_date = Date()
    is_active = Boolean(default=True)


@pricing.command_handler(part_of=CouponCode)
class ManageCouponCodesHandler:
    @handle(CreateCouponCode)
    def create_coupon_code(self, command):
        repo = current_domain.repository_for(CouponCode)
        if repo._dao.query.filter(code=command.code.strip()).all().items:
            raise ValidationError({"code": ["Coupon code already exists"]})

        coupon = CouponCode.create(
            code=command.code,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
            min_cart_value=command.min_cart_value,
            max_uses=command.max_uses,
            expiry_date=command.expiry_date,
            is_active=command.is_active,
        )
        repo.add(coupon)
        return str(coupon.id)
