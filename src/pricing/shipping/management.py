"""Shipping rate management — command and handler."""

from protean import handle
from protean.fields import Boolean, Decimal
from protean.utils.globals import current_domain

from pricing.domain import pricing
from pricing.shipping.shipping_rate import ShippingRate


@pricing.command(part_of="ShippingRate")
class CreateShippingRate:
    min_price = Decimal(required=True)
    max_price = Decimal()
    percentage_rate = Decimal(required=True)
    is_active = Boolean(default=True)


@pricing.command_handler(part_of=ShippingRate)
class ManageShippingRatesHandler:
    @handle(CreateShippingRate)
    def create_shipping_rate(self, command):
        rate = ShippingRate.create(
            min_price=command.min_price,
            max_price=command.max_price,
            percentage_rate=command.percentage_rate,
            is_active=command.is_active,
        )
        current_domain.repository_for(ShippingRate).add(rate)
        return str(rate.id)


def active_shipping_rates() -> list[ShippingRate]:
    """Active tiers, lowest ``min_price`` first."""
    rates = current_domain.repository_for(ShippingRate)._dao.query.filter(is_active=True).all().items
    return sorted(rates, key=lambda rate: rate.min_price)
