"""Tax fee aggregate — a named percentage rate applied to the cart subtotal."""

from protean.fields import Boolean, Decimal, String

from pricing.domain import pricing


@pricing.aggregate
class TaxFee:
    name = String(required=True, max_length=100)
    rate = Decimal(required=True, min_value=0)  # fraction of subtotal, 0.21 = 21%
    is_active = Boolean(default=True)

    def deactivate(self) -> None:
        self.is_active = False
