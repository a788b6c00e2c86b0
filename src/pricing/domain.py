"""Pricing bounded context — tax fees, shipping-rate tiers and coupon codes.

Serves the fee and coupon lookups that the checkout client uses to
recompute taxes, shipping and discounts whenever the cart changes.
"""

import structlog
from protean.domain import Domain

pricing = Domain(name="pricing")

logger = structlog.get_logger(__name__)
