"""Checkout bounded context — the storefront client core.

Holds the cart state and its reducer, the fee and coupon engine that keeps
the cart's derived amounts in line with the server, the checkout step
machine and the payment bridge that turns a confirmed payment into exactly
one order. Everything here talks to the server through the ports in
``checkout.services.ports``.
"""

import structlog

logger = structlog.get_logger(__name__)
