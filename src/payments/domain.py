"""Payments bounded context — the payment-intent boundary.

The storefront never charges cards itself: it creates an intent with the
provider for the payable amount, lets the provider confirm it (possibly
after a bank redirect) and reports the intent status back to the client.
"""

import structlog
from protean.domain import Domain

payments = Domain(name="payments")

logger = structlog.get_logger(__name__)
