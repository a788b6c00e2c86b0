"""Ordering bounded context — orders placed after a confirmed payment.

The checkout client posts its pending-order snapshot here once the
payment provider reports success, either directly or after a redirect.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
