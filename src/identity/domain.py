"""Identity bounded context — provinces and saved customer addresses.

Authentication itself lives outside this service; addresses are keyed by
the user id the caller already holds.
"""

import structlog
from protean.domain import Domain

identity = Domain(name="identity")

logger = structlog.get_logger(__name__)
