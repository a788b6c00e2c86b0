"""Outcomes reported to the customer at the end of a payment attempt."""

from dataclasses import dataclass
from enum import Enum

ORDER_FAILED_MESSAGE = (
    "Your payment succeeded but we could not record your order. "
    "Please contact support; your payment details have been kept."
)
UNRESOLVED_MESSAGE = (
    "We could not match this payment to an order. "
    "Please contact support before paying again."
)
PENDING_MESSAGE = (
    "Your payment is still being processed by your bank. "
    "We will place your order once it completes; please do not pay again."
)


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    DECLINED = "declined"
    REDIRECT = "redirect"
    ORDER_FAILED = "order_failed"
    UNRESOLVED = "unresolved"
    FAILED = "failed"
    PENDING = "pending"


@dataclass(frozen=True)
class PaymentOutcome:
    status: OutcomeStatus
    message: str | None = None
    order_id: str | None = None
    redirect_url: str | None = None

    @property
    def needs_support(self) -> bool:
        return self.status in (OutcomeStatus.ORDER_FAILED, OutcomeStatus.UNRESOLVED)
