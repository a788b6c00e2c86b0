"""Payment intent record — the storefront's copy of a provider intent.

The provider stays the source of truth for the status; this record keeps
the amount that was asked for and the last status the storefront saw, so
a confirmation can be traced back to the intent it belongs to.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Integer, String

from payments.domain import payments
from payments.gateway.port import IntentStatus


@payments.aggregate
class PaymentIntent:
    intent_id = String(required=True, max_length=255)
    client_secret = String(required=True, max_length=255)
    amount = Integer(required=True, min_value=0)  # minor units
    currency = String(required=True, max_length=3)
    status = String(choices=IntentStatus, default=IntentStatus.REQUIRES_PAYMENT_METHOD.value)
    payment_method = String(max_length=50)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, intent_id, client_secret, amount, currency, status):
        now = datetime.now(UTC)
        return cls(
            intent_id=intent_id,
            client_secret=client_secret,
            amount=amount,
            currency=currency,
            status=IntentStatus(status).value,
            created_at=now,
            updated_at=now,
        )

    def record_confirmation(self, status, payment_method) -> None:
        self.status = IntentStatus(status).value
        self.payment_method = payment_method
        self.updated_at = datetime.now(UTC)
