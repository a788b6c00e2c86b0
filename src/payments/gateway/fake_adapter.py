"""Configurable fake payment gateway for development and testing.

This adapter simulates a payment provider without any external calls.
It can be configured at runtime to succeed or decline, and treats bank
payment methods (iDEAL, Klarna) as redirect-based: confirming them returns
a redirect URL that leads straight back to the caller's return URL, as if
the customer had approved the payment at their bank.
"""

from urllib.parse import urlencode
from uuid import uuid4

from payments.gateway.port import (
    BillingDetails,
    ConfirmationResult,
    GatewayError,
    IntentResult,
    IntentStatus,
    PaymentGateway,
    intent_id_from_secret,
)

REDIRECT_METHODS = frozenset({"ideal", "klarna", "bancontact"})


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Your card was declined."
        self.intents: dict[str, IntentResult] = {}
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Your card was declined.") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_intent(
        self,
        amount: int,
        currency: str,
        payment_method_types: list[str],
    ) -> IntentResult:
        self.calls.append(
            {
                "method": "create_intent",
                "amount": amount,
                "currency": currency,
                "payment_method_types": list(payment_method_types),
            }
        )

        intent_id = f"pi_fake{uuid4().hex[:16]}"
        intent = IntentResult(
            intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:12]}",
            status=IntentStatus.REQUIRES_PAYMENT_METHOD,
            amount=amount,
            currency=currency,
        )
        self.intents[intent_id] = intent
        return intent

    def confirm_intent(
        self,
        client_secret: str,
        payment_method: str,
        billing_details: BillingDetails,
        return_url: str,
    ) -> ConfirmationResult:
        self.calls.append(
            {
                "method": "confirm_intent",
                "client_secret": client_secret,
                "payment_method": payment_method,
                "billing_details": billing_details,
                "return_url": return_url,
            }
        )
        intent = self._lookup(client_secret)

        if payment_method in REDIRECT_METHODS:
            final_status = IntentStatus.SUCCEEDED if self.should_succeed else IntentStatus.REQUIRES_PAYMENT_METHOD
            self._set_status(intent, final_status)
            query = urlencode(
                {
                    "payment_intent": intent.intent_id,
                    "payment_intent_client_secret": intent.client_secret,
                    "redirect_status": "succeeded" if self.should_succeed else "failed",
                }
            )
            return ConfirmationResult(
                status=IntentStatus.REQUIRES_ACTION,
                intent_id=intent.intent_id,
                redirect_url=f"{return_url}?{query}",
            )

        if self.should_succeed:
            self._set_status(intent, IntentStatus.SUCCEEDED)
            return ConfirmationResult(status=IntentStatus.SUCCEEDED, intent_id=intent.intent_id)

        self._set_status(intent, IntentStatus.REQUIRES_PAYMENT_METHOD)
        return ConfirmationResult(
            status=IntentStatus.REQUIRES_PAYMENT_METHOD,
            intent_id=intent.intent_id,
            failure_reason=self.failure_reason,
        )

    def retrieve_intent(self, client_secret: str) -> IntentResult:
        self.calls.append({"method": "retrieve_intent", "client_secret": client_secret})
        return self._lookup(client_secret)

    def _lookup(self, client_secret: str) -> IntentResult:
        intent = self.intents.get(intent_id_from_secret(client_secret))
        if intent is None or intent.client_secret != client_secret:
            raise GatewayError("No such payment intent")
        return intent

    def _set_status(self, intent: IntentResult, status: IntentStatus) -> None:
        self.intents[intent.intent_id] = IntentResult(
            intent_id=intent.intent_id,
            client_secret=intent.client_secret,
            status=status,
            amount=intent.amount,
            currency=intent.currency,
        )
