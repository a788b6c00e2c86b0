"""Stripe payment gateway adapter.

Uses the stripe-python SDK to create, confirm and retrieve PaymentIntents.
Card payments usually complete during confirmation; bank methods such as
iDEAL come back with ``requires_action`` and a redirect URL.
"""

import stripe

from payments.domain import logger
from payments.gateway.port import (
    BillingDetails,
    ConfirmationResult,
    GatewayError,
    IntentResult,
    IntentStatus,
    PaymentGateway,
    intent_id_from_secret,
)


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def create_intent(
        self,
        amount: int,
        currency: str,
        payment_method_types: list[str],
    ) -> IntentResult:
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=currency,
                payment_method_types=payment_method_types,
                api_key=self.api_key,
            )
        except stripe.StripeError as exc:
            logger.error("stripe_create_intent_failed", error=str(exc))
            raise GatewayError(exc.user_message or str(exc)) from exc
        return self._to_result(intent)

    def confirm_intent(
        self,
        client_secret: str,
        payment_method: str,
        billing_details: BillingDetails,
        return_url: str,
    ) -> ConfirmationResult:
        params: dict = {"return_url": return_url, "api_key": self.api_key}
        if payment_method.startswith("pm_"):
            params["payment_method"] = payment_method
        else:
            params["payment_method_data"] = {
                "type": payment_method,
                "billing_details": _billing_params(billing_details),
            }

        try:
            intent = stripe.PaymentIntent.confirm(intent_id_from_secret(client_secret), **params)
        except stripe.CardError as exc:
            return ConfirmationResult(
                status=IntentStatus.REQUIRES_PAYMENT_METHOD,
                intent_id=intent_id_from_secret(client_secret),
                failure_reason=exc.user_message or str(exc),
            )
        except stripe.StripeError as exc:
            logger.error("stripe_confirm_intent_failed", error=str(exc))
            raise GatewayError(exc.user_message or str(exc)) from exc

        status = IntentStatus(intent["status"])
        redirect_url = None
        next_action = intent.get("next_action") or {}
        if status == IntentStatus.REQUIRES_ACTION and next_action.get("redirect_to_url"):
            redirect_url = next_action["redirect_to_url"]["url"]

        failure_reason = None
        last_error = intent.get("last_payment_error")
        if status == IntentStatus.REQUIRES_PAYMENT_METHOD and last_error:
            failure_reason = last_error.get("message")

        return ConfirmationResult(
            status=status,
            intent_id=intent["id"],
            redirect_url=redirect_url,
            failure_reason=failure_reason,
        )

    def retrieve_intent(self, client_secret: str) -> IntentResult:
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id_from_secret(client_secret), api_key=self.api_key)
        except stripe.StripeError as exc:
            logger.error("stripe_retrieve_intent_failed", error=str(exc))
            raise GatewayError(exc.user_message or str(exc)) from exc
        if intent["client_secret"] != client_secret:
            raise GatewayError("Client secret does not match the payment intent")
        return self._to_result(intent)

    @staticmethod
    def _to_result(intent) -> IntentResult:
        return IntentResult(
            intent_id=intent["id"],
            client_secret=intent["client_secret"],
            status=IntentStatus(intent["status"]),
            amount=intent["amount"],
            currency=intent["currency"],
        )


def _billing_params(billing_details: BillingDetails) -> dict:
    params = {
        "name": billing_details.name,
        "email": billing_details.email,
        "phone": billing_details.phone,
        "address": billing_details.address or None,
    }
    return {key: value for key, value in params.items() if value}
