"""Payment intent creation and confirmation."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Decimal, String, Text
from protean.utils.globals import current_domain

from payments.domain import logger, payments
from payments.gateway import get_gateway
from payments.gateway.port import BillingDetails, IntentResult
from payments.intent.amounts import to_minor_units
from payments.intent.intent import PaymentIntent
from shared.config import get_settings


@payments.command(part_of="PaymentIntent")
class CreatePaymentIntent:
    amount = Decimal(required=True)
    currency = String(max_length=3)


@payments.command(part_of="PaymentIntent")
class ConfirmPaymentIntent:
    client_secret = String(required=True, max_length=255)
    payment_method = String(required=True, max_length=50)
    billing_details = Text()  # JSON: {name, email, phone, address}
    return_url = String(max_length=2048)


@payments.command_handler(part_of=PaymentIntent)
class PaymentIntentHandler:
    @handle(CreatePaymentIntent)
    def create_intent(self, command):
        if command.amount < 0:
            raise ValidationError({"amount": ["Amount cannot be negative"]})

        settings = get_settings()
        minor_units = to_minor_units(command.amount, settings.MIN_CHARGE_MINOR_UNITS)
        currency = (command.currency or settings.CURRENCY).lower()

        intent = get_gateway().create_intent(
            amount=minor_units,
            currency=currency,
            payment_method_types=settings.PAYMENT_METHOD_TYPES,
        )
        current_domain.repository_for(PaymentIntent).add(
            PaymentIntent.create(
                intent_id=intent.intent_id,
                client_secret=intent.client_secret,
                amount=intent.amount,
                currency=intent.currency,
                status=intent.status,
            )
        )
        logger.info(
            "payment_intent_created",
            intent_id=intent.intent_id,
            amount=minor_units,
            currency=currency,
        )
        return intent

    @handle(ConfirmPaymentIntent)
    def confirm_intent(self, command):
        settings = get_settings()
        method = command.payment_method
        if not method.startswith("pm_") and method not in settings.PAYMENT_METHOD_TYPES:
            raise ValidationError({"payment_method": [f"Unsupported payment method {method}"]})

        billing = json.loads(command.billing_details) if command.billing_details else {}
        result = get_gateway().confirm_intent(
            client_secret=command.client_secret,
            payment_method=method,
            billing_details=BillingDetails(
                name=billing.get("name"),
                email=billing.get("email"),
                phone=billing.get("phone"),
                address=billing.get("address") or {},
            ),
            return_url=command.return_url or settings.PAYMENT_RETURN_URL,
        )

        repo = current_domain.repository_for(PaymentIntent)
        records = repo._dao.query.filter(client_secret=command.client_secret).all().items
        if records:
            record = records[0]
            record.record_confirmation(result.status, method)
            repo.add(record)

        logger.info(
            "payment_intent_confirmed",
            intent_id=result.intent_id,
            status=result.status.value,
            redirect=result.requires_redirect,
        )
        return result


def retrieve_intent(client_secret: str) -> IntentResult:
    """Current provider view of an intent, looked up by its client secret."""
    return get_gateway().retrieve_intent(client_secret)
