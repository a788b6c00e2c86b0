"""FastAPI routes for the Payments domain — payment intents."""

import json

from fastapi import APIRouter, HTTPException
from protean.utils.globals import current_domain

from payments.api.schemas import (
    ConfigureGatewayRequest,
    ConfirmationResponse,
    ConfirmIntentRequest,
    CreateIntentRequest,
    GatewayConfigResponse,
    IntentResponse,
)
from payments.gateway import get_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import IntentResult
from payments.intent.creation import ConfirmPaymentIntent, CreatePaymentIntent, retrieve_intent
from shared.config import get_settings

payment_router = APIRouter(prefix="/payments", tags=["payments"])


def _intent_response(intent: IntentResult) -> IntentResponse:
    return IntentResponse(
        intent_id=intent.intent_id,
        client_secret=intent.client_secret,
        status=intent.status.value,
        amount=intent.amount,
        currency=intent.currency,
    )


@payment_router.post("/intents", status_code=201, response_model=IntentResponse)
async def create_intent(body: CreateIntentRequest) -> IntentResponse:
    """Create a payment intent for a major-unit amount."""
    command = CreatePaymentIntent(amount=body.amount, currency=body.currency)
    intent = current_domain.process(command, asynchronous=False)
    return _intent_response(intent)


@payment_router.post("/intents/confirm", response_model=ConfirmationResponse)
async def confirm_intent(body: ConfirmIntentRequest) -> ConfirmationResponse:
    """Confirm an intent with a payment method.

    Redirect-based methods answer with ``requires_action`` and a
    ``redirect_url`` the client must navigate to.
    """
    command = ConfirmPaymentIntent(
        client_secret=body.client_secret,
        payment_method=body.payment_method,
        billing_details=json.dumps(body.billing_details.model_dump()),
        return_url=body.return_url,
    )
    result = current_domain.process(command, asynchronous=False)
    return ConfirmationResponse(
        status=result.status.value,
        intent_id=result.intent_id,
        redirect_url=result.redirect_url,
        failure_reason=result.failure_reason,
    )


@payment_router.get("/intents/{client_secret}", response_model=IntentResponse)
async def get_intent(client_secret: str) -> IntentResponse:
    """Look up an intent by client secret, e.g. after returning from a redirect."""
    return _intent_response(retrieve_intent(client_secret))


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only).

    This endpoint is only available when ENVIRONMENT is not 'production'.
    It allows toggling success/failure behavior for manual API testing.
    """
    if get_settings().ENVIRONMENT == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
    )
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )
