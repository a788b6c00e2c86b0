"""Pydantic request/response schemas for the Payments API.

These are external contracts (anti-corruption layer) — separate from
internal commands.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateIntentRequest(BaseModel):
    amount: Decimal = Field(ge=0)
    currency: str | None = None

    model_config = {"json_schema_extra": {"examples": [{"amount": "25.20", "currency": "eur"}]}}


class BillingDetailsSchema(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: dict = Field(default_factory=dict)


class ConfirmIntentRequest(BaseModel):
    client_secret: str
    payment_method: str
    billing_details: BillingDetailsSchema = Field(default_factory=BillingDetailsSchema)
    return_url: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "client_secret": "pi_123_secret_abc",
                    "payment_method": "card",
                    "billing_details": {"name": "Ana", "email": "ana@example.com"},
                    "return_url": "http://localhost:5173/payment/callback",
                }
            ]
        }
    }


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Your card was declined."


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class IntentResponse(BaseModel):
    intent_id: str
    client_secret: str
    status: str
    amount: int
    currency: str


class ConfirmationResponse(BaseModel):
    status: str
    intent_id: str | None = None
    redirect_url: str | None = None
    failure_reason: str | None = None


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str
