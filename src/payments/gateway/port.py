"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing any application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum


class IntentStatus(Enum):
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    REQUIRES_ACTION = "requires_action"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    CANCELED = "canceled"


@dataclass(frozen=True)
class IntentResult:
    """A payment intent as reported by the gateway."""

    intent_id: str
    client_secret: str
    status: IntentStatus
    amount: int  # minor units
    currency: str


@dataclass(frozen=True)
class ConfirmationResult:
    """Result of asking the gateway to confirm an intent."""

    status: IntentStatus
    intent_id: str | None = None
    redirect_url: str | None = None
    failure_reason: str | None = None

    @property
    def requires_redirect(self) -> bool:
        return self.status == IntentStatus.REQUIRES_ACTION and self.redirect_url is not None


@dataclass(frozen=True)
class BillingDetails:
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: dict = field(default_factory=dict)


class GatewayError(Exception):
    """The gateway rejected a request or could not be reached."""


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_intent(
        self,
        amount: int,
        currency: str,
        payment_method_types: list[str],
    ) -> IntentResult:
        """Create a payment intent for ``amount`` minor units."""
        ...

    @abstractmethod
    def confirm_intent(
        self,
        client_secret: str,
        payment_method: str,
        billing_details: BillingDetails,
        return_url: str,
    ) -> ConfirmationResult:
        """Confirm an intent. Redirect-based methods return a redirect URL instead of a final status."""
        ...

    @abstractmethod
    def retrieve_intent(self, client_secret: str) -> IntentResult:
        """Look up the current state of an intent by its client secret."""
        ...


def intent_id_from_secret(client_secret: str) -> str:
    """Client secrets have the form ``<intent id>_secret_<random>``."""
    intent_id, separator, _ = client_secret.partition("_secret_")
    if not separator or not intent_id:
        raise GatewayError("Malformed payment intent client secret")
    return intent_id
