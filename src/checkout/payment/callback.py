"""PaymentCallback: completes a payment after the bank redirect.

Runs in a fresh page life: only the PendingOrder in session storage and the
provider's own intent state are trusted. Each instance processes one return
navigation; repeated calls get the first outcome back.
"""

import asyncio
from urllib.parse import parse_qs, urlsplit

from checkout.domain import logger
from checkout.errors import ServiceUnavailableError
from checkout.payment.finalizer import OrderFinalizer
from checkout.payment.outcome import PENDING_MESSAGE, UNRESOLVED_MESSAGE, OutcomeStatus, PaymentOutcome
from checkout.payment.pending import PendingOrderStore
from checkout.services.ports import SETTLING_STATUSES, PaymentProvider

CLIENT_SECRET_PARAM = "payment_intent_client_secret"


def client_secret_from_url(url: str) -> str | None:
    values = parse_qs(urlsplit(url).query).get(CLIENT_SECRET_PARAM)
    return values[0] if values else None


class PaymentCallback:
    def __init__(
        self,
        provider: PaymentProvider,
        pending_orders: PendingOrderStore,
        finalizer: OrderFinalizer,
    ) -> None:
        self.provider = provider
        self.pending_orders = pending_orders
        self.finalizer = finalizer
        self._task: asyncio.Task | None = None

    async def handle(self, return_url: str) -> PaymentOutcome:
        if self._task is None:
            self._task = asyncio.ensure_future(self._process(return_url))
        else:
            logger.info("payment_callback_repeated")
        return await self._task

    async def _process(self, return_url: str) -> PaymentOutcome:
        client_secret = client_secret_from_url(return_url)
        if not client_secret:
            logger.warning("payment_callback_without_secret")
            return PaymentOutcome(OutcomeStatus.FAILED, message="The payment reference is missing.")

        try:
            status = await self.provider.retrieve_intent(client_secret)
        except ServiceUnavailableError as exc:
            logger.error("payment_status_unavailable", error=str(exc))
            return PaymentOutcome(OutcomeStatus.FAILED, message="We could not verify your payment. Please try again.")

        if status in SETTLING_STATUSES:
            logger.info("payment_still_settling", status=status)
            return PaymentOutcome(OutcomeStatus.PENDING, message=PENDING_MESSAGE)

        if status != "succeeded":
            logger.info("payment_not_completed", status=status)
            return PaymentOutcome(OutcomeStatus.FAILED, message="Your payment was not completed. Please try again.")

        pending = self.pending_orders.load()
        if pending is None:
            logger.error("payment_without_pending_order", intent=client_secret.partition("_secret_")[0])
            return PaymentOutcome(OutcomeStatus.UNRESOLVED, message=UNRESOLVED_MESSAGE)

        return await self.finalizer.finalize(pending)
