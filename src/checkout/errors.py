"""Checkout-specific exceptions.

Field-level validation failures use ``protean.exceptions.ValidationError``; the
classes below cover the conditions a caller has to treat differently.
"""


class CheckoutError(Exception):
    """Base class for checkout failures."""


class MixedCartError(CheckoutError):
    """The cart already holds items of a different type."""

    def __init__(self, cart_type: str, requested_type: str) -> None:
        self.cart_type = cart_type
        self.requested_type = requested_type
        super().__init__(
            f"Cart contains {cart_type} items; clear the cart before adding {requested_type} items"
        )


class AddressPersistenceError(CheckoutError):
    """Saving a new address for a signed-in customer failed."""


class CheckoutInProgressError(CheckoutError):
    """A payment confirmation is already outstanding."""


class ServiceUnavailableError(CheckoutError):
    """A storefront service could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
