"""CheckoutFlow: the step machine from contact details to payment.

Guests start at ``guest_info``; signed-in customers start at ``address``.
Moving forward is guarded: a failed guard raises ``ValidationError`` and
leaves the step where it was. Moving back never clears entered data.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum

from protean.exceptions import ValidationError

from checkout.domain import logger
from checkout.errors import AddressPersistenceError, ServiceUnavailableError
from checkout.payment.pending import GuestAddress, GuestInfo
from checkout.services.ports import (
    Address,
    AddressDraft,
    AddressService,
    BillingDetails,
    ProvinceService,
)

DEFAULT_ADDRESS_LABEL = "Home"

_FIELD_LABELS = {
    "address_name": "Address name",
    "street_name": "Street name",
    "house_number": "House number",
    "postcode": "Postcode",
    "city": "City",
    "province": "Province",
}


class CheckoutStep(str, Enum):
    GUEST_INFO = "guest_info"
    ADDRESS = "address"
    PAYMENT = "payment"
    SUCCESS = "success"


class AddressMode(str, Enum):
    EXISTING = "existing"
    NEW = "new"


@dataclass(frozen=True)
class CustomerAccount:
    """The signed-in customer."""

    id: str
    name: str
    email: str
    phone: str | None = None


def missing_address_fields(draft: AddressDraft) -> dict[str, list[str]]:
    return {
        f.name: [f"{_FIELD_LABELS[f.name]} is required"]
        for f in fields(draft)
        if not str(getattr(draft, f.name) or "").strip()
    }


class CheckoutFlow:
    def __init__(
        self,
        addresses: AddressService,
        provinces: ProvinceService,
        customer: CustomerAccount | None = None,
    ) -> None:
        self.addresses = addresses
        self.provinces = provinces
        self.customer = customer
        self.saved_addresses: list[Address] = []
        self.open()

    @property
    def is_authenticated(self) -> bool:
        return self.customer is not None

    def open(self) -> CheckoutStep:
        """Start over at the first step for the current customer."""
        self.step = CheckoutStep.ADDRESS if self.is_authenticated else CheckoutStep.GUEST_INFO
        self.guest_info: GuestInfo | None = None
        self.guest_address: GuestAddress | None = None
        self.address_draft = AddressDraft()
        self.address_mode = AddressMode.EXISTING if self.is_authenticated else AddressMode.NEW
        self.selected_address_id: str | None = None
        self.address_id: str | None = None
        return self.step

    # -------------------------------------------------------------------
    # guest_info
    # -------------------------------------------------------------------
    def submit_guest_info(self, name: str, email: str, phone: str | None = None) -> CheckoutStep:
        self._require_step(CheckoutStep.GUEST_INFO)

        errors: dict[str, list[str]] = {}
        if not (name or "").strip():
            errors["name"] = ["Name is required"]
        if not (email or "").strip():
            errors["email"] = ["Email is required"]
        if errors:
            raise ValidationError(errors)

        self.guest_info = GuestInfo(name=name.strip(), email=email.strip(), phone=(phone or "").strip() or None)
        self.address_mode = AddressMode.NEW
        if not self.address_draft.address_name.strip():
            self.address_draft = replace(self.address_draft, address_name=DEFAULT_ADDRESS_LABEL)
        self.step = CheckoutStep.ADDRESS
        return self.step

    # -------------------------------------------------------------------
    # address
    # -------------------------------------------------------------------
    async def load_addresses(self) -> list[Address]:
        """Fetch the customer's saved addresses; with none saved, switch to a new address."""
        if not self.is_authenticated:
            return []
        self.saved_addresses = await self.addresses.list(self.customer.id)
        if not self.saved_addresses:
            self.address_mode = AddressMode.NEW
        return self.saved_addresses

    def select_address(self, address_id: str) -> None:
        if not self.is_authenticated:
            raise ValidationError({"address_id": ["Guests cannot use saved addresses"]})
        self.address_mode = AddressMode.EXISTING
        self.selected_address_id = address_id

    def use_new_address(self) -> None:
        self.address_mode = AddressMode.NEW

    def update_address(self, **values) -> AddressDraft:
        self.address_draft = replace(self.address_draft, **values)
        return self.address_draft

    async def continue_to_payment(self) -> CheckoutStep:
        self._require_step(CheckoutStep.ADDRESS)

        if self.is_authenticated and self.address_mode == AddressMode.EXISTING:
            if not self.selected_address_id:
                raise ValidationError({"address_id": ["Select an address or add a new one"]})
            self.address_id = self.selected_address_id
            self.step = CheckoutStep.PAYMENT
            return self.step

        errors = missing_address_fields(self.address_draft)
        if errors:
            raise ValidationError(errors)
        province_id = await self._resolve_province(self.address_draft.province)

        if not self.is_authenticated:
            draft = self.address_draft
            self.guest_address = GuestAddress(
                address_name=draft.address_name,
                street_name=draft.street_name,
                house_number=draft.house_number,
                postcode=draft.postcode,
                city=draft.city,
                province=draft.province,
                province_id=province_id,
            )
            self.step = CheckoutStep.PAYMENT
            return self.step

        try:
            address = await self.addresses.create(self.customer.id, self.address_draft, province_id)
        except ServiceUnavailableError as exc:
            logger.error("address_save_failed", user_id=self.customer.id, error=str(exc))
            raise AddressPersistenceError("Your address could not be saved. Please try again.") from exc

        logger.info("address_saved", user_id=self.customer.id, address_id=address.id)
        self.saved_addresses = [address, *self.saved_addresses]
        self.address_mode = AddressMode.EXISTING
        self.selected_address_id = address.id
        self.address_id = address.id
        self.step = CheckoutStep.PAYMENT
        return self.step

    # -------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------
    def back(self) -> CheckoutStep:
        if self.step == CheckoutStep.PAYMENT:
            self.step = CheckoutStep.ADDRESS
        elif self.step == CheckoutStep.ADDRESS and not self.is_authenticated:
            self.step = CheckoutStep.GUEST_INFO
        return self.step

    def mark_success(self) -> CheckoutStep:
        self._require_step(CheckoutStep.PAYMENT)
        self.step = CheckoutStep.SUCCESS
        return self.step

    # -------------------------------------------------------------------
    # Payment details
    # -------------------------------------------------------------------
    @property
    def shipping_address(self) -> Address | GuestAddress | None:
        if not self.is_authenticated:
            return self.guest_address
        return next((address for address in self.saved_addresses if address.id == self.address_id), None)

    def billing_details(self) -> BillingDetails:
        if self.is_authenticated:
            name, email, phone = self.customer.name, self.customer.email, self.customer.phone
        else:
            name, email, phone = self.guest_info.name, self.guest_info.email, self.guest_info.phone

        address = self.shipping_address
        postal = {}
        if address is not None:
            postal = {
                "line1": f"{address.street_name} {address.house_number}",
                "postal_code": address.postcode,
                "city": address.city,
                "state": address.province,
            }
        return BillingDetails(name=name, email=email, phone=phone, address=postal)

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _require_step(self, step: CheckoutStep) -> None:
        if self.step != step:
            raise ValidationError({"step": [f"Checkout is at {self.step.value}, not {step.value}"]})

    async def _resolve_province(self, name: str) -> str:
        wanted = name.strip().casefold()
        for province in await self.provinces.list():
            if province.name.casefold() == wanted:
                return province.id
        raise ValidationError({"province": ["Select a valid province"]})
