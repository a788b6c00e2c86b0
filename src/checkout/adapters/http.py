"""Storefront API adapters for the checkout ports.

``StorefrontClient`` owns the ``httpx.AsyncClient``; one small adapter per
port turns its JSON into checkout value objects. Transport failures, error
responses and bodies that cannot be decoded or parsed all surface as
``ServiceUnavailableError``.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal
from typing import Any
from urllib.parse import quote

import httpx

from checkout.domain import logger
from checkout.errors import ServiceUnavailableError
from checkout.features import FeatureFlags
from checkout.payment.pending import PendingOrder
from checkout.services.ports import (
    SETTLING_STATUSES,
    Address,
    AddressDraft,
    AddressService,
    BillingDetails,
    Confirmation,
    ConfirmationStatus,
    Coupon,
    CouponService,
    DiscountType,
    FeeService,
    OrderReceipt,
    OrderService,
    PaymentIntent,
    PaymentProvider,
    Province,
    ProvinceService,
    ShippingTier,
)
from checkout.session import Services
from shared.config import get_settings


@contextmanager
def parsing(path: str) -> Iterator[None]:
    """Turn a body with missing or mistyped fields into ``ServiceUnavailableError``."""
    try:
        yield
    except (AttributeError, KeyError, IndexError, TypeError, ValueError, ArithmeticError) as exc:
        logger.warning("storefront_malformed_response", path=path, error=repr(exc))
        raise ServiceUnavailableError(f"{path} returned a malformed body") from exc


class StorefrontClient:
    def __init__(self, base_url: str | None = None, client: httpx.AsyncClient | None = None) -> None:
        settings = get_settings()
        self.client = client or httpx.AsyncClient(
            base_url=base_url or settings.STOREFRONT_API_URL,
            timeout=settings.HTTP_TIMEOUT,
        )

    async def request(self, method: str, path: str, json: Any = None) -> Any:
        """Send a request and return the decoded JSON body."""
        try:
            response = await self.client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning("storefront_request_failed", method=method, path=path, error=str(exc))
            raise ServiceUnavailableError(f"{method} {path} failed: {exc}") from exc

        if response.is_error:
            logger.warning("storefront_error_response", method=method, path=path, status_code=response.status_code)
            raise ServiceUnavailableError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("storefront_undecodable_response", method=method, path=path)
            raise ServiceUnavailableError(
                f"{method} {path} returned a body that is not JSON",
                status_code=response.status_code,
            ) from exc

    async def feature_flags(self) -> FeatureFlags:
        data = await self.request("GET", "/feature-settings")
        with parsing("/feature-settings"):
            return FeatureFlags.from_mapping(data)

    async def aclose(self) -> None:
        await self.client.aclose()


class HttpFeeService(FeeService):
    def __init__(self, client: StorefrontClient) -> None:
        self.client = client

    async def get_active_tax_rate(self) -> Decimal | None:
        fees = await self.client.request("GET", "/tax-fees/active")
        with parsing("/tax-fees/active"):
            return Decimal(str(fees[0]["rate"])) if fees else None

    async def get_active_shipping_tiers(self) -> list[ShippingTier]:
        rates = await self.client.request("GET", "/shipping-rates/active")
        with parsing("/shipping-rates/active"):
            return [
                ShippingTier(
                    min_price=Decimal(str(rate["min_price"])),
                    max_price=Decimal(str(rate["max_price"])) if rate.get("max_price") is not None else None,
                    percentage_rate=Decimal(str(rate["percentage_rate"])),
                )
                for rate in rates
            ]


class HttpCouponService(CouponService):
    def __init__(self, client: StorefrontClient) -> None:
        self.client = client

    async def lookup(self, code: str) -> Coupon | None:
        path = f"/coupon-codes/{quote(code, safe='')}"
        try:
            data = await self.client.request("GET", path)
        except ServiceUnavailableError as exc:
            if exc.status_code == 404:
                return None
            raise
        with parsing(path):
            return Coupon(
                id=data["id"],
                code=data["code"],
                discount_type=DiscountType(data["discount_type"]),
                discount_value=Decimal(str(data["discount_value"])),
                min_cart_value=Decimal(str(data.get("min_cart_value") or "0")),
            )

    async def mark_used(self, coupon_id: str) -> None:
        await self.client.request("PUT", f"/coupon-codes/use/{quote(coupon_id, safe='')}")


class HttpAddressService(AddressService):
    def __init__(self, client: StorefrontClient) -> None:
        self.client = client

    async def list(self, user_id: str) -> list[Address]:
        path = f"/user-addresses/{quote(user_id, safe='')}"
        rows = await self.client.request("GET", path)
        with parsing(path):
            return [_address(row) for row in rows]

    async def create(self, user_id: str, draft: AddressDraft, province_id: str) -> Address:
        path = f"/user-addresses/{quote(user_id, safe='')}"
        row = await self.client.request(
            "POST",
            path,
            json={
                "address_name": draft.address_name,
                "city": draft.city,
                "province_id": province_id,
                "street_name": draft.street_name,
                "house_number": draft.house_number,
                "postcode": draft.postcode,
            },
        )
        with parsing(path):
            return _address(row)


class HttpProvinceService(ProvinceService):
    def __init__(self, client: StorefrontClient) -> None:
        self.client = client

    async def list(self) -> list[Province]:
        rows = await self.client.request("GET", "/provinces")
        with parsing("/provinces"):
            return [Province(id=row["id"], name=row["name"]) for row in rows]


class HttpPaymentProvider(PaymentProvider):
    def __init__(self, client: StorefrontClient) -> None:
        self.client = client

    async def create_intent(self, amount: Decimal, currency: str) -> PaymentIntent:
        data = await self.client.request(
            "POST",
            "/payments/intents",
            json={"amount": str(amount), "currency": currency},
        )
        with parsing("/payments/intents"):
            return PaymentIntent(
                client_secret=data["client_secret"],
                amount=data["amount"],
                currency=data["currency"],
                intent_id=data.get("intent_id"),
            )

    async def confirm(
        self,
        client_secret: str,
        payment_method: str,
        billing_details: BillingDetails,
        return_url: str,
    ) -> Confirmation:
        data = await self.client.request(
            "POST",
            "/payments/intents/confirm",
            json={
                "client_secret": client_secret,
                "payment_method": payment_method,
                "billing_details": {
                    "name": billing_details.name,
                    "email": billing_details.email,
                    "phone": billing_details.phone,
                    "address": billing_details.address,
                },
                "return_url": return_url,
            },
        )
        with parsing("/payments/intents/confirm"):
            status = data["status"]
            redirect_url = data.get("redirect_url")
            failure_reason = data.get("failure_reason")

        if redirect_url:
            return Confirmation(ConfirmationStatus.REDIRECT, redirect_url=redirect_url)
        if status == "succeeded":
            return Confirmation(ConfirmationStatus.SUCCEEDED)
        if status in SETTLING_STATUSES:
            return Confirmation(ConfirmationStatus.PENDING)
        return Confirmation(
            ConfirmationStatus.FAILED,
            error_message=failure_reason or "Your payment was not completed.",
        )

    async def retrieve_intent(self, client_secret: str) -> str:
        path = f"/payments/intents/{quote(client_secret, safe='')}"
        data = await self.client.request("GET", path)
        with parsing(path):
            return str(data["status"])


class HttpOrderService(OrderService):
    def __init__(self, client: StorefrontClient) -> None:
        self.client = client

    async def create(self, pending: PendingOrder) -> OrderReceipt:
        data = await self.client.request("POST", "/orders", json=pending.model_dump(mode="json"))
        with parsing("/orders"):
            return OrderReceipt(order_id=str(data["order_id"]))


def _address(row: dict) -> Address:
    return Address(
        id=row["id"],
        address_name=row["address_name"],
        street_name=row["street_name"],
        house_number=row["house_number"],
        postcode=row["postcode"],
        city=row["city"],
        province_id=row["province_id"],
        province=row.get("province"),
    )


def storefront_services(client: StorefrontClient) -> Services:
    """Every checkout port backed by the storefront API."""
    return Services(
        fees=HttpFeeService(client),
        coupons=HttpCouponService(client),
        addresses=HttpAddressService(client),
        provinces=HttpProvinceService(client),
        payments=HttpPaymentProvider(client),
        orders=HttpOrderService(client),
    )
