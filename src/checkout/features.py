"""Feature flags that decide which fees take part in the payable amount."""

from dataclasses import dataclass

from shared.config import Settings, get_settings


@dataclass(frozen=True)
class FeatureFlags:
    enable_tax_purchase: bool = False
    enable_shipping_by_price_zone: bool = False
    enable_discount_coupons: bool = False

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "FeatureFlags":
        settings = settings or get_settings()
        return cls(
            enable_tax_purchase=settings.ENABLE_TAX_PURCHASE,
            enable_shipping_by_price_zone=settings.ENABLE_SHIPPING_BY_PRICE_ZONE,
            enable_discount_coupons=settings.ENABLE_DISCOUNT_COUPONS,
        )

    @classmethod
    def from_mapping(cls, data: dict) -> "FeatureFlags":
        """Build flags from a ``/feature-settings`` payload; unknown keys are ignored."""
        return cls(
            enable_tax_purchase=bool(data.get("enable_tax_purchase", False)),
            enable_shipping_by_price_zone=bool(data.get("enable_shipping_by_price_zone", False)),
            enable_discount_coupons=bool(data.get("enable_discount_coupons", False)),
        )
