"""Identity API routers."""

from identity.api.routes import address_router, province_router

__all__ = ["address_router", "province_router"]
