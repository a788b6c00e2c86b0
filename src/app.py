"""Storefront FastAPI application.

Serves the storefront API the checkout talks to: fees, coupons, feature
settings, provinces, user addresses, orders and payment intents. Each
request is wrapped in the domain context that owns its URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from identity.domain import identity  # noqa: E402
from ordering.domain import ordering  # noqa: E402
from payments.domain import payments  # noqa: E402
from payments.gateway.port import GatewayError
from pricing.domain import pricing  # noqa: E402
from protean.exceptions import ObjectNotFoundError, ValidationError
from shared.config import get_settings
from shared.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)

identity.init()
ordering.init()
payments.init()
pricing.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/tax-fees": pricing,
    "/shipping-rates": pricing,
    "/coupon-codes": pricing,
    "/feature-settings": pricing,
    "/provinces": identity,
    "/user-addresses": identity,
    "/orders": ordering,
    "/payments": payments,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


def _first_message(messages: dict) -> str:
    for errors in messages.values():
        if errors:
            return errors[0] if isinstance(errors, list) else str(errors)
    return ""


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Storefront checkout — pricing, identity, ordering and payments",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match — pass through (health check, docs, etc.)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": _first_message(exc.messages), "messages": exc.messages})


@app.exception_handler(ObjectNotFoundError)
async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": str(exc)})


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    logger.warning("payment_gateway_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=502, content={"error": str(exc)})


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from identity.api import address_router, province_router  # noqa: E402
from ordering.api import order_router  # noqa: E402
from payments.api import payment_router  # noqa: E402
from pricing.api import coupon_router, feature_router, shipping_router, tax_router  # noqa: E402


app.include_router(tax_router)
app.include_router(shipping_router)
app.include_router(coupon_router)
app.include_router(feature_router)
app.include_router(province_router)
app.include_router(address_router)
app.include_router(order_router)
app.include_router(payment_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    settings = get_settings()
    return JSONResponse(
        content={
            "status": "ok",
            "environment": settings.ENVIRONMENT,
            "payment_gateway": settings.PAYMENT_GATEWAY,
        }
    )
