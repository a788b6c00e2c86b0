from decimal import Decimal

import pytest
from checkout.cart.state import Product
from checkout.cart.store import CartStore
from checkout.features import FeatureFlags
from checkout.flow.steps import CustomerAccount
from checkout.services.fakes import (
    FakeAddressService,
    FakeCouponService,
    FakeFeeService,
    FakeOrderService,
    FakePaymentProvider,
    FakeProvinceService,
)
from checkout.services.ports import Address, Coupon, DiscountType, Province
from checkout.session import CheckoutSession, Services
from checkout.storage.memory import MemoryStorage

UTRECHT = Province(id="prov-utrecht", name="Utrecht")
NOORD_HOLLAND = Province(id="prov-nh", name="Noord-Holland")

LAMP = Product(
    product_id="lamp",
    name="Desk Lamp",
    retail_price=Decimal("10.00"),
    wholesale_price=Decimal("7.50"),
)
SOFA = Product(product_id="sofa", name="Sofa", retail_price=Decimal("50.00"))
TABLE = Product(product_id="table", name="Table", retail_price=Decimal("100.00"))

FIVE_OFF = Coupon(
    id="coupon-five",
    code="FIVEOFF",
    discount_type=DiscountType.FIXED,
    discount_value=Decimal("5.00"),
    min_cart_value=Decimal("20.00"),
)
TEN_PERCENT = Coupon(
    id="coupon-ten",
    code="TENPCT",
    discount_type=DiscountType.PERCENTAGE,
    discount_value=Decimal("0.10"),
)
BIG_SPENDER = Coupon(
    id="coupon-big",
    code="BIGSPENDER",
    discount_type=DiscountType.FIXED,
    discount_value=Decimal("5.00"),
    min_cart_value=Decimal("100.00"),
)

ANA = CustomerAccount(id="user-ana", name="Ana de Vries", email="ana@example.com", phone="+31600000000")
ANA_HOME = Address(
    id="addr-ana-home",
    address_name="Home",
    street_name="Oudegracht",
    house_number="12",
    postcode="3511 AB",
    city="Utrecht",
    province_id=UTRECHT.id,
    province=UTRECHT.name,
)

ALL_FEATURES = FeatureFlags(
    enable_tax_purchase=True,
    enable_shipping_by_price_zone=True,
    enable_discount_coupons=True,
)


@pytest.fixture()
def durable_storage():
    return MemoryStorage()


@pytest.fixture()
def session_storage():
    return MemoryStorage()


@pytest.fixture()
def store(durable_storage):
    return CartStore(durable_storage, clock=lambda: 1700000000000)


@pytest.fixture()
def services():
    return Services(
        fees=FakeFeeService(),
        coupons=FakeCouponService([FIVE_OFF, TEN_PERCENT, BIG_SPENDER]),
        addresses=FakeAddressService({ANA.id: [ANA_HOME]}),
        provinces=FakeProvinceService([UTRECHT, NOORD_HOLLAND]),
        payments=FakePaymentProvider(),
        orders=FakeOrderService(),
    )


@pytest.fixture()
def make_session(services, durable_storage, session_storage):
    """Build a session over the shared storages, as a new page load would."""

    def _make(customer=None, features=ALL_FEATURES):
        return CheckoutSession(
            services,
            durable_storage=durable_storage,
            session_storage=session_storage,
            features=features,
            customer=customer,
        )

    return _make


@pytest.fixture()
def session(make_session):
    return make_session()


@pytest.fixture()
async def guest_at_payment(session):
    """A guest session with 2 lamps in the cart, ready to pay."""
    session.cart.add_item(LAMP)
    session.cart.add_item(LAMP)
    session.flow.submit_guest_info("Piet Jansen", "piet@example.com")
    session.flow.update_address(
        street_name="Oudegracht",
        house_number="12",
        postcode="3511 AB",
        city="Utrecht",
        province="Utrecht",
    )
    await session.flow.continue_to_payment()
    return session


@pytest.fixture()
async def member_at_payment(make_session):
    """A signed-in session paying for one sofa, shipping to a saved address."""
    session = make_session(customer=ANA)
    session.cart.add_item(SOFA)
    await session.flow.load_addresses()
    session.flow.select_address(ANA_HOME.id)
    await session.flow.continue_to_payment()
    return session
