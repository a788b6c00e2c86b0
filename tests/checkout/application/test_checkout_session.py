from decimal import Decimal

from checkout.cart.state import Product
from checkout.features import FeatureFlags
from checkout.flow.steps import CheckoutStep, CustomerAccount
from checkout.payment.pending import PENDING_ORDER_KEY
from checkout.session import CheckoutSession

LAMP = Product(product_id="lamp", name="Desk Lamp", retail_price=Decimal("10.00"))
ANA = CustomerAccount(id="user-ana", name="Ana de Vries", email="ana@example.com")


class TestCheckoutSession:
    def test_features_default_to_settings(self, services, durable_storage, session_storage):
        session = CheckoutSession(services, durable_storage, session_storage)

        assert session.features == FeatureFlags(True, True, True)
        assert session.currency == "eur"

    def test_cart_is_restored_from_durable_storage(self, make_session):
        make_session().cart.add_item(LAMP)

        assert make_session().cart.state.item_count == 1

    async def test_start_keeps_fees_in_sync(self, session, services):
        services.fees.tax_rate = Decimal("0.21")
        session.start()

        session.cart.add_item(LAMP)
        await session.fees.drain()

        assert session.cart.state.tax_fee == Decimal("2.10")
        session.fees.stop()

    def test_closing_checkout_keeps_the_cart(self, session):
        session.cart.add_item(LAMP)
        session.flow.submit_guest_info("Piet", "piet@example.com")

        session.open_checkout()

        assert session.flow.step == CheckoutStep.GUEST_INFO
        assert session.cart.state.item_count == 1

    def test_sign_in_moves_to_the_address_step(self, session):
        session.sign_in(ANA)

        assert session.flow.is_authenticated
        assert session.flow.step == CheckoutStep.ADDRESS

    def test_sign_out_tears_down_session_state(self, make_session, session_storage):
        session = make_session(customer=ANA)
        session.cart.add_item(LAMP)
        session_storage.set(PENDING_ORDER_KEY, "{}")

        session.sign_out()

        assert not session.flow.is_authenticated
        assert session.flow.step == CheckoutStep.GUEST_INFO
        assert session.cart.state.is_empty
        assert session_storage.get(PENDING_ORDER_KEY) is None

    def test_each_return_gets_a_fresh_callback(self, session):
        assert session.payment_callback() is not session.payment_callback()
