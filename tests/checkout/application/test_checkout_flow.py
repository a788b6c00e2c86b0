import pytest
from checkout.errors import AddressPersistenceError
from checkout.flow.steps import AddressMode, CheckoutFlow, CheckoutStep, CustomerAccount
from protean.exceptions import ValidationError

ANA = CustomerAccount(id="user-ana", name="Ana de Vries", email="ana@example.com")
BRAM = CustomerAccount(id="user-bram", name="Bram", email="bram@example.com")

ADDRESS = {
    "street_name": "Damrak",
    "house_number": "1",
    "postcode": "1012 LG",
    "city": "Amsterdam",
    "province": "Noord-Holland",
}


@pytest.fixture()
def guest_flow(services):
    return CheckoutFlow(services.addresses, services.provinces)


@pytest.fixture()
def member_flow(services):
    return CheckoutFlow(services.addresses, services.provinces, customer=ANA)


class TestInitialStep:
    def test_guests_start_with_contact_details(self, guest_flow):
        assert guest_flow.step == CheckoutStep.GUEST_INFO
        assert guest_flow.address_mode == AddressMode.NEW

    def test_members_start_with_the_address(self, member_flow):
        assert member_flow.step == CheckoutStep.ADDRESS

    def test_reopening_starts_over(self, guest_flow):
        guest_flow.submit_guest_info("Piet", "piet@example.com")

        guest_flow.open()

        assert guest_flow.step == CheckoutStep.GUEST_INFO
        assert guest_flow.guest_info is None
        assert guest_flow.address_draft.address_name == ""


class TestGuestInfo:
    def test_name_and_email_are_required(self, guest_flow):
        with pytest.raises(ValidationError) as exc:
            guest_flow.submit_guest_info("  ", "")

        assert set(exc.value.messages) == {"name", "email"}
        assert guest_flow.step == CheckoutStep.GUEST_INFO

    def test_advances_to_a_new_address_with_default_label(self, guest_flow):
        step = guest_flow.submit_guest_info("Piet", "piet@example.com", "0612345678")

        assert step == CheckoutStep.ADDRESS
        assert guest_flow.guest_info.name == "Piet"
        assert guest_flow.guest_info.phone == "0612345678"
        assert guest_flow.address_mode == AddressMode.NEW
        assert guest_flow.address_draft.address_name == "Home"

    def test_typed_label_is_kept(self, guest_flow):
        guest_flow.update_address(address_name="Office")

        guest_flow.submit_guest_info("Piet", "piet@example.com")

        assert guest_flow.address_draft.address_name == "Office"

    def test_guests_cannot_pick_saved_addresses(self, guest_flow):
        guest_flow.submit_guest_info("Piet", "piet@example.com")

        with pytest.raises(ValidationError):
            guest_flow.select_address("addr-ana-home")


class TestGuestAddress:
    async def test_missing_fields_are_reported_per_field(self, guest_flow):
        guest_flow.submit_guest_info("Piet", "piet@example.com")
        guest_flow.update_address(street_name="Damrak")

        with pytest.raises(ValidationError) as exc:
            await guest_flow.continue_to_payment()

        assert set(exc.value.messages) == {"house_number", "postcode", "city", "province"}
        assert guest_flow.step == CheckoutStep.ADDRESS

    async def test_unknown_province_blocks(self, guest_flow):
        guest_flow.submit_guest_info("Piet", "piet@example.com")
        guest_flow.update_address(**{**ADDRESS, "province": "Atlantis"})

        with pytest.raises(ValidationError) as exc:
            await guest_flow.continue_to_payment()

        assert "province" in exc.value.messages
        assert guest_flow.step == CheckoutStep.ADDRESS

    async def test_complete_address_advances_without_saving(self, guest_flow, services):
        guest_flow.submit_guest_info("Piet", "piet@example.com")
        guest_flow.update_address(**{**ADDRESS, "province": "noord-holland"})

        step = await guest_flow.continue_to_payment()

        assert step == CheckoutStep.PAYMENT
        assert guest_flow.guest_address.province_id == "prov-nh"
        assert guest_flow.guest_address.address_name == "Home"
        assert guest_flow.address_id is None
        assert set(services.addresses.addresses) == {"user-ana"}


class TestMemberAddress:
    async def test_saved_addresses_are_loaded(self, member_flow):
        addresses = await member_flow.load_addresses()

        assert [address.id for address in addresses] == ["addr-ana-home"]
        assert member_flow.address_mode == AddressMode.EXISTING

    async def test_no_saved_addresses_switches_to_new(self, services):
        flow = CheckoutFlow(services.addresses, services.provinces, customer=BRAM)

        await flow.load_addresses()

        assert flow.address_mode == AddressMode.NEW

    async def test_an_address_must_be_selected(self, member_flow):
        await member_flow.load_addresses()

        with pytest.raises(ValidationError) as exc:
            await member_flow.continue_to_payment()

        assert "address_id" in exc.value.messages
        assert member_flow.step == CheckoutStep.ADDRESS

    async def test_selected_address_advances(self, member_flow):
        await member_flow.load_addresses()
        member_flow.select_address("addr-ana-home")

        step = await member_flow.continue_to_payment()

        assert step == CheckoutStep.PAYMENT
        assert member_flow.address_id == "addr-ana-home"
        assert member_flow.shipping_address.city == "Utrecht"

    async def test_new_address_is_saved_first(self, member_flow, services):
        member_flow.use_new_address()
        member_flow.update_address(address_name="Office", **ADDRESS)

        await member_flow.continue_to_payment()

        saved = services.addresses.addresses["user-ana"][0]
        assert member_flow.step == CheckoutStep.PAYMENT
        assert member_flow.address_id == saved.id
        assert saved.province_id == "prov-nh"
        assert member_flow.saved_addresses[0] == saved

    async def test_save_failure_stays_on_address(self, member_flow, services):
        services.addresses.fail = True
        member_flow.use_new_address()
        member_flow.update_address(address_name="Office", **ADDRESS)

        with pytest.raises(AddressPersistenceError):
            await member_flow.continue_to_payment()

        assert member_flow.step == CheckoutStep.ADDRESS
        assert member_flow.address_id is None


class TestNavigation:
    async def test_back_keeps_entered_data(self, guest_flow):
        guest_flow.submit_guest_info("Piet", "piet@example.com")
        guest_flow.update_address(**ADDRESS)
        await guest_flow.continue_to_payment()

        assert guest_flow.back() == CheckoutStep.ADDRESS
        assert guest_flow.address_draft.city == "Amsterdam"
        assert guest_flow.back() == CheckoutStep.GUEST_INFO
        assert guest_flow.guest_info.email == "piet@example.com"

    def test_members_cannot_go_back_past_the_address(self, member_flow):
        assert member_flow.back() == CheckoutStep.ADDRESS

    def test_success_requires_the_payment_step(self, guest_flow):
        with pytest.raises(ValidationError):
            guest_flow.mark_success()

    def test_forward_actions_check_the_step(self, member_flow):
        with pytest.raises(ValidationError):
            member_flow.submit_guest_info("Ana", "ana@example.com")


class TestBillingDetails:
    async def test_guest_billing_uses_guest_details(self, guest_flow):
        guest_flow.submit_guest_info("Piet", "piet@example.com")
        guest_flow.update_address(**ADDRESS)
        await guest_flow.continue_to_payment()

        billing = guest_flow.billing_details()

        assert billing.name == "Piet"
        assert billing.email == "piet@example.com"
        assert billing.address["line1"] == "Damrak 1"
        assert billing.address["postal_code"] == "1012 LG"

    async def test_member_billing_uses_the_account(self, member_flow):
        await member_flow.load_addresses()
        member_flow.select_address("addr-ana-home")
        await member_flow.continue_to_payment()

        billing = member_flow.billing_details()

        assert billing.name == "Ana de Vries"
        assert billing.address["city"] == "Utrecht"
