"""Integration tests for provinces and user addresses via TestClient."""

import pytest
from app import app
from fastapi.testclient import TestClient
from identity.address.management import AddProvince
from protean import current_domain


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def utrecht():
    current_domain.process(AddProvince(name="Zeeland"), asynchronous=False)
    return current_domain.process(AddProvince(name="Utrecht"), asynchronous=False)


def _address(province_id, **overrides):
    data = {
        "address_name": "Home",
        "city": "Utrecht",
        "province_id": province_id,
        "street_name": "Oudegracht",
        "house_number": "12",
        "postcode": "3511 AB",
    }
    data.update(overrides)
    return data


class TestProvincesAPI:
    def test_sorted_by_name(self, client, utrecht):
        names = [province["name"] for province in client.get("/provinces").json()]

        assert names == ["Utrecht", "Zeeland"]


class TestUserAddressesAPI:
    def test_create_returns_201(self, client, utrecht):
        response = client.post("/user-addresses/user-ana", json=_address(utrecht))

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == "user-ana"
        assert body["province_id"] == utrecht
        assert body["province"] == "Utrecht"

    def test_missing_fields_are_400(self, client, utrecht):
        response = client.post("/user-addresses/user-ana", json=_address(utrecht, postcode="", city=None))

        assert response.status_code == 400
        assert set(response.json()["messages"]) == {"postcode", "city"}

    def test_unknown_province_is_400(self, client, utrecht):
        response = client.post("/user-addresses/user-ana", json=_address("prov-atlantis"))

        assert response.status_code == 400
        assert "province_id" in response.json()["messages"]

    def test_list_newest_first(self, client, utrecht):
        client.post("/user-addresses/user-ana", json=_address(utrecht, address_name="Home"))
        client.post("/user-addresses/user-ana", json=_address(utrecht, address_name="Office"))
        client.post("/user-addresses/user-bram", json=_address(utrecht, address_name="Elsewhere"))

        names = [address["address_name"] for address in client.get("/user-addresses/user-ana").json()]

        assert names == ["Office", "Home"]

    def test_no_addresses(self, client):
        assert client.get("/user-addresses/nobody").json() == []
