"""FastAPI routes for the Identity domain — provinces and user addresses."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from identity.address.address import UserAddress
from identity.address.management import AddAddress, addresses_for, province_name, provinces
from identity.api.schemas import AddAddressRequest, AddressResponse, ProvinceResponse

# ---------------------------------------------------------------------------
# Province Router
# ---------------------------------------------------------------------------
province_router = APIRouter(prefix="/provinces", tags=["provinces"])


@province_router.get("", response_model=list[ProvinceResponse])
async def list_provinces() -> list[ProvinceResponse]:
    return [ProvinceResponse(id=str(province.id), name=province.name) for province in provinces()]


# ---------------------------------------------------------------------------
# Address Router
# ---------------------------------------------------------------------------
address_router = APIRouter(prefix="/user-addresses", tags=["user-addresses"])


def _to_response(address: UserAddress) -> AddressResponse:
    return AddressResponse(
        id=str(address.id),
        user_id=str(address.user_id),
        address_name=address.address_name,
        city=address.city,
        province_id=str(address.province_id),
        province=province_name(address.province_id),
        street_name=address.street_name,
        house_number=address.house_number,
        postcode=address.postcode,
        created_at=address.created_at,
    )


@address_router.get("/{user_id}", response_model=list[AddressResponse])
async def list_addresses(user_id: str) -> list[AddressResponse]:
    return [_to_response(address) for address in addresses_for(user_id)]


@address_router.post("/{user_id}", status_code=201, response_model=AddressResponse)
async def add_address(user_id: str, body: AddAddressRequest) -> AddressResponse:
    command = AddAddress(
        user_id=user_id,
        address_name=body.address_name,
        city=body.city,
        province_id=body.province_id,
        street_name=body.street_name,
        house_number=body.house_number,
        postcode=body.postcode,
    )
    address_id = current_domain.process(command, asynchronous=False)
    return _to_response(current_domain.repository_for(UserAddress).get(address_id))
