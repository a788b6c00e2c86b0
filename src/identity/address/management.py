"""Address book management — commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.address.address import Province, UserAddress
from identity.domain import identity, logger


@identity.command(part_of="UserAddress")
class AddAddress:
    """Save a new shipping address for a user."""

    user_id = Identifier(required=True)
    address_name = String(max_length=100)
    city = String(max_length=100)
    province_id = Identifier()
    street_name = String(max_length=255)
    house_number = String(max_length=20)
    postcode = String(max_length=20)


@identity.command(part_of="Province")
class AddProvince:
    name = String(required=True, max_length=100)


@identity.command_handler(part_of=UserAddress)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        if command.province_id and province_name(command.province_id) is None:
            raise ValidationError({"province_id": ["Unknown province"]})

        address = UserAddress.create(
            user_id=command.user_id,
            address_name=command.address_name,
            city=command.city,
            province_id=command.province_id,
            street_name=command.street_name,
            house_number=command.house_number,
            postcode=command.postcode,
        )
        current_domain.repository_for(UserAddress).add(address)
        logger.info("address_added", user_id=address.user_id, address_id=str(address.id))
        return str(address.id)


@identity.command_handler(part_of=Province)
class ManageProvincesHandler:
    @handle(AddProvince)
    def add_province(self, command):
        province = Province(name=command.name)
        current_domain.repository_for(Province).add(province)
        return str(province.id)


def addresses_for(user_id: str) -> list[UserAddress]:
    """Saved addresses for a user, newest first."""
    repo = current_domain.repository_for(UserAddress)
    addresses = repo._dao.query.filter(user_id=str(user_id)).all().items
    return sorted(addresses, key=lambda address: address.created_at, reverse=True)


def provinces() -> list[Province]:
    provinces = current_domain.repository_for(Province)._dao.query.all().items
    return sorted(provinces, key=lambda province: province.name)


def province_name(province_id: str) -> str | None:
    try:
        return current_domain.repository_for(Province).get(province_id).name
    except ObjectNotFoundError:
        return None
