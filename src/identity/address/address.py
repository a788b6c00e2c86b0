"""Province reference data and the saved user address aggregate."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from identity.domain import identity

_REQUIRED_FIELDS = {
    "address_name": "Address Name",
    "city": "City",
    "province_id": "Province",
    "street_name": "Street Name",
    "house_number": "House Number",
    "postcode": "Postcode",
}


@identity.aggregate
class Province:
    name = String(required=True, max_length=100)


@identity.aggregate
class UserAddress:
    user_id = Identifier(required=True)
    address_name = String(required=True, max_length=100)
    city = String(required=True, max_length=100)
    province_id = Identifier(required=True)
    street_name = String(required=True, max_length=255)
    house_number = String(required=True, max_length=20)
    postcode = String(required=True, max_length=20)
    created_at = DateTime()

    @classmethod
    def create(cls, user_id, **fields):
        missing = {
            field: [f"{label} is required"] for field, label in _REQUIRED_FIELDS.items() if not fields.get(field)
        }
        if missing:
            raise ValidationError(missing)

        return cls(
            user_id=str(user_id),
            created_at=datetime.now(UTC),
            **{field: fields[field] for field in _REQUIRED_FIELDS},
        )
