"""Pydantic request/response schemas for the Identity API."""

from datetime import datetime

from pydantic import BaseModel


class ProvinceResponse(BaseModel):
    id: str
    name: str


class AddAddressRequest(BaseModel):
    address_name: str | None = None
    city: str | None = None
    province_id: str | None = None
    street_name: str | None = None
    house_number: str | None = None
    postcode: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "address_name": "Home",
                    "city": "Utrecht",
                    "province_id": "prov-utrecht",
                    "street_name": "Oudegracht",
                    "house_number": "12",
                    "postcode": "3511 AB",
                }
            ]
        }
    }


class AddressResponse(BaseModel):
    id: str
    user_id: str
    address_name: str
    city: str
    province_id: str
    province: str | None = None
    street_name: str
    house_number: str
    postcode: str
    created_at: datetime
