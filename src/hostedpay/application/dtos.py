"""Data Transfer Objects for the payment backend HTTP API."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


class CreatePaymentRequestDTO(BaseModel):
    """Body of ``POST /payment/create-payment``.

    Field names are snake_case in Python and camelCase on the wire.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "amount": 150.0,
                "itemName": "Charizard Base Set",
                "itemDescription": "Holo, near mint",
                "userEmail": "buyer@cards.co.za",
                "userNameFirst": "Thandi",
                "userNameLast": "Mokoena",
                "cellNumber": "",
                "listingId": 42,
                "buyerId": "usr_buyer",
                "sellerId": "usr_seller",
                "backendUrl": "http://localhost:3050",
            }
        },
    )

    amount: Decimal
    item_name: str
    item_description: str
    user_email: str
    user_name_first: str
    user_name_last: str
    cell_number: str
    listing_id: Union[int, str]
    buyer_id: Union[int, str]
    seller_id: Union[int, str]
    backend_url: str

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> float:
        return float(value)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class CreatePaymentResponseDTO(BaseModel):
    """Response of ``POST /payment/create-payment``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = False
    payment_url: Optional[str] = None
    m_payment_id: Optional[str] = Field(None, alias="mPaymentId")

    @field_validator("m_payment_id", mode="before")
    @classmethod
    def coerce_payment_id(cls, v: object) -> Optional[str]:
        if v is None or v == "":
            return None
        return str(v)


class PaymentStatusResponseDTO(BaseModel):
    """Response of ``GET /payment/status/{paymentId}``.

    ``status`` is normally ``complete``, ``failed`` or ``pending``; any other
    value is kept as-is and handled like ``pending``.
    """

    status: str

    @property
    def is_complete(self) -> bool:
        return self.status == "complete"

    @property
    def is_failed(self) -> bool:
        return self.status == "failed"
