"""Payment domain entities: requests, sessions, browser results and outcomes."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# Backend identifiers are either numeric or opaque strings.
Identifier = Union[int, str]


class PaymentRequest(BaseModel):
    """Everything needed to ask the backend for a hosted payment.

    Identity fields are optional at construction time so that a request with
    missing values can still be represented; the initiator rejects it before
    any network call.
    """

    amount: Decimal = Field(..., gt=0)
    item_name: str = Field(..., min_length=1)
    item_description: Optional[str] = None
    buyer_id: Optional[Identifier] = None
    buyer_email: Optional[EmailStr] = None
    buyer_first_name: Optional[str] = None
    buyer_last_name: Optional[str] = None
    cell_number: Optional[str] = None
    seller_id: Optional[Identifier] = None
    listing_id: Optional[Identifier] = None
    callback_base_url: Optional[str] = None


class PaymentSession(BaseModel):
    """A payment the backend has accepted, waiting on the hosted page."""

    model_config = ConfigDict(frozen=True)

    payment_url: str
    payment_id: Optional[str] = None


class BrowserResult(BaseModel):
    """Terminal result of an external browser session.

    ``type`` is normally ``success``, ``cancel`` or ``dismiss`` but any other
    value is accepted and treated as ambiguous.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    url: Optional[str] = None


class ReturnSignal(BaseModel):
    """What a return URL says about the payment."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["success", "cancel", "unknown"]
    payment_id: Optional[str] = None


class PaymentSucceeded(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: Decimal
    item_name: str
    payment_id: str


class PaymentCancelled(BaseModel):
    model_config = ConfigDict(frozen=True)


class PaymentFailed(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


PaymentOutcome = Union[PaymentSucceeded, PaymentCancelled, PaymentFailed]
