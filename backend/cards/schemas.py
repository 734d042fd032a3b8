# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the card endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


# -- Requests --------------------------------------------------------------
# The client sends the plaintext number and CVV; the server encrypts both
# before persisting.  Both snake_case and the web client's camelCase keys
# are accepted.


class CardWrite(BaseModel):
    card_holder_name: str = ""
    card_number: str = ""
    expiry_date: str = ""
    cvv: str = ""
    card_type: str = ""
    bank_name: Optional[str] = None
    card_color: Optional[str] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


# -- Responses -------------------------------------------------------------
# Only the last four digits ever appear here.  ``card_number_masked`` is
# None and ``error`` is set when the stored record cannot be decrypted.


class CardResponse(BaseModel):
    id: int
    user_id: int
    card_holder_name: str
    card_number_masked: Optional[str]
    expiry_date: str
    card_type: str
    bank_name: Optional[str]
    card_color: str
    created_at: datetime
    updated_at: datetime
    error: Optional[str] = None


class CardMutationResponse(BaseModel):
    message: str
    card: CardResponse


class CardRevealResponse(BaseModel):
    id: int
    card_number: str
    cvv: str
