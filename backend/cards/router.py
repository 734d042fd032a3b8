# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Payment-card endpoints – CRUD plus on-demand reveal.

Security invariants enforced by every handler
---------------------------------------------
* JWT is required on every endpoint (via ``get_current_user``).
* Single-card operations resolve the row through ``owned_resource``; a card
  that belongs to someone else is a plain 404.
* Card number and CVV are encrypted with ``encrypt_field`` before they
  reach the database.  Plaintext is only returned by ``/reveal``; every
  other response carries the masked number.
* A card whose stored record is corrupt shows up in the list with an
  ``error`` marker instead of failing the whole response.
"""

import re

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from core.logger import logger
from core.ownership import owned_query, owned_resource
from core.security import (
    DECRYPTION_FAILED,
    DecryptionError,
    decrypt_field,
    encrypt_field,
    get_current_user,
    mask_card_number,
)
from models.card import Card
from models.user import User
from cards.schemas import (
    CardWrite,
    CardResponse,
    CardMutationResponse,
    CardRevealResponse,
)

router = APIRouter(prefix="/cards", tags=["cards"])

_DEFAULT_COLOR = "from-gray-900 to-gray-800"
_SEPARATORS = re.compile(r"[\s-]")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _validated(body: CardWrite) -> CardWrite:
    """Strip and check the payload.  Raises 400 with a readable reason."""
    required = (body.card_holder_name, body.card_number, body.expiry_date, body.cvv, body.card_type)
    if not all(value and value.strip() for value in required):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required")

    number = _SEPARATORS.sub("", body.card_number)
    if not number.isdigit() or not 12 <= len(number) <= 19:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Card number must be 12 to 19 digits",
        )
    cvv = body.cvv.strip()
    if not cvv.isdigit() or len(cvv) not in (3, 4):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="CVV must be 3 or 4 digits")

    return body.model_copy(update={"card_number": number, "cvv": cvv})


def _apply(card: Card, body: CardWrite) -> None:
    """Copy a validated payload onto *card*, encrypting with fresh IVs."""
    card.card_holder_name = body.card_holder_name.strip()
    card.card_number = encrypt_field(body.card_number)
    card.expiry_date = body.expiry_date.strip()
    card.cvv = encrypt_field(body.cvv)
    card.card_type = body.card_type.strip()
    card.bank_name = body.bank_name or None
    card.card_color = body.card_color or _DEFAULT_COLOR


def _to_response(card: Card) -> CardResponse:
    try:
        masked = mask_card_number(decrypt_field(card.card_number))
        error = None
    except DecryptionError:
        logger.warning("Stored card could not be decrypted | card_id=%d", card.id)
        masked, error = None, DECRYPTION_FAILED

    return CardResponse(
        id=card.id,
        user_id=card.user_id,
        card_holder_name=card.card_holder_name,
        card_number_masked=masked,
        expiry_date=card.expiry_date,
        card_type=card.card_type,
        bank_name=card.bank_name,
        card_color=card.card_color,
        created_at=card.created_at,
        updated_at=card.updated_at,
        error=error,
    )


# ---------------------------------------------------------------------------
# GET /cards  – list the current user's cards
# ---------------------------------------------------------------------------


@router.get("", response_model=list[CardResponse])
def list_cards(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """All cards of the caller, newest first, masked."""
    return [_to_response(card) for card in owned_query(db, Card, current_user.id).all()]


# ---------------------------------------------------------------------------
# POST /cards  – add a card
# ---------------------------------------------------------------------------


@router.post("", response_model=CardMutationResponse, status_code=status.HTTP_201_CREATED)
def create_card(
    body: CardWrite,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    body = _validated(body)
    card = Card(user_id=current_user.id)
    _apply(card, body)
    db.add(card)
    db.commit()
    db.refresh(card)

    logger.info("Card added | user_id=%d card_id=%d", current_user.id, card.id)
    return CardMutationResponse(message="Card added successfully", card=_to_response(card))


# ---------------------------------------------------------------------------
# GET /cards/{id}  – one card, masked
# ---------------------------------------------------------------------------


@router.get("/{item_id}", response_model=CardResponse)
def get_card(card: Card = Depends(owned_resource(Card))):
    return _to_response(card)


# ---------------------------------------------------------------------------
# GET /cards/{id}/reveal  – full number and CVV
# ---------------------------------------------------------------------------


@router.get("/{item_id}/reveal", response_model=CardRevealResponse)
def reveal_card(card: Card = Depends(owned_resource(Card))):
    """
    The *only* endpoint that returns the full card number and CVV.
    The plaintext is never persisted, cached, or logged.
    """
    try:
        return CardRevealResponse(
            id=card.id,
            card_number=decrypt_field(card.card_number),
            cvv=decrypt_field(card.cvv),
        )
    except DecryptionError:
        logger.warning("Reveal failed, stored card could not be decrypted | card_id=%d", card.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=DECRYPTION_FAILED,
        )


# ---------------------------------------------------------------------------
# PUT /cards/{id}  – replace a card
# ---------------------------------------------------------------------------


@router.put("/{item_id}", response_model=CardMutationResponse)
def update_card(
    body: CardWrite,
    card: Card = Depends(owned_resource(Card)),
    db: Session = Depends(get_db),
):
    """Full replacement; number and CVV are re-encrypted with new IVs."""
    body = _validated(body)
    _apply(card, body)
    db.commit()
    db.refresh(card)
    return CardMutationResponse(message="Card updated successfully", card=_to_response(card))


# ---------------------------------------------------------------------------
# DELETE /cards/{id}
# ---------------------------------------------------------------------------


@router.delete("/{item_id}")
def delete_card(
    card: Card = Depends(owned_resource(Card)),
    db: Session = Depends(get_db),
):
    card_id = card.id
    db.delete(card)
    db.commit()
    logger.info("Card deleted | card_id=%d", card_id)
    return {"message": "Card deleted successfully"}
