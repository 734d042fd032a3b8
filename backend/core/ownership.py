# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Ownership-scoped data access.  Every router goes through these helpers
instead of filtering on ``user_id`` by hand.

Rules
-----
* Every query is constrained by ``Model.user_id == caller``.
* A row that exists but belongs to someone else is reported exactly like a
  row that does not exist: 404 with the same detail text.  The response
  never reveals which case applied.
"""

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Query, Session

from core.security import get_current_user
from database import get_db
from models.user import User


def owned_query(db: Session, model, user_id: int) -> Query:
    """All rows of *model* owned by *user_id*, newest first."""
    return (
        db.query(model)
        .filter(model.user_id == user_id)
        .order_by(model.created_at.desc(), model.id.desc())
    )


def not_found(model) -> HTTPException:
    label = getattr(model, "__display_name__", model.__name__)
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")


def get_owned_or_404(db: Session, model, item_id: int, user_id: int):
    """
    Load one row of *model* by primary key, constrained to *user_id*.

    The owner is part of the WHERE clause, so a foreign row is never loaded
    at all.
    """
    item = (
        db.query(model)
        .filter(model.id == item_id, model.user_id == user_id)
        .first()
    )
    if item is None:
        raise not_found(model)
    return item


def owned_resource(model):
    """
    Dependency factory: resolve the ``item_id`` path parameter to a row of
    *model* owned by the authenticated caller.

        @router.delete("/{item_id}")
        def delete_card(card: Card = Depends(owned_resource(Card)), ...):
    """

    def _dependency(
        item_id: int,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ):
        return get_owned_or_404(db, model, item_id, current_user.id)

    return _dependency
