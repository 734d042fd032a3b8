# tests/test_ownership.py
"""
Ownership helper tests
Tests: owned_query, get_owned_or_404
"""

import pytest
from fastapi import HTTPException

from core.ownership import get_owned_or_404, owned_query
from models.album import Album
from models.card import Card
from models.document import DocumentFolder
from models.user import User


@pytest.fixture
def users(db_session):
    alice = User(email="alice@example.com", username="alice", password_hash="x")
    bob = User(email="bob@example.com", username="bob", password_hash="x")
    db_session.add_all([alice, bob])
    db_session.commit()
    return alice, bob


class TestOwnershipHelpers:

    def test_owned_query_filters_by_owner(self, db_session, users):
        alice, bob = users
        db_session.add_all([
            Album(user_id=alice.id, name="a1"),
            Album(user_id=alice.id, name="a2"),
            Album(user_id=bob.id, name="b1"),
        ])
        db_session.commit()

        names = {album.name for album in owned_query(db_session, Album, alice.id)}

        assert names == {"a1", "a2"}

    def test_owned_row_is_returned(self, db_session, users):
        alice, _ = users
        album = Album(user_id=alice.id, name="mine")
        db_session.add(album)
        db_session.commit()

        assert get_owned_or_404(db_session, Album, album.id, alice.id).name == "mine"

    @pytest.mark.parametrize("model, label", [
        (Album, "Album"),
        (Card, "Card"),
        (DocumentFolder, "Folder"),
    ])
    def test_foreign_and_missing_are_identical(self, db_session, users, model, label):
        alice, bob = users
        album = Album(user_id=alice.id, name="mine")
        db_session.add(album)
        db_session.commit()

        with pytest.raises(HTTPException) as foreign:
            get_owned_or_404(db_session, model, album.id, bob.id)
        with pytest.raises(HTTPException) as missing:
            get_owned_or_404(db_session, model, 424242, alice.id)

        assert foreign.value.status_code == missing.value.status_code == 404
        assert foreign.value.detail == missing.value.detail == f"{label} not found"
