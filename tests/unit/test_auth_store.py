"""
Unit tests for the persisted auth store.
"""

import json

from vaxvet_console.auth import AuthStore
from vaxvet_console.schemas.auth import CurrentUser


def make_user():
    return CurrentUser(id="u-7", user_name="drvet", role="Veterinarian")


class TestAuthStore:
    """Tests for AuthStore."""

    def test_starts_signed_out(self, tmp_path):
        store = AuthStore(tmp_path / "session.json")
        assert not store.is_authenticated
        assert store.get_token() is None
        assert store.role == ""

    def test_login_persists_token_and_user(self, tmp_path):
        path = tmp_path / "nested" / "session.json"
        store = AuthStore(path)

        store.login(make_user(), "abc123")

        stored = json.loads(path.read_text(encoding="utf-8"))
        assert stored["token"] == "abc123"
        assert stored["user"]["userName"] == "drvet"
        assert store.role == "veterinarian"

    def test_load_restores_session(self, tmp_path):
        path = tmp_path / "session.json"
        AuthStore(path).login(make_user(), "abc123")

        restored = AuthStore(path)
        assert restored.load()
        assert restored.token == "abc123"
        assert restored.user == make_user()

    def test_load_requires_token_and_user(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"token": "abc123", "user": None}), encoding="utf-8")

        store = AuthStore(path)
        assert not store.load()
        assert not store.is_authenticated

    def test_load_ignores_corrupt_file(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")

        assert not AuthStore(path).load()

    def test_logout_clears_and_removes_file(self, tmp_path):
        path = tmp_path / "session.json"
        store = AuthStore(path)
        store.login(make_user(), "abc123")

        store.logout()

        assert not store.is_authenticated
        assert store.user is None
        assert not path.exists()

    def test_without_storage_path(self):
        store = AuthStore()
        store.login(make_user(), "abc123")
        assert store.is_authenticated
        assert not store.load()
