"""
Unit tests for the session manager.
"""

from unittest.mock import patch

from islamwiki.core.session import SessionManager
from islamwiki.server.core.config import SessionConfig


class TestSessionStart:
    def test_new_session_is_regenerated(self):
        data = {}
        session = SessionManager(data)

        session.start()

        assert session.started
        assert len(data["session_id"]) == 32
        assert "last_regeneration" in data

    def test_recent_session_keeps_id(self):
        data = {"session_id": "abc", "last_regeneration": 1000}
        session = SessionManager(data, SessionConfig(regenerate_after=1800))

        with patch("islamwiki.core.session.time.time", return_value=2000):
            session.start()

        assert data["session_id"] == "abc"

    def test_stale_session_is_regenerated(self):
        data = {"session_id": "abc", "last_regeneration": 1000, "username": "aisha"}
        session = SessionManager(data, SessionConfig(regenerate_after=1800))

        with patch("islamwiki.core.session.time.time", return_value=3000):
            session.start()

        assert data["session_id"] != "abc"
        assert data["last_regeneration"] == 3000
        assert data["username"] == "aisha"


class TestSessionData:
    def test_get_put_has_forget(self):
        session = SessionManager({})

        session.put("theme", "dark")
        session.put("empty", None)

        assert session.get("theme") == "dark"
        assert session.get("missing", "default") == "default"
        assert session.has("theme")
        assert not session.has("empty")

        session.forget("theme")
        assert not session.has("theme")

    def test_clear(self):
        data = {"a": 1}
        SessionManager(data).clear()

        assert data == {}


class TestAuthentication:
    def test_login_and_logout(self):
        session = SessionManager({})
        session.start()
        first_id = session.session_id

        session.login(42, "yusuf", is_admin=True)

        assert session.is_logged_in()
        assert session.user_id == 42
        assert session.username == "yusuf"
        assert session.is_admin
        assert session.session_id != first_id

        session.logout()

        assert not session.is_logged_in()
        assert session.user_id is None
        assert not session.is_admin

    def test_anonymous(self):
        session = SessionManager({})

        assert not session.is_logged_in()
        assert session.username is None


class TestCsrfTokens:
    def test_token_is_stable(self):
        session = SessionManager({})

        token = session.get_csrf_token()

        assert len(token) == 64
        assert session.get_csrf_token() == token
        assert session.verify_csrf_token(token)
        assert not session.verify_csrf_token("forged")

    def test_non_ascii_token_is_rejected(self):
        session = SessionManager({})
        session.get_csrf_token()

        assert not session.verify_csrf_token("tok\u00e9n")

    def test_generate_replaces_token(self):
        session = SessionManager({})
        first = session.get_csrf_token()

        second = session.generate_csrf_token()

        assert first != second
        assert session.verify_csrf_token(second)

    def test_remember_token(self):
        session = SessionManager({})
        assert session.get_remember_token() is None

        session.set_remember_token("remember-me")

        assert session.get_remember_token() == "remember-me"
