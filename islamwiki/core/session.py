"""
Session Manager.

Wraps the per-request session mapping (Starlette's signed-cookie session)
with the authentication, CSRF and remember-me helpers the application uses.
"""

from __future__ import annotations

import hmac
import secrets
import time
from typing import Any, MutableMapping, Optional

from islamwiki.server.core.config import SessionConfig

USER_KEYS = ("user_id", "username", "is_admin", "logged_in_at")


class SessionManager:
    """Session-based authentication state for a single request."""

    def __init__(self, data: MutableMapping[str, Any], config: Optional[SessionConfig] = None) -> None:
        """
        Args:
            data: The session mapping for the current request
            config: Session configuration; defaults apply when omitted
        """
        self._data = data
        self.config = config or SessionConfig()
        self.started = False

    def start(self) -> None:
        """
        Mark the session started and regenerate it when needed.

        A brand new (empty) session is regenerated immediately; an existing
        one is regenerated once its last regeneration is older than
        ``config.regenerate_after`` seconds.
        """
        self.started = True
        if not self._data:
            self.regenerate()
        elif time.time() - self.get("last_regeneration", 0) > self.config.regenerate_after:
            self.regenerate()

    def regenerate(self) -> None:
        """Issue a new session identifier, keeping the session data."""
        self.put("session_id", secrets.token_hex(16))
        self.put("last_regeneration", int(time.time()))

    @property
    def session_id(self) -> Optional[str]:
        return self.get("session_id")

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def put(self, key: str, value: Any) -> None:
        self._data[key] = value

    def has(self, key: str) -> bool:
        return self._data.get(key) is not None

    def forget(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def login(self, user_id: int, username: str, is_admin: bool = False) -> None:
        self.put("user_id", user_id)
        self.put("username", username)
        self.put("is_admin", is_admin)
        self.put("logged_in_at", int(time.time()))
        self.regenerate()

    def logout(self) -> None:
        for key in USER_KEYS:
            self.forget(key)
        self.regenerate()

    def is_logged_in(self) -> bool:
        return self.has("user_id") and self.has("username")

    @property
    def user_id(self) -> Optional[int]:
        return self.get("user_id")

    @property
    def username(self) -> Optional[str]:
        return self.get("username")

    @property
    def is_admin(self) -> bool:
        return bool(self.get("is_admin", False))

    def generate_csrf_token(self) -> str:
        token = secrets.token_hex(32)
        self.put("csrf_token", token)
        return token

    def get_csrf_token(self) -> str:
        if not self.has("csrf_token"):
            return self.generate_csrf_token()
        return self.get("csrf_token")

    def verify_csrf_token(self, token: str) -> bool:
        return hmac.compare_digest(self.get_csrf_token().encode("utf-8"), token.encode("utf-8"))

    def set_remember_token(self, token: str) -> None:
        self.put("remember_token", token)

    def get_remember_token(self) -> Optional[str]:
        return self.get("remember_token")
