# src/taskvista/core/session.py

from __future__ import annotations

import logging

from .ports import KeyValueStore

logger = logging.getLogger(__name__)

AUTH_KEY = "isAuthenticated"
USERNAME_KEY = "username"
EMAIL_KEY = "email"


class AuthSession:
    """
    Simulated login gate.

    Any non-empty email/password pair is accepted; the only effect is a flag in
    the key-value store that the front-end checks before showing task screens.
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    @property
    def is_authenticated(self) -> bool:
        try:
            return self._kv.get(AUTH_KEY) == "true"
        except Exception:
            logger.warning("Failed to read auth flag; treating session as logged out.", exc_info=True)
            return False

    @property
    def username(self) -> str:
        try:
            return self._kv.get(USERNAME_KEY) or "User"
        except Exception:
            return "User"

    def login(self, email: str, password: str) -> bool:
        email = (email or "").strip()
        if not email or not password:
            return False
        self._kv.set(AUTH_KEY, "true")
        self._kv.set(USERNAME_KEY, email.split("@")[0])
        self._kv.set(EMAIL_KEY, email)
        logger.info("Signed in as %s", email)
        return True

    def logout(self) -> None:
        self._kv.set(AUTH_KEY, "false")
        logger.info("Signed out.")
