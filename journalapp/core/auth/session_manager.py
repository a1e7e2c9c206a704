"""In-memory authentication session for the single local user of the app.

The session holds at most one current account. Credential checks and account
changes are delegated to the :class:`CredentialStore`; every login, logout
and account deletion is published on the manager's own :class:`EventBus`.
Remember-me tokens live in process memory only and never expire.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any, Callable, Dict, Optional

from journalapp.core.auth.constants import MIN_PASSWORD_LENGTH, MIN_USERNAME_LENGTH
from journalapp.core.auth.credential_store import CredentialStore
from journalapp.core.auth.events import AUTH_ACCOUNT_DELETED, AUTH_SESSION_LOGGED_IN, AUTH_SESSION_LOGGED_OUT
from journalapp.core.events.event_bus import EventBus, EventHandler
from journalapp.core.users.schemas import UserAccount

logger = logging.getLogger(__name__)

TOKEN_BYTES = 24


class SessionManager:
    def __init__(
        self,
        credentials: CredentialStore,
        *,
        min_username_length: int = MIN_USERNAME_LENGTH,
        min_password_length: int = MIN_PASSWORD_LENGTH,
        events: Optional[EventBus] = None,
    ) -> None:
        self.credentials = credentials
        self.min_username_length = min_username_length
        self.min_password_length = min_password_length
        self.events = events if events is not None else EventBus()
        self._current_user: Optional[UserAccount] = None
        # token -> username; several tokens may be valid for one user.
        self._tokens: Dict[str, str] = {}

    @property
    def current_user(self) -> Optional[UserAccount]:
        return self._current_user

    @property
    def is_authenticated(self) -> bool:
        return self._current_user is not None

    @property
    def current_user_id(self) -> int:
        """Id of the signed-in account, ``0`` when nobody is signed in."""
        return self._current_user.id if self._current_user else 0

    def subscribe(self, observer: EventHandler) -> Callable[[], None]:
        """Observe session changes; call the returned function to stop."""
        return self.events.subscribe(observer)

    def login(self, username: str, password: str) -> bool:
        if not username or not password:
            return False
        try:
            if not self.credentials.user_exists(username):
                logger.info("Login rejected: unknown user %r", username)
                return False
            user = self.credentials.login(username, password)
        except Exception:  # noqa: BLE001 - a failed login is a plain rejection
            logger.exception("Login for %r failed", username)
            return False
        if user is None:
            logger.info("Login rejected: bad password for %r", username)
            return False
        self._start(user, method="password")
        return True

    def register(self, username: str, password: str) -> bool:
        """Create an account and sign into it."""
        if not username or len(username) < self.min_username_length:
            return False
        if not password or len(password) < self.min_password_length:
            return False
        if self.credentials.user_exists(username):
            return False
        if not self.credentials.register(username, password):
            return False
        return self.login(username, password)

    def logout(self) -> None:
        self._end(AUTH_SESSION_LOGGED_OUT)

    def generate_token(self, username: str) -> str:
        """Issue a remember-me token for ``username``."""
        if not username:
            raise ValueError("username is required to issue a token")
        token = secrets.token_urlsafe(TOKEN_BYTES)
        self._tokens[token] = username
        return token

    def login_with_token(self, token: str) -> bool:
        if not token:
            return False
        username = self._tokens.get(token)
        if username is None:
            return False
        user = self.credentials.get_user_by_username(username)
        if user is None:
            return False
        self._start(user, method="token")
        return True

    def change_password(self, current_password: str, new_password: str) -> bool:
        if self._current_user is None:
            return False
        if not new_password or len(new_password) < self.min_password_length:
            return False
        return self.credentials.change_password(self._current_user.id, current_password, new_password)

    def delete_account(self, password: str) -> bool:
        """Delete the signed-in account; success ends the session."""
        user = self._current_user
        if user is None:
            return False
        if not self.credentials.delete_account(user.id, password):
            return False
        self._revoke_tokens(user.username)
        self._end(AUTH_ACCOUNT_DELETED)
        return True

    def verify_password(self, password: str) -> bool:
        """Re-check the signed-in user's password; session state is untouched."""
        if self._current_user is None or not password:
            return False
        try:
            return self.credentials.verify_credentials(self._current_user.username, password)
        except Exception:  # noqa: BLE001
            logger.exception("Password check for %r failed", self._current_user.username)
            return False

    def describe(self) -> Dict[str, Any]:
        user = self._current_user
        return {
            "authenticated": user is not None,
            "user_id": user.id if user else 0,
            "username": user.username if user else None,
            "observers": len(self.events),
            "active_tokens": len(self._tokens),
        }

    def _start(self, user: UserAccount, *, method: str) -> None:
        self._current_user = user
        logger.info("User %r signed in (%s)", user.username, method)
        self.events.publish(
            AUTH_SESSION_LOGGED_IN,
            {"user_id": user.id, "username": user.username, "method": method},
        )

    def _end(self, event_type: str) -> None:
        user = self._current_user
        self._current_user = None
        if user is not None:
            logger.info("User %r signed out", user.username)
        self.events.publish(
            event_type,
            {"user_id": user.id if user else None, "username": user.username if user else None},
        )

    def _revoke_tokens(self, username: str) -> None:
        for token in [t for t, owner in self._tokens.items() if owner == username]:
            del self._tokens[token]
