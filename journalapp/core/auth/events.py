"""Session state-change event catalog."""

from __future__ import annotations

AUTH_SESSION_LOGGED_IN = "auth.session.logged_in"
AUTH_SESSION_LOGGED_OUT = "auth.session.logged_out"
AUTH_ACCOUNT_DELETED = "auth.account.deleted"

EVENT_CATALOG = {
    AUTH_SESSION_LOGGED_IN: {
        "version": "v1",
        "payload": {"user_id": "int", "username": "str", "method": "str"},
    },
    AUTH_SESSION_LOGGED_OUT: {
        "version": "v1",
        "payload": {"user_id": "int?", "username": "str?"},
    },
    AUTH_ACCOUNT_DELETED: {
        "version": "v1",
        "payload": {"user_id": "int", "username": "str"},
    },
}

__all__ = [
    "EVENT_CATALOG",
    "AUTH_SESSION_LOGGED_IN",
    "AUTH_SESSION_LOGGED_OUT",
    "AUTH_ACCOUNT_DELETED",
]
