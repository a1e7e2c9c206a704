"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import current_app, jsonify

F = TypeVar("F", bound=Callable)


def session_manager():
    return current_app.extensions["session_manager"]


def require_session(fn: F) -> F:
    """Reject the request with 401 unless a user is signed in."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if not session_manager().is_authenticated:
            return jsonify({"ok": False, "error": "unauthorized"}), 401
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
