"""Explicit outcomes for read paths that degrade to defaults."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Generic, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from journalapp.extensions import db

logger = logging.getLogger(__name__)

T = TypeVar("T")
F = TypeVar("F", bound=Callable)

# Storage, filesystem and data-shape failures; anything else is a bug and propagates.
READ_ERRORS = (SQLAlchemyError, OSError, ValueError)


@dataclass(frozen=True)
class ReadResult(Generic[T]):
    """Value of a read plus the error that forced it to its default, if any."""

    value: T
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_read(fn: Callable[..., T], args: tuple, kwargs: dict, default: Callable[[], T]) -> ReadResult[T]:
    try:
        return ReadResult(fn(*args, **kwargs))
    except READ_ERRORS as exc:
        logger.error("%s failed (args=%r, kwargs=%r): %s", fn.__name__, args[1:], kwargs, exc, exc_info=True)
        db.session.rollback()
        return ReadResult(default(), exc)


def graceful_read(default: Callable[[], Any] = lambda: None):
    """Turn storage errors of a read method into ``default()``.

    The undecorated method stays reachable through ``__wrapped__`` so callers
    that need to tell "no rows" from "failed" can ask for a ``ReadResult``.
    """

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):  # type: ignore[misc]
            return run_read(fn, args, kwargs, default).value

        wrapper.read_default = default  # type: ignore[attr-defined]
        return wrapper  # type: ignore[return-value]

    return decorator


def read_outcome(owner: Any, operation: str, *args, **kwargs) -> ReadResult:
    """Run the read ``operation`` of ``owner`` and return its full outcome."""
    method = getattr(type(owner), operation, None)
    default = getattr(method, "read_default", None)
    if method is None or default is None:
        raise AttributeError(f"{operation} is not a read operation")
    return run_read(method.__wrapped__, (owner, *args), kwargs, default)
