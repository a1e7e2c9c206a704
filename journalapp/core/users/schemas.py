"""Typed schemas for user IO."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from journalapp.core.users.models import User


class UserAccount(BaseModel):
    """Transient account value; never carries the password hash."""

    id: int
    username: str
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


def serialize_user(user: "User") -> UserAccount:
    return UserAccount(
        id=user.id,
        username=user.username,
        created_at=user.created_at,
        last_login=user.last_login,
    )
