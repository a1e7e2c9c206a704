"""User account model (stored in the auth database)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from journalapp.core.utils.dates import TextDateTime, now
from journalapp.extensions import db


class User(db.Model):
    __bind_key__ = "auth"
    __tablename__ = "Users"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column("UserId", primary_key=True)
    username: Mapped[str] = mapped_column("Username", db.Text, unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column("PasswordHash", db.Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column("CreatedAt", TextDateTime, nullable=False, default=now)
    last_login: Mapped[datetime | None] = mapped_column("LastLogin", TextDateTime)

    def __repr__(self) -> str:
        return f"<User {self.username}>"
