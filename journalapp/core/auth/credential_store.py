"""Credential store: user accounts on the auth database bind."""

from __future__ import annotations

import logging
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from journalapp.core.auth.constants import DEFAULT_PASSWORD, DEFAULT_USERNAME, HASH_SCHEME_SHA256_B64
from journalapp.core.auth.password import hash_password, verify_password
from journalapp.core.users.models import User
from journalapp.core.users.schemas import UserAccount, serialize_user
from journalapp.core.utils.dates import now
from journalapp.core.utils.results import READ_ERRORS, graceful_read
from journalapp.extensions import db

logger = logging.getLogger(__name__)


class CredentialStore:
    def __init__(
        self,
        *,
        hash_scheme: str = HASH_SCHEME_SHA256_B64,
        bootstrap_username: str = DEFAULT_USERNAME,
        bootstrap_password: str = DEFAULT_PASSWORD,
    ) -> None:
        self.hash_scheme = hash_scheme
        self.bootstrap_username = bootstrap_username
        self.bootstrap_password = bootstrap_password

    def ensure_schema(self) -> None:
        """Create the users table and seed the default account on first run."""
        db.create_all(bind_key="auth")
        self._add_default_user_if_needed()

    def _add_default_user_if_needed(self) -> None:
        if self._count_users() > 0:
            return
        db.session.add(
            User(
                username=self.bootstrap_username,
                password_hash=hash_password(self.bootstrap_password, self.hash_scheme),
                created_at=now(),
            )
        )
        db.session.commit()
        logger.info("Created default account %r", self.bootstrap_username)

    def user_exists(self, username: str) -> bool:
        # Comparison is exact: SQLite's "=" is case-sensitive for TEXT.
        stmt = sa.select(sa.func.count()).select_from(User).where(User.username == username)
        return db.session.execute(stmt).scalar_one() > 0

    def register(self, username: str, password: str) -> bool:
        if self.user_exists(username):
            return False
        try:
            db.session.add(
                User(
                    username=username,
                    password_hash=hash_password(password, self.hash_scheme),
                    created_at=now(),
                )
            )
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Registering %r failed", username)
            raise
        logger.info("Registered account %r", username)
        return True

    def login(self, username: str, password: str) -> Optional[UserAccount]:
        """Return the account when username and password match, stamping last-login."""
        try:
            user = self._find_by_username(username)
            if user is None or not verify_password(password, user.password_hash):
                return None
            user.last_login = now()
            db.session.commit()
            return serialize_user(user)
        except READ_ERRORS:
            db.session.rollback()
            logger.exception("Login failed for %r", username)
            return None

    def verify_credentials(self, username: str, password: str) -> bool:
        """Check a password without touching last-login."""
        user = self._find_by_username(username)
        return user is not None and verify_password(password, user.password_hash)

    def change_password(self, user_id: int, current_password: str, new_password: str) -> bool:
        user = self._find_by_id(user_id)
        if user is None or not verify_password(current_password, user.password_hash):
            return False
        try:
            user.password_hash = hash_password(new_password, self.hash_scheme)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Changing password of user %s failed", user_id)
            raise
        logger.info("Password changed for user %s", user_id)
        return True

    def delete_account(self, user_id: int, password: str) -> bool:
        user = self._find_by_id(user_id)
        if user is None or not verify_password(password, user.password_hash):
            return False
        try:
            db.session.execute(sa.delete(User).where(User.id == user_id))
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Deleting account %s failed", user_id)
            raise
        logger.info("Deleted account %s", user_id)
        return True

    @graceful_read()
    def get_user_by_username(self, username: str) -> Optional[UserAccount]:
        user = self._find_by_username(username)
        return serialize_user(user) if user else None

    @graceful_read()
    def get_user_by_id(self, user_id: int) -> Optional[UserAccount]:
        user = self._find_by_id(user_id)
        return serialize_user(user) if user else None

    @graceful_read(lambda: 0)
    def get_total_users(self) -> int:
        return self._count_users()

    def _find_by_username(self, username: str) -> Optional[User]:
        return db.session.execute(sa.select(User).where(User.username == username).limit(1)).scalar_one_or_none()

    def _find_by_id(self, user_id: int) -> Optional[User]:
        return db.session.execute(sa.select(User).where(User.id == user_id)).scalar_one_or_none()

    def _count_users(self) -> int:
        return int(db.session.execute(sa.select(sa.func.count()).select_from(User)).scalar_one())
