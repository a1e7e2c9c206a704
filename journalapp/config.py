"""Application configuration for the journal app."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Type

from dotenv import load_dotenv

load_dotenv()

ENTRIES_DB_FILENAME = "journal.db"
AUTH_DB_FILENAME = "journal_auth.db"


def default_data_dir() -> Path:
    """Per-user data directory holding both database files."""
    override = os.environ.get("JOURNAL_DATA_DIR")
    if override:
        return Path(override).expanduser()
    xdg_home = os.environ.get("XDG_DATA_HOME")
    if xdg_home:
        return Path(xdg_home) / "journalapp"
    return Path.home() / ".local" / "share" / "journalapp"


def sqlite_uri(path: Path) -> str:
    return f"sqlite:///{path}"


def _sqlite_engine_options() -> dict:
    # Keep text dates as text; busy timeout reduces "database is locked" errors.
    return {
        "pool_pre_ping": True,
        "connect_args": {"detect_types": 0, "timeout": 30},
    }


class BaseConfig:
    """Base configuration loaded for all environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")

    JOURNAL_DATA_DIR = str(default_data_dir())
    SQLALCHEMY_DATABASE_URI = sqlite_uri(Path(JOURNAL_DATA_DIR) / ENTRIES_DB_FILENAME)
    SQLALCHEMY_BINDS = {"auth": sqlite_uri(Path(JOURNAL_DATA_DIR) / AUTH_DB_FILENAME)}
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = _sqlite_engine_options()

    # Legacy digest stays the default so existing stored credentials keep verifying.
    PASSWORD_HASH_SCHEME = os.environ.get("PASSWORD_HASH_SCHEME", "sha256-b64")
    BCRYPT_LOG_ROUNDS = int(os.environ.get("BCRYPT_LOG_ROUNDS", "12"))

    BOOTSTRAP_USERNAME = os.environ.get("BOOTSTRAP_USERNAME", "user")
    BOOTSTRAP_PASSWORD = os.environ.get("BOOTSTRAP_PASSWORD", "password")
    MIN_USERNAME_LENGTH = int(os.environ.get("MIN_USERNAME_LENGTH", "3"))
    MIN_PASSWORD_LENGTH = int(os.environ.get("MIN_PASSWORD_LENGTH", "4"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    # The test fixtures point JOURNAL_DATA_DIR at a temporary directory.
    BCRYPT_LOG_ROUNDS = 4


class ProductionConfig(BaseConfig):
    ENV = "production"


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}
