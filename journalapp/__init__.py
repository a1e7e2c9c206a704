"""Journal application factory and bootstrap."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

from flask import Flask

from journalapp.config import AUTH_DB_FILENAME, ENTRIES_DB_FILENAME, config_by_name, sqlite_uri
from journalapp.extensions import init_extensions

logger = logging.getLogger(__name__)


def create_app(config_name: Optional[str] = None, data_dir: Optional[Union[str, Path]] = None) -> Flask:
    """Create and configure the journal Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()

    app = Flask(__name__)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    # Both databases live side by side in the data directory.
    root = Path(data_dir or app.config["JOURNAL_DATA_DIR"]).expanduser().resolve()
    root.mkdir(parents=True, exist_ok=True)
    app.config["JOURNAL_DATA_DIR"] = str(root)
    app.config["SQLALCHEMY_DATABASE_URI"] = sqlite_uri(root / ENTRIES_DB_FILENAME)
    app.config["SQLALCHEMY_BINDS"] = {"auth": sqlite_uri(root / AUTH_DB_FILENAME)}

    init_extensions(app)
    _register_services(app)
    _register_blueprints(app)
    _register_error_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    return app


def _register_services(app: Flask) -> None:
    """Build the stores and the session, creating both schemas idempotently."""
    from journalapp.core.auth.credential_store import CredentialStore
    from journalapp.core.auth.session_manager import SessionManager
    from journalapp.domains.journal.services.entry_store import EntryStore

    credentials = CredentialStore(
        hash_scheme=app.config["PASSWORD_HASH_SCHEME"],
        bootstrap_username=app.config["BOOTSTRAP_USERNAME"],
        bootstrap_password=app.config["BOOTSTRAP_PASSWORD"],
    )
    entries = EntryStore()
    with app.app_context():
        credentials.ensure_schema()
        entries.ensure_schema()

    app.extensions["credential_store"] = credentials
    app.extensions["entry_store"] = entries
    app.extensions["session_manager"] = SessionManager(
        credentials,
        min_username_length=app.config["MIN_USERNAME_LENGTH"],
        min_password_length=app.config["MIN_PASSWORD_LENGTH"],
    )
    logger.info("Journal data directory: %s", app.config["JOURNAL_DATA_DIR"])


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from journalapp.core.auth.controllers import auth_bp  # local import to avoid circulars
    from journalapp.domains.journal.controllers.journal_api import journal_api_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(journal_api_bp, url_prefix="/api/journal")


def _register_error_handlers(app: Flask) -> None:
    """Basic JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500
