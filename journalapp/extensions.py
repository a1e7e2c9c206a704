"""Shared extensions for the journal application."""

from flask_bcrypt import Bcrypt
from flask_sqlalchemy import SQLAlchemy

# Entries live on the default bind, user accounts on the "auth" bind.
db = SQLAlchemy(session_options={"expire_on_commit": False})
bcrypt = Bcrypt()


def init_extensions(app) -> None:
    """Initialize all extensions with the Flask app."""
    db.init_app(app)
    bcrypt.init_app(app)
