import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from journalapp import create_app
from journalapp.domains.journal.schemas.journal_schemas import JournalEntryData
from journalapp.extensions import db


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


@pytest.fixture()
def app(tmp_path):
    """Per-test app whose two databases live in a fresh temporary directory."""
    app = create_app("testing", data_dir=tmp_path / "data")
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        db.session.remove()
        for engine in db.engines.values():
            engine.dispose()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app):
    return app.extensions["entry_store"]


@pytest.fixture()
def credentials(app):
    return app.extensions["credential_store"]


@pytest.fixture()
def sessions(app):
    return app.extensions["session_manager"]


@pytest.fixture()
def make_entry():
    """Build an unsaved entry; keyword arguments override the defaults."""

    def _make(**overrides):
        values = {"title": "Entry", "content": "some words here"}
        values.update(overrides)
        return JournalEntryData(**values)

    return _make
