"""Journal JSON API."""

from __future__ import annotations

from datetime import date
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from journalapp.core.utils.dates import now
from journalapp.core.utils.decorators import require_session, session_manager
from journalapp.core.utils.validation import validation_failed
from journalapp.domains.journal.mappers import serialize_entry
from journalapp.domains.journal.schemas.journal_schemas import (
    JournalEntryCreate,
    JournalEntryData,
    JournalEntryListFilter,
    JournalEntryUpdate,
)

journal_api_bp = Blueprint("journal_api", __name__)


def _store():
    return current_app.extensions["entry_store"]


def _user_id() -> int:
    return session_manager().current_user_id


@journal_api_bp.get("")
@require_session
def list_journal():
    try:
        filters = JournalEntryListFilter.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return validation_failed(exc)
    store, user_id = _store(), _user_id()
    if filters.date_from or filters.date_to:
        if not (filters.date_from and filters.date_to):
            return jsonify({"ok": False, "error": "validation_error", "details": "date_from and date_to go together"}), 400
        entries = store.get_by_date_range(filters.date_from, filters.date_to, user_id)
    elif filters.mood:
        entries = store.get_by_mood(filters.mood, user_id)
    elif filters.tag:
        entries = store.get_by_tag(filters.tag, user_id)
    elif filters.q is not None:
        entries = store.search(filters.q, user_id)
    else:
        entries = store.get_all_for_user(user_id)
    return jsonify({"ok": True, "items": [serialize_entry(e) for e in entries], "total": len(entries)})


@journal_api_bp.get("/<int:entry_id>")
@require_session
def get_entry(entry_id: int):
    entry = _store().get_by_id(entry_id, _user_id())
    if not entry:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "entry": serialize_entry(entry)})


@journal_api_bp.get("/date/<day>")
@require_session
def get_entry_for_date(day: str):
    try:
        target = date.fromisoformat(day)
    except ValueError:
        return jsonify({"ok": False, "error": "validation_error"}), 400
    entry = _store().get_for_date(target, _user_id())
    if not entry:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "entry": serialize_entry(entry)})


@journal_api_bp.post("")
@require_session
def create_journal_entry():
    payload = request.get_json(silent=True) or {}
    try:
        data = JournalEntryCreate.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    entry = JournalEntryData(**{k: v for k, v in data.model_dump().items() if v is not None})
    entry = _store().save(entry, user_id=_user_id())
    return jsonify({"ok": True, "entry": serialize_entry(entry)}), 201


@journal_api_bp.patch("/<int:entry_id>")
@require_session
def update_journal_entry(entry_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = JournalEntryUpdate.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    store, user_id = _store(), _user_id()
    entry = store.get_by_id(entry_id, user_id)
    if not entry:
        return jsonify({"ok": False, "error": "not_found"}), 404
    changes = data.model_dump(exclude_unset=True)
    if changes.get("entry_date") is None:
        changes.pop("entry_date", None)
    if "primary_mood" in changes and "mood_category" not in changes:
        # Re-derived by the store from the new mood.
        changes["mood_category"] = ""
    updated = entry.model_copy(update={k: ("" if v is None else v) for k, v in changes.items()})
    entry = store.save(updated, user_id=user_id)
    return jsonify({"ok": True, "entry": serialize_entry(entry)})


@journal_api_bp.delete("/<int:entry_id>")
@require_session
def delete_journal_entry(entry_id: int):
    if not _store().delete(entry_id, _user_id()):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})


@journal_api_bp.get("/categories")
@require_session
def list_categories():
    return jsonify({"ok": True, "items": _store().get_user_categories(_user_id())})


@journal_api_bp.get("/moods")
@require_session
def list_moods():
    return jsonify({"ok": True, "items": _store().get_user_moods(_user_id())})


@journal_api_bp.get("/stats")
@require_session
def statistics():
    stats = _store().get_statistics(_user_id())
    return jsonify({"ok": True, "stats": stats.model_dump()})


@journal_api_bp.post("/backup")
@require_session
def backup():
    payload = request.get_json(silent=True) or {}
    destination = payload.get("destination")
    if not destination:
        stamp = now().strftime("%Y%m%d-%H%M%S")
        destination = Path(current_app.config["JOURNAL_DATA_DIR"]) / "backups" / f"journal-{stamp}.db"
    if not _store().backup(destination):
        return jsonify({"ok": False, "error": "backup_failed"}), 500
    return jsonify({"ok": True, "path": str(destination)})
