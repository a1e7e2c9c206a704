"""Auth HTTP controllers (API only)."""

from __future__ import annotations

from typing import Optional

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from journalapp.core.auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    PasswordRequest,
    RegisterRequest,
    TokenLoginRequest,
)
from journalapp.core.utils.decorators import require_session, session_manager
from journalapp.core.utils.validation import validation_failed

auth_bp = Blueprint("auth_api", __name__)


def _current_user_payload() -> Optional[dict]:
    user = session_manager().current_user
    return user.model_dump(mode="json") if user else None


@auth_bp.post("/login")
def login():
    payload = request.get_json(silent=True) or {}
    try:
        data = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    sessions = session_manager()
    if not sessions.login(data.username, data.password):
        return jsonify({"ok": False, "error": "invalid_credentials"}), 401
    resp = {"ok": True, "user": _current_user_payload()}
    if data.remember:
        resp["token"] = sessions.generate_token(data.username)
    return jsonify(resp)


@auth_bp.post("/register")
def register():
    payload = request.get_json(silent=True) or {}
    try:
        data = RegisterRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    if not session_manager().register(data.username, data.password):
        return jsonify({"ok": False, "error": "registration_failed"}), 400
    return jsonify({"ok": True, "user": _current_user_payload()}), 201


@auth_bp.post("/token-login")
def token_login():
    payload = request.get_json(silent=True) or {}
    try:
        data = TokenLoginRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    if not session_manager().login_with_token(data.token):
        return jsonify({"ok": False, "error": "invalid_token"}), 401
    return jsonify({"ok": True, "user": _current_user_payload()})


@auth_bp.post("/logout")
def logout():
    session_manager().logout()
    return jsonify({"ok": True})


@auth_bp.get("/me")
@require_session
def me():
    return jsonify({"ok": True, "user": _current_user_payload()})


@auth_bp.post("/change-password")
@require_session
def change_password():
    payload = request.get_json(silent=True) or {}
    try:
        data = ChangePasswordRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    if not session_manager().change_password(data.current_password, data.new_password):
        return jsonify({"ok": False, "error": "password_change_failed"}), 400
    return jsonify({"ok": True})


@auth_bp.post("/verify-password")
@require_session
def verify_password():
    payload = request.get_json(silent=True) or {}
    try:
        data = PasswordRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    return jsonify({"ok": True, "valid": session_manager().verify_password(data.password)})


@auth_bp.post("/delete-account")
@require_session
def delete_account():
    payload = request.get_json(silent=True) or {}
    try:
        data = PasswordRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    sessions = session_manager()
    user_id = sessions.current_user_id
    if not sessions.delete_account(data.password):
        return jsonify({"ok": False, "error": "invalid_credentials"}), 400
    removed = current_app.extensions["entry_store"].clear_user_entries(user_id)
    return jsonify({"ok": True, "entries_removed": removed})
