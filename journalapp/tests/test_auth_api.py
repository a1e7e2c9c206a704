"""Auth JSON API tests."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration


def _login(client, username="user", password="password", **extra):
    return client.post("/api/auth/login", json={"username": username, "password": password, **extra})


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True}


def test_login_and_me(client):
    resp = _login(client)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["ok"] is True
    assert body["user"]["username"] == "user"
    assert "token" not in body
    assert "password_hash" not in body["user"]

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.get_json()["user"]["username"] == "user"


def test_login_invalid_credentials(client):
    resp = _login(client, password="wrong")
    assert resp.status_code == 401
    assert resp.get_json() == {"ok": False, "error": "invalid_credentials"}


def test_login_validation_error(client):
    resp = client.post("/api/auth/login", json={"username": "user"})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "validation_error"
    assert body["details"]


def test_me_requires_session(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.get_json() == {"ok": False, "error": "unauthorized"}


def test_remember_me_token_login(client):
    token = _login(client, remember=True).get_json()["token"]
    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401

    resp = client.post("/api/auth/token-login", json={"token": token})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["username"] == "user"
    assert client.post("/api/auth/token-login", json={"token": "bogus"}).status_code == 401


def test_register(client):
    resp = client.post("/api/auth/register", json={"username": "alice", "password": "pass1"})
    assert resp.status_code == 201
    assert resp.get_json()["user"]["username"] == "alice"

    dup = client.post("/api/auth/register", json={"username": "alice", "password": "pass1"})
    assert dup.status_code == 400
    assert dup.get_json()["error"] == "registration_failed"

    short = client.post("/api/auth/register", json={"username": "al", "password": "pass1"})
    assert short.status_code == 400


def test_change_and_verify_password(client):
    _login(client)
    assert client.post("/api/auth/verify-password", json={"password": "password"}).get_json()["valid"] is True
    assert client.post("/api/auth/verify-password", json={"password": "nope"}).get_json()["valid"] is False

    bad = client.post("/api/auth/change-password", json={"current_password": "nope", "new_password": "changed"})
    assert bad.status_code == 400
    ok = client.post("/api/auth/change-password", json={"current_password": "password", "new_password": "changed"})
    assert ok.status_code == 200

    client.post("/api/auth/logout")
    assert _login(client).status_code == 401
    assert _login(client, password="changed").status_code == 200


def test_delete_account_clears_entries(client, store, make_entry, sessions):
    client.post("/api/auth/register", json={"username": "alice", "password": "pass1"})
    user_id = sessions.current_user_id
    store.save(make_entry(), user_id=user_id)
    store.save(make_entry(), user_id=1)

    assert client.post("/api/auth/delete-account", json={"password": "wrong"}).status_code == 400
    resp = client.post("/api/auth/delete-account", json={"password": "pass1"})
    assert resp.status_code == 200
    assert resp.get_json()["entries_removed"] == 1
    assert store.get_entry_count(user_id) == 0
    assert store.get_entry_count(1) == 1
    assert client.get("/api/auth/me").status_code == 401
