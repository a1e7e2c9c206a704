"""Schemas for auth flows (login, register, password and account changes)."""

from __future__ import annotations

from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: str
    password: str
    remember: bool = False


class RegisterRequest(BaseModel):
    # Length rules live in the session manager so they stay a boolean rejection.
    username: str
    password: str


class TokenLoginRequest(BaseModel):
    token: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class PasswordRequest(BaseModel):
    password: str
