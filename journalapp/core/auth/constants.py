"""Auth constants."""

from __future__ import annotations

# Password hashing schemes; the legacy digest stays the default for stored credentials.
HASH_SCHEME_SHA256_B64 = "sha256-b64"
HASH_SCHEME_BCRYPT = "bcrypt"
HASH_SCHEMES = (HASH_SCHEME_SHA256_B64, HASH_SCHEME_BCRYPT)

DEFAULT_USERNAME = "user"
DEFAULT_PASSWORD = "password"

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 4

__all__ = [
    "HASH_SCHEME_SHA256_B64",
    "HASH_SCHEME_BCRYPT",
    "HASH_SCHEMES",
    "DEFAULT_USERNAME",
    "DEFAULT_PASSWORD",
    "MIN_USERNAME_LENGTH",
    "MIN_PASSWORD_LENGTH",
]
