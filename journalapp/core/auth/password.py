"""Password hashing helpers.

``sha256-b64`` is the unsalted single-round digest every existing account was
stored with; it is weak and kept only so those credentials keep verifying.
``bcrypt`` can be selected for new hashes. Verification looks at the stored
value, so accounts hashed under either scheme keep working after a switch.
"""

from __future__ import annotations

import base64
import hashlib
import hmac

from journalapp.core.auth.constants import HASH_SCHEME_BCRYPT, HASH_SCHEME_SHA256_B64, HASH_SCHEMES
from journalapp.extensions import bcrypt

_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def legacy_digest(plain_password: str) -> str:
    """Base64 of the SHA-256 digest of the UTF-8 password."""
    digest = hashlib.sha256(plain_password.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


def hash_password(plain_password: str, scheme: str = HASH_SCHEME_SHA256_B64) -> str:
    if scheme not in HASH_SCHEMES:
        raise ValueError(f"unknown password hash scheme: {scheme}")
    if scheme == HASH_SCHEME_BCRYPT:
        return bcrypt.generate_password_hash(plain_password).decode("utf-8")
    return legacy_digest(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Validate a plaintext password against a stored hash of any scheme."""
    if not hashed_password:
        return False
    if hashed_password.startswith(_BCRYPT_PREFIXES):
        return bcrypt.check_password_hash(hashed_password, plain_password)
    return hmac.compare_digest(legacy_digest(plain_password), hashed_password)
