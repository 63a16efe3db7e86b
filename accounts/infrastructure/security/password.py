"""Password hashing (bcrypt with SHA-256 pre-hash).

Bcrypt truncates inputs at 72 bytes; pre-hashing with SHA-256 yields a
fixed-length input so long passwords are not silently truncated. The cost
factor comes from settings (bcrypt_rounds, 12 by default).
"""

import base64
import hashlib

import bcrypt

from accounts.core.constants import DEFAULT_BCRYPT_ROUNDS


def _prehash(password: str) -> bytes:
    """SHA-256 pre-hash to avoid bcrypt's 72-byte truncation."""
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def get_password_hash(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Return the bcrypt hash of password at the given cost."""
    hashed = bcrypt.hashpw(_prehash(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


class PasswordHasher:
    """Bound hashing cost, so the handler only sees hash_password."""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        return get_password_hash(password, self.rounds)
