"""Security infrastructure: password hashing."""

from accounts.infrastructure.security.password import PasswordHasher, get_password_hash

__all__ = ["PasswordHasher", "get_password_hash"]
