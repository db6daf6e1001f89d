"""Password hashing backed by passlib."""

from __future__ import annotations

from passlib.context import CryptContext

DEFAULT_SCHEMES = ("pbkdf2_sha256",)


class PasslibHasher:
    """PasswordHasher implementation over a passlib CryptContext."""

    def __init__(self, schemes: tuple[str, ...] = DEFAULT_SCHEMES) -> None:
        self._context = CryptContext(schemes=list(schemes), deprecated="auto")

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password. Hashes no configured scheme recognises never match."""
        if self._context.identify(password_hash) is None:
            return False
        return self._context.verify(password, password_hash)
