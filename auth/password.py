"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and a work factor fixed at process start.
"""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10

# bcrypt ignores (or, in recent releases, rejects) input past 72 bytes.
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Salted adaptive hashing with bcrypt."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self.rounds = rounds
        # Digest of a throwaway secret, used to keep unknown-account logins
        # as slow as wrong-password ones.
        self._dummy_digest = bcrypt.hashpw(
            b"unused-dummy-password", bcrypt.gensalt(rounds=rounds)
        )

    def hash(self, password: str) -> str:
        """Hash a password with a fresh random salt."""
        return bcrypt.hashpw(
            password.encode(), bcrypt.gensalt(rounds=self.rounds)
        ).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash."""
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except (ValueError, TypeError, AttributeError):
            return False

    def dummy_verify(self, password: str) -> bool:
        """Burn one verification's worth of time; always ``False``."""
        try:
            bcrypt.checkpw(password.encode(), self._dummy_digest)
        except (ValueError, TypeError, AttributeError):
            pass
        return False
