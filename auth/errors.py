"""
Authentication error taxonomy.

Every error carries an HTTP ``status_code`` and a public ``detail`` that is
safe to show to the caller.  Internal reasons (why a token was rejected,
which store call failed) are logged, never put in ``detail``.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for errors raised by the auth core."""

    status_code: int = 400
    default_detail: str = "Authentication error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidCredentials(AuthError):
    """Wrong email or password, or an unusable session token."""

    status_code = 401
    default_detail = "Invalid credentials"


class InvalidToken(InvalidCredentials):
    """A session token failed verification (malformed, forged or expired)."""

    default_detail = "Not authenticated"


class DuplicateAccount(AuthError):
    status_code = 409
    default_detail = "User already exists"


class MalformedInput(AuthError):
    status_code = 422
    default_detail = "Email and password are required"


class ServerFailure(AuthError):
    """Store unreachable, hashing failure, anything the user cannot fix."""

    status_code = 500
    default_detail = "Server error"


class ConfigurationError(RuntimeError):
    """Raised at startup when required process configuration is missing."""
