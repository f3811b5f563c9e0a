"""
Auth service — registration, login and the protected-resource guard.

Transports (``api.auth`` for JSON, ``api.pages`` for cookie + views) call
into this class with raw credentials or a raw token and translate the
outcome into their own idiom.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from auth.errors import InvalidCredentials, InvalidToken, MalformedInput, ServerFailure
from auth.jwt import Claims, TokenService
from auth.password import MAX_PASSWORD_BYTES, PasswordHasher
from database.models import Account
from database.store import AccountStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    token: str
    account_id: int
    email: str
    expires_in: int


def _require_credentials(email: Optional[str], password: Optional[str]) -> None:
    if not email or not email.strip() or not password:
        raise MalformedInput()


class AuthService:
    def __init__(
        self,
        store: AccountStore,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    async def register(self, email: Optional[str], password: Optional[str]) -> Account:
        """
        Create an account.

        Raises ``MalformedInput`` for missing fields or an over-long password
        and ``DuplicateAccount`` (from the store) when the email is taken.
        """
        _require_credentials(email, password)
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            raise MalformedInput(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        try:
            password_hash = await asyncio.to_thread(self.hasher.hash, password)
        except (ValueError, MemoryError) as exc:
            logger.exception("Password hashing failed")
            raise ServerFailure() from exc
        account = await self.store.insert(email, password_hash)
        logger.info("Registered account %s", account.id)
        return account

    async def login(self, email: Optional[str], password: Optional[str]) -> LoginResult:
        """
        Check credentials and issue a session token.

        Unknown email and wrong password both raise the same
        ``InvalidCredentials`` after the same amount of bcrypt work.
        """
        _require_credentials(email, password)
        account = await self.store.find_by_email(email)

        if account is None:
            await asyncio.to_thread(self.hasher.dummy_verify, password)
            logger.info("Login failed: unknown email")
            raise InvalidCredentials()
        if not await asyncio.to_thread(self.hasher.verify, password, account.password_hash):
            logger.info("Login failed: wrong password for account %s", account.id)
            raise InvalidCredentials()

        token = self.tokens.issue(account.id, account.email)
        logger.info("Login: account %s", account.id)
        return LoginResult(
            token=token,
            account_id=account.id,
            email=account.email,
            expires_in=self.tokens.expiry_seconds,
        )

    def authenticate(self, token: Optional[str]) -> Optional[Claims]:
        """Guard: claims for a valid token, ``None`` for an absent or invalid one."""
        if not token:
            return None
        try:
            return self.tokens.verify(token)
        except InvalidToken:
            return None

    def require(self, token: Optional[str]) -> Claims:
        """Like ``authenticate`` but raises ``InvalidToken`` instead of returning ``None``."""
        claims = self.authenticate(token)
        if claims is None:
            raise InvalidToken()
        return claims
