"""
Shared fixtures: fake clock, in-memory store, SQLite-backed app.
"""

from __future__ import annotations

import itertools
from typing import Dict, Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from auth.errors import DuplicateAccount
from auth.jwt import TokenService
from auth.password import PasswordHasher
from auth.service import AuthService
from config.settings import Settings
from database.models import Account
from database.session import create_engine_for, create_session_factory, init_models

TEST_SECRET = "test-secret-key"
T0 = 1_700_000_000


class FakeClock:
    def __init__(self, now: float = T0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryAccountStore:
    def __init__(self) -> None:
        self.rows: Dict[str, Account] = {}
        self._ids = itertools.count(1)

    async def find_by_email(self, email: str) -> Optional[Account]:
        return self.rows.get(email)

    async def insert(self, email: str, password_hash: str) -> Account:
        if email in self.rows:
            raise DuplicateAccount()
        account = Account(id=next(self._ids), email=email, password_hash=password_hash)
        self.rows[email] = account
        return account


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    # Minimum bcrypt cost keeps the suite fast.
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens(clock) -> TokenService:
    return TokenService(TEST_SECRET, clock=clock)


@pytest.fixture
def store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture
def service(store, hasher, tokens) -> AuthService:
    return AuthService(store=store, hasher=hasher, tokens=tokens)


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}"


@pytest_asyncio.fixture
async def session_factory(database_url):
    engine = create_engine_for(database_url)
    await init_models(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def settings(database_url) -> Settings:
    return Settings(
        jwt_secret=TEST_SECRET,
        database_url=database_url,
        bcrypt_rounds=4,
    )


@pytest.fixture
def client(settings):
    from main import create_app

    with TestClient(create_app(settings)) as test_client:
        yield test_client
