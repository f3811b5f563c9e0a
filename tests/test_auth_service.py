"""
Tests for AuthService — register, login and the guard.
"""

import base64

import pytest
from unittest.mock import AsyncMock, MagicMock

from auth.errors import (
    DuplicateAccount,
    InvalidCredentials,
    InvalidToken,
    MalformedInput,
    ServerFailure,
)
from auth.service import AuthService


class TestRegister:
    @pytest.mark.asyncio
    async def test_stores_digest_not_plaintext(self, service, store, hasher):
        account = await service.register("a@x.com", "secret1")

        assert account.id == 1
        assert account.email == "a@x.com"
        stored = store.rows["a@x.com"].password_hash
        assert stored and stored != "secret1"
        assert hasher.verify("secret1", stored)

    @pytest.mark.asyncio
    async def test_duplicate_email(self, service, store):
        await service.register("a@x.com", "secret1")
        with pytest.raises(DuplicateAccount):
            await service.register("a@x.com", "other")
        assert len(store.rows) == 1

    @pytest.mark.asyncio
    async def test_email_is_case_sensitive(self, service, store):
        await service.register("a@x.com", "secret1")
        await service.register("A@x.com", "secret1")
        assert len(store.rows) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email, password",
        [(None, "secret1"), ("", "secret1"), ("   ", "secret1"), ("a@x.com", None), ("a@x.com", "")],
    )
    async def test_missing_fields(self, service, store, email, password):
        with pytest.raises(MalformedInput):
            await service.register(email, password)
        assert store.rows == {}

    @pytest.mark.asyncio
    async def test_password_over_bcrypt_limit(self, service):
        with pytest.raises(MalformedInput):
            await service.register("a@x.com", "x" * 73)

    @pytest.mark.asyncio
    async def test_hashing_failure_is_server_failure(self, store, tokens):
        hasher = MagicMock()
        hasher.hash.side_effect = MemoryError()
        service = AuthService(store=store, hasher=hasher, tokens=tokens)

        with pytest.raises(ServerFailure):
            await service.register("a@x.com", "secret1")
        assert store.rows == {}


class TestLogin:
    @pytest.mark.asyncio
    async def test_issues_token_for_valid_credentials(self, service, tokens):
        account = await service.register("a@x.com", "secret1")
        result = await service.login("a@x.com", "secret1")

        assert result.account_id == account.id
        assert result.email == "a@x.com"
        assert result.expires_in == 3600
        claims = tokens.verify(result.token)
        assert (claims.id, claims.email) == (account.id, "a@x.com")

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, service):
        await service.register("a@x.com", "secret1")

        with pytest.raises(InvalidCredentials) as wrong_password:
            await service.login("a@x.com", "wrong")
        with pytest.raises(InvalidCredentials) as unknown_email:
            await service.login("nobody@x.com", "secret1")

        assert type(wrong_password.value) is type(unknown_email.value)
        assert wrong_password.value.detail == unknown_email.value.detail == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_unknown_email_still_runs_bcrypt(self, store, hasher, tokens):
        spy = MagicMock(wraps=hasher)
        service = AuthService(store=store, hasher=spy, tokens=tokens)

        with pytest.raises(InvalidCredentials):
            await service.login("nobody@x.com", "secret1")
        spy.dummy_verify.assert_called_once_with("secret1")

    @pytest.mark.asyncio
    async def test_single_lookup_per_login(self, hasher, tokens):
        store = MagicMock()
        store.find_by_email = AsyncMock(return_value=None)
        service = AuthService(store=store, hasher=hasher, tokens=tokens)

        with pytest.raises(InvalidCredentials):
            await service.login("a@x.com", "secret1")
        store.find_by_email.assert_awaited_once_with("a@x.com")

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, hasher, tokens):
        store = MagicMock()
        store.find_by_email = AsyncMock(side_effect=ServerFailure())
        service = AuthService(store=store, hasher=hasher, tokens=tokens)

        with pytest.raises(ServerFailure):
            await service.login("a@x.com", "secret1")

    @pytest.mark.asyncio
    async def test_missing_fields(self, service):
        with pytest.raises(MalformedInput):
            await service.login("a@x.com", "")


class TestGuard:
    @pytest.mark.asyncio
    async def test_admits_valid_token(self, service):
        await service.register("a@x.com", "secret1")
        result = await service.login("a@x.com", "secret1")

        claims = service.authenticate(result.token)
        assert claims is not None
        assert claims.email == "a@x.com"

    @pytest.mark.parametrize("token", [None, "", "garbage"])
    def test_rejects_absent_or_invalid(self, service, token):
        assert service.authenticate(token) is None

    def test_rejects_deeply_nested_token(self, service):
        nested = base64.urlsafe_b64encode(b"[" * 5000).rstrip(b"=").decode()
        assert service.authenticate(f"{nested}.{nested}.c2ln") is None

    def test_rejects_expired(self, service, tokens, clock):
        token = tokens.issue(1, "a@x.com")
        clock.advance(3601)
        assert service.authenticate(token) is None

    def test_require_raises_uniformly(self, service, tokens, clock):
        expired = tokens.issue(1, "a@x.com")
        clock.advance(3601)
        for token in (None, "garbage", expired):
            with pytest.raises(InvalidToken) as excinfo:
                service.require(token)
            assert excinfo.value.detail == "Not authenticated"


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_register_login_guard(self, service):
        await service.register("a@x.com", "secret1")

        result = await service.login("a@x.com", "secret1")
        claims = service.authenticate(result.token)
        assert claims is not None and claims.email == "a@x.com"

        with pytest.raises(InvalidCredentials):
            await service.login("a@x.com", "wrong")

        assert service.authenticate(None) is None
