"""
Account store — the persistence boundary of the auth core.

``AccountStore`` is what ``auth.service.AuthService`` depends on; the
SQLAlchemy implementation below is the one the application wires in.
``insert`` only flushes; the request-scoped session in
``database.session.get_db_session`` owns the commit.  Email uniqueness is
enforced by the ``users.email`` unique constraint, so a duplicate
registration surfaces here as ``DuplicateAccount``.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import DuplicateAccount, ServerFailure
from database.models import Account

logger = logging.getLogger(__name__)


class AccountStore(Protocol):
    async def find_by_email(self, email: str) -> Optional[Account]:
        ...

    async def insert(self, email: str, password_hash: str) -> Account:
        ...


class SqlAlchemyAccountStore:
    """``AccountStore`` backed by an ``AsyncSession``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_email(self, email: str) -> Optional[Account]:
        try:
            result = await self._session.execute(
                select(Account).where(Account.email == email)
            )
        except SQLAlchemyError as exc:
            logger.exception("Account lookup failed")
            raise ServerFailure() from exc
        return result.scalar_one_or_none()

    async def insert(self, email: str, password_hash: str) -> Account:
        account = Account(email=email, password_hash=password_hash)
        self._session.add(account)
        try:
            await self._session.flush()
        except IntegrityError:
            await self._session.rollback()
            raise DuplicateAccount() from None
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.exception("Account insert failed")
            raise ServerFailure() from exc
        return account
