"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import Claims
from auth.service import AuthService
from database.session import get_db_session
from database.store import SqlAlchemyAccountStore

_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(session: AsyncSession = Depends(get_db_session)) -> AsyncGenerator[AsyncSession, None]:
    """Re-export so routes import from a single place."""
    yield session


async def get_auth_service(
    request: Request,
    session: AsyncSession = Depends(db_session),
) -> AuthService:
    """Per-request ``AuthService`` over the process-wide hasher and token service."""
    return AuthService(
        store=SqlAlchemyAccountStore(session),
        hasher=request.app.state.hasher,
        tokens=request.app.state.tokens,
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    service: AuthService = Depends(get_auth_service),
) -> Claims:
    """
    Extract and verify the Bearer token, returning its claims.

    A missing header is treated exactly like a bad token: ``InvalidToken``,
    rendered as 401 by ``api.middleware``.
    """
    token = credentials.credentials if credentials else None
    return service.require(token)


async def get_cookie_user(
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> Optional[Claims]:
    """Claims from the session cookie, or ``None`` when absent or invalid."""
    token = request.cookies.get(request.app.state.settings.cookie_name)
    return service.authenticate(token)
