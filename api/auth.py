"""
JSON auth API — register, login, and the protected ``/me`` resource.

Route prefix: /api/v1/auth
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from api.dependencies import get_auth_service, get_current_user
from auth.jwt import Claims
from auth.service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────


class CredentialsRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AccountResponse(BaseModel):
    id: int
    email: str


class TokenResponse(BaseModel):
    id: int
    email: str
    token: str
    token_type: str = "bearer"
    expires_in: int


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/register", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: CredentialsRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Register a new account."""
    account = await service.register(req.email, req.password)
    return {"id": account.id, "email": account.email}


@router.post("/login", response_model=TokenResponse)
async def login(
    req: CredentialsRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Login with email + password."""
    result = await service.login(req.email, req.password)
    return {
        "id": result.account_id,
        "email": result.email,
        "token": result.token,
        "expires_in": result.expires_in,
    }


@router.get("/me", response_model=Claims)
async def me(claims: Claims = Depends(get_current_user)) -> Claims:
    """Protected resource: the claims of the presented token."""
    return claims
