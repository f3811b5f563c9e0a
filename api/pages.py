"""
Cookie-session pages — the browser-facing variant of the auth flow.

The session token lives in an ``httponly`` cookie; unauthenticated access
to ``/profile`` redirects to ``/login``.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from api.dependencies import get_auth_service, get_cookie_user
from auth.errors import DuplicateAccount, InvalidCredentials, MalformedInput, ServerFailure
from auth.jwt import Claims
from auth.service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

templates = Jinja2Templates(
    directory=str(pathlib.Path(__file__).resolve().parent.parent / "templates")
)


def _render(request: Request, template_name: str, title: str, **ctx) -> HTMLResponse:
    return templates.TemplateResponse(
        request, template_name, {"title": title, "message": None, **ctx}
    )


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, user: Optional[Claims] = Depends(get_cookie_user)):
    return _render(request, "index.html", "Home Page", user=user)


@router.get("/register", response_class=HTMLResponse)
async def register_page(request: Request):
    return _render(request, "register.html", "Register Page")


@router.post("/register", response_class=HTMLResponse)
async def register_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    service: AuthService = Depends(get_auth_service),
):
    try:
        await service.register(email, password)
    except (DuplicateAccount, MalformedInput, ServerFailure) as exc:
        logger.info("Registration rejected: %s", type(exc).__name__)
        return _render(
            request,
            "register.html",
            "Register Page",
            message="User already exists or invalid data.",
        )
    return _render(
        request,
        "login.html",
        "Login Page",
        message="Registration successful! Please log in.",
    )


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    return _render(request, "login.html", "Login Page")


@router.post("/login")
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    service: AuthService = Depends(get_auth_service),
):
    try:
        result = await service.login(email, password)
    except (InvalidCredentials, MalformedInput):
        return _render(request, "login.html", "Login Page", message="Invalid credentials")
    except ServerFailure:
        return _render(request, "login.html", "Login Page", message="Server error")

    settings = request.app.state.settings
    resp = RedirectResponse(url="/profile", status_code=303)
    resp.set_cookie(
        settings.cookie_name,
        result.token,
        max_age=result.expires_in,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return resp


@router.get("/profile", response_class=HTMLResponse)
async def profile(request: Request, user: Optional[Claims] = Depends(get_cookie_user)):
    if user is None:
        return RedirectResponse(url="/login", status_code=303)
    return _render(request, "profile.html", "Profile Page", user=user)


@router.get("/logout")
async def logout(request: Request):
    resp = RedirectResponse(url="/", status_code=303)
    resp.delete_cookie(request.app.state.settings.cookie_name)
    return resp
