"""
Credential authentication service — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.auth import router as auth_router
from api.middleware import register_exception_handlers, register_middleware
from api.pages import router as pages_router
from auth.jwt import TokenService
from auth.password import PasswordHasher
from config.settings import Settings, config
from database.session import create_engine_for, create_session_factory, init_models

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "asyncio", "multipart"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Fails fast with ConfigurationError when JWT_SECRET is missing.
        app.state.tokens = TokenService(
            settings.jwt_secret,
            expiry_seconds=settings.jwt_expiry_seconds,
        )
        app.state.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

        engine = create_engine_for(settings.resolved_database_url(), echo=settings.debug)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        await init_models(engine)

        logger.info("Application ready to accept requests.")
        try:
            yield
        finally:
            await engine.dispose()

    app = FastAPI(
        title="Credential Auth Service",
        version="1.0.0",
        description="Email + password accounts with signed session tokens.",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router, prefix="/api/v1/auth")
    app.include_router(pages_router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
