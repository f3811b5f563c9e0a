"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: str = ""                  # HMAC secret for session tokens (required)
    jwt_expiry_seconds: int = 3600        # 1 hour
    bcrypt_rounds: int = 10               # bcrypt work factor

    # ── Session cookie ───────────────────────────────────────────────────
    cookie_name: str = "token"
    cookie_secure: bool = False

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = ""                # takes precedence over the db_* parts
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: Optional[str] = None
    db_name: str = "auth"

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 8000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def resolved_database_url(self) -> str:
        """
        Return ``database_url`` or assemble an asyncpg URL from the
        ``DB_HOST`` / ``DB_PORT`` / ``DB_USER`` / ``DB_PASSWORD`` / ``DB_NAME``
        variables.
        """
        if self.database_url:
            return self.database_url
        credentials = self.db_user
        if self.db_password:
            credentials = f"{self.db_user}:{self.db_password}"
        return (
            f"postgresql+asyncpg://{credentials}@{self.db_host}:{self.db_port}/{self.db_name}"
        )


config = Settings()
