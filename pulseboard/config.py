"""Configuration management. All settings from environment variables with sensible defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "pulseboard-secret-key-change-in-production"


@dataclass(frozen=True)
class DatabaseConfig:
    host: str = "localhost"
    port: int = 5432
    name: str = "pulseboard"
    user: str = "pulseboard"
    password: str = "pulseboard-dev-password"
    pool_min: int = 2
    pool_max: int = 10

    @property
    def dsn(self) -> str:
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"


@dataclass(frozen=True)
class AuthConfig:
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 7
    bcrypt_rounds: int = 10
    min_password_length: int = 6


@dataclass(frozen=True)
class AnalyticsConfig:
    window_days: int = 30        # Trailing window for dashboard and explorer defaults
    top_pages_limit: int = 10
    top_events_limit: int = 10


@dataclass(frozen=True)
class Config:
    db: DatabaseConfig = field(default_factory=DatabaseConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    http_host: str = "0.0.0.0"
    http_port: int = 3001
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:5173"])
    log_level: str = "INFO"


def _parse_cors_origins(raw: str) -> list[str]:
    """Parse comma-separated CORS origins. '*' means allow all."""
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def load_config() -> Config:
    """Load configuration from environment variables."""
    config = Config(
        db=DatabaseConfig(
            host=os.getenv("PULSEBOARD_DB_HOST", "localhost"),
            port=int(os.getenv("PULSEBOARD_DB_PORT", "5432")),
            name=os.getenv("PULSEBOARD_DB_NAME", "pulseboard"),
            user=os.getenv("PULSEBOARD_DB_USER", "pulseboard"),
            password=os.getenv("PULSEBOARD_DB_PASS", "pulseboard-dev-password"),
            pool_min=int(os.getenv("PULSEBOARD_DB_POOL_MIN", "2")),
            pool_max=int(os.getenv("PULSEBOARD_DB_POOL_MAX", "10")),
        ),
        auth=AuthConfig(
            jwt_secret=os.getenv("PULSEBOARD_JWT_SECRET", DEFAULT_JWT_SECRET),
            jwt_algorithm=os.getenv("PULSEBOARD_JWT_ALGORITHM", "HS256"),
            token_ttl_days=int(os.getenv("PULSEBOARD_TOKEN_TTL_DAYS", "7")),
            bcrypt_rounds=int(os.getenv("PULSEBOARD_BCRYPT_ROUNDS", "10")),
            min_password_length=int(os.getenv("PULSEBOARD_MIN_PASSWORD_LENGTH", "6")),
        ),
        analytics=AnalyticsConfig(
            window_days=int(os.getenv("PULSEBOARD_WINDOW_DAYS", "30")),
            top_pages_limit=int(os.getenv("PULSEBOARD_TOP_PAGES_LIMIT", "10")),
            top_events_limit=int(os.getenv("PULSEBOARD_TOP_EVENTS_LIMIT", "10")),
        ),
        http_host=os.getenv("PULSEBOARD_HTTP_HOST", "0.0.0.0"),
        http_port=int(os.getenv("PULSEBOARD_HTTP_PORT", "3001")),
        cors_origins=_parse_cors_origins(os.getenv("PULSEBOARD_CORS_ORIGINS", "http://localhost:5173")),
        log_level=os.getenv("PULSEBOARD_LOG_LEVEL", "INFO").upper(),
    )

    if config.auth.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("PULSEBOARD_JWT_SECRET not set; using the built-in development secret")

    return config
