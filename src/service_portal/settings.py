"""
service_portal.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., session signing secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    All knobs are read from `PORTAL_*` environment variables.
    Defaults are safe for local development.
    """

    model_config = SettingsConfigDict(env_prefix="PORTAL_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables and dev routes.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "service-portal"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 3000
    # Comma-separated proxy addresses trusted for X-Forwarded-* headers.
    forwarded_allow_ips: str = "127.0.0.1"

    # Record store
    database_url: str = "sqlite+aiosqlite:///./portal.db"
    store_timeout_seconds: float = Field(default=10.0, gt=0)

    # Identity provider
    auth_mode: Literal["forward_auth", "session_token"] = "forward_auth"
    identity_verify_url: str = "http://localhost:9000/api/verify"
    identity_timeout_seconds: float = Field(default=5.0, gt=0)
    identity_user_header: str = "remote-user"
    identity_email_header: str = "remote-email"
    identity_name_header: str = "remote-name"
    identity_groups_headers: list[str] = Field(
        default_factory=lambda: ["remote-groups", "x-authentik-groups"]
    )

    # Session tokens (session_token mode and the dev session route)
    session_cookie_name: str = "portal_session"
    session_alg: str = "HS256"
    session_issuer: str = "service-portal"
    session_audience: str = "service-portal-api"
    session_secret: str = Field(default="dev-session-secret-change-me-in-prod", repr=False)
    session_leeway_seconds: int = Field(default=30, ge=0)

    # Blob store
    blob_backend: Literal["filesystem", "memory"] = "filesystem"
    blob_root: str = "./uploads"
    blob_timeout_seconds: float = Field(default=10.0, gt=0)

    # Image ingestion
    image_display_height: int = Field(default=50, ge=1)
    # False switches the pipeline to pass-through mode (original bytes are stored).
    image_resize_enabled: bool = True
    image_cache_max_age: int = 31536000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests build `Settings(...)` directly and hand it to `create_app`; the cached
# instance is only used by the process entrypoint and dependency defaults.
