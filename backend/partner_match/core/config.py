from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(v: Any) -> Any:
    # Support either:
    # - JSON array (recommended): PARTNER_MATCH_CORS_ALLOW_ORIGINS='["https://your-frontend"]'
    # - Comma-separated string:   PARTNER_MATCH_CORS_ALLOW_ORIGINS='https://a,https://b'
    if isinstance(v, str):
        s = v.strip()
        if not s:
            return []
        if s.startswith("["):
            return v
        return [p.strip() for p in s.split(",") if p.strip()]
    return v


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PARTNER_MATCH_", extra="ignore")

    store_base_url: str = "http://localhost:8080/v1"
    store_api_key: Optional[str] = None
    styles_collection: str = "danceStyles"
    users_collection: str = "users"

    http_connect_timeout_s: float = 5.0
    http_read_timeout_s: float = 20.0
    http_max_bytes: int = 2_000_000
    # No retry policy by default: a failed fetch yields an empty result for that search.
    max_retries: int = Field(default=0, ge=0, le=5)

    candidate_page_size: int = Field(default=100, gt=0, le=500)
    candidate_roles: list[str] = ["user", "student"]

    placeholder_photo: str = "/assets/images/dance/egitmen1.jpg"
    default_rating: float = 4.0

    log_level: str = "INFO"
    log_json: bool = True

    cors_allow_origins: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    @field_validator("cors_allow_origins", "candidate_roles", mode="before")
    @classmethod
    def _parse_lists(cls, v: Any) -> Any:
        return _split_csv(v)


settings = Settings()
