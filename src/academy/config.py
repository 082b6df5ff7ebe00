"""Application settings for the academy service.

Protean infrastructure (databases, brokers, event store) is configured in
``domain.toml``. Everything else the service needs at runtime, such as the
gateway credentials, is read here from ``ACADEMY_*`` environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ACADEMY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Currency every order is priced and settled in
    settlement_currency: str = "KRW"

    # Payment gateway
    gateway: Literal["fake", "portone"] = "fake"
    portone_api_base_url: str = "https://api.portone.io"
    portone_api_secret: str = ""
    portone_webhook_secret: str = ""
    gateway_timeout_seconds: float = Field(default=10.0, gt=0)

    # "json" or "console"; unset picks json in production and staging
    log_format: str | None = None

    # Order listing
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)


@lru_cache
def get_settings() -> Settings:
    return Settings()
