"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Iterable, Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Movie Wishlist", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=8080, alias="PORT")

    watchmode_api_key: str | None = Field(default=None, alias="WATCHMODE_API_KEY")
    watchmode_api_url: HttpUrl = Field(
        default="https://api.watchmode.com/v1", alias="WATCHMODE_API_URL"
    )
    watchmode_regions: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(), alias="WATCHMODE_REGIONS"
    )
    provider_timeout_seconds: float = Field(
        default=15.0, alias="PROVIDER_TIMEOUT", gt=0, le=120
    )
    similar_titles_concurrency: int = Field(
        default=8, alias="SIMILAR_TITLES_CONCURRENCY", ge=1, le=32
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./moviewishlist.db", alias="DATABASE_URL"
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("watchmode_regions", mode="before")
    @classmethod
    def _parse_regions(cls, value: object) -> tuple[str, ...]:
        """Normalise region filters such as ``"us, gb"`` into ``("US", "GB")``."""

        if value is None:
            return ()
        if isinstance(value, str):
            raw_values = value.split(",")
        elif isinstance(value, Iterable):
            raw_values = [str(part) for part in value]
        else:
            raise TypeError("WATCHMODE_REGIONS must be a string or iterable of strings")

        cleaned: list[str] = []
        for entry in raw_values:
            region = entry.strip().upper()
            if not region:
                continue
            if len(region) != 2 or not region.isalpha():
                raise ValueError("WATCHMODE_REGIONS must contain two-letter country codes")
            if region not in cleaned:
                cleaned.append(region)
        return tuple(cleaned)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
