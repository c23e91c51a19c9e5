"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HttpSettings(BaseModel):
    request_timeout_seconds: float = Field(default=10, gt=0, le=60)
    user_agent: str = Field(default="repo-search/0.1", min_length=1)
    github_token: SecretStr | None = Field(
        default=None,
        description="Optional token; unauthenticated search is heavily rate limited.",
    )

    @field_validator("github_token", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PipelineSettings(BaseModel):
    debounce_seconds: float = Field(default=0.5, ge=0, le=5)
    cancel_superseded: bool = Field(
        default=True,
        description="Abort in-flight fetches once a newer query is dispatched.",
    )


class SearchSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REPO_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__"
    )

    log_level: str = "INFO"
    http: HttpSettings = Field(default_factory=HttpSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)


@lru_cache
def get_settings() -> SearchSettings:
    """Return cached settings instance."""

    return SearchSettings()


__all__ = [
    "HttpSettings",
    "PipelineSettings",
    "SearchSettings",
    "get_settings",
]
