"""
Importer configuration, read from ``EXPENSE_IMPORT_*`` environment variables.

CLI flags override individual values; see ``cli.py``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ImporterSettings(BaseSettings):
    """Connection and tuning settings for the expense API."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_IMPORT_",
        env_file=".env",
        extra="ignore",
    )

    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the expense API; expenses are POSTed to <base>/expenses",
    )
    access_token: Optional[str] = Field(
        default=None,
        description="Bearer token for the signed-in user",
    )
    project_id: Optional[str] = Field(
        default=None,
        description="Project the imported expenses belong to (X-Project-Id header)",
    )
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_concurrency: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Upper bound on create-expense calls in flight",
    )

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")
