"""Pydantic settings model for koko.

Credentials come from the process environment (optionally from a .env file
in the working directory). Token format checks belong to the clients that
consume them, so a missing token surfaces with the same wording whether it
came from here or was passed in directly.
"""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_GITHUB_API_URL = "https://api.github.com"


class KokoConfig(BaseSettings):
    """Root configuration for the koko bot process."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    slack_app_token: SecretStr = Field(
        default=SecretStr(""),
        description="Slack app-level token (xapp-...) used to open the Socket Mode connection.",
    )
    slack_bot_token: SecretStr = Field(
        default=SecretStr(""),
        description="Slack bot token (xoxb-...) used for Web API lookups.",
    )
    github_token: SecretStr = Field(
        default=SecretStr(""),
        description="GitHub token used to read pull requests.",
    )
    debug: bool = Field(
        default=False,
        validation_alias="KOKO_DEBUG",
        description="Enable slack-sdk debug logging.",
    )
    github_api_url: str = Field(
        default=DEFAULT_GITHUB_API_URL,
        validation_alias="KOKO_GITHUB_API_URL",
        description="Base URL of the GitHub REST API (override for GitHub Enterprise).",
    )
