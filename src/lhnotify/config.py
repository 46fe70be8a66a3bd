from __future__ import annotations

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import LogLevel


class NotifyConfig(BaseSettings):
    """Configuration loaded from GitHub Actions inputs."""

    model_config = SettingsConfigDict(
        env_prefix="INPUT_",
        frozen=True,
        extra="ignore",
    )

    # Slack
    slack_webhook_url: SecretStr = Field(default="", description="Slack incoming webhook URL")
    slack_notification: bool = Field(default=False, description="Post the report to Slack")

    # GitHub
    application_github_token: SecretStr = Field(
        default="",
        description="Token used to post the check run (GitHub App or workflow token)",
    )
    github_notification: bool = Field(default=False, description="Post the report as a check run")
    personal_github_token: SecretStr = Field(
        default="",
        description="Personal token used to archive results to gists and look up pull requests",
    )

    log_level: LogLevel = Field(
        default="info",
        description="info: always report; error: report only failed runs",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_lowercase(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip().lower() or "info"
        return value

    @field_validator("slack_notification", "github_notification", mode="before")
    @classmethod
    def _blank_is_false(cls, value: object) -> object:
        # Actions passes unset inputs as empty strings.
        if isinstance(value, str) and not value.strip():
            return False
        return value

    @property
    def slack_enabled(self) -> bool:
        return self.slack_notification and bool(self.slack_webhook_url.get_secret_value())

    @property
    def github_enabled(self) -> bool:
        return self.github_notification and bool(self.application_github_token.get_secret_value())
