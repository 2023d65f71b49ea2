"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # Linter settings
    WORKFLOW_CONVENTIONS_CONFIG: Path | None = None
    DRY_RUN_FLAG: str | None = None
    FAIL_ON: str | None = None
    OUTPUT_FORMAT: str | None = None

    # Set by the GitHub Actions runner
    GITHUB_STEP_SUMMARY: Path | None = None


def get_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings()
