"""Configuration management for the Questkeeper adventure engine.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files, and
runtime configuration overrides.

Example:
    >>> from questkeeper.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.content.campaign_path("muddlebrook")
    PosixPath('campaigns/muddlebrook')

Environment Variables:
    QUESTKEEPER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    QUESTKEEPER_JSON_LOGS: Emit JSON log lines instead of console output
    QUESTKEEPER_CONTENT_CAMPAIGNS_PATH: Directory holding campaign folders
    QUESTKEEPER_CONTENT_DEFAULT_CAMPAIGN: Campaign loaded when none is named
    QUESTKEEPER_GAME_DICE_SEED: Seed for reproducible dice rolls
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from questkeeper.core.exceptions import ConfigurationError


class ContentSettings(BaseSettings):
    """Configuration for campaign content discovery.

    Attributes:
        campaigns_path: Directory containing one folder per campaign.
        default_campaign: Campaign identifier used when none is requested.
        encoding: Text encoding of content documents.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUESTKEEPER_CONTENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    campaigns_path: Path = Field(
        default=Path("campaigns"),
        description="Directory containing campaign folders",
    )
    default_campaign: str = Field(
        default="muddlebrook",
        min_length=1,
        description="Campaign loaded when none is named",
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of content documents",
    )

    @field_validator("default_campaign", mode="after")
    @classmethod
    def reject_path_separators(cls, value: str) -> str:
        """Ensure the default campaign is a folder name, not a path.

        Raises:
            ConfigurationError: If the value contains a path separator.
        """
        if "/" in value or "\\" in value:
            raise ConfigurationError(
                f"default_campaign must be a folder name, got {value!r}",
                config_key="default_campaign",
            )
        return value

    def campaign_path(self, campaign_id: str | None = None) -> Path:
        """Resolve the content root for a campaign.

        Args:
            campaign_id: Campaign folder name; defaults to default_campaign.

        Returns:
            Path to the campaign's content root.
        """
        return self.campaigns_path / (campaign_id or self.default_campaign)


class GameSettings(BaseSettings):
    """Configuration for rule-engine behavior.

    Attributes:
        dice_seed: Optional seed for reproducible dice rolls.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUESTKEEPER_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    dice_seed: int | None = Field(
        default=None,
        description="Seed for reproducible dice rolls",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        log_level: Application logging level.
        json_logs: Emit JSON logs.
        content: Content discovery settings.
        game: Rule-engine settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUESTKEEPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Questkeeper",
        description="Application name",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines",
    )

    content: ContentSettings = Field(default_factory=ContentSettings)
    game: GameSettings = Field(default_factory=GameSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "ContentSettings",
    "GameSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
