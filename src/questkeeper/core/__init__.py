"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        QuestkeeperError: Base exception for all application errors.
        ContentError: Campaign content errors.
        GameEngineError: Rule-engine errors raised at the point of use.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        configure_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        unbind_context: Remove specific context keys.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from questkeeper.core.config import (
    ContentSettings,
    GameSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from questkeeper.core.exceptions import (
    AlreadyAttunedError,
    AttunementError,
    AttunementRefusedError,
    CampaignLoadError,
    ConfigurationError,
    ContentError,
    DiceRollError,
    DocumentDecodeError,
    DocumentNotFoundError,
    DocumentReadError,
    EffectDepletedError,
    EffectIndexError,
    EmptyDocumentError,
    GameEngineError,
    ItemUsageError,
    QuestkeeperError,
    RecordParseError,
    SkillCheckError,
    ValidationError,
)
from questkeeper.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
    unbind_context,
)


__all__ = [
    # Base exception
    "QuestkeeperError",
    # Content exceptions
    "ContentError",
    "DocumentReadError",
    "DocumentNotFoundError",
    "EmptyDocumentError",
    "DocumentDecodeError",
    "RecordParseError",
    "CampaignLoadError",
    # Game engine exceptions
    "GameEngineError",
    "DiceRollError",
    "ItemUsageError",
    "AttunementError",
    "AttunementRefusedError",
    "AlreadyAttunedError",
    "EffectIndexError",
    "EffectDepletedError",
    "SkillCheckError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "ContentSettings",
    "GameSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
]
