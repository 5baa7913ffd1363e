"""Custom exception hierarchy for the Questkeeper adventure engine.

This module defines the exception hierarchy shared by the content pipeline
and the rule engines. All exceptions inherit from QuestkeeperError, enabling
unified error handling at the application boundary while preserving
domain-specific context.

Content problems found while loading a campaign are normally collected as
diagnostics rather than raised; the content exceptions below are raised by
the low-level readers and parsers and caught by the loader.

Example:
    >>> from questkeeper.core.exceptions import DocumentDecodeError
    >>> raise DocumentDecodeError("Invalid YAML", source_file="monsters.yaml")
"""

from __future__ import annotations

from typing import Any


class QuestkeeperError(Exception):
    """Base exception for all Questkeeper errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Content Domain Exceptions
# =============================================================================


class ContentError(QuestkeeperError):
    """Base exception for campaign content problems."""


class DocumentReadError(ContentError):
    """Raised when a content document cannot be turned into a decoded tree."""

    def __init__(
        self,
        message: str,
        *,
        source_file: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize document error with source file context.

        Args:
            message: Human-readable error description.
            source_file: Name of the document that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if source_file:
            combined_details["source_file"] = source_file
        super().__init__(message, details=combined_details)


class DocumentNotFoundError(DocumentReadError):
    """Raised when a named document does not exist under the content root."""


class EmptyDocumentError(DocumentReadError):
    """Raised when a document exists but decodes to nothing."""


class DocumentDecodeError(DocumentReadError):
    """Raised when a document is unreadable, malformed, or not a mapping."""


class RecordParseError(ContentError):
    """Raised when a single record cannot be turned into an entity.

    The loader skips the record and keeps loading its siblings.
    """

    def __init__(
        self,
        message: str,
        *,
        record_kind: str | None = None,
        record_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize record parse error with record context.

        Args:
            message: Human-readable error description.
            record_kind: Kind of record (monster, npc, weapon, ...).
            record_id: Identifier of the record, when one could be read.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if record_kind:
            combined_details["record_kind"] = record_kind
        if record_id:
            combined_details["record_id"] = record_id
        self.record_kind = record_kind
        self.record_id = record_id
        super().__init__(message, details=combined_details)


class CampaignLoadError(ContentError):
    """Raised when a caller demands a campaign that failed to load."""

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize campaign load error with the collected load errors.

        Args:
            message: Human-readable error description.
            errors: Load errors reported by the content loader.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if errors:
            combined_details["errors"] = errors
        self.errors = list(errors or [])
        super().__init__(message, details=combined_details)


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(QuestkeeperError):
    """Base exception for rule-engine errors raised at the point of use."""


class DiceRollError(GameEngineError):
    """Raised when dice rolling operations fail.

    This typically occurs when parsing invalid dice notation.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class ItemUsageError(GameEngineError):
    """Raised when a magic item is used in a state that forbids it."""

    def __init__(
        self,
        message: str,
        *,
        item_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize item usage error with item context.

        Args:
            message: Human-readable error description.
            item_id: Identifier of the item involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if item_id:
            combined_details["item_id"] = item_id
        super().__init__(message, details=combined_details)


class AttunementError(ItemUsageError):
    """Base exception for refused attunement transitions."""


class AttunementRefusedError(AttunementError):
    """Raised when a character does not meet an item's attunement requirement."""


class AlreadyAttunedError(AttunementError):
    """Raised when an item is attuned to a different character."""


class EffectIndexError(ItemUsageError):
    """Raised when an effect is addressed by an index outside the item's effects."""

    def __init__(
        self,
        message: str,
        *,
        index: int | None = None,
        item_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize effect index error with the offending index.

        Args:
            message: Human-readable error description.
            index: The out-of-range index.
            item_id: Identifier of the item involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if index is not None:
            combined_details["index"] = index
        super().__init__(message, item_id=item_id, details=combined_details)


class EffectDepletedError(GameEngineError):
    """Raised when an effect with no remaining charges is activated directly."""


class SkillCheckError(GameEngineError):
    """Raised when a skill check cannot be evaluated as requested."""

    def __init__(
        self,
        message: str,
        *,
        mini_game_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize skill check error with mini-game context.

        Args:
            message: Human-readable error description.
            mini_game_id: Identifier of the mini-game being evaluated.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if mini_game_id:
            combined_details["mini_game_id"] = mini_game_id
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(QuestkeeperError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(QuestkeeperError):
    """Raised when an argument or value fails validation.

    The rule engines raise this for invalid arguments, such as a missing
    character passed to an attunement call.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


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
]
