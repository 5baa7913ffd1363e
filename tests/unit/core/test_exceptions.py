"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

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
    EffectIndexError,
    GameEngineError,
    ItemUsageError,
    QuestkeeperError,
    RecordParseError,
    SkillCheckError,
    ValidationError,
)


class TestQuestkeeperError:
    """Tests for the base QuestkeeperError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = QuestkeeperError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = QuestkeeperError(
            "Test error",
            details={"key": "value", "count": 42},
        )
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        exc = QuestkeeperError("Test", details={"x": 1})
        repr_str = repr(exc)
        assert "QuestkeeperError" in repr_str
        assert "Test" in repr_str
        assert "x" in repr_str


class TestContentExceptions:
    """Tests for content loading exceptions."""

    def test_document_error_with_source_file(self) -> None:
        """Test DocumentReadError records the document name."""
        exc = DocumentNotFoundError("missing", source_file="campaign.yaml")
        assert exc.details["source_file"] == "campaign.yaml"
        assert exc.message == "missing"

    def test_document_inheritance(self) -> None:
        """Test document error inheritance chain."""
        exc = DocumentDecodeError("bad yaml")
        assert isinstance(exc, DocumentReadError)
        assert isinstance(exc, ContentError)
        assert isinstance(exc, QuestkeeperError)

    def test_record_parse_error_context(self) -> None:
        """Test RecordParseError exposes kind and id."""
        exc = RecordParseError("bad record", record_kind="monster", record_id="goblin")
        assert exc.record_kind == "monster"
        assert exc.record_id == "goblin"
        assert exc.details == {"record_kind": "monster", "record_id": "goblin"}

    def test_campaign_load_error_keeps_errors(self) -> None:
        """Test CampaignLoadError carries the load errors."""
        exc = CampaignLoadError("failed", errors=["campaign.yaml not found"])
        assert exc.errors == ["campaign.yaml not found"]
        assert exc.details["errors"] == ["campaign.yaml not found"]


class TestGameEngineExceptions:
    """Tests for game engine exceptions."""

    def test_dice_roll_error(self) -> None:
        """Test DiceRollError with expression."""
        exc = DiceRollError("Invalid dice", expression="1d0+5")
        assert exc.details["expression"] == "1d0+5"

    def test_attunement_hierarchy(self) -> None:
        """Test attunement failures are item usage errors."""
        for exc in (AttunementRefusedError("no"), AlreadyAttunedError("no")):
            assert isinstance(exc, AttunementError)
            assert isinstance(exc, ItemUsageError)
            assert isinstance(exc, GameEngineError)

    def test_effect_index_error(self) -> None:
        """Test EffectIndexError with index and item."""
        exc = EffectIndexError("out of range", index=5, item_id="wand")
        assert exc.details["index"] == 5
        assert exc.details["item_id"] == "wand"

    def test_effect_index_zero_is_recorded(self) -> None:
        """Test an index of zero still lands in the details."""
        exc = EffectIndexError("out of range", index=0)
        assert exc.details["index"] == 0

    def test_skill_check_error(self) -> None:
        """Test SkillCheckError with mini-game id."""
        exc = SkillCheckError("bad skill", mini_game_id="lock")
        assert exc.details["mini_game_id"] == "lock"


class TestConfigurationExceptions:
    """Tests for configuration exceptions."""

    def test_configuration_error(self) -> None:
        """Test ConfigurationError with config key."""
        exc = ConfigurationError(
            "Bad campaign name",
            config_key="default_campaign",
        )
        assert exc.details["config_key"] == "default_campaign"

    def test_validation_error(self) -> None:
        """Test ValidationError with field info."""
        exc = ValidationError(
            "Invalid value",
            field_name="hit_points",
            invalid_value=-5,
        )
        assert exc.details["field_name"] == "hit_points"
        assert exc.details["invalid_value"] == -5


class TestExceptionChaining:
    """Tests for exception chaining behavior."""

    def test_raise_from(self) -> None:
        """Test that exceptions can be properly chained."""
        original = ValueError("Original error")

        with pytest.raises(DocumentDecodeError) as exc_info:
            try:
                raise original
            except ValueError as e:
                raise DocumentDecodeError("Wrapped error") from e

        assert exc_info.value.__cause__ is original
