"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Questkeeper test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest
import yaml


if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from questkeeper.engine.dice import DiceRoller
    from questkeeper.models.character import Adventurer


SAMPLE_CAMPAIGNS = Path(__file__).resolve().parent.parent / "campaigns"


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from questkeeper.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_shared_roller() -> Generator[None, None, None]:
    """Discard the shared dice roller before and after each test."""
    from questkeeper.engine.dice import reset_default_roller

    reset_default_roller()
    yield
    reset_default_roller()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "QUESTKEEPER_LOG_LEVEL": "DEBUG",
        "QUESTKEEPER_CONTENT_DEFAULT_CAMPAIGN": "saltmarsh",
        "QUESTKEEPER_GAME_DICE_SEED": "7",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Content Fixtures
# =============================================================================


@pytest.fixture
def minimal_campaign() -> dict[str, Any]:
    """Provide a minimal campaign.yaml document."""
    return {
        "id": "test_campaign",
        "name": "Test Campaign",
        "description": "A campaign for tests",
        "author": "Tester",
        "version": "0.1",
        "starting_location": "town_square",
    }


@pytest.fixture
def write_campaign(tmp_path: Path) -> Callable[..., Path]:
    """Write campaign documents into a temporary content root.

    Each keyword names a document (``campaign``, ``monsters``, ``npcs``,
    ``items``, ``locations``, ``trials``, ``minigames``); a dict is dumped
    as YAML and a str is written verbatim.

    Returns:
        Factory returning the content root.
    """

    def _write(**documents: dict[str, Any] | str | None) -> Path:
        root = tmp_path / "campaign"
        root.mkdir(exist_ok=True)
        for name, content in documents.items():
            path = root / f"{name}.yaml"
            if isinstance(content, str):
                path.write_text(content, encoding="utf-8")
            elif content is None:
                path.write_text("", encoding="utf-8")
            else:
                path.write_text(yaml.safe_dump(content, sort_keys=False), encoding="utf-8")
        return root

    return _write


@pytest.fixture
def scenario_documents(minimal_campaign: dict[str, Any]) -> dict[str, Any]:
    """A small, fully consistent campaign used across loader tests."""
    return {
        "campaign": minimal_campaign,
        "locations": {
            "locations": [
                {
                    "id": "town_square",
                    "name": "Town Square",
                    "exits": {"north": "forest"},
                    "npcs": ["guard"],
                },
                {
                    "id": "forest",
                    "name": "Forest",
                    "exits": {"south": "town_square"},
                },
            ]
        },
        "npcs": {
            "npcs": [
                {"id": "guard", "name": "Town Guard", "location_id": "town_square"},
            ]
        },
        "items": {
            "items": [
                {"id": "potion_01", "name": "Potion of Healing", "type": "consumable"},
            ]
        },
        "minigames": {
            "minigames": [
                {
                    "id": "lock_puzzle",
                    "name": "Lock Puzzle",
                    "required_skill": "sleight_of_hand",
                    "dc": 12,
                    "reward_item": "potion_01",
                },
            ]
        },
        "trials": {
            "trials": [
                {"id": "first_trial", "name": "First Trial", "mini_games": ["lock_puzzle"]},
            ]
        },
    }


@pytest.fixture
def sample_campaign_root() -> Path:
    """The bundled Muddlebrook campaign."""
    return SAMPLE_CAMPAIGNS / "muddlebrook"


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def adventurer() -> Adventurer:
    """A level 3 rogue proficient in sleight of hand (+4) and investigation (+1)."""
    from questkeeper.models.character import Adventurer
    from questkeeper.models.enums import CharacterClass, Skill

    return Adventurer(
        name="Wren",
        character_class=CharacterClass.ROGUE,
        level=3,
        dexterity=14,
        intelligence=8,
        skill_proficiencies=frozenset({Skill.SLEIGHT_OF_HAND, Skill.INVESTIGATION}),
        max_hit_points=20,
    )


@pytest.fixture
def wizard() -> Adventurer:
    """A level 5 wizard."""
    from questkeeper.models.character import Adventurer
    from questkeeper.models.enums import CharacterClass

    return Adventurer(
        name="Mirela",
        character_class=CharacterClass.WIZARD,
        level=5,
        intelligence=18,
        max_hit_points=28,
    )


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def roller() -> DiceRoller:
    """A seeded dice roller for reproducible rolls."""
    from questkeeper.engine.dice import DiceRoller

    return DiceRoller(seed=42)
