"""Questkeeper - D&D 5E adventure content engine.

Loads a campaign authored as a directory of YAML documents, validates the
references between its entities, and provides the rule engines a game
session plays against it: monster spawning, magic item effects and
attunement, and mini-game skill checks.

Example:
    >>> from questkeeper import Adventurer, SkillCheckResolver, load_campaign
    >>>
    >>> campaign = load_campaign("muddlebrook").require()
    >>> hero = Adventurer(name="Wren", dexterity=16)
    >>> lock = campaign.get_mini_game("rusty_lock")
    >>> result = SkillCheckResolver().evaluate(lock, hero)
    >>> print(result.formatted())

Modules:
    core: Configuration, logging, constants, and exceptions.
    models: Pydantic V2 content models and the Campaign facade.
    ingestion: YAML document reading, entity parsing, and loading.
    engine: Dice, monster spawning, and skill-check resolution.
"""

from __future__ import annotations

# Core
from questkeeper.core.config import Settings, get_settings
from questkeeper.core.exceptions import QuestkeeperError
from questkeeper.core.logging import configure_logging, get_logger

# Models
from questkeeper.models.campaign import Campaign, Diagnostic, Severity
from questkeeper.models.character import Adventurer
from questkeeper.models.items import ActionStatus, ItemActionResult, MagicItem

# Ingestion
from questkeeper.ingestion.loader import ContentLoader, LoadResult, load_campaign

# Engine
from questkeeper.engine.dice import DiceRoller
from questkeeper.engine.skill_checks import SkillCheckResolver, SkillCheckResult
from questkeeper.engine.spawner import MonsterTemplateRegistry


__version__ = "0.1.0"
__author__ = "Questkeeper Team"
__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Core
    "QuestkeeperError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Campaign",
    "Diagnostic",
    "Severity",
    "Adventurer",
    "MagicItem",
    "ActionStatus",
    "ItemActionResult",
    # Ingestion
    "ContentLoader",
    "LoadResult",
    "load_campaign",
    # Engine
    "DiceRoller",
    "SkillCheckResolver",
    "SkillCheckResult",
    "MonsterTemplateRegistry",
]
