"""Application-wide constants for the Questkeeper adventure engine.

This module defines content file names, record defaults, and D&D 5E rules
constants shared by the loader and the rule engines.
"""

from __future__ import annotations

# =============================================================================
# Content Documents
# =============================================================================

CAMPAIGN_FILE = "campaign.yaml"
"""Mandatory campaign metadata document."""

MONSTERS_FILE = "monsters.yaml"
NPCS_FILE = "npcs.yaml"
ITEMS_FILE = "items.yaml"
LOCATIONS_FILE = "locations.yaml"
TRIALS_FILE = "trials.yaml"
MINIGAMES_FILE = "minigames.yaml"

# =============================================================================
# Campaign Metadata Defaults
# =============================================================================

DEFAULT_CAMPAIGN_ID = "unknown"
DEFAULT_CAMPAIGN_NAME = "Unnamed Campaign"
DEFAULT_CAMPAIGN_AUTHOR = "Unknown"
DEFAULT_CAMPAIGN_VERSION = "1.0"

# =============================================================================
# Monster Defaults
# =============================================================================

DEFAULT_ARMOR_CLASS = 10
DEFAULT_HIT_POINTS = 10
DEFAULT_SPEED = 30
"""Default walking speed in feet (most medium creatures)."""

DEFAULT_EXPERIENCE = 10
DEFAULT_ATTACK_BONUS = 2
DEFAULT_DAMAGE_DICE = "1d4"
DEFAULT_ALIGNMENT = "unaligned"

# =============================================================================
# Skill Checks
# =============================================================================

DEFAULT_DC = 10
"""Default mini-game difficulty class (Easy)."""

MIN_DC = 1
"""Difficulty classes below this are raised to it."""

DEFAULT_SUCCESS_TEXT = "Challenge completed!"
DEFAULT_FAILURE_TEXT = "You failed the challenge."

# =============================================================================
# Characters
# =============================================================================

MAX_CHARACTER_LEVEL = 20
"""Maximum character level in D&D 5E."""

MIN_CHARACTER_LEVEL = 1
"""Minimum character level."""


__all__ = [
    # Documents
    "CAMPAIGN_FILE",
    "MONSTERS_FILE",
    "NPCS_FILE",
    "ITEMS_FILE",
    "LOCATIONS_FILE",
    "TRIALS_FILE",
    "MINIGAMES_FILE",
    # Campaign
    "DEFAULT_CAMPAIGN_ID",
    "DEFAULT_CAMPAIGN_NAME",
    "DEFAULT_CAMPAIGN_AUTHOR",
    "DEFAULT_CAMPAIGN_VERSION",
    # Monsters
    "DEFAULT_ARMOR_CLASS",
    "DEFAULT_HIT_POINTS",
    "DEFAULT_SPEED",
    "DEFAULT_EXPERIENCE",
    "DEFAULT_ATTACK_BONUS",
    "DEFAULT_DAMAGE_DICE",
    "DEFAULT_ALIGNMENT",
    # Skill checks
    "DEFAULT_DC",
    "MIN_DC",
    "DEFAULT_SUCCESS_TEXT",
    "DEFAULT_FAILURE_TEXT",
    # Characters
    "MAX_CHARACTER_LEVEL",
    "MIN_CHARACTER_LEVEL",
]
