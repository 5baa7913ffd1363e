"""Enumeration types for the Questkeeper adventure engine.

This module defines the fixed vocabularies used by campaign content:
ability scores, skills, creature sizes and types, damage types, item
categories, rarities, effect cadences, and puzzle types. Content documents
name these with case-insensitive tokens; see ``parse_token`` for matching.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TypeVar


class Ability(StrEnum):
    """D&D 5E ability scores.

    The six core abilities that define a creature's physical
    and mental characteristics.
    """

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability.

        Returns:
            Full ability name (e.g., 'Strength' for STR).
        """
        return self.value.capitalize()

    @property
    def abbreviation(self) -> str:
        """Get the three-letter abbreviation.

        Returns:
            Three-letter abbreviation (e.g., 'STR').
        """
        return self.name


class Skill(StrEnum):
    """D&D 5E skills and their associated abilities.

    Each skill is linked to a primary ability score used
    for skill checks.
    """

    # Strength skills
    ATHLETICS = "athletics"

    # Dexterity skills
    ACROBATICS = "acrobatics"
    SLEIGHT_OF_HAND = "sleight_of_hand"
    STEALTH = "stealth"

    # Intelligence skills
    ARCANA = "arcana"
    HISTORY = "history"
    INVESTIGATION = "investigation"
    NATURE = "nature"
    RELIGION = "religion"

    # Wisdom skills
    ANIMAL_HANDLING = "animal_handling"
    INSIGHT = "insight"
    MEDICINE = "medicine"
    PERCEPTION = "perception"
    SURVIVAL = "survival"

    # Charisma skills
    DECEPTION = "deception"
    INTIMIDATION = "intimidation"
    PERFORMANCE = "performance"
    PERSUASION = "persuasion"

    @property
    def ability(self) -> Ability:
        """Get the primary ability score for this skill.

        Returns:
            The Ability enum value associated with this skill.
        """
        return _SKILL_ABILITIES[self]

    @property
    def display_name(self) -> str:
        """Get human-readable skill name (e.g., 'Sleight Of Hand')."""
        return self.value.replace("_", " ").title()


_SKILL_ABILITIES: dict[Skill, Ability] = {
    Skill.ATHLETICS: Ability.STR,
    Skill.ACROBATICS: Ability.DEX,
    Skill.SLEIGHT_OF_HAND: Ability.DEX,
    Skill.STEALTH: Ability.DEX,
    Skill.ARCANA: Ability.INT,
    Skill.HISTORY: Ability.INT,
    Skill.INVESTIGATION: Ability.INT,
    Skill.NATURE: Ability.INT,
    Skill.RELIGION: Ability.INT,
    Skill.ANIMAL_HANDLING: Ability.WIS,
    Skill.INSIGHT: Ability.WIS,
    Skill.MEDICINE: Ability.WIS,
    Skill.PERCEPTION: Ability.WIS,
    Skill.SURVIVAL: Ability.WIS,
    Skill.DECEPTION: Ability.CHA,
    Skill.INTIMIDATION: Ability.CHA,
    Skill.PERFORMANCE: Ability.CHA,
    Skill.PERSUASION: Ability.CHA,
}


class DamageType(StrEnum):
    """D&D 5E damage types."""

    ACID = "acid"
    BLUDGEONING = "bludgeoning"
    COLD = "cold"
    FIRE = "fire"
    FORCE = "force"
    LIGHTNING = "lightning"
    NECROTIC = "necrotic"
    PIERCING = "piercing"
    POISON = "poison"
    PSYCHIC = "psychic"
    RADIANT = "radiant"
    SLASHING = "slashing"
    THUNDER = "thunder"


class Condition(StrEnum):
    """D&D 5E conditions that can affect creatures."""

    BLINDED = "blinded"
    CHARMED = "charmed"
    DEAFENED = "deafened"
    EXHAUSTION = "exhaustion"
    FRIGHTENED = "frightened"
    GRAPPLED = "grappled"
    INCAPACITATED = "incapacitated"
    INVISIBLE = "invisible"
    PARALYZED = "paralyzed"
    PETRIFIED = "petrified"
    POISONED = "poisoned"
    PRONE = "prone"
    RESTRAINED = "restrained"
    STUNNED = "stunned"
    UNCONSCIOUS = "unconscious"


class Size(StrEnum):
    """D&D 5E creature sizes."""

    TINY = "tiny"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    HUGE = "huge"
    GARGANTUAN = "gargantuan"

    @property
    def space_feet(self) -> int:
        """Get the space controlled by a creature of this size in feet.

        Returns:
            Space in feet (e.g., 5 for Medium).
        """
        sizes = {
            Size.TINY: 2,
            Size.SMALL: 5,
            Size.MEDIUM: 5,
            Size.LARGE: 10,
            Size.HUGE: 15,
            Size.GARGANTUAN: 20,
        }
        return sizes[self]


class CreatureType(StrEnum):
    """D&D 5E creature types."""

    ABERRATION = "aberration"
    BEAST = "beast"
    CELESTIAL = "celestial"
    CONSTRUCT = "construct"
    DRAGON = "dragon"
    ELEMENTAL = "elemental"
    FEY = "fey"
    FIEND = "fiend"
    GIANT = "giant"
    HUMANOID = "humanoid"
    MONSTROSITY = "monstrosity"
    OOZE = "ooze"
    PLANT = "plant"
    UNDEAD = "undead"


class MonsterBehavior(StrEnum):
    """Combat temperament of a monster template."""

    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    COWARDLY = "cowardly"
    TACTICAL = "tactical"
    SUPPORT = "support"


class CharacterClass(StrEnum):
    """D&D 5E character classes."""

    BARBARIAN = "barbarian"
    BARD = "bard"
    CLERIC = "cleric"
    DRUID = "druid"
    FIGHTER = "fighter"
    MONK = "monk"
    PALADIN = "paladin"
    RANGER = "ranger"
    ROGUE = "rogue"
    SORCERER = "sorcerer"
    WARLOCK = "warlock"
    WIZARD = "wizard"

    @property
    def is_spellcaster(self) -> bool:
        """Whether the class casts spells (full, half, or pact casters)."""
        return self in _SPELLCASTERS


_SPELLCASTERS = frozenset(
    {
        CharacterClass.BARD,
        CharacterClass.CLERIC,
        CharacterClass.DRUID,
        CharacterClass.PALADIN,
        CharacterClass.RANGER,
        CharacterClass.SORCERER,
        CharacterClass.WARLOCK,
        CharacterClass.WIZARD,
    }
)


# =============================================================================
# Items
# =============================================================================


class ItemType(StrEnum):
    """Broad item categories used by inventories and shops."""

    WEAPON = "weapon"
    ARMOR = "armor"
    SHIELD = "shield"
    CONSUMABLE = "consumable"
    TOOL = "tool"
    KEY = "key"
    QUEST_ITEM = "quest_item"
    MAGIC_ITEM = "magic_item"
    TREASURE = "treasure"
    MISCELLANEOUS = "miscellaneous"


class Rarity(StrEnum):
    """D&D 5E item rarities."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    VERY_RARE = "very_rare"
    LEGENDARY = "legendary"
    ARTIFACT = "artifact"

    @property
    def display_name(self) -> str:
        """Get human-readable rarity name (e.g., 'Very Rare')."""
        return self.value.replace("_", " ").title()


class WeaponCategory(StrEnum):
    """Weapon training categories."""

    SIMPLE_MELEE = "simple_melee"
    SIMPLE_RANGED = "simple_ranged"
    MARTIAL_MELEE = "martial_melee"
    MARTIAL_RANGED = "martial_ranged"

    @property
    def is_ranged(self) -> bool:
        """Whether weapons of this category attack at range."""
        return self in (WeaponCategory.SIMPLE_RANGED, WeaponCategory.MARTIAL_RANGED)


class WeaponProperty(StrEnum):
    """D&D 5E weapon properties."""

    AMMUNITION = "ammunition"
    FINESSE = "finesse"
    HEAVY = "heavy"
    LIGHT = "light"
    LOADING = "loading"
    REACH = "reach"
    SPECIAL = "special"
    THROWN = "thrown"
    TWO_HANDED = "two_handed"
    VERSATILE = "versatile"


class ArmorCategory(StrEnum):
    """Armor training categories."""

    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"
    SHIELD = "shield"


# =============================================================================
# Item Effects
# =============================================================================


class UsageType(StrEnum):
    """Charge cadence of a magic item effect."""

    PASSIVE = "passive"
    UNLIMITED = "unlimited"
    DAILY = "daily"
    LONG_REST = "long_rest"
    CHARGES = "charges"
    CONSUMABLE = "consumable"

    @property
    def is_limited(self) -> bool:
        """Whether effects with this cadence track charges."""
        return self not in (UsageType.PASSIVE, UsageType.UNLIMITED)


class BonusStat(StrEnum):
    """Derived statistics a stat bonus effect can raise."""

    ARMOR_CLASS = "armor_class"
    ATTACK_ROLLS = "attack_rolls"
    DAMAGE_ROLLS = "damage_rolls"
    SAVING_THROWS = "saving_throws"
    SPELL_ATTACK = "spell_attack"
    SPELL_DC = "spell_dc"
    INITIATIVE = "initiative"
    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    CONSTITUTION = "constitution"
    INTELLIGENCE = "intelligence"
    WISDOM = "wisdom"
    CHARISMA = "charisma"

    @property
    def display_name(self) -> str:
        """Get human-readable stat name (e.g., 'Armor Class')."""
        return self.value.replace("_", " ").title()


class RestType(StrEnum):
    """Types of rest in D&D 5E."""

    SHORT_REST = "short_rest"
    LONG_REST = "long_rest"


class SkillBonusType(StrEnum):
    """How a skill bonus effect improves a skill."""

    FLAT_BONUS = "flat_bonus"
    ADVANTAGE = "advantage"
    PROFICIENCY = "proficiency"
    EXPERTISE = "expertise"
    AUTO_SUCCESS = "auto_success"


class RollBonusType(StrEnum):
    """How a bonus roll effect improves a d20 roll."""

    FLAT_BONUS = "flat_bonus"
    BONUS_DICE = "bonus_dice"
    ADVANTAGE = "advantage"
    REROLL = "reroll"
    AUTO_SUCCESS = "auto_success"


class RollTarget(StrEnum):
    """Which rolls a bonus roll effect applies to."""

    ANY = "any"
    ATTACK = "attack"
    SAVING_THROW = "saving_throw"
    ABILITY_CHECK = "ability_check"
    DAMAGE = "damage"
    SPECIFIC_SKILL = "specific_skill"


class ReductionType(StrEnum):
    """How a damage reduction effect reduces incoming damage."""

    FLAT = "flat"
    PERCENTAGE = "percentage"
    HALVE = "halve"
    NEGATE_CRIT = "negate_crit"


class MovementType(StrEnum):
    """Movement change granted by a movement effect."""

    SPEED_BONUS = "speed_bonus"
    SPEED_SET = "speed_set"
    SPEED_DOUBLE = "speed_double"
    FLYING = "flying"
    SWIMMING = "swimming"
    CLIMBING = "climbing"
    BURROWING = "burrowing"
    WATER_WALKING = "water_walking"
    SPIDER_CLIMB = "spider_climb"
    JUMP_BONUS = "jump_bonus"
    IGNORE_DIFFICULT_TERRAIN = "ignore_difficult_terrain"

    @property
    def is_movement_mode(self) -> bool:
        """Whether this grants a new mode of movement with its own speed."""
        return self in (
            MovementType.FLYING,
            MovementType.SWIMMING,
            MovementType.CLIMBING,
            MovementType.BURROWING,
        )


# =============================================================================
# Puzzles
# =============================================================================


class MiniGameType(StrEnum):
    """Presentation style of a trial mini-game."""

    SEARCH = "search"
    EXAMINE = "examine"
    DECODE = "decode"
    ALIGNMENT = "alignment"
    TIMING = "timing"
    DIALOGUE = "dialogue"
    MECHANISM = "mechanism"
    CHOICE = "choice"
    COMBAT = "combat"
    SKILL_CHECK = "skill_check"


# =============================================================================
# Token Matching
# =============================================================================

E = TypeVar("E", bound=StrEnum)


def parse_token(enum_cls: type[E], token: object) -> E | None:
    """Match a content token against an enumeration, case-insensitively.

    Spaces and hyphens are treated as underscores, so ``"Sleight of Hand"``,
    ``"sleight-of-hand"`` and ``"SLEIGHT_OF_HAND"`` all match the same member.
    Both member values and member names are accepted.

    Args:
        enum_cls: The enumeration to match against.
        token: Raw token from a content document.

    Returns:
        The matching member, or None if the token is not recognized.
    """
    if not isinstance(token, str):
        return None
    normalized = token.strip().lower().replace("-", "_").replace(" ", "_")
    if not normalized:
        return None
    for member in enum_cls:
        if normalized in (member.value, member.name.lower()):
            return member
    return None


__all__ = [
    "Ability",
    "Skill",
    "DamageType",
    "Condition",
    "Size",
    "CreatureType",
    "MonsterBehavior",
    "CharacterClass",
    "ItemType",
    "Rarity",
    "WeaponCategory",
    "WeaponProperty",
    "ArmorCategory",
    "UsageType",
    "BonusStat",
    "RestType",
    "SkillBonusType",
    "RollBonusType",
    "RollTarget",
    "ReductionType",
    "MovementType",
    "MiniGameType",
    "parse_token",
]
