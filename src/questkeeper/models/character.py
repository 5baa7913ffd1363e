"""Pydantic V2 schema for the adventurers that interact with campaign content.

The content core only needs a narrow slice of a player character: a name,
a class for attunement requirements, skill modifiers for puzzle checks, and
a hit point pool that puzzle failures can damage. ``Adventurer`` provides
that slice; the protocols below describe it for callers that bring their
own character type.
"""

from __future__ import annotations

from typing import Annotated, Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from questkeeper.core.constants import MAX_CHARACTER_LEVEL, MIN_CHARACTER_LEVEL
from questkeeper.models.enums import Ability, CharacterClass, Skill


# =============================================================================
# Validators and Type Definitions
# =============================================================================


def calculate_modifier(score: int) -> int:
    """Calculate the ability modifier from an ability score.

    The modifier is calculated as: (score - 10) // 2

    Args:
        score: The ability score (1-30).

    Returns:
        The ability modifier (-5 to +10).

    Example:
        >>> calculate_modifier(10)
        0
        >>> calculate_modifier(18)
        4
        >>> calculate_modifier(7)
        -2
    """
    return (score - 10) // 2


def level_to_proficiency_bonus(level: int) -> int:
    """Proficiency bonus for a total character level (+2 at 1st, +6 at 17th)."""
    return (level - 1) // 4 + 2


AbilityScore = Annotated[int, Field(ge=1, le=30, description="Ability score (1-30)")]


# =============================================================================
# Capability Protocols
# =============================================================================


@runtime_checkable
class AttunementCandidate(Protocol):
    """A character that can attune to magic items."""

    @property
    def name(self) -> str: ...

    @property
    def character_class(self) -> CharacterClass: ...


@runtime_checkable
class SkillCheckSubject(Protocol):
    """A character that can attempt a mini-game skill check."""

    @property
    def name(self) -> str: ...

    def skill_modifier(self, skill: Skill) -> int: ...

    def take_damage(self, amount: int) -> int: ...


# =============================================================================
# Adventurer
# =============================================================================


class Adventurer(BaseModel):
    """A player character as seen by the content rule engines.

    Attributes:
        name: Character name; attunement is tracked by name.
        character_class: Class used for attunement requirements.
        level: Total character level (1-20).
        strength: Strength ability score.
        dexterity: Dexterity ability score.
        constitution: Constitution ability score.
        intelligence: Intelligence ability score.
        wisdom: Wisdom ability score.
        charisma: Charisma ability score.
        skill_proficiencies: Skills the character adds proficiency to.
        max_hit_points: Maximum hit points.
        current_hit_points: Current hit points (defaults to maximum).

    Example:
        >>> hero = Adventurer(name="Ada", character_class=CharacterClass.WIZARD)
        >>> hero.skill_modifier(Skill.ARCANA)
        0
    """

    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        validate_assignment=True,
    )

    name: str = Field(min_length=1, max_length=100, description="Character name")
    character_class: CharacterClass = Field(
        default=CharacterClass.FIGHTER,
        description="Character class",
    )
    level: int = Field(
        default=MIN_CHARACTER_LEVEL,
        ge=MIN_CHARACTER_LEVEL,
        le=MAX_CHARACTER_LEVEL,
        description="Total character level",
    )
    strength: AbilityScore = 10
    dexterity: AbilityScore = 10
    constitution: AbilityScore = 10
    intelligence: AbilityScore = 10
    wisdom: AbilityScore = 10
    charisma: AbilityScore = 10
    skill_proficiencies: frozenset[Skill] = Field(
        default_factory=frozenset,
        description="Proficient skills",
    )
    max_hit_points: int = Field(default=10, ge=1, description="Maximum HP")
    current_hit_points: int = Field(default=10, ge=0, description="Current HP")

    @model_validator(mode="before")
    @classmethod
    def default_current_to_max(cls, data: Any) -> Any:
        """Start at full health when current HP is not given."""
        if isinstance(data, dict) and "current_hit_points" not in data:
            return {**data, "current_hit_points": data.get("max_hit_points", 10)}
        return data

    @computed_field  # type: ignore[prop-decorator]
    @property
    def proficiency_bonus(self) -> int:
        """Calculate proficiency bonus based on level.

        Returns:
            Proficiency bonus (2-6 based on level).
        """
        return level_to_proficiency_bonus(self.level)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_conscious(self) -> bool:
        """Check if character is conscious (HP > 0)."""
        return self.current_hit_points > 0

    def ability_score(self, ability: Ability) -> int:
        """Get the raw score for an ability."""
        return getattr(self, ability.value)

    def ability_modifier(self, ability: Ability) -> int:
        """Get the modifier for an ability score."""
        return calculate_modifier(self.ability_score(ability))

    def skill_modifier(self, skill: Skill) -> int:
        """Calculate a skill check bonus.

        Args:
            skill: The skill being checked.

        Returns:
            Ability modifier plus proficiency bonus when proficient.
        """
        modifier = self.ability_modifier(skill.ability)
        if skill in self.skill_proficiencies:
            modifier += self.proficiency_bonus
        return modifier

    def take_damage(self, amount: int) -> int:
        """Reduce current hit points, never below zero.

        Args:
            amount: Damage to apply; negative values are treated as zero.

        Returns:
            The hit points actually lost.
        """
        lost = min(max(0, amount), self.current_hit_points)
        self.current_hit_points -= lost
        return lost

    def heal(self, amount: int) -> int:
        """Restore hit points up to the maximum.

        Returns:
            The hit points actually restored.
        """
        restored = min(max(0, amount), self.max_hit_points - self.current_hit_points)
        self.current_hit_points += restored
        return restored


__all__ = [
    "calculate_modifier",
    "level_to_proficiency_bonus",
    "AbilityScore",
    "AttunementCandidate",
    "SkillCheckSubject",
    "Adventurer",
]
