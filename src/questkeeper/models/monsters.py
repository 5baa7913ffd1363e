"""Pydantic V2 schemas for monster templates and their combat instances.

A ``MonsterTemplate`` is the immutable stat block authored in
``monsters.yaml``. A ``MonsterInstance`` is one combat-ready creature
spawned from a template: it carries its own identifier, hit points and
conditions, and never writes back to the template.
"""

from __future__ import annotations

from fractions import Fraction
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from questkeeper.core.constants import (
    DEFAULT_ALIGNMENT,
    DEFAULT_ARMOR_CLASS,
    DEFAULT_ATTACK_BONUS,
    DEFAULT_DAMAGE_DICE,
    DEFAULT_EXPERIENCE,
    DEFAULT_HIT_POINTS,
    DEFAULT_SPEED,
)
from questkeeper.models.enums import Ability, Condition, CreatureType, MonsterBehavior, Size


if TYPE_CHECKING:
    from questkeeper.engine.dice import D20Result, DiceResult, DiceRoller


# =============================================================================
# Challenge Rating Helpers
# =============================================================================


def cr_to_float(cr: str | float) -> float:
    """Convert a challenge rating to a float.

    Args:
        cr: Challenge rating (e.g., "1/4", "5", 0.5).

    Returns:
        Numeric challenge rating.

    Raises:
        ValueError: If the rating is not a number or fraction.
    """
    if isinstance(cr, str):
        if "/" in cr:
            num, denom = cr.split("/")
            return int(num) / int(denom)
        return float(cr)
    return float(cr)


def cr_to_proficiency_bonus(cr: float) -> int:
    """Calculate proficiency bonus from challenge rating.

    Args:
        cr: Numeric challenge rating.

    Returns:
        Proficiency bonus (2-9 based on CR).
    """
    if cr < 5:
        return 2
    elif cr < 9:
        return 3
    elif cr < 13:
        return 4
    elif cr < 17:
        return 5
    elif cr < 21:
        return 6
    elif cr < 25:
        return 7
    elif cr < 29:
        return 8
    else:
        return 9


def format_challenge_rating(cr: float) -> str:
    """Render a challenge rating the way stat blocks print it ("1/4", "2")."""
    if cr.is_integer():
        return str(int(cr))
    fraction = Fraction(cr).limit_denominator(8)
    return f"{fraction.numerator}/{fraction.denominator}"


# =============================================================================
# Monster Template
# =============================================================================


class AbilityModifiers(BaseModel):
    """The six ability modifiers printed in a monster stat block."""

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    strength: int = 0
    dexterity: int = 0
    constitution: int = 0
    intelligence: int = 0
    wisdom: int = 0
    charisma: int = 0

    def get(self, ability: Ability) -> int:
        """Get the modifier for an ability."""
        return getattr(self, ability.value)


class MonsterTemplate(BaseModel):
    """Immutable monster stat block.

    Attributes:
        id: Unique template identifier.
        name: Display name.
        size: Creature size.
        creature_type: Creature type.
        armor_class: Armor class.
        max_hit_points: Hit point maximum for every instance.
        abilities: Ability modifiers.
        alignment: Free-text alignment.
        speed: Walking speed in feet.
        challenge_rating: Challenge rating (fractional below 1).
        experience: Experience awarded for defeating one instance.
        attack_bonus: Bonus to hit for the basic attack.
        damage_dice: Damage expression for the basic attack.
        description: Narrative description.
        special_abilities: Names of special abilities.
        behavior: Combat temperament, if authored.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    id: str = Field(min_length=1, description="Unique identifier")
    name: str = Field(description="Monster name")
    size: Size = Size.MEDIUM
    creature_type: CreatureType = CreatureType.HUMANOID
    armor_class: int = Field(default=DEFAULT_ARMOR_CLASS, ge=0)
    max_hit_points: int = Field(default=DEFAULT_HIT_POINTS, ge=1)
    abilities: AbilityModifiers = Field(default_factory=AbilityModifiers)
    alignment: str = DEFAULT_ALIGNMENT
    speed: int = Field(default=DEFAULT_SPEED, ge=0)
    challenge_rating: float = Field(default=0.0, ge=0)
    experience: int = Field(default=DEFAULT_EXPERIENCE, ge=0)
    attack_bonus: int = DEFAULT_ATTACK_BONUS
    damage_dice: str = DEFAULT_DAMAGE_DICE
    description: str = ""
    special_abilities: tuple[str, ...] = ()
    behavior: MonsterBehavior | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def proficiency_bonus(self) -> int:
        """Proficiency bonus implied by the challenge rating."""
        return cr_to_proficiency_bonus(self.challenge_rating)

    @property
    def challenge_rating_display(self) -> str:
        """Challenge rating as printed in a stat block."""
        return format_challenge_rating(self.challenge_rating)

    def has_special_ability(self, name: str) -> bool:
        """Check for a special ability by name, case-insensitively."""
        wanted = name.strip().lower()
        return any(ability.lower() == wanted for ability in self.special_abilities)


# =============================================================================
# Combat Capability
# =============================================================================


@runtime_checkable
class Combatant(Protocol):
    """What the combat layer needs from any participant."""

    @property
    def name(self) -> str: ...

    @property
    def armor_class(self) -> int: ...

    @property
    def current_hit_points(self) -> int: ...

    @property
    def max_hit_points(self) -> int: ...

    @property
    def is_alive(self) -> bool: ...

    @property
    def initiative_modifier(self) -> int: ...

    def take_damage(self, amount: int) -> int: ...

    def heal(self, amount: int) -> int: ...


# =============================================================================
# Monster Instance
# =============================================================================


class MonsterInstance(BaseModel):
    """A combat-ready creature spawned from a template.

    Attributes:
        instance_id: Identifier unique to this instance.
        template: Private copy of the template stat block.
        current_hit_points: Remaining hit points (0..template maximum).
        conditions: Conditions currently affecting this creature.
    """

    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        validate_assignment=True,
    )

    instance_id: str = Field(min_length=1)
    template: MonsterTemplate
    current_hit_points: int = Field(ge=0)
    conditions: set[Condition] = Field(default_factory=set)

    @model_validator(mode="after")
    def hit_points_within_maximum(self) -> MonsterInstance:
        """Ensure current HP never exceeds the template maximum."""
        if self.current_hit_points > self.template.max_hit_points:
            msg = (
                f"current_hit_points {self.current_hit_points} exceeds "
                f"maximum {self.template.max_hit_points}"
            )
            raise ValueError(msg)
        return self

    @property
    def template_id(self) -> str:
        return self.template.id

    @property
    def name(self) -> str:
        return self.template.name

    @property
    def armor_class(self) -> int:
        return self.template.armor_class

    @property
    def max_hit_points(self) -> int:
        return self.template.max_hit_points

    @property
    def is_alive(self) -> bool:
        """Whether the creature still has hit points."""
        return self.current_hit_points > 0

    @property
    def is_bloodied(self) -> bool:
        """Whether the creature is at or below half its hit points."""
        return self.current_hit_points * 2 <= self.max_hit_points

    @property
    def initiative_modifier(self) -> int:
        """Initiative bonus (the Dexterity modifier)."""
        return self.template.abilities.dexterity

    def take_damage(self, amount: int) -> int:
        """Apply damage, stopping at zero hit points.

        Args:
            amount: Damage to apply; negative values are treated as zero.

        Returns:
            The hit points actually lost.
        """
        lost = min(max(0, amount), self.current_hit_points)
        self.current_hit_points -= lost
        return lost

    def heal(self, amount: int) -> int:
        """Restore hit points, never above the template maximum.

        Returns:
            The hit points actually restored.
        """
        restored = min(max(0, amount), self.max_hit_points - self.current_hit_points)
        self.current_hit_points += restored
        return restored

    def reset_hit_points(self) -> None:
        """Restore the creature to full health."""
        self.current_hit_points = self.max_hit_points

    def add_condition(self, condition: Condition) -> None:
        self.conditions.add(condition)

    def remove_condition(self, condition: Condition) -> None:
        self.conditions.discard(condition)

    def has_condition(self, condition: Condition) -> bool:
        return condition in self.conditions

    def roll_attack(self, roller: DiceRoller) -> D20Result:
        """Roll the basic attack using the template's attack bonus."""
        return roller.roll_attack(self.template.attack_bonus)

    def roll_damage(self, roller: DiceRoller, *, is_critical: bool = False) -> DiceResult:
        """Roll the basic attack's damage dice."""
        return roller.roll_damage(self.template.damage_dice, is_critical=is_critical)


__all__ = [
    "cr_to_float",
    "cr_to_proficiency_bonus",
    "format_challenge_rating",
    "AbilityModifiers",
    "MonsterTemplate",
    "Combatant",
    "MonsterInstance",
]
