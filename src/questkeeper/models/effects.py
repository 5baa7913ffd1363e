"""Magic item effects: a closed set of variants with shared charge tracking.

Every effect carries a usage cadence and, for limited cadences, a charge
counter. Variants differ only in what happens when they fire, and that is
decided in one place, ``activate_effect``, rather than by per-class
overrides. Add a variant by adding a model to ``ItemEffect`` and a branch
to ``_activation_text``.

Charge rules:
    * passive effects are always on and never consume charges;
    * unlimited effects can be activated any number of times;
    * daily and ``charges`` effects recharge on the daily (dawn) reset;
    * long-rest effects recharge on the long-rest reset;
    * consumable effects never recharge.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, Literal, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from questkeeper.core.exceptions import EffectDepletedError
from questkeeper.core.logging import get_logger
from questkeeper.models.enums import (
    Ability,
    BonusStat,
    DamageType,
    MovementType,
    ReductionType,
    RollBonusType,
    RollTarget,
    Skill,
    SkillBonusType,
    UsageType,
)


if TYPE_CHECKING:
    from questkeeper.engine.dice import DiceRoller


logger = get_logger(__name__)


class EffectUser(Protocol):
    """Anything with a name can trigger an effect."""

    @property
    def name(self) -> str: ...


# =============================================================================
# Shared Charge State
# =============================================================================


class EffectBase(BaseModel):
    """Fields and charge state machine shared by every effect variant.

    Attributes:
        id: Effect identifier, unique within its item.
        name: Display name used for lookup by name.
        description: Rules text.
        usage: Charge cadence.
        max_charges: Charge capacity; None for passive and unlimited effects.
        current_charges: Remaining charges; None for passive and unlimited effects.
        recharge_amount: Charges restored per reset; None restores to full.
    """

    model_config = ConfigDict(strict=True, extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    usage: UsageType = UsageType.PASSIVE
    max_charges: int | None = Field(default=None, ge=1)
    current_charges: int | None = Field(default=None, ge=0)
    recharge_amount: int | None = Field(default=None, ge=1)

    @model_validator(mode="before")
    @classmethod
    def fill_charge_defaults(cls, data: Any) -> Any:
        """Give limited effects one charge by default and start them full."""
        if not isinstance(data, dict):
            return data
        usage = data.get("usage", UsageType.PASSIVE)
        if isinstance(usage, UsageType) and usage.is_limited:
            max_charges = data.get("max_charges")
            if max_charges is None:
                max_charges = 1
            current = data.get("current_charges")
            return {
                **data,
                "max_charges": max_charges,
                "current_charges": max_charges if current is None else current,
            }
        return {**data, "max_charges": None, "current_charges": None}

    @model_validator(mode="after")
    def charges_within_capacity(self) -> EffectBase:
        """Ensure current charges never exceed capacity."""
        if (
            self.max_charges is not None
            and self.current_charges is not None
            and self.current_charges > self.max_charges
        ):
            msg = f"current_charges {self.current_charges} exceeds max_charges {self.max_charges}"
            raise ValueError(msg)
        return self

    @property
    def is_passive(self) -> bool:
        """Passive effects are always active and never activated."""
        return self.usage is UsageType.PASSIVE

    @property
    def is_limited(self) -> bool:
        """Whether the effect tracks charges."""
        return self.usage.is_limited

    @property
    def is_usable(self) -> bool:
        """Whether the effect can be activated right now."""
        if self.is_passive:
            return False
        if not self.is_limited:
            return True
        return (self.current_charges or 0) > 0

    @property
    def is_consumed(self) -> bool:
        """Whether a consumable effect has been used up."""
        return self.usage is UsageType.CONSUMABLE and self.current_charges == 0

    @property
    def charge_display(self) -> str:
        """Short charge summary, e.g. ``(2/3 charges)``."""
        if self.is_passive:
            return "(passive)"
        if not self.is_limited:
            return "(at will)"
        return f"({self.current_charges}/{self.max_charges} charges)"

    def consume(self) -> None:
        """Spend one charge.

        Raises:
            EffectDepletedError: If a limited effect has no charges left.
        """
        if not self.is_limited:
            return
        if not self.current_charges:
            raise EffectDepletedError(
                f"{self.name} has no charges remaining",
                details={"effect_id": self.id},
            )
        self.current_charges -= 1

    def add_charges(self, amount: int) -> int:
        """Add charges, clamped to capacity.

        Returns:
            The charges actually added.
        """
        if not self.is_limited or self.max_charges is None:
            return 0
        current = self.current_charges or 0
        added = min(max(0, amount), self.max_charges - current)
        self.current_charges = current + added
        return added

    def recharge(self) -> int:
        """Apply one recharge: ``recharge_amount`` charges, or back to full.

        Consumables never recharge.

        Returns:
            The charges actually restored.
        """
        if not self.is_limited or self.usage is UsageType.CONSUMABLE:
            return 0
        amount = self.recharge_amount if self.recharge_amount is not None else self.max_charges
        return self.add_charges(amount or 0)

    def reset_daily(self) -> int:
        """Dawn reset: recharges daily and ``charges`` effects."""
        if self.usage in (UsageType.DAILY, UsageType.CHARGES):
            return self.recharge()
        return 0

    def reset_long_rest(self) -> int:
        """Long-rest reset: recharges long-rest effects."""
        if self.usage is UsageType.LONG_REST:
            return self.recharge()
        return 0

    def duplicate(self) -> ItemEffect:
        """Deep copy, preserving current charge state."""
        return self.model_copy(deep=True)  # type: ignore[return-value]


# =============================================================================
# Variants
# =============================================================================


class TeleportEffect(EffectBase):
    """Magical short-range teleportation (e.g. a misty step)."""

    kind: Literal["teleport"] = "teleport"
    distance_feet: int = Field(default=30, ge=5)
    requires_sight: bool = True


class StatBonusEffect(EffectBase):
    """Flat bonus to a derived statistic, usually passive."""

    kind: Literal["stat_bonus"] = "stat_bonus"
    stat: BonusStat
    bonus: int = 1

    def applies_to(self, stat: BonusStat) -> bool:
        return self.stat is stat


class AbilityScoreEffect(EffectBase):
    """Sets an ability score to a fixed value unless it is already higher."""

    kind: Literal["ability_score"] = "ability_score"
    ability: Ability
    score: int = Field(ge=1, le=30)

    def effective_score(self, base_score: int) -> int:
        return max(base_score, self.score)


class ResistanceEffect(EffectBase):
    """Resistance to one damage type."""

    kind: Literal["resistance"] = "resistance"
    damage_type: DamageType


class SpellEffect(EffectBase):
    """Casts a spell from the item."""

    kind: Literal["spell"] = "spell"
    spell_name: str = Field(min_length=1)
    spell_level: int = Field(default=1, ge=0, le=9)
    save_dc: int | None = Field(default=None, ge=1)
    damage_dice: str | None = None
    damage_type: DamageType | None = None


class ExtraDamageEffect(EffectBase):
    """Extra damage dealt on a hit."""

    kind: Literal["extra_damage"] = "extra_damage"
    damage_dice: str = Field(min_length=1)
    damage_type: DamageType = DamageType.FIRE


class HealingEffect(EffectBase):
    """Restores hit points to the user."""

    kind: Literal["healing"] = "healing"
    healing_dice: str = Field(min_length=1)


class UtilityEffect(EffectBase):
    """Narrative utility power (light, feather fall, comprehend languages)."""

    kind: Literal["utility"] = "utility"
    outcome: str = ""


class SkillBonusEffect(EffectBase):
    """Improves skill checks: a flat bonus, advantage, or proficiency.

    A ``skill`` of None applies to every skill.
    """

    kind: Literal["skill_bonus"] = "skill_bonus"
    skill: Skill | None = None
    bonus_type: SkillBonusType = SkillBonusType.FLAT_BONUS
    bonus: int = 1

    def applies_to(self, skill: Skill) -> bool:
        return self.skill is None or self.skill is skill

    @property
    def grants_advantage(self) -> bool:
        return self.bonus_type is SkillBonusType.ADVANTAGE

    def calculate_bonus(self, proficiency_bonus: int, proficient: bool) -> int:
        """Bonus this effect adds to a check.

        Granted proficiency adds nothing when the character is already
        proficient. Expertise adds one proficiency bonus on top of existing
        proficiency, or two when the character has none.
        """
        match self.bonus_type:
            case SkillBonusType.FLAT_BONUS:
                return self.bonus
            case SkillBonusType.PROFICIENCY:
                return 0 if proficient else proficiency_bonus
            case SkillBonusType.EXPERTISE:
                return proficiency_bonus if proficient else 2 * proficiency_bonus
            case _:
                return 0


class BonusRollEffect(EffectBase):
    """Adds to a single roll when activated (a bardic-inspiration style boost)."""

    kind: Literal["bonus_roll"] = "bonus_roll"
    bonus_type: RollBonusType = RollBonusType.BONUS_DICE
    applies_to_roll: RollTarget = RollTarget.ANY
    skill: Skill | None = None
    flat_bonus: int = 0
    bonus_dice: str | None = None

    @model_validator(mode="after")
    def dice_when_rolling(self) -> BonusRollEffect:
        if self.bonus_type is RollBonusType.BONUS_DICE and not self.bonus_dice:
            raise ValueError("bonus_dice is required for bonus_dice rolls")
        return self

    def applies_to(self, target: RollTarget, skill: Skill | None = None) -> bool:
        if self.applies_to_roll is RollTarget.ANY:
            return True
        if self.applies_to_roll is RollTarget.SPECIFIC_SKILL:
            return target is RollTarget.ABILITY_CHECK and skill is not None and skill is self.skill
        return self.applies_to_roll is target


class DamageReductionEffect(EffectBase):
    """Reduces incoming damage, optionally only of one damage type."""

    kind: Literal["damage_reduction"] = "damage_reduction"
    reduction_type: ReductionType = ReductionType.FLAT
    amount: int = Field(default=0, ge=0)
    damage_type: DamageType | None = None

    def reduce(
        self,
        incoming: int,
        damage_type: DamageType | None = None,
        is_critical: bool = False,
    ) -> int:
        """Damage left after this effect applies; never below zero."""
        if self.damage_type is not None and damage_type is not self.damage_type:
            return incoming
        if not self.is_passive and not self.is_usable:
            return incoming
        match self.reduction_type:
            case ReductionType.FLAT:
                return max(0, incoming - self.amount)
            case ReductionType.PERCENTAGE:
                return max(0, incoming - incoming * self.amount // 100)
            case ReductionType.HALVE:
                return incoming // 2
            case ReductionType.NEGATE_CRIT:
                return incoming // 2 if is_critical else incoming
        return incoming


class MovementEffect(EffectBase):
    """Changes walking speed or grants a movement mode (boots, brooms, rings)."""

    kind: Literal["movement"] = "movement"
    movement_type: MovementType = MovementType.SPEED_BONUS
    speed: int = Field(default=0, ge=0)
    duration_minutes: int = Field(default=0, ge=0)
    hovering: bool = False

    def modified_speed(self, base_speed: int) -> int:
        match self.movement_type:
            case MovementType.SPEED_BONUS:
                return base_speed + self.speed
            case MovementType.SPEED_SET:
                return self.speed
            case MovementType.SPEED_DOUBLE:
                return base_speed * 2
        return base_speed

    @property
    def special_speed(self) -> int:
        """Speed of the granted movement mode, or 0 if none is granted."""
        return self.speed if self.movement_type.is_movement_mode else 0

    def grants(self, movement_type: MovementType) -> bool:
        return self.movement_type is movement_type


ItemEffect = Annotated[
    Union[
        TeleportEffect,
        StatBonusEffect,
        AbilityScoreEffect,
        ResistanceEffect,
        SpellEffect,
        ExtraDamageEffect,
        HealingEffect,
        UtilityEffect,
        SkillBonusEffect,
        BonusRollEffect,
        DamageReductionEffect,
        MovementEffect,
    ],
    Field(discriminator="kind"),
]
"""Closed union of effect variants, discriminated by ``kind``."""

EFFECT_KINDS: dict[str, type[EffectBase]] = {
    "teleport": TeleportEffect,
    "stat_bonus": StatBonusEffect,
    "ability_score": AbilityScoreEffect,
    "resistance": ResistanceEffect,
    "spell": SpellEffect,
    "extra_damage": ExtraDamageEffect,
    "healing": HealingEffect,
    "utility": UtilityEffect,
    "skill_bonus": SkillBonusEffect,
    "bonus_roll": BonusRollEffect,
    "damage_reduction": DamageReductionEffect,
    "movement": MovementEffect,
}


# =============================================================================
# Activation
# =============================================================================


def _signed(value: int) -> str:
    return f"+{value}" if value >= 0 else str(value)


def _activation_text(effect: EffectBase, user: EffectUser, roller: DiceRoller) -> str:
    """Describe what an effect does when it fires for ``user``."""
    who = user.name
    match effect:
        case SkillBonusEffect(skill=skill, bonus_type=bonus_type, bonus=bonus):
            target = skill.display_name if skill is not None else "all skill checks"
            match bonus_type:
                case SkillBonusType.FLAT_BONUS:
                    return f"{who} gains {_signed(bonus)} to {target}."
                case SkillBonusType.ADVANTAGE:
                    return f"{who} has advantage on {target}."
                case SkillBonusType.AUTO_SUCCESS:
                    return f"{who} automatically succeeds on {target}."
            return f"{who} gains {bonus_type.value} in {target}."
        case BonusRollEffect(bonus_type=RollBonusType.FLAT_BONUS, flat_bonus=bonus):
            return f"{who} gains {_signed(bonus)} to their roll!"
        case BonusRollEffect(bonus_type=RollBonusType.BONUS_DICE, bonus_dice=dice):
            return f"{who} rolls {dice} for an extra {roller.roll(dice).total}!"
        case BonusRollEffect(bonus_type=RollBonusType.ADVANTAGE):
            return f"{who} gains advantage on their next roll!"
        case BonusRollEffect(bonus_type=RollBonusType.REROLL):
            return f"{who} may reroll and take the new result!"
        case BonusRollEffect(bonus_type=RollBonusType.AUTO_SUCCESS):
            return f"{who}'s next roll automatically succeeds!"
        case DamageReductionEffect(reduction_type=reduction, amount=amount, damage_type=damage_type):
            of = f"{damage_type.value} damage" if damage_type is not None else "damage"
            match reduction:
                case ReductionType.FLAT:
                    return f"{who} reduces incoming {of} by {amount}."
                case ReductionType.PERCENTAGE:
                    return f"{who} reduces incoming {of} by {amount}%."
                case ReductionType.HALVE:
                    return f"{who} halves incoming {of}."
            return f"{who} turns critical hits into normal hits."
        case MovementEffect(movement_type=movement, speed=speed, hovering=hovering):
            match movement:
                case MovementType.SPEED_BONUS:
                    return f"{who}'s speed increases by {speed} feet."
                case MovementType.SPEED_SET:
                    return f"{who}'s speed becomes {speed} feet."
                case MovementType.SPEED_DOUBLE:
                    return f"{who}'s speed is doubled."
            if movement.is_movement_mode:
                text = f"{who} gains a {movement.value} speed of {speed} feet"
                return f"{text} and can hover." if hovering else f"{text}."
            return f"{who} gains {movement.value.replace('_', ' ')}."
        case TeleportEffect(distance_feet=distance, requires_sight=sight):
            where = "an unoccupied space they can see" if sight else "an unoccupied space"
            return f"{who} teleports up to {distance} feet to {where}."
        case StatBonusEffect(stat=stat, bonus=bonus):
            return f"{who} benefits from {_signed(bonus)} to {stat.display_name}."
        case AbilityScoreEffect(ability=ability, score=score):
            return f"{who}'s {ability.full_name} score becomes {score}."
        case ResistanceEffect(damage_type=damage_type):
            return f"{who} has resistance to {damage_type.value} damage."
        case SpellEffect(spell_name=spell, save_dc=save_dc, damage_dice=dice):
            text = f"{who} casts {spell}!"
            if dice:
                text += f" ({roller.roll(dice).total} damage)"
            if save_dc is not None:
                text += f" Save DC {save_dc}."
            return text
        case ExtraDamageEffect(damage_dice=dice, damage_type=damage_type):
            return f"{who} deals {roller.roll(dice).total} extra {damage_type.value} damage."
        case HealingEffect(healing_dice=dice):
            amount = roller.roll(dice).total
            heal = getattr(user, "heal", None)
            if callable(heal):
                amount = heal(amount)
            return f"{who} regains {amount} hit points."
        case UtilityEffect(outcome=outcome):
            return f"{who} uses {effect.name}. {outcome}".strip()
        case _:
            return f"{who} uses {effect.name}."


def activate_effect(
    effect: EffectBase,
    user: EffectUser,
    roller: DiceRoller | None = None,
) -> str:
    """Fire one effect for a user, spending a charge if it is limited.

    Passive effects are not fired; the returned text describes their
    standing benefit instead.

    Args:
        effect: The effect to activate.
        user: The character activating it.
        roller: Dice roller for effects with dice; defaults to the shared
            roller.

    Returns:
        Human-readable description of what happened.

    Raises:
        EffectDepletedError: If a limited effect has no charges left.
    """
    if roller is None:
        from questkeeper.engine.dice import get_default_roller

        roller = get_default_roller()
    if effect.is_passive:
        return _activation_text(effect, user, roller)
    if not effect.is_usable:
        raise EffectDepletedError(
            f"{effect.name} cannot be used right now. {effect.charge_display}",
            details={"effect_id": effect.id},
        )
    text = _activation_text(effect, user, roller)
    effect.consume()
    logger.debug(
        "Effect activated",
        effect_id=effect.id,
        user=user.name,
        charges_left=effect.current_charges,
    )
    if effect.is_limited:
        text = f"{text} {effect.charge_display}"
    return text


# =============================================================================
# Effect Factories
# =============================================================================


def plus_one_weapon_effects(weapon_name: str = "weapon") -> list[ItemEffect]:
    """Passive +1 to attack and damage rolls."""
    slug = weapon_name.lower().replace(" ", "_")
    return [
        StatBonusEffect(
            id=f"{slug}_plus1_attack",
            name="+1 Attack",
            description="You have a +1 bonus to attack rolls made with this magic weapon.",
            stat=BonusStat.ATTACK_ROLLS,
            bonus=1,
        ),
        StatBonusEffect(
            id=f"{slug}_plus1_damage",
            name="+1 Damage",
            description="You have a +1 bonus to damage rolls made with this magic weapon.",
            stat=BonusStat.DAMAGE_ROLLS,
            bonus=1,
        ),
    ]


__all__ = [
    "EffectUser",
    "EffectBase",
    "TeleportEffect",
    "StatBonusEffect",
    "AbilityScoreEffect",
    "ResistanceEffect",
    "SpellEffect",
    "ExtraDamageEffect",
    "HealingEffect",
    "UtilityEffect",
    "SkillBonusEffect",
    "BonusRollEffect",
    "DamageReductionEffect",
    "MovementEffect",
    "ItemEffect",
    "EFFECT_KINDS",
    "activate_effect",
    "plus_one_weapon_effects",
]
