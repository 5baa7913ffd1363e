"""Pydantic V2 schemas for items: mundane gear, weapons, armor, and magic items.

``MagicItem`` composes item effects and owns the attunement state machine:

    Unattuned --attune(c)--> AttunedTo(c) --unattune()--> Unattuned

Refused transitions raise; ordinary outcomes such as "already attuned" or
"nothing usable" come back as ``ItemActionResult`` values with
``ActionStatus.INFO``.
"""

from __future__ import annotations

import re
from enum import StrEnum
from typing import TYPE_CHECKING, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from questkeeper.core.exceptions import (
    AlreadyAttunedError,
    AttunementRefusedError,
    EffectIndexError,
    ItemUsageError,
    ValidationError,
)
from questkeeper.core.logging import get_logger
from questkeeper.models.effects import (
    AbilityScoreEffect,
    DamageReductionEffect,
    ExtraDamageEffect,
    HealingEffect,
    ItemEffect,
    MovementEffect,
    ResistanceEffect,
    SkillBonusEffect,
    SpellEffect,
    StatBonusEffect,
    TeleportEffect,
    UtilityEffect,
    activate_effect,
    plus_one_weapon_effects,
)
from questkeeper.models.enums import (
    Ability,
    ArmorCategory,
    BonusStat,
    DamageType,
    ItemType,
    MovementType,
    Rarity,
    Skill,
    UsageType,
    WeaponCategory,
    WeaponProperty,
)


if TYPE_CHECKING:
    from questkeeper.engine.dice import DiceRoller
    from questkeeper.models.character import AttunementCandidate


logger = get_logger(__name__)

SPELLCASTER_REQUIREMENT = "spellcaster"


def slugify(name: str) -> str:
    """Derive an identifier from a display name ("Flame Tongue" -> "flame_tongue")."""
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")


# =============================================================================
# Base Item
# =============================================================================


class Item(BaseModel):
    """A mundane item.

    Attributes:
        id: Unique item identifier.
        name: Display name.
        item_type: Broad category.
        rarity: Rarity.
        description: Narrative description.
        weight: Weight in pounds.
        value: Value in gold pieces.
        stackable: Whether identical items share an inventory slot.
        quest_item: Whether the item is plot-critical.
    """

    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        validate_assignment=True,
    )

    id: str = Field(min_length=1, description="Unique identifier")
    name: str = Field(min_length=1, description="Item name")
    item_type: ItemType = ItemType.MISCELLANEOUS
    rarity: Rarity = Rarity.COMMON
    description: str = ""
    weight: float = Field(default=0.0, ge=0)
    value: int = Field(default=0, ge=0)
    stackable: bool = False
    quest_item: bool = False

    def duplicate(self) -> Item:
        """Deep copy of this item."""
        return self.model_copy(deep=True)


class Weapon(Item):
    """A weapon.

    Attributes:
        damage_dice_count: Number of damage dice.
        damage_die_size: Faces on each damage die.
        damage_type: Damage type dealt.
        category: Training category.
        normal_range: Normal range in feet, for ranged or thrown weapons.
        long_range: Long range in feet.
        properties: Weapon properties.
        versatile_die_size: Die size when wielded two-handed.
        attack_bonus: Magic bonus to attack rolls.
        damage_bonus: Magic bonus to damage rolls.
    """

    item_type: ItemType = ItemType.WEAPON
    damage_dice_count: int = Field(default=1, ge=1)
    damage_die_size: int = Field(default=4, ge=1)
    damage_type: DamageType = DamageType.SLASHING
    category: WeaponCategory = WeaponCategory.SIMPLE_MELEE
    normal_range: int | None = Field(default=None, ge=1)
    long_range: int | None = Field(default=None, ge=1)
    properties: frozenset[WeaponProperty] = Field(default_factory=frozenset)
    versatile_die_size: int | None = Field(default=None, ge=1)
    attack_bonus: int = 0
    damage_bonus: int = 0

    @property
    def damage_expression(self) -> str:
        """Damage dice expression including the damage bonus ("1d8+1")."""
        expression = f"{self.damage_dice_count}d{self.damage_die_size}"
        if self.damage_bonus:
            expression += f"{self.damage_bonus:+d}"
        return expression

    @property
    def is_ranged(self) -> bool:
        return self.category.is_ranged or self.normal_range is not None

    def has_property(self, prop: WeaponProperty) -> bool:
        return prop in self.properties


class Armor(Item):
    """A suit of armor or a shield.

    Attributes:
        base_ac: Base armor class (the bonus, for shields).
        category: Armor category.
        strength_requirement: Minimum Strength to avoid a speed penalty.
        stealth_disadvantage: Whether Stealth checks have disadvantage.
        magic_bonus: Magic bonus to AC, for magic armor.
    """

    item_type: ItemType = ItemType.ARMOR
    base_ac: int = Field(default=10, ge=0)
    category: ArmorCategory = ArmorCategory.LIGHT
    strength_requirement: int | None = Field(default=None, ge=1)
    stealth_disadvantage: bool = False
    magic_bonus: int | None = None

    @property
    def is_shield(self) -> bool:
        return self.category is ArmorCategory.SHIELD

    def armor_class(self, dexterity_modifier: int = 0) -> int:
        """Armor class granted to a wearer.

        Args:
            dexterity_modifier: Wearer's Dexterity modifier.

        Returns:
            AC for armor; the AC bonus for shields.
        """
        bonus = self.magic_bonus or 0
        match self.category:
            case ArmorCategory.LIGHT:
                return self.base_ac + dexterity_modifier + bonus
            case ArmorCategory.MEDIUM:
                return self.base_ac + min(dexterity_modifier, 2) + bonus
            case _:
                return self.base_ac + bonus


# =============================================================================
# Magic Items
# =============================================================================


class ActionStatus(StrEnum):
    """Outcome class of an item action that did not raise."""

    SUCCESS = "success"
    INFO = "info"


class ItemActionResult(NamedTuple):
    """Result of an attunement or usage call.

    Attributes:
        status: SUCCESS when state changed or an effect fired; INFO otherwise.
        message: Human-readable text for the player.
    """

    status: ActionStatus
    message: str

    @property
    def succeeded(self) -> bool:
        return self.status is ActionStatus.SUCCESS


class MagicItem(Item):
    """A magic item composed of effects, with optional attunement.

    Attributes:
        effects: Effects in activation order.
        requires_attunement: Whether effects are gated behind attunement.
        attunement_requirement: ``spellcaster`` or a class name, if restricted.
        attuned_to: Name of the attuned character, or None.
        base_item: Mundane item this magic item is built on, if any.
    """

    item_type: ItemType = ItemType.MAGIC_ITEM
    rarity: Rarity = Rarity.UNCOMMON
    effects: list[ItemEffect] = Field(default_factory=list)
    requires_attunement: bool = False
    attunement_requirement: str | None = None
    attuned_to: str | None = None
    base_item: str | None = None

    # -- effects ---------------------------------------------------------

    def add_effect(self, effect: ItemEffect) -> None:
        self.effects.append(effect)

    def remove_effect(self, effect: ItemEffect) -> bool:
        """Remove an effect; returns False if it was not on the item."""
        try:
            self.effects.remove(effect)
        except ValueError:
            return False
        return True

    @property
    def passive_effects(self) -> list[ItemEffect]:
        return [effect for effect in self.effects if effect.is_passive]

    @property
    def active_effects(self) -> list[ItemEffect]:
        return [effect for effect in self.effects if not effect.is_passive]

    @property
    def usable_effects(self) -> list[ItemEffect]:
        return [effect for effect in self.effects if effect.is_usable]

    @property
    def has_effects(self) -> bool:
        return bool(self.effects)

    @property
    def effect_count(self) -> int:
        return len(self.effects)

    @property
    def is_fully_consumed(self) -> bool:
        """Whether every consumable effect is spent (False with no effects)."""
        if not self.effects:
            return False
        return all(
            not effect.is_usable
            for effect in self.effects
            if effect.usage is UsageType.CONSUMABLE
        )

    # -- attunement ------------------------------------------------------

    @property
    def is_attuned(self) -> bool:
        return self.attuned_to is not None

    def is_attuned_to(self, character: AttunementCandidate | None) -> bool:
        if character is None or self.attuned_to is None:
            return False
        return character.name == self.attuned_to

    def meets_attunement_requirement(self, character: AttunementCandidate) -> bool:
        """Check the attunement restriction against a character's class.

        ``spellcaster`` admits any spellcasting class; any other requirement
        must appear in the character's class name.
        """
        if not self.attunement_requirement:
            return True
        requirement = self.attunement_requirement.strip().lower()
        character_class = character.character_class
        if requirement == SPELLCASTER_REQUIREMENT:
            return character_class.is_spellcaster
        return requirement in character_class.value

    def attune(self, character: AttunementCandidate | None) -> ItemActionResult:
        """Attune the item to a character.

        Args:
            character: The character attempting to attune.

        Returns:
            SUCCESS on a new attunement; INFO when the item needs no
            attunement or is already attuned to this character.

        Raises:
            ValidationError: If no character is given.
            AlreadyAttunedError: If attuned to a different character.
            AttunementRefusedError: If the character fails the requirement.
        """
        if character is None:
            raise ValidationError("Character cannot be None", field_name="character")

        if not self.requires_attunement:
            return ItemActionResult(ActionStatus.INFO, f"{self.name} doesn't require attunement.")

        if self.attuned_to is not None and self.attuned_to != character.name:
            raise AlreadyAttunedError(
                f"{self.name} is already attuned to {self.attuned_to}. Unattune first.",
                item_id=self.id,
            )

        if self.attuned_to == character.name:
            return ItemActionResult(
                ActionStatus.INFO,
                f"{self.name} is already attuned to {character.name}.",
            )

        if not self.meets_attunement_requirement(character):
            raise AttunementRefusedError(
                f"{self.name} requires attunement by a {self.attunement_requirement}.",
                item_id=self.id,
            )

        self.attuned_to = character.name
        logger.info("Item attuned", item_id=self.id, character=character.name)
        return ItemActionResult(
            ActionStatus.SUCCESS,
            f"{character.name} attunes to {self.name}. Its magic resonates with their soul.",
        )

    def unattune(self) -> ItemActionResult:
        """Break the current attunement.

        Returns:
            SUCCESS if an attunement was broken; INFO if there was none.
        """
        if self.attuned_to is None:
            return ItemActionResult(ActionStatus.INFO, f"{self.name} is not attuned to anyone.")
        previous = self.attuned_to
        self.attuned_to = None
        logger.info("Item unattuned", item_id=self.id, character=previous)
        return ItemActionResult(
            ActionStatus.SUCCESS,
            f"{self.name} is no longer attuned to {previous}.",
        )

    # -- usage -----------------------------------------------------------

    def can_use(self, character: AttunementCandidate | None) -> bool:
        """Whether a character may activate this item's effects."""
        if character is None:
            return False
        if self.requires_attunement and not self.is_attuned_to(character):
            return False
        return True

    def cannot_use_reason(self, character: AttunementCandidate | None) -> str:
        """Explain why ``can_use`` is False; empty when it is True."""
        if character is None:
            return "No user specified."
        if self.requires_attunement and self.attuned_to is None:
            return f"{self.name} requires attunement before it can be used."
        if self.requires_attunement and not self.is_attuned_to(character):
            return f"{self.name} is attuned to {self.attuned_to}, not {character.name}."
        return ""

    def _check_usable_by(self, character: AttunementCandidate | None) -> None:
        if character is None:
            raise ValidationError("Character cannot be None", field_name="character")
        if not self.can_use(character):
            raise ItemUsageError(self.cannot_use_reason(character), item_id=self.id)

    def use(
        self,
        character: AttunementCandidate | None,
        roller: DiceRoller | None = None,
    ) -> ItemActionResult:
        """Activate every currently usable active effect, in order.

        Args:
            character: The character using the item.
            roller: Dice roller for effects with dice.

        Returns:
            SUCCESS with one line per fired effect, or INFO when nothing
            is usable.

        Raises:
            ValidationError: If no character is given.
            ItemUsageError: If attunement gates the character out.
        """
        self._check_usable_by(character)
        usable = self.usable_effects
        if not usable:
            return ItemActionResult(
                ActionStatus.INFO,
                f"{self.name} has no usable effects right now.",
            )
        lines = [activate_effect(effect, character, roller) for effect in usable]
        logger.info("Item used", item_id=self.id, character=character.name, effects=len(lines))
        return ItemActionResult(ActionStatus.SUCCESS, "\n".join(lines))

    def use_effect(
        self,
        character: AttunementCandidate | None,
        selector: int | str,
        roller: DiceRoller | None = None,
    ) -> ItemActionResult:
        """Activate one effect chosen by index or by name.

        Args:
            character: The character using the item.
            selector: Zero-based effect index, or effect name (case-insensitive).
                By name, the first usable match wins over earlier depleted or
                passive effects with the same name.
            roller: Dice roller for effects with dice.

        Returns:
            SUCCESS if the effect fired; INFO if it is passive, depleted,
            or no effect has the given name.

        Raises:
            ValidationError: If no character is given.
            ItemUsageError: If attunement gates the character out.
            EffectIndexError: If an index is out of range.
        """
        self._check_usable_by(character)

        if isinstance(selector, str):
            wanted = selector.strip().lower()
            matches = [
                index for index, effect in enumerate(self.effects) if effect.name.lower() == wanted
            ]
            if not matches:
                return ItemActionResult(
                    ActionStatus.INFO,
                    f"No effect named '{selector}' found on {self.name}.",
                )
            usable = [index for index in matches if self.effects[index].is_usable]
            return self.use_effect(character, (usable or matches)[0], roller)

        if not 0 <= selector < len(self.effects):
            raise EffectIndexError(
                f"Invalid effect index: {selector}",
                index=selector,
                item_id=self.id,
            )

        effect = self.effects[selector]
        if effect.is_passive:
            return ItemActionResult(
                ActionStatus.INFO,
                f"{effect.name} is a passive effect and doesn't need activation.",
            )
        if not effect.is_usable:
            return ItemActionResult(
                ActionStatus.INFO,
                f"{effect.name} cannot be used right now. {effect.charge_display}",
            )
        return ItemActionResult(ActionStatus.SUCCESS, activate_effect(effect, character, roller))

    # -- rests -----------------------------------------------------------

    def reset_daily(self) -> None:
        """Apply the dawn reset to every effect."""
        for effect in self.effects:
            effect.reset_daily()

    def reset_long_rest(self) -> None:
        """Apply the long-rest reset to every effect."""
        for effect in self.effects:
            effect.reset_long_rest()

    def stat_bonus(self, stat: BonusStat) -> int:
        """Sum of passive bonuses this item grants to a statistic."""
        return sum(
            effect.bonus
            for effect in self.passive_effects
            if isinstance(effect, StatBonusEffect) and effect.applies_to(stat)
        )

    def skill_bonus(self, skill: Skill, proficiency_bonus: int = 0, proficient: bool = False) -> int:
        """Sum of passive bonuses this item grants to checks with a skill."""
        return sum(
            effect.calculate_bonus(proficiency_bonus, proficient)
            for effect in self.passive_effects
            if isinstance(effect, SkillBonusEffect) and effect.applies_to(skill)
        )

    def grants_skill_advantage(self, skill: Skill) -> bool:
        return any(
            isinstance(effect, SkillBonusEffect)
            and effect.applies_to(skill)
            and effect.grants_advantage
            for effect in self.passive_effects
        )

    def reduce_damage(
        self,
        amount: int,
        damage_type: DamageType | None = None,
        is_critical: bool = False,
    ) -> int:
        """Apply every passive damage reduction, in effect order."""
        for effect in self.passive_effects:
            if isinstance(effect, DamageReductionEffect):
                amount = effect.reduce(amount, damage_type, is_critical)
        return amount

    def modified_speed(self, base_speed: int) -> int:
        """Walking speed after passive movement effects, in effect order."""
        for effect in self.passive_effects:
            if isinstance(effect, MovementEffect):
                base_speed = effect.modified_speed(base_speed)
        return base_speed

    def special_speed(self, movement_type: MovementType) -> int:
        """Best passive speed this item grants for a movement mode, or 0."""
        return max(
            (
                effect.special_speed
                for effect in self.passive_effects
                if isinstance(effect, MovementEffect) and effect.grants(movement_type)
            ),
            default=0,
        )

    def duplicate(self) -> MagicItem:
        """Deep copy with all effects and flags; the copy starts unattuned."""
        return self.model_copy(deep=True, update={"attuned_to": None})


# =============================================================================
# Named Magic Item Factories
# =============================================================================


def create_flame_tongue() -> MagicItem:
    """Flame Tongue longsword: fire damage on hit and a bright light."""
    return MagicItem(
        id="flame_tongue",
        name="Flame Tongue",
        description="A longsword that bursts into flame on command.",
        rarity=Rarity.RARE,
        weight=3.0,
        value=5000,
        base_item="Longsword",
        requires_attunement=True,
        effects=[
            ExtraDamageEffect(
                id="flame_tongue_fire",
                name="Flaming Blade",
                description="While ablaze, the blade deals an extra 2d6 fire damage on a hit.",
                damage_dice="2d6",
                damage_type=DamageType.FIRE,
            ),
            UtilityEffect(
                id="flame_tongue_light",
                name="Fire Light",
                description="The flames shed bright light in a 40-foot radius.",
                usage=UsageType.UNLIMITED,
                outcome="Flames shed bright light in a 40-foot radius.",
            ),
        ],
    )


def create_plus_one_weapon(weapon_name: str = "Longsword") -> MagicItem:
    """A +1 weapon with passive attack and damage bonuses."""
    return MagicItem(
        id=f"{slugify(weapon_name)}_plus_1",
        name=f"{weapon_name} +1",
        description=f"A finely made magic {weapon_name.lower()}.",
        rarity=Rarity.UNCOMMON,
        base_item=weapon_name,
        effects=plus_one_weapon_effects(weapon_name),
    )


def create_ring_of_protection() -> MagicItem:
    """Ring of Protection: +1 to AC and saving throws."""
    return MagicItem(
        id="ring_of_protection",
        name="Ring of Protection",
        description="You gain a +1 bonus to AC and saving throws while wearing this ring.",
        rarity=Rarity.RARE,
        value=3500,
        requires_attunement=True,
        effects=[
            StatBonusEffect(
                id="ring_of_protection_ac",
                name="Protection (AC)",
                stat=BonusStat.ARMOR_CLASS,
                bonus=1,
            ),
            StatBonusEffect(
                id="ring_of_protection_saves",
                name="Protection (Saves)",
                stat=BonusStat.SAVING_THROWS,
                bonus=1,
            ),
        ],
    )


def create_gauntlets_of_ogre_power() -> MagicItem:
    """Gauntlets of Ogre Power: Strength becomes 19."""
    return MagicItem(
        id="gauntlets_of_ogre_power",
        name="Gauntlets of Ogre Power",
        description="Your Strength score is 19 while you wear these gauntlets.",
        rarity=Rarity.UNCOMMON,
        weight=2.0,
        value=500,
        requires_attunement=True,
        effects=[
            AbilityScoreEffect(
                id="ogre_power_strength",
                name="Ogre Power",
                ability=Ability.STR,
                score=19,
            ),
        ],
    )


def create_potion_of_healing() -> MagicItem:
    """Potion of Healing: single use, regain 2d4+2 hit points."""
    return MagicItem(
        id="potion_of_healing",
        name="Potion of Healing",
        description="A red liquid that glimmers when agitated.",
        rarity=Rarity.COMMON,
        item_type=ItemType.CONSUMABLE,
        weight=0.5,
        value=50,
        stackable=True,
        effects=[
            HealingEffect(
                id="potion_of_healing_heal",
                name="Drink",
                description="You regain 2d4+2 hit points.",
                usage=UsageType.CONSUMABLE,
                healing_dice="2d4+2",
            ),
        ],
    )


def create_blinkstep_spark() -> MagicItem:
    """Blinkstep Spark: teleport 10 feet once per long rest."""
    return MagicItem(
        id="blinkstep_spark",
        name="Blinkstep Spark",
        description="A crackling mote of blue light trapped in glass.",
        rarity=Rarity.UNCOMMON,
        effects=[
            TeleportEffect(
                id="blinkstep_spark_blink",
                name="Blinkstep",
                description="Teleport up to 10 feet to a space you can see.",
                usage=UsageType.LONG_REST,
                max_charges=1,
                distance_feet=10,
            ),
        ],
    )


def create_featherfall_bookmark() -> MagicItem:
    """Featherfall Bookmark: cast Feather Fall once per day."""
    return MagicItem(
        id="featherfall_bookmark",
        name="Featherfall Bookmark",
        description="A silk ribbon embroidered with a single feather.",
        rarity=Rarity.UNCOMMON,
        effects=[
            SpellEffect(
                id="featherfall_bookmark_spell",
                name="Feather Fall",
                description="Cast feather fall on yourself.",
                usage=UsageType.DAILY,
                max_charges=1,
                spell_name="Feather Fall",
                spell_level=1,
            ),
        ],
    )


def create_wand_of_fireballs() -> MagicItem:
    """Wand of Fireballs: 7 charges, regains 1d6+1 (modelled as 4) at dawn."""
    return MagicItem(
        id="wand_of_fireballs",
        name="Wand of Fireballs",
        description="A charred wand of blackened wood.",
        rarity=Rarity.RARE,
        weight=1.0,
        requires_attunement=True,
        attunement_requirement=SPELLCASTER_REQUIREMENT,
        effects=[
            SpellEffect(
                id="wand_of_fireballs_fireball",
                name="Fireball",
                description="Expend a charge to cast fireball (save DC 15).",
                usage=UsageType.CHARGES,
                max_charges=7,
                recharge_amount=4,
                spell_name="Fireball",
                spell_level=3,
                save_dc=15,
                damage_dice="8d6",
                damage_type=DamageType.FIRE,
            ),
        ],
    )


def create_ring_of_fire_resistance() -> MagicItem:
    """Ring of Resistance (fire)."""
    return MagicItem(
        id="ring_of_fire_resistance",
        name="Ring of Fire Resistance",
        description="A ring set with a garnet that is warm to the touch.",
        rarity=Rarity.RARE,
        requires_attunement=True,
        effects=[
            ResistanceEffect(
                id="ring_of_fire_resistance_fire",
                name="Fire Resistance",
                damage_type=DamageType.FIRE,
            ),
        ],
    )


__all__ = [
    "slugify",
    "Item",
    "Weapon",
    "Armor",
    "ActionStatus",
    "ItemActionResult",
    "MagicItem",
    "SPELLCASTER_REQUIREMENT",
    "create_flame_tongue",
    "create_plus_one_weapon",
    "create_ring_of_protection",
    "create_gauntlets_of_ogre_power",
    "create_potion_of_healing",
    "create_blinkstep_spark",
    "create_featherfall_bookmark",
    "create_wand_of_fireballs",
    "create_ring_of_fire_resistance",
]
