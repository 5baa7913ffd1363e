"""Entity parsers: decoded YAML records to typed models.

One parser per record kind. Every parser takes the raw record and a
``WarningSink``; recoverable problems (an unknown enumeration token, a bad
weapon property, an unknown effect kind) are reported to the sink and a
documented fallback is used. A record that cannot become an entity at all
raises ``RecordParseError`` so the loader can skip it.

Enumeration fallbacks:
    size -> medium, creature type -> humanoid, damage type -> slashing,
    weapon category -> simple_melee, armor category -> light,
    rarity -> common (uncommon for magic items), item type -> miscellaneous,
    mini-game type -> skill_check, effect usage -> passive; unknown
    behavior and skills become None; unknown weapon properties are dropped.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from questkeeper.core.constants import (
    DEFAULT_ALIGNMENT,
    DEFAULT_ARMOR_CLASS,
    DEFAULT_ATTACK_BONUS,
    DEFAULT_CAMPAIGN_AUTHOR,
    DEFAULT_CAMPAIGN_ID,
    DEFAULT_CAMPAIGN_NAME,
    DEFAULT_CAMPAIGN_VERSION,
    DEFAULT_DAMAGE_DICE,
    DEFAULT_DC,
    DEFAULT_EXPERIENCE,
    DEFAULT_FAILURE_TEXT,
    DEFAULT_HIT_POINTS,
    DEFAULT_SPEED,
    DEFAULT_SUCCESS_TEXT,
    MIN_DC,
)
from questkeeper.core.exceptions import RecordParseError
from questkeeper.ingestion.fields import RecordFields
from questkeeper.models.campaign import CampaignMetadata
from questkeeper.models.effects import (
    AbilityScoreEffect,
    BonusRollEffect,
    DamageReductionEffect,
    EffectBase,
    ExtraDamageEffect,
    HealingEffect,
    MovementEffect,
    ResistanceEffect,
    SkillBonusEffect,
    SpellEffect,
    StatBonusEffect,
    TeleportEffect,
    UtilityEffect,
)
from questkeeper.models.enums import (
    Ability,
    ArmorCategory,
    BonusStat,
    CreatureType,
    DamageType,
    ItemType,
    MiniGameType,
    MonsterBehavior,
    MovementType,
    Rarity,
    ReductionType,
    RollBonusType,
    RollTarget,
    Size,
    Skill,
    SkillBonusType,
    UsageType,
    WeaponCategory,
    WeaponProperty,
    parse_token,
)
from questkeeper.models.items import Armor, Item, MagicItem, Weapon, slugify
from questkeeper.models.monsters import AbilityModifiers, MonsterTemplate, cr_to_float
from questkeeper.models.puzzles import MiniGame, Trial
from questkeeper.models.world import NPC, DialogueEntry, Location


M = TypeVar("M", bound=BaseModel)
E = TypeVar("E", bound=Any)


class WarningSink(Protocol):
    """Receives recoverable problems found while parsing a record."""

    def warn(self, message: str, *, entity_id: str | None = None) -> None: ...


# =============================================================================
# Helpers
# =============================================================================


def _require_id(fields: RecordFields, kind: str) -> str:
    record_id = fields.get_str("id")
    if not record_id or not record_id.strip():
        raise RecordParseError(f"{kind.capitalize()} record has no 'id'", record_kind=kind)
    return record_id.strip()


def _build(model: type[M], kind: str, record_id: str, **values: Any) -> M:
    """Construct a model, turning validation failures into RecordParseError."""
    try:
        return model(**values)
    except PydanticValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}"
            for err in exc.errors()
        )
        raise RecordParseError(
            f"Invalid {kind} '{record_id}': {problems}",
            record_kind=kind,
            record_id=record_id,
        ) from exc


def _enum_field(
    fields: RecordFields,
    key: str,
    enum_cls: type[E],
    fallback: E,
    *,
    label: str,
    entity_id: str,
    warnings: WarningSink,
) -> E:
    """Read an enumeration token, warning and falling back when unrecognized."""
    token = fields.get_str(key)
    if token is None:
        return fallback
    value = parse_token(enum_cls, token)
    if value is None:
        shown = fallback.value if fallback is not None else "none"
        warnings.warn(
            f"Invalid {label} '{token}' for {entity_id}; using {shown}",
            entity_id=entity_id,
        )
        return fallback
    return value


def _challenge_rating(fields: RecordFields, entity_id: str, warnings: WarningSink) -> float:
    raw = fields.raw("challenge_rating")
    if raw is None:
        return 0.0
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, str):
        try:
            return cr_to_float(raw.strip())
        except (ValueError, ZeroDivisionError):
            pass
    warnings.warn(
        f"Invalid challenge rating '{raw}' for {entity_id}; using 0",
        entity_id=entity_id,
    )
    return 0.0


# =============================================================================
# Campaign Metadata
# =============================================================================


def parse_metadata(record: Mapping[str, Any]) -> CampaignMetadata:
    """Parse ``campaign.yaml``; every field has a default."""
    fields = RecordFields(record)
    return CampaignMetadata(
        id=fields.get_str("id", DEFAULT_CAMPAIGN_ID) or DEFAULT_CAMPAIGN_ID,
        name=fields.get_str("name", DEFAULT_CAMPAIGN_NAME),
        description=fields.get_str("description", ""),
        author=fields.get_str("author", DEFAULT_CAMPAIGN_AUTHOR),
        version=fields.get_str("version", DEFAULT_CAMPAIGN_VERSION),
        starting_location_id=fields.get_str("starting_location"),
    )


# =============================================================================
# Monsters
# =============================================================================


def parse_monster(record: Mapping[str, Any], warnings: WarningSink) -> MonsterTemplate:
    """Parse one entry of ``monsters.yaml``.

    Raises:
        RecordParseError: If the record has no id or invalid stats.
    """
    fields = RecordFields(record)
    monster_id = _require_id(fields, "monster")

    abilities = fields.nested("abilities")
    special_abilities = []
    for entry in fields.get_list("special_abilities"):
        if isinstance(entry, Mapping):
            name = RecordFields(entry).get_str("name", "")
        else:
            name = str(entry) if isinstance(entry, str) else ""
        if name:
            special_abilities.append(name)

    return _build(
        MonsterTemplate,
        "monster",
        monster_id,
        id=monster_id,
        name=fields.get_str("name", "Unknown Monster"),
        size=_enum_field(
            fields, "size", Size, Size.MEDIUM,
            label="size", entity_id=monster_id, warnings=warnings,
        ),
        creature_type=_enum_field(
            fields, "type", CreatureType, CreatureType.HUMANOID,
            label="creature type", entity_id=monster_id, warnings=warnings,
        ),
        armor_class=fields.get_int("armor_class", DEFAULT_ARMOR_CLASS),
        max_hit_points=fields.get_int("hit_points", DEFAULT_HIT_POINTS),
        abilities=AbilityModifiers(
            strength=abilities.get_int("str", 0),
            dexterity=abilities.get_int("dex", 0),
            constitution=abilities.get_int("con", 0),
            intelligence=abilities.get_int("int", 0),
            wisdom=abilities.get_int("wis", 0),
            charisma=abilities.get_int("cha", 0),
        ),
        alignment=fields.get_str("alignment", DEFAULT_ALIGNMENT),
        speed=fields.get_int("speed", DEFAULT_SPEED),
        challenge_rating=_challenge_rating(fields, monster_id, warnings),
        experience=fields.get_int("xp", DEFAULT_EXPERIENCE),
        attack_bonus=fields.get_int("attack_bonus", DEFAULT_ATTACK_BONUS),
        damage_dice=fields.get_str("damage_dice", DEFAULT_DAMAGE_DICE),
        description=fields.get_str("description", ""),
        special_abilities=tuple(special_abilities),
        behavior=_enum_field(
            fields, "behavior", MonsterBehavior, None,
            label="behavior", entity_id=monster_id, warnings=warnings,
        ),
    )


# =============================================================================
# NPCs
# =============================================================================


def _dialogue_entry(value: Any) -> DialogueEntry | None:
    if isinstance(value, str):
        return DialogueEntry(text=value)
    if isinstance(value, Mapping):
        entry = RecordFields(value)
        text = entry.get_str("text")
        if text is None:
            return None
        return DialogueEntry(
            text=text,
            requires_flag=entry.get_str("requires_flag"),
            sets_flag=entry.get_str("sets_flag"),
        )
    return None


def parse_npc(record: Mapping[str, Any], warnings: WarningSink) -> NPC:
    """Parse one entry of ``npcs.yaml``.

    Raises:
        RecordParseError: If the record has no id.
    """
    fields = RecordFields(record)
    npc_id = _require_id(fields, "npc")

    dialogues: dict[str, DialogueEntry] = {}
    for topic, value in fields.get_mapping("dialogues").items():
        entry = _dialogue_entry(value)
        if entry is None:
            warnings.warn(
                f"NPC '{npc_id}' dialogue '{topic}' has no text; skipped",
                entity_id=npc_id,
            )
            continue
        dialogues[topic.strip().lower()] = entry

    return _build(
        NPC,
        "npc",
        npc_id,
        id=npc_id,
        name=fields.get_str("name", "Unknown NPC"),
        role=fields.get_str("role", ""),
        voice=fields.get_str("voice", ""),
        personality=fields.get_str("personality", ""),
        description=fields.get_str("description", ""),
        location_id=fields.get_str("location_id"),
        shopkeeper=fields.get_bool("shopkeeper", False),
        greeting=fields.get_str("greeting", ""),
        return_greeting=fields.get_str("return_greeting", ""),
        dialogues=dialogues,
        sample_lines=fields.get_str_list("sample_lines"),
    )


# =============================================================================
# Locations
# =============================================================================


def parse_location(record: Mapping[str, Any], warnings: WarningSink) -> Location:
    """Parse one entry of ``locations.yaml``.

    Raises:
        RecordParseError: If the record has no id.
    """
    fields = RecordFields(record)
    location_id = _require_id(fields, "location")

    location = _build(
        Location,
        "location",
        location_id,
        id=location_id,
        name=fields.get_str("name", "Unknown Location"),
        description=fields.get_str("description", ""),
        read_aloud_text=fields.get_str("read_aloud_text", ""),
        npc_ids=fields.get_str_list("npcs"),
        item_ids=fields.get_str_list("items"),
    )

    exits = RecordFields(fields.get_mapping("exits"))
    for direction in fields.get_mapping("exits"):
        destination = exits.get_str(direction)
        if destination is None:
            warnings.warn(
                f"Location '{location_id}' exit '{direction}' has no destination; skipped",
                entity_id=location_id,
            )
            continue
        location.add_exit(direction, destination)

    for flag in fields.get_str_list("flags"):
        location.set_flag(flag)

    return location


# =============================================================================
# Items
# =============================================================================


def _item_id(fields: RecordFields, name: str) -> str:
    record_id = fields.get_str("id")
    if record_id and record_id.strip():
        return record_id.strip()
    return slugify(name)


def _rarity(fields: RecordFields, fallback: Rarity, item_id: str, warnings: WarningSink) -> Rarity:
    return _enum_field(
        fields, "rarity", Rarity, fallback,
        label="rarity", entity_id=item_id, warnings=warnings,
    )


def parse_weapon(record: Mapping[str, Any], warnings: WarningSink) -> Weapon:
    """Parse one entry of the ``weapons`` list in ``items.yaml``."""
    fields = RecordFields(record)
    name = fields.get_str("name", "Unknown Weapon")
    weapon_id = _item_id(fields, name)

    properties: set[WeaponProperty] = set()
    for token in fields.get_str_list("properties"):
        prop = parse_token(WeaponProperty, token)
        if prop is None:
            warnings.warn(
                f"Invalid weapon property '{token}' for {weapon_id}; skipped",
                entity_id=weapon_id,
            )
            continue
        properties.add(prop)

    normal_range = fields.get_int("normal_range", 0)
    long_range = fields.get_int("long_range", 0)

    return _build(
        Weapon,
        "weapon",
        weapon_id,
        id=weapon_id,
        name=name,
        description=fields.get_str("description", ""),
        rarity=_rarity(fields, Rarity.COMMON, weapon_id, warnings),
        weight=fields.get_float("weight", 1.0),
        value=fields.get_int("value", 1),
        damage_dice_count=fields.get_int("damage_dice_count", 1),
        damage_die_size=fields.get_int("damage_die_size", 4),
        damage_type=_enum_field(
            fields, "damage_type", DamageType, DamageType.SLASHING,
            label="damage type", entity_id=weapon_id, warnings=warnings,
        ),
        category=_enum_field(
            fields, "category", WeaponCategory, WeaponCategory.SIMPLE_MELEE,
            label="weapon category", entity_id=weapon_id, warnings=warnings,
        ),
        normal_range=normal_range if normal_range > 0 else None,
        long_range=long_range if normal_range > 0 and long_range > 0 else None,
        properties=frozenset(properties),
        versatile_die_size=fields.get_optional_int("versatile_die_size") or None,
        attack_bonus=fields.get_int("attack_bonus", 0),
        damage_bonus=fields.get_int("damage_bonus", 0),
    )


def parse_armor(record: Mapping[str, Any], warnings: WarningSink) -> Armor:
    """Parse one entry of the ``armor`` list in ``items.yaml``."""
    fields = RecordFields(record)
    name = fields.get_str("name", "Unknown Armor")
    armor_id = _item_id(fields, name)
    category = _enum_field(
        fields, "category", ArmorCategory, ArmorCategory.LIGHT,
        label="armor category", entity_id=armor_id, warnings=warnings,
    )

    return _build(
        Armor,
        "armor",
        armor_id,
        id=armor_id,
        name=name,
        item_type=ItemType.SHIELD if category is ArmorCategory.SHIELD else ItemType.ARMOR,
        description=fields.get_str("description", ""),
        rarity=_rarity(fields, Rarity.COMMON, armor_id, warnings),
        weight=fields.get_float("weight", 1.0),
        value=fields.get_int("value", 1),
        base_ac=fields.get_int("base_ac", 10),
        category=category,
        strength_requirement=fields.get_optional_int("strength_requirement") or None,
        stealth_disadvantage=fields.get_bool("stealth_disadvantage", False),
        magic_bonus=fields.get_optional_int("magic_bonus") or None,
    )


def parse_item(record: Mapping[str, Any], warnings: WarningSink) -> Item:
    """Parse one entry of the ``items`` list in ``items.yaml``."""
    fields = RecordFields(record)
    name = fields.get_str("name", "Unknown Item")
    item_id = _item_id(fields, name)

    return _build(
        Item,
        "item",
        item_id,
        id=item_id,
        name=name,
        item_type=_enum_field(
            fields, "type", ItemType, ItemType.MISCELLANEOUS,
            label="item type", entity_id=item_id, warnings=warnings,
        ),
        description=fields.get_str("description", ""),
        rarity=_rarity(fields, Rarity.COMMON, item_id, warnings),
        weight=fields.get_float("weight", 0.0),
        value=fields.get_int("value", 0),
        stackable=fields.get_bool("stackable", False),
        quest_item=fields.get_bool("quest_item", False),
    )


# -- magic item effects ---------------------------------------------------


def _stat_bonus_values(fields: RecordFields, context: str, warnings: WarningSink) -> dict[str, Any] | None:
    stat = parse_token(BonusStat, fields.get_str("stat", ""))
    if stat is None:
        warnings.warn(f"{context} has invalid stat '{fields.get_str('stat', '')}'; skipped")
        return None
    return {"stat": stat, "bonus": fields.get_int("bonus", 1)}


def _ability_score_values(fields: RecordFields, context: str, warnings: WarningSink) -> dict[str, Any] | None:
    ability = parse_token(Ability, fields.get_str("ability", ""))
    if ability is None:
        warnings.warn(f"{context} has invalid ability '{fields.get_str('ability', '')}'; skipped")
        return None
    return {"ability": ability, "score": fields.get_int("score", 19)}


def _resistance_values(fields: RecordFields, context: str, warnings: WarningSink) -> dict[str, Any] | None:
    damage_type = parse_token(DamageType, fields.get_str("damage_type", ""))
    if damage_type is None:
        warnings.warn(
            f"{context} has invalid damage type '{fields.get_str('damage_type', '')}'; skipped"
        )
        return None
    return {"damage_type": damage_type}


def _teleport_values(fields: RecordFields, context: str, warnings: WarningSink) -> dict[str, Any]:
    return {
        "distance_feet": fields.get_int("distance", 30),
        "requires_sight": fields.get_bool("requires_sight", True),
    }


def _spell_values(fields: RecordFields, context: str, warnings: WarningSink) -> dict[str, Any]:
    damage_type = None
    if "damage_type" in fields:
        damage_type = parse_token(DamageType, fields.get_str("damage_type", ""))
        if damage_type is None:
            warnings.warn(f"{context} has invalid damage type '{fields.get_str('damage_type', '')}'")
    return {
        "spell_name": fields.get_str("spell") or fields.get_str("name", "Unknown Spell"),
        "spell_level": fields.get_int("spell_level", 1),
        "save_dc": fields.get_optional_int("save_dc"),
        "damage_dice": fields.get_str("damage_dice"),
        "damage_type": damage_type,
    }


def _extra_damage_values(fields: RecordFields, context: str, warnings: WarningSink) -> dict[str, Any]:
    damage_type = parse_token(DamageType, fields.get_str("damage_type", "fire"))
    if damage_type is None:
        warnings.warn(
            f"{context} has invalid damage type '{fields.get_str('damage_type', '')}'; using fire"
        )
        damage_type = DamageType.FIRE
    return {"damage_dice": fields.get_str("damage_dice", "1d6"), "damage_type": damage_type}


def _healing_values(fields: RecordFields, context: str, warnings: WarningSink) -> dict[str, Any]:
    return {"healing_dice": fields.get_str("healing_dice", "2d4+2")}


def _utility_values(fields: RecordFields, context: str, warnings: WarningSink) -> dict[str, Any]:
    return {"outcome": fields.get_str("outcome", "")}


def _skill_bonus_values(fields: RecordFields, context: str, warnings: WarningSink) -> dict[str, Any] | None:
    skill = None
    skill_token = fields.get_str("skill", "all") or "all"
    if skill_token.strip().lower() not in ("all", "all_skills", "any"):
        skill = parse_token(Skill, skill_token)
        if skill is None:
            warnings.warn(f"{context} has invalid skill '{skill_token}'; skipped")
            return None
    bonus_type = parse_token(SkillBonusType, fields.get_str("bonus_type", "flat_bonus"))
    if bonus_type is None:
        warnings.warn(f"{context} has invalid bonus type '{fields.get_str('bonus_type', '')}'; skipped")
        return None
    return {"skill": skill, "bonus_type": bonus_type, "bonus": fields.get_int("bonus", 1)}


def _bonus_roll_values(fields: RecordFields, context: str, warnings: WarningSink) -> dict[str, Any] | None:
    bonus_type = parse_token(RollBonusType, fields.get_str("bonus_type", "bonus_dice"))
    if bonus_type is None:
        warnings.warn(f"{context} has invalid bonus type '{fields.get_str('bonus_type', '')}'; skipped")
        return None
    target = parse_token(RollTarget, fields.get_str("applies_to", "any"))
    if target is None:
        warnings.warn(f"{context} has invalid roll target '{fields.get_str('applies_to', '')}'; using any")
        target = RollTarget.ANY
    skill = None
    if "skill" in fields:
        skill = parse_token(Skill, fields.get_str("skill", ""))
        if skill is None:
            warnings.warn(f"{context} has invalid skill '{fields.get_str('skill', '')}'")
    return {
        "bonus_type": bonus_type,
        "applies_to_roll": target,
        "skill": skill,
        "flat_bonus": fields.get_int("bonus", 0),
        "bonus_dice": fields.get_str("bonus_dice"),
    }


def _damage_reduction_values(fields: RecordFields, context: str, warnings: WarningSink) -> dict[str, Any] | None:
    reduction = parse_token(ReductionType, fields.get_str("reduction_type", "flat"))
    if reduction is None:
        warnings.warn(
            f"{context} has invalid reduction type '{fields.get_str('reduction_type', '')}'; skipped"
        )
        return None
    damage_type = None
    if "damage_type" in fields:
        damage_type = parse_token(DamageType, fields.get_str("damage_type", ""))
        if damage_type is None:
            warnings.warn(f"{context} has invalid damage type '{fields.get_str('damage_type', '')}'; skipped")
            return None
    return {
        "reduction_type": reduction,
        "amount": max(0, fields.get_int("amount", 0)),
        "damage_type": damage_type,
    }


def _movement_values(fields: RecordFields, context: str, warnings: WarningSink) -> dict[str, Any] | None:
    movement = parse_token(MovementType, fields.get_str("movement_type", "speed_bonus"))
    if movement is None:
        warnings.warn(
            f"{context} has invalid movement type '{fields.get_str('movement_type', '')}'; skipped"
        )
        return None
    return {
        "movement_type": movement,
        "speed": max(0, fields.get_int("speed", 0)),
        "duration_minutes": max(0, fields.get_int("duration_minutes", 0)),
        "hovering": fields.get_bool("hovering", False),
    }


_EffectValues = Callable[[RecordFields, str, WarningSink], "dict[str, Any] | None"]

_EFFECT_PARSERS: dict[str, tuple[type[EffectBase], _EffectValues]] = {
    "teleport": (TeleportEffect, _teleport_values),
    "stat_bonus": (StatBonusEffect, _stat_bonus_values),
    "ability_score": (AbilityScoreEffect, _ability_score_values),
    "resistance": (ResistanceEffect, _resistance_values),
    "spell": (SpellEffect, _spell_values),
    "extra_damage": (ExtraDamageEffect, _extra_damage_values),
    "healing": (HealingEffect, _healing_values),
    "utility": (UtilityEffect, _utility_values),
    "skill_bonus": (SkillBonusEffect, _skill_bonus_values),
    "bonus_roll": (BonusRollEffect, _bonus_roll_values),
    "damage_reduction": (DamageReductionEffect, _damage_reduction_values),
    "movement": (MovementEffect, _movement_values),
}


def parse_effect(
    record: Mapping[str, Any],
    *,
    item_id: str,
    index: int,
    warnings: WarningSink,
) -> EffectBase | None:
    """Parse one entry of a magic item's ``effects`` list.

    Returns:
        The effect, or None (after a warning) if it cannot be built.
    """
    fields = RecordFields(record)
    context = f"Magic item '{item_id}' effect {index}"
    kind_token = (fields.get_str("kind", "") or "").strip().lower().replace("-", "_")
    parser = _EFFECT_PARSERS.get(kind_token)
    if parser is None:
        warnings.warn(f"{context} has unknown kind '{kind_token}'; skipped", entity_id=item_id)
        return None

    model, variant_values = parser
    specific = variant_values(fields, context, _ItemWarnings(warnings, item_id))
    if specific is None:
        return None

    usage = _enum_field(
        fields, "usage", UsageType, UsageType.PASSIVE,
        label="usage", entity_id=item_id, warnings=warnings,
    )
    charges = fields.get_optional_int("charges")
    if charges is not None and charges < 1 and usage.is_limited:
        warnings.warn(f"{context} has {charges} charges; using 1", entity_id=item_id)
        charges = 1
    name = fields.get_str("name", kind_token.replace("_", " ").title())
    try:
        return model(
            id=fields.get_str("id") or f"{item_id}_{slugify(name) or index}",
            name=name,
            description=fields.get_str("description", ""),
            usage=usage,
            max_charges=charges,
            recharge_amount=fields.get_optional_int("recharge_amount"),
            **specific,
        )
    except PydanticValidationError as exc:
        warnings.warn(
            f"{context} is invalid ({exc.error_count()} problems); skipped",
            entity_id=item_id,
        )
        return None


class _ItemWarnings:
    """Tags warnings from effect variant parsers with the owning item id."""

    def __init__(self, sink: WarningSink, item_id: str) -> None:
        self._sink = sink
        self._item_id = item_id

    def warn(self, message: str, *, entity_id: str | None = None) -> None:
        self._sink.warn(message, entity_id=entity_id or self._item_id)


def parse_magic_item(record: Mapping[str, Any], warnings: WarningSink) -> MagicItem:
    """Parse one entry of the ``magic_items`` list in ``items.yaml``."""
    fields = RecordFields(record)
    name = fields.get_str("name", "Unknown Magic Item")
    item_id = _item_id(fields, name)
    consumable = fields.get_bool("consumable", False)

    effects = []
    for index, entry in enumerate(fields.get_list("effects")):
        if not isinstance(entry, Mapping):
            warnings.warn(
                f"Magic item '{item_id}' effect {index} is not a mapping; skipped",
                entity_id=item_id,
            )
            continue
        effect = parse_effect(entry, item_id=item_id, index=index, warnings=warnings)
        if effect is not None:
            effects.append(effect)

    requires_attunement = fields.get_bool("requires_attunement", False)
    return _build(
        MagicItem,
        "magic item",
        item_id,
        id=item_id,
        name=name,
        item_type=ItemType.CONSUMABLE if consumable else ItemType.MAGIC_ITEM,
        description=fields.get_str("description", ""),
        rarity=_rarity(fields, Rarity.UNCOMMON, item_id, warnings),
        weight=fields.get_float("weight", 0.0),
        value=fields.get_int("value", 0),
        stackable=consumable,
        quest_item=fields.get_bool("quest_item", False),
        effects=effects,
        requires_attunement=requires_attunement,
        attunement_requirement=(
            fields.get_str("attunement_requirements") if requires_attunement else None
        ),
        base_item=fields.get_str("base_item"),
    )


# =============================================================================
# Puzzles
# =============================================================================


def parse_mini_game(record: Mapping[str, Any], warnings: WarningSink) -> MiniGame:
    """Parse one mini-game record.

    Raises:
        RecordParseError: If the record has no id.
    """
    fields = RecordFields(record)
    mini_game_id = _require_id(fields, "mini-game")

    return _build(
        MiniGame,
        "mini-game",
        mini_game_id,
        id=mini_game_id,
        name=fields.get_str("name", "Unknown Mini-Game"),
        game_type=_enum_field(
            fields, "type", MiniGameType, MiniGameType.SKILL_CHECK,
            label="mini-game type", entity_id=mini_game_id, warnings=warnings,
        ),
        description=fields.get_str("description", ""),
        hint=fields.get_str("hint", ""),
        required_skill=_enum_field(
            fields, "required_skill", Skill, None,
            label="required_skill", entity_id=mini_game_id, warnings=warnings,
        ),
        alternate_skill=_enum_field(
            fields, "alternate_skill", Skill, None,
            label="alternate_skill", entity_id=mini_game_id, warnings=warnings,
        ),
        dc=max(MIN_DC, fields.get_int("dc", DEFAULT_DC)),
        allow_retry=fields.get_bool("allow_retry", False),
        reward_item_id=fields.get_str("reward_item"),
        reward_text=fields.get_str("reward_text", ""),
        success_text=fields.get_str("success_text", DEFAULT_SUCCESS_TEXT),
        failure_text=fields.get_str("fail_text", DEFAULT_FAILURE_TEXT),
        fail_consequence=fields.get_str("fail_consequence", ""),
        failure_damage=max(0, fields.get_int("failure_damage", 0)),
    )


def parse_trial(record: Mapping[str, Any], warnings: WarningSink) -> Trial:
    """Parse one entry of ``trials.yaml``.

    Member mini-games are kept as identifiers; dangling ones are reported
    by the cross-reference pass, not here.

    Raises:
        RecordParseError: If the record has no id.
    """
    fields = RecordFields(record)
    trial_id = _require_id(fields, "trial")

    return _build(
        Trial,
        "trial",
        trial_id,
        id=trial_id,
        name=fields.get_str("name", "Unknown Trial"),
        description=fields.get_str("description", ""),
        difficulty=fields.get_str("difficulty", ""),
        location_id=fields.get_str("location_id"),
        entry_narrative=fields.get_str("entry_narrative", ""),
        mini_game_ids=tuple(fields.get_str_list("mini_games")),
        prerequisites=frozenset(fields.get_str_list("prerequisites")),
        completion_reward=fields.get_str("completion_reward", ""),
        stinger=fields.get_str("stinger", ""),
        completion_flag=fields.get_str("completion_flag", ""),
    )


__all__ = [
    "WarningSink",
    "parse_metadata",
    "parse_monster",
    "parse_npc",
    "parse_location",
    "parse_weapon",
    "parse_armor",
    "parse_item",
    "parse_effect",
    "parse_magic_item",
    "parse_mini_game",
    "parse_trial",
]
