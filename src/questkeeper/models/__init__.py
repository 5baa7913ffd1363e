"""Domain models for campaign content.

All models are Pydantic V2 schemas in strict mode. Entities that content
documents define (locations, NPCs, monster templates, items, trials and
mini-games) live here alongside the ``Campaign`` facade that owns them.

Modules:
    enums: Fixed vocabularies and case-insensitive token matching.
    character: The adventurer slice the rule engines need.
    world: Locations and NPCs.
    monsters: Monster templates and combat instances.
    effects: Magic item effect variants and activation.
    items: Items, weapons, armor, and magic items with attunement.
    puzzles: Trials and mini-games.
    campaign: Diagnostics, metadata, and the Campaign facade.
"""

from __future__ import annotations

from questkeeper.models.campaign import Campaign, CampaignMetadata, Diagnostic, Severity
from questkeeper.models.character import (
    Adventurer,
    AttunementCandidate,
    SkillCheckSubject,
    calculate_modifier,
)
from questkeeper.models.effects import (
    EFFECT_KINDS,
    AbilityScoreEffect,
    BonusRollEffect,
    DamageReductionEffect,
    EffectBase,
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
    CharacterClass,
    Condition,
    CreatureType,
    DamageType,
    ItemType,
    MiniGameType,
    MonsterBehavior,
    MovementType,
    Rarity,
    ReductionType,
    RestType,
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
from questkeeper.models.items import (
    ActionStatus,
    Armor,
    Item,
    ItemActionResult,
    MagicItem,
    Weapon,
    create_blinkstep_spark,
    create_featherfall_bookmark,
    create_flame_tongue,
    create_gauntlets_of_ogre_power,
    create_plus_one_weapon,
    create_potion_of_healing,
    create_ring_of_fire_resistance,
    create_ring_of_protection,
    create_wand_of_fireballs,
)
from questkeeper.models.monsters import (
    AbilityModifiers,
    Combatant,
    MonsterInstance,
    MonsterTemplate,
)
from questkeeper.models.puzzles import MiniGame, Trial
from questkeeper.models.world import NPC, DialogueEntry, Location


__all__ = [
    # Enums
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
    # Characters
    "Adventurer",
    "AttunementCandidate",
    "SkillCheckSubject",
    "calculate_modifier",
    # World
    "Location",
    "NPC",
    "DialogueEntry",
    # Monsters
    "AbilityModifiers",
    "MonsterTemplate",
    "MonsterInstance",
    "Combatant",
    # Effects
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
    # Items
    "Item",
    "Weapon",
    "Armor",
    "MagicItem",
    "ActionStatus",
    "ItemActionResult",
    "create_flame_tongue",
    "create_plus_one_weapon",
    "create_ring_of_protection",
    "create_gauntlets_of_ogre_power",
    "create_potion_of_healing",
    "create_blinkstep_spark",
    "create_featherfall_bookmark",
    "create_wand_of_fireballs",
    "create_ring_of_fire_resistance",
    # Puzzles
    "Trial",
    "MiniGame",
    # Campaign
    "Severity",
    "Diagnostic",
    "CampaignMetadata",
    "Campaign",
]
