"""Tests for items, weapons, armor, and the magic item state machine."""

from __future__ import annotations

import pytest

from questkeeper.core.exceptions import (
    AlreadyAttunedError,
    AttunementRefusedError,
    EffectIndexError,
    ItemUsageError,
    ValidationError,
)
from questkeeper.models.character import Adventurer
from questkeeper.models.effects import (
    DamageReductionEffect,
    MovementEffect,
    SkillBonusEffect,
    TeleportEffect,
    UtilityEffect,
)
from questkeeper.models.enums import (
    ArmorCategory,
    BonusStat,
    CharacterClass,
    DamageType,
    MovementType,
    ReductionType,
    Skill,
    SkillBonusType,
    UsageType,
    WeaponCategory,
    WeaponProperty,
)
from questkeeper.models.items import (
    ActionStatus,
    Armor,
    MagicItem,
    Weapon,
    create_blinkstep_spark,
    create_flame_tongue,
    create_gauntlets_of_ogre_power,
    create_plus_one_weapon,
    create_potion_of_healing,
    create_ring_of_protection,
    create_wand_of_fireballs,
    slugify,
)


@pytest.fixture
def fighter() -> Adventurer:
    """A fighter named Brann."""
    return Adventurer(name="Brann", character_class=CharacterClass.FIGHTER, strength=16)


class TestMundaneItems:
    """Tests for weapons and armor."""

    def test_slugify(self) -> None:
        """Test identifiers derived from names."""
        assert slugify("Flame Tongue") == "flame_tongue"
        assert slugify("  Potion of Healing (Greater) ") == "potion_of_healing_greater"

    def test_weapon_damage_expression(self) -> None:
        """Test weapon damage expressions include the bonus."""
        sword = Weapon(id="longsword", name="Longsword", damage_die_size=8, damage_bonus=1)

        assert sword.damage_expression == "1d8+1"
        assert not sword.is_ranged

    def test_ranged_weapon(self) -> None:
        """Test ranged detection and properties."""
        bow = Weapon(
            id="shortbow",
            name="Shortbow",
            category=WeaponCategory.SIMPLE_RANGED,
            normal_range=80,
            long_range=320,
            properties=frozenset({WeaponProperty.AMMUNITION}),
        )

        assert bow.is_ranged
        assert bow.has_property(WeaponProperty.AMMUNITION)
        assert not bow.has_property(WeaponProperty.FINESSE)

    @pytest.mark.parametrize(
        ("category", "base_ac", "dex", "expected"),
        [
            (ArmorCategory.LIGHT, 11, 3, 14),
            (ArmorCategory.MEDIUM, 14, 3, 16),
            (ArmorCategory.HEAVY, 16, 3, 16),
            (ArmorCategory.SHIELD, 2, 3, 2),
        ],
    )
    def test_armor_class(self, category: ArmorCategory, base_ac: int, dex: int, expected: int) -> None:
        """Test AC per armor category."""
        armor = Armor(id="armor", name="Armor", category=category, base_ac=base_ac)

        assert armor.armor_class(dex) == expected


class TestAttunement:
    """Tests for the attunement state machine."""

    def test_not_required_is_informational(self, fighter: Adventurer) -> None:
        """Test attuning an item that needs no attunement changes nothing."""
        spark = create_blinkstep_spark()

        result = spark.attune(fighter)

        assert result.status is ActionStatus.INFO
        assert "doesn't require attunement" in result.message
        assert not spark.is_attuned

    def test_attune_then_other_character(self, fighter: Adventurer, wizard: Adventurer) -> None:
        """Test a second character cannot attune until the first unattunes."""
        ring = create_ring_of_protection()

        assert ring.attune(fighter).succeeded
        assert ring.is_attuned_to(fighter)

        with pytest.raises(AlreadyAttunedError):
            ring.attune(wizard)
        assert ring.attuned_to == "Brann"

        assert ring.unattune().succeeded
        assert ring.attune(wizard).succeeded
        assert ring.is_attuned_to(wizard)

    def test_attune_same_character_again(self, fighter: Adventurer) -> None:
        """Test re-attuning to the same character is informational."""
        ring = create_ring_of_protection()
        ring.attune(fighter)

        result = ring.attune(fighter)

        assert result.status is ActionStatus.INFO
        assert ring.is_attuned_to(fighter)

    def test_requirement_refused(self, fighter: Adventurer, wizard: Adventurer) -> None:
        """Test a spellcaster-only item refuses a fighter."""
        wand = create_wand_of_fireballs()

        with pytest.raises(AttunementRefusedError):
            wand.attune(fighter)
        assert not wand.is_attuned

        assert wand.attune(wizard).succeeded

    def test_class_requirement(self, fighter: Adventurer, wizard: Adventurer) -> None:
        """Test a class-name requirement."""
        gauntlets = create_gauntlets_of_ogre_power()
        gauntlets.attunement_requirement = "Fighter"

        assert gauntlets.meets_attunement_requirement(fighter)
        assert not gauntlets.meets_attunement_requirement(wizard)

    def test_attune_none(self) -> None:
        """Test attuning nobody is an invalid argument."""
        with pytest.raises(ValidationError):
            create_ring_of_protection().attune(None)

    def test_unattune_when_unattuned(self) -> None:
        """Test unattuning an unattuned item is informational."""
        result = create_ring_of_protection().unattune()

        assert result.status is ActionStatus.INFO
        assert "not attuned to anyone" in result.message

    def test_duplicate_starts_unattuned(self, fighter: Adventurer) -> None:
        """Test copies never inherit attunement."""
        ring = create_ring_of_protection()
        ring.attune(fighter)

        copy = ring.duplicate()

        assert not copy.is_attuned
        assert copy.effect_count == ring.effect_count
        assert ring.is_attuned_to(fighter)


class TestUsage:
    """Tests for using magic items."""

    def test_gated_use_requires_attunement(self, fighter: Adventurer, wizard: Adventurer) -> None:
        """Test only the attuned character may use a gated item."""
        wand = create_wand_of_fireballs()

        with pytest.raises(ItemUsageError):
            wand.use(wizard)

        wand.attune(wizard)
        with pytest.raises(ItemUsageError):
            wand.use(fighter)

        result = wand.use(wizard)
        assert result.succeeded
        assert "casts Fireball!" in result.message
        assert wand.effects[0].current_charges == 6

    def test_can_use(self, fighter: Adventurer) -> None:
        """Test can_use and its explanation."""
        ring = create_ring_of_protection()

        assert not ring.can_use(fighter)
        assert "requires attunement" in ring.cannot_use_reason(fighter)

        ring.attune(fighter)
        assert ring.can_use(fighter)
        assert ring.cannot_use_reason(fighter) == ""

    def test_use_none(self) -> None:
        """Test using with no character is an invalid argument."""
        with pytest.raises(ValidationError):
            create_blinkstep_spark().use(None)

    def test_nothing_usable_is_informational(self, fighter: Adventurer) -> None:
        """Test an item with only passive effects reports nothing usable."""
        sword = create_plus_one_weapon("Mace")

        result = sword.use(fighter)

        assert result.status is ActionStatus.INFO
        assert result.message == "Mace +1 has no usable effects right now."

    def test_use_fires_active_effects_in_order(self, fighter: Adventurer) -> None:
        """Test use fires every usable active effect and spends charges."""
        item = MagicItem(
            id="twin_spark",
            name="Twin Spark",
            effects=[
                TeleportEffect(id="a", name="Hop", usage=UsageType.DAILY),
                TeleportEffect(id="b", name="Skip", usage=UsageType.LONG_REST, distance_feet=60),
            ],
        )

        result = item.use(fighter)

        lines = result.message.split("\n")
        assert len(lines) == 2
        assert "30 feet" in lines[0]
        assert "60 feet" in lines[1]

        assert item.use(fighter).status is ActionStatus.INFO

        item.reset_daily()
        assert [effect.current_charges for effect in item.effects] == [1, 0]
        item.reset_long_rest()
        assert [effect.current_charges for effect in item.effects] == [1, 1]

    def test_use_effect_by_index_and_name(self, fighter: Adventurer) -> None:
        """Test selecting one effect by index or name."""
        tongue = create_flame_tongue()
        tongue.attune(fighter)

        passive = tongue.use_effect(fighter, 0)
        assert passive.status is ActionStatus.INFO
        assert "passive" in passive.message

        light = tongue.use_effect(fighter, "fire light")
        assert light.succeeded

        missing = tongue.use_effect(fighter, "Frost Brand")
        assert missing.status is ActionStatus.INFO
        assert missing.message == "No effect named 'Frost Brand' found on Flame Tongue."

    def test_use_effect_bad_index(self, fighter: Adventurer) -> None:
        """Test an out-of-range index raises."""
        spark = create_blinkstep_spark()

        with pytest.raises(EffectIndexError):
            spark.use_effect(fighter, 3)
        with pytest.raises(EffectIndexError):
            spark.use_effect(fighter, -1)

    def test_use_effect_depleted(self, fighter: Adventurer) -> None:
        """Test a depleted effect reports rather than raises."""
        spark = create_blinkstep_spark()
        spark.use_effect(fighter, 0)

        result = spark.use_effect(fighter, 0)

        assert result.status is ActionStatus.INFO
        assert "(0/1 charges)" in result.message

    def test_potion_is_consumed(self, fighter: Adventurer) -> None:
        """Test a potion is used up and stays used up."""
        potion = create_potion_of_healing()

        assert potion.use(fighter).succeeded
        assert potion.is_fully_consumed

        potion.reset_daily()
        potion.reset_long_rest()
        assert potion.is_fully_consumed

    def test_potion_heals_without_roller(self) -> None:
        """Test drinking a potion rolls its healing on the shared roller."""
        hero = Adventurer(name="Wren", max_hit_points=20, current_hit_points=5)

        result = create_potion_of_healing().use(hero)

        assert result.succeeded
        assert hero.current_hit_points > 5
        assert "2d4" not in result.message

    def test_name_lookup_prefers_usable_effect(self, fighter: Adventurer) -> None:
        """Test a name shared by a passive and an active effect reaches the active one."""
        lantern = MagicItem(
            id="lantern",
            name="Lantern",
            effects=[
                UtilityEffect(id="glow_aura", name="Glow", outcome="A faint glow surrounds you."),
                UtilityEffect(
                    id="glow_burst", name="Glow", usage=UsageType.DAILY, outcome="Light floods the room."
                ),
            ],
        )

        first = lantern.use_effect(fighter, "glow")
        second = lantern.use_effect(fighter, "glow")

        assert first.succeeded
        assert "Light floods the room." in first.message
        assert lantern.effects[1].current_charges == 0
        assert second.status is ActionStatus.INFO
        assert "passive" in second.message

    def test_stat_bonus(self) -> None:
        """Test summing passive stat bonuses."""
        ring = create_ring_of_protection()

        assert ring.stat_bonus(BonusStat.ARMOR_CLASS) == 1
        assert ring.stat_bonus(BonusStat.INITIATIVE) == 0

    def test_skill_bonus(self) -> None:
        """Test summing passive skill bonuses and advantage."""
        circlet = MagicItem(
            id="circlet",
            name="Circlet",
            effects=[
                SkillBonusEffect(id="eye", name="Keen Eye", skill=Skill.PERCEPTION, bonus=2),
                SkillBonusEffect(
                    id="gift", name="Gift", skill=Skill.PERCEPTION, bonus_type=SkillBonusType.EXPERTISE
                ),
                SkillBonusEffect(id="luck", name="Luck", bonus_type=SkillBonusType.ADVANTAGE),
            ],
        )

        assert circlet.skill_bonus(Skill.PERCEPTION, proficiency_bonus=2, proficient=True) == 4
        assert circlet.skill_bonus(Skill.PERCEPTION, proficiency_bonus=2) == 6
        assert circlet.skill_bonus(Skill.STEALTH, proficiency_bonus=2) == 0
        assert circlet.grants_skill_advantage(Skill.STEALTH)

    def test_reduce_damage(self) -> None:
        """Test passive reductions apply in order and respect damage types."""
        plate = MagicItem(
            id="adamant_plate",
            name="Adamant Plate",
            effects=[
                DamageReductionEffect(id="bulwark", name="Bulwark", amount=2),
                DamageReductionEffect(
                    id="crit", name="Crit Ward", reduction_type=ReductionType.NEGATE_CRIT
                ),
                DamageReductionEffect(
                    id="frost", name="Frost Ward", reduction_type=ReductionType.HALVE,
                    damage_type=DamageType.COLD,
                ),
            ],
        )

        assert plate.reduce_damage(10, DamageType.SLASHING) == 8
        assert plate.reduce_damage(10, DamageType.SLASHING, is_critical=True) == 4
        assert plate.reduce_damage(10, DamageType.COLD) == 4
        assert plate.reduce_damage(1) == 0

    def test_speed(self) -> None:
        """Test walking speed and granted movement modes."""
        boots = MagicItem(
            id="winged_boots",
            name="Winged Boots",
            effects=[
                MovementEffect(id="stride", name="Stride", speed=10),
                MovementEffect(id="wings", name="Wings", movement_type=MovementType.FLYING, speed=30),
                MovementEffect(
                    id="soar", name="Soar", usage=UsageType.DAILY,
                    movement_type=MovementType.FLYING, speed=60,
                ),
            ],
        )

        assert boots.modified_speed(30) == 40
        assert boots.special_speed(MovementType.FLYING) == 30
        assert boots.special_speed(MovementType.SWIMMING) == 0
