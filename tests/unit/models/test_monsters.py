"""Tests for monster templates and instances."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from questkeeper.engine.dice import DiceRoller
from questkeeper.models.enums import Ability, Condition, Size
from questkeeper.models.monsters import (
    AbilityModifiers,
    Combatant,
    MonsterInstance,
    MonsterTemplate,
    cr_to_float,
    cr_to_proficiency_bonus,
    format_challenge_rating,
)


@pytest.fixture
def goblin() -> MonsterTemplate:
    """A goblin template."""
    return MonsterTemplate(
        id="goblin",
        name="Goblin",
        size=Size.SMALL,
        armor_class=15,
        max_hit_points=7,
        challenge_rating=0.25,
        attack_bonus=4,
        damage_dice="1d6+2",
        abilities=AbilityModifiers(dexterity=2),
        special_abilities=("Nimble Escape",),
    )


class TestChallengeRating:
    """Tests for challenge rating helpers."""

    def test_fraction_strings(self) -> None:
        """Test fractional challenge ratings parse."""
        assert cr_to_float("1/4") == 0.25
        assert cr_to_float("1/2") == 0.5
        assert cr_to_float("3") == 3.0
        assert cr_to_float(2) == 2.0

    def test_invalid_string(self) -> None:
        """Test garbage challenge ratings raise ValueError."""
        with pytest.raises(ValueError):
            cr_to_float("tough")

    @pytest.mark.parametrize(
        ("cr", "bonus"),
        [(0, 2), (4, 2), (5, 3), (8, 3), (9, 4), (13, 5), (17, 6), (30, 9)],
    )
    def test_proficiency_bonus(self, cr: float, bonus: int) -> None:
        """Test proficiency bonus thresholds."""
        assert cr_to_proficiency_bonus(cr) == bonus

    def test_display(self) -> None:
        """Test display formatting of fractional ratings."""
        assert format_challenge_rating(0.25) == "1/4"
        assert format_challenge_rating(2.0) == "2"


class TestMonsterTemplate:
    """Tests for MonsterTemplate."""

    def test_derived_values(self, goblin: MonsterTemplate) -> None:
        """Test derived template values."""
        assert goblin.proficiency_bonus == 2
        assert goblin.challenge_rating_display == "1/4"
        assert goblin.abilities.get(Ability.DEX) == 2
        assert goblin.has_special_ability("nimble escape")
        assert not goblin.has_special_ability("Pack Tactics")

    def test_is_frozen(self, goblin: MonsterTemplate) -> None:
        """Test templates cannot be modified."""
        with pytest.raises(ValidationError):
            goblin.armor_class = 20  # type: ignore[misc]

    def test_hit_points_must_be_positive(self) -> None:
        """Test a template needs at least one hit point."""
        with pytest.raises(ValidationError):
            MonsterTemplate(id="ghost", name="Ghost", max_hit_points=0)


class TestMonsterInstance:
    """Tests for MonsterInstance combat state."""

    def test_damage_and_heal(self, goblin: MonsterTemplate) -> None:
        """Test damage floors at zero and healing caps at maximum."""
        instance = MonsterInstance(instance_id="g1", template=goblin, current_hit_points=7)

        assert instance.take_damage(4) == 4
        assert instance.current_hit_points == 3
        assert instance.is_bloodied

        assert instance.heal(10) == 4
        assert instance.current_hit_points == 7

        assert instance.take_damage(50) == 7
        assert not instance.is_alive

        instance.reset_hit_points()
        assert instance.current_hit_points == instance.max_hit_points

    def test_hit_points_cannot_exceed_maximum(self, goblin: MonsterTemplate) -> None:
        """Test an instance cannot start above its template maximum."""
        with pytest.raises(ValidationError):
            MonsterInstance(instance_id="g1", template=goblin, current_hit_points=8)

    def test_conditions(self, goblin: MonsterTemplate) -> None:
        """Test conditions are added and removed."""
        instance = MonsterInstance(instance_id="g1", template=goblin, current_hit_points=7)

        instance.add_condition(Condition.PRONE)
        assert instance.has_condition(Condition.PRONE)

        instance.remove_condition(Condition.PRONE)
        assert not instance.has_condition(Condition.PRONE)

    def test_delegates_to_template(self, goblin: MonsterTemplate) -> None:
        """Test instance statistics come from the template."""
        instance = MonsterInstance(instance_id="g1", template=goblin, current_hit_points=7)

        assert instance.template_id == "goblin"
        assert instance.name == "Goblin"
        assert instance.armor_class == 15
        assert instance.initiative_modifier == 2
        assert isinstance(instance, Combatant)

    def test_rolls(self, goblin: MonsterTemplate) -> None:
        """Test attack and damage rolls use the template numbers."""
        instance = MonsterInstance(instance_id="g1", template=goblin, current_hit_points=7)
        roller = DiceRoller(seed=3)

        attack = instance.roll_attack(roller)
        damage = instance.roll_damage(roller)

        assert attack.modifier == 4
        assert 1 <= attack.natural <= 20
        assert 3 <= damage.total <= 8
