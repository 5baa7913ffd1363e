"""Tests for the Adventurer model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from questkeeper.models.character import (
    Adventurer,
    AttunementCandidate,
    SkillCheckSubject,
    calculate_modifier,
    level_to_proficiency_bonus,
)
from questkeeper.models.enums import Ability, CharacterClass, Skill


class TestModifiers:
    """Tests for ability and proficiency math."""

    @pytest.mark.parametrize(("score", "modifier"), [(1, -5), (7, -2), (10, 0), (11, 0), (18, 4), (30, 10)])
    def test_calculate_modifier(self, score: int, modifier: int) -> None:
        """Test ability modifiers."""
        assert calculate_modifier(score) == modifier

    @pytest.mark.parametrize(("level", "bonus"), [(1, 2), (4, 2), (5, 3), (9, 4), (13, 5), (17, 6), (20, 6)])
    def test_proficiency_bonus(self, level: int, bonus: int) -> None:
        """Test proficiency bonus by level."""
        assert level_to_proficiency_bonus(level) == bonus


class TestAdventurer:
    """Tests for Adventurer."""

    def test_starts_at_full_health(self) -> None:
        """Test current hit points default to the maximum."""
        hero = Adventurer(name="Ada", max_hit_points=17)

        assert hero.current_hit_points == 17
        assert hero.is_conscious

    def test_skill_modifier(self, adventurer: Adventurer) -> None:
        """Test skill modifiers include proficiency only when proficient."""
        assert adventurer.ability_modifier(Ability.DEX) == 2
        assert adventurer.skill_modifier(Skill.SLEIGHT_OF_HAND) == 4
        assert adventurer.skill_modifier(Skill.INVESTIGATION) == 1
        assert adventurer.skill_modifier(Skill.ARCANA) == -1
        assert adventurer.skill_modifier(Skill.ATHLETICS) == 0

    def test_damage_and_heal(self, adventurer: Adventurer) -> None:
        """Test damage floors at zero and healing caps at the maximum."""
        assert adventurer.take_damage(25) == 20
        assert not adventurer.is_conscious

        assert adventurer.heal(50) == 20
        assert adventurer.current_hit_points == 20

    def test_negative_damage_is_ignored(self, adventurer: Adventurer) -> None:
        """Test negative amounts do nothing."""
        assert adventurer.take_damage(-3) == 0
        assert adventurer.current_hit_points == 20

    def test_strict_types(self) -> None:
        """Test strict mode rejects coerced values."""
        with pytest.raises(ValidationError):
            Adventurer(name="Ada", level="3")  # type: ignore[arg-type]

    def test_level_bounds(self) -> None:
        """Test levels outside 1-20 are rejected."""
        with pytest.raises(ValidationError):
            Adventurer(name="Ada", level=21)

    def test_satisfies_protocols(self) -> None:
        """Test the adventurer works with the rule engines' protocols."""
        hero = Adventurer(name="Ada", character_class=CharacterClass.WIZARD)

        assert isinstance(hero, AttunementCandidate)
        assert isinstance(hero, SkillCheckSubject)
        assert hero.character_class.is_spellcaster
