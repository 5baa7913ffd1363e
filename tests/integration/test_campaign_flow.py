"""Integration tests for loading a campaign and playing against it.

These tests exercise the full path from YAML documents on disk through
the loader, cross-reference validation, and the rule engines.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from questkeeper.core.exceptions import AttunementRefusedError
from questkeeper.engine.dice import DiceRoller
from questkeeper.engine.skill_checks import SkillCheckResolver
from questkeeper.ingestion.loader import ContentLoader
from questkeeper.models.campaign import Campaign
from questkeeper.models.character import Adventurer
from questkeeper.models.enums import BonusStat, DamageType, ItemType, MovementType, Skill


class TestScenarioCampaign:
    """A small consistent campaign, loaded and played end to end."""

    def test_trial_flow(
        self,
        write_campaign: Callable[..., Path],
        scenario_documents: dict[str, Any],
        adventurer: Adventurer,
        roller: DiceRoller,
    ) -> None:
        """Test a clean load followed by a trial's skill checks."""
        result = ContentLoader(write_campaign(**scenario_documents)).load()

        assert result.ok
        assert result.errors == []
        campaign = result.require()
        assert campaign.starting_location is not None
        assert campaign.starting_location.id == "town_square"

        lock = campaign.trial_mini_games("first_trial")[0]
        resolver = SkillCheckResolver(roller)

        success = resolver.evaluate(lock, adventurer, natural_roll=8)
        assert success.total == 12
        assert success.success
        assert success.reward_item_id == "potion_01"
        reward = campaign.get_any_item(success.reward_item_id)
        assert reward is not None
        assert reward.item_type is ItemType.CONSUMABLE

        failure = resolver.evaluate(lock, adventurer, natural_roll=7)
        assert not failure.success
        assert failure.reward_item_id is None

    def test_dangling_references_do_not_fail_load(
        self,
        write_campaign: Callable[..., Path],
        scenario_documents: dict[str, Any],
    ) -> None:
        """Test broken references surface as warnings on a loaded campaign."""
        scenario_documents["trials"]["trials"][0]["mini_games"].append("missing_game")

        result = ContentLoader(write_campaign(**scenario_documents)).load()

        assert result.ok
        assert result.errors == ["Trial 'first_trial' references unknown mini-game 'missing_game'"]
        assert [mg.id for mg in result.require().trial_mini_games("first_trial")] == ["lock_puzzle"]


class TestSampleCampaign:
    """The bundled Muddlebrook campaign."""

    @pytest.fixture
    def campaign(self, sample_campaign_root: Path) -> Campaign:
        """The loaded sample campaign."""
        return ContentLoader(sample_campaign_root).load().require()

    def test_loads_cleanly(self, campaign: Campaign) -> None:
        """Test the sample has every registry populated and no diagnostics."""
        summary = campaign.load_summary()

        assert campaign.diagnostics == ()
        assert summary["locations"] == 4
        assert summary["monsters"] == 3
        assert summary["trials"] == 1
        assert summary["mini_games"] == 2

    def test_monsters_spawn_independently(self, campaign: Campaign) -> None:
        """Test two spawned goblins do not share state."""
        first = campaign.create_monster("mud_goblin")
        second = campaign.create_monster("mud_goblin")
        assert first is not None and second is not None

        first.take_damage(first.max_hit_points)

        assert not first.is_alive
        assert second.is_alive

    def test_mill_trial(self, campaign: Campaign, adventurer: Adventurer) -> None:
        """Test the mill trial resolves with its first lock."""
        games = campaign.trial_mini_games("trial_of_the_mill")
        assert [game.id for game in games] == ["rusty_lock", "flour_riddle"]
        assert "heard_about_mill" in campaign.known_flags()

        result = SkillCheckResolver(DiceRoller(seed=3)).evaluate(games[0], adventurer, natural_roll=2)

        assert not result.success
        assert result.damage_taken == 1
        assert result.can_retry

    def test_magic_item_lifecycle(
        self,
        campaign: Campaign,
        wizard: Adventurer,
        adventurer: Adventurer,
        roller: DiceRoller,
    ) -> None:
        """Test attunement gating, a daily spell, and the dawn reset."""
        template = campaign.get_magic_item("millers_charm")
        assert template is not None
        charm = template.duplicate()

        with pytest.raises(AttunementRefusedError):
            charm.attune(adventurer)
        assert charm.attune(wizard).succeeded
        assert charm.stat_bonus(BonusStat.ARMOR_CLASS) == 1

        assert charm.use_effect(wizard, "Gust of Chaff", roller).succeeded
        assert not charm.use_effect(wizard, "Gust of Chaff", roller).succeeded
        charm.reset_daily()
        assert charm.use_effect(wizard, "Gust of Chaff", roller).succeeded

        assert template.attuned_to is None

    def test_passive_item_bonuses(self, campaign: Campaign) -> None:
        """Test passive movement, skill and reduction effects from the sample boots."""
        boots = campaign.get_magic_item("otterskin_boots")
        assert boots is not None

        assert boots.special_speed(MovementType.SWIMMING) == 30
        assert boots.modified_speed(30) == 30
        assert boots.skill_bonus(Skill.ATHLETICS) == 1
        assert boots.reduce_damage(6, DamageType.BLUDGEONING) == 5
        assert boots.reduce_damage(6, DamageType.PIERCING) == 6
