"""Tests for cross-reference validation."""

from __future__ import annotations

from questkeeper.engine.spawner import MonsterTemplateRegistry
from questkeeper.ingestion.cross_refs import validate_cross_references
from questkeeper.models.campaign import Campaign, CampaignMetadata, Severity
from questkeeper.models.items import Item
from questkeeper.models.puzzles import MiniGame, Trial
from questkeeper.models.world import NPC, DialogueEntry, Location


def _campaign(
    *,
    start: str | None = "square",
    locations: list[Location] | None = None,
    npcs: list[NPC] | None = None,
    items: list[Item] | None = None,
    mini_games: list[MiniGame] | None = None,
    trials: list[Trial] | None = None,
) -> Campaign:
    return Campaign(
        CampaignMetadata(id="demo", starting_location_id=start),
        monster_registry=MonsterTemplateRegistry(),
        locations={loc.id: loc for loc in locations or [Location(id="square", name="Square")]},
        npcs={npc.id: npc for npc in npcs or []},
        items={item.id: item for item in items or []},
        mini_games={mg.id: mg for mg in mini_games or []},
        trials={trial.id: trial for trial in trials or []},
    )


def _messages(campaign: Campaign) -> list[str]:
    return [finding.message for finding in validate_cross_references(campaign)]


class TestCrossReferences:
    """Tests for validate_cross_references."""

    def test_consistent_campaign(self) -> None:
        """Test a consistent campaign has no findings."""
        campaign = _campaign(
            locations=[
                Location(id="square", name="Square", exits={"north": "forest"}, npc_ids=["guard"], item_ids=["rope"]),
                Location(id="forest", name="Forest", exits={"south": "square"}),
            ],
            npcs=[
                NPC(
                    id="guard",
                    name="Guard",
                    location_id="square",
                    dialogues={"gate": DialogueEntry(text="Open.", sets_flag="gate_open")},
                )
            ],
            items=[Item(id="rope", name="Rope")],
            mini_games=[MiniGame(id="climb", name="Climb", reward_item_id="rope")],
            trials=[
                Trial(id="cliff", name="Cliff", location_id="forest", mini_game_ids=("climb",)),
                Trial(
                    id="summit",
                    name="Summit",
                    mini_game_ids=("climb",),
                    prerequisites=frozenset({"gate_open", "cliff_complete"}),
                ),
            ],
        )

        assert validate_cross_references(campaign) == []

    def test_missing_starting_location(self) -> None:
        """Test a dangling starting location is reported."""
        assert _messages(_campaign(start="castle")) == [
            "Campaign 'demo' starting location 'castle' not found"
        ]

    def test_location_references(self) -> None:
        """Test exits, NPCs, and ground items are checked."""
        campaign = _campaign(
            locations=[
                Location(
                    id="square",
                    name="Square",
                    exits={"north": "forest"},
                    npc_ids=["ghost"],
                    item_ids=["lantern"],
                )
            ]
        )

        assert _messages(campaign) == [
            "Location 'square' exit 'north' references unknown location 'forest'",
            "Location 'square' references unknown NPC 'ghost'",
            "Location 'square' references unknown item 'lantern'",
        ]

    def test_npc_home(self) -> None:
        """Test NPC home locations are checked; unplaced NPCs are fine."""
        campaign = _campaign(
            npcs=[NPC(id="hermit", name="Hermit", location_id="cave"), NPC(id="drifter", name="Drifter")]
        )

        assert _messages(campaign) == ["NPC 'hermit' references unknown location 'cave'"]

    def test_mini_game_reward(self) -> None:
        """Test reward items are checked."""
        campaign = _campaign(mini_games=[MiniGame(id="lock", name="Lock", reward_item_id="potion_01")])

        assert _messages(campaign) == ["Mini-game 'lock' reward references unknown item 'potion_01'"]

    def test_trial_references(self) -> None:
        """Test trial locations, members, and prerequisite flags are checked."""
        campaign = _campaign(
            trials=[
                Trial(
                    id="mill",
                    name="Mill",
                    location_id="mill",
                    mini_game_ids=("lock",),
                    prerequisites=frozenset({"heard_rumor"}),
                )
            ]
        )

        assert _messages(campaign) == [
            "Trial 'mill' references unknown location 'mill'",
            "Trial 'mill' references unknown mini-game 'lock'",
            "Trial 'mill' prerequisite flag 'heard_rumor' is never set",
        ]

    def test_findings_are_warnings_with_entity(self) -> None:
        """Test findings identify their source entity."""
        campaign = _campaign(npcs=[NPC(id="hermit", name="Hermit", location_id="cave")])

        finding = validate_cross_references(campaign)[0]

        assert finding.severity is Severity.WARNING
        assert finding.entity_id == "hermit"

    def test_idempotent(self) -> None:
        """Test repeated runs give the same findings and change nothing."""
        campaign = _campaign(start="castle")

        first = validate_cross_references(campaign)
        second = validate_cross_references(campaign)

        assert first == second
        assert campaign.diagnostics == ()
