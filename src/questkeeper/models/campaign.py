"""The loaded campaign: a read-only facade over every content registry.

A ``Campaign`` is produced once by the content loader and never changes
shape afterwards. Its registries are exposed as read-only mappings; the
entities inside them carry their own per-instance mutable state (location
flags, magic item charges and attunement) owned by the game session.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from questkeeper.core.constants import (
    DEFAULT_CAMPAIGN_AUTHOR,
    DEFAULT_CAMPAIGN_ID,
    DEFAULT_CAMPAIGN_NAME,
    DEFAULT_CAMPAIGN_VERSION,
)
from questkeeper.models.items import Armor, Item, MagicItem, Weapon
from questkeeper.models.monsters import MonsterInstance, MonsterTemplate
from questkeeper.models.puzzles import MiniGame, Trial
from questkeeper.models.world import NPC, Location


if TYPE_CHECKING:
    from pathlib import Path

    from questkeeper.engine.spawner import MonsterTemplateRegistry


T = TypeVar("T", bound=Item)


# =============================================================================
# Diagnostics
# =============================================================================


class Severity(StrEnum):
    """How serious a load diagnostic is."""

    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """One problem found while loading a campaign.

    Attributes:
        severity: WARNING for recoverable fallbacks, ERROR for skipped content.
        message: Human-readable description.
        document: Content document the problem came from, if any.
        entity_id: Identifier of the entity involved, if known.
    """

    severity: Severity
    message: str
    document: str | None = None
    entity_id: str | None = None

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Metadata
# =============================================================================


class CampaignMetadata(BaseModel):
    """Contents of ``campaign.yaml``.

    Attributes:
        id: Campaign identifier.
        name: Display name.
        description: Campaign pitch.
        author: Author credit.
        version: Content version string.
        starting_location_id: Where a new game begins, if set.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    id: str = Field(default=DEFAULT_CAMPAIGN_ID, min_length=1)
    name: str = DEFAULT_CAMPAIGN_NAME
    description: str = ""
    author: str = DEFAULT_CAMPAIGN_AUTHOR
    version: str = DEFAULT_CAMPAIGN_VERSION
    starting_location_id: str | None = None


# =============================================================================
# Campaign Facade
# =============================================================================


class Campaign:
    """Read-only view of one loaded campaign.

    Example:
        >>> campaign = ContentLoader(Path("campaigns/muddlebrook")).load().require()
        >>> campaign.starting_location.name
        'Town Square'
    """

    def __init__(
        self,
        metadata: CampaignMetadata,
        *,
        monster_registry: MonsterTemplateRegistry,
        locations: Mapping[str, Location] | None = None,
        npcs: Mapping[str, NPC] | None = None,
        items: Mapping[str, Item] | None = None,
        trials: Mapping[str, Trial] | None = None,
        mini_games: Mapping[str, MiniGame] | None = None,
        diagnostics: tuple[Diagnostic, ...] = (),
        root: Path | None = None,
    ) -> None:
        """Initialize the facade; the mappings are copied.

        Args:
            metadata: Campaign metadata.
            monster_registry: Registry holding the monster templates.
            locations: Locations by id.
            npcs: NPCs by id.
            items: Every item (weapons, armor, magic and general) by id.
            trials: Trials by id.
            mini_games: Mini-games by id.
            diagnostics: Problems recorded while loading.
            root: Content root the campaign was loaded from.
        """
        self._metadata = metadata
        self._monsters = monster_registry
        self._locations = dict(locations or {})
        self._npcs = dict(npcs or {})
        self._items = dict(items or {})
        self._trials = dict(trials or {})
        self._mini_games = dict(mini_games or {})
        self._diagnostics = tuple(diagnostics)
        self._root = root

    def __repr__(self) -> str:
        return f"Campaign(id={self.id!r}, name={self.name!r})"

    # -- metadata --------------------------------------------------------

    @property
    def metadata(self) -> CampaignMetadata:
        return self._metadata

    @property
    def id(self) -> str:
        return self._metadata.id

    @property
    def name(self) -> str:
        return self._metadata.name

    @property
    def description(self) -> str:
        return self._metadata.description

    @property
    def author(self) -> str:
        return self._metadata.author

    @property
    def version(self) -> str:
        return self._metadata.version

    @property
    def starting_location_id(self) -> str | None:
        return self._metadata.starting_location_id

    @property
    def root(self) -> Path | None:
        return self._root

    # -- registries ------------------------------------------------------

    @property
    def locations(self) -> Mapping[str, Location]:
        return MappingProxyType(self._locations)

    @property
    def npcs(self) -> Mapping[str, NPC]:
        return MappingProxyType(self._npcs)

    @property
    def monster_templates(self) -> Mapping[str, MonsterTemplate]:
        return self._monsters.templates

    @property
    def items(self) -> Mapping[str, Item]:
        """Every item of every kind, by id."""
        return MappingProxyType(self._items)

    @property
    def weapons(self) -> Mapping[str, Weapon]:
        return self._items_of(Weapon)

    @property
    def armor(self) -> Mapping[str, Armor]:
        return self._items_of(Armor)

    @property
    def magic_items(self) -> Mapping[str, MagicItem]:
        return self._items_of(MagicItem)

    @property
    def trials(self) -> Mapping[str, Trial]:
        return MappingProxyType(self._trials)

    @property
    def mini_games(self) -> Mapping[str, MiniGame]:
        return MappingProxyType(self._mini_games)

    def _items_of(self, kind: type[T]) -> Mapping[str, T]:
        return MappingProxyType(
            {item_id: item for item_id, item in self._items.items() if isinstance(item, kind)}
        )

    # -- lookups ---------------------------------------------------------

    def get_location(self, location_id: str) -> Location | None:
        return self._locations.get(location_id)

    def get_npc(self, npc_id: str) -> NPC | None:
        return self._npcs.get(npc_id)

    def get_monster_template(self, template_id: str) -> MonsterTemplate | None:
        return self._monsters.get(template_id)

    def get_any_item(self, item_id: str) -> Item | None:
        """Look up an item of any kind by id."""
        return self._items.get(item_id)

    def get_weapon(self, item_id: str) -> Weapon | None:
        item = self._items.get(item_id)
        return item if isinstance(item, Weapon) else None

    def get_armor(self, item_id: str) -> Armor | None:
        item = self._items.get(item_id)
        return item if isinstance(item, Armor) else None

    def get_magic_item(self, item_id: str) -> MagicItem | None:
        item = self._items.get(item_id)
        return item if isinstance(item, MagicItem) else None

    def get_trial(self, trial_id: str) -> Trial | None:
        return self._trials.get(trial_id)

    def get_mini_game(self, mini_game_id: str) -> MiniGame | None:
        return self._mini_games.get(mini_game_id)

    @property
    def starting_location(self) -> Location | None:
        """The starting location, if set and present."""
        if self.starting_location_id is None:
            return None
        return self._locations.get(self.starting_location_id)

    def npcs_at_location(self, location_id: str) -> list[NPC]:
        """NPCs listed at a location or homed there, without duplicates.

        NPCs the location lists come first, in its order; NPCs whose home
        is the location but which it does not list follow in load order.
        """
        found: dict[str, NPC] = {}
        location = self._locations.get(location_id)
        if location is not None:
            for npc_id in location.npc_ids:
                npc = self._npcs.get(npc_id)
                if npc is not None:
                    found.setdefault(npc.id, npc)
        for npc in self._npcs.values():
            if npc.location_id == location_id:
                found.setdefault(npc.id, npc)
        return list(found.values())

    def trial_mini_games(self, trial_id: str) -> list[MiniGame]:
        """Resolved member mini-games of a trial, in play order.

        Dangling ids are skipped; they are reported at load time.
        """
        trial = self._trials.get(trial_id)
        if trial is None:
            return []
        return [self._mini_games[mg_id] for mg_id in trial.mini_game_ids if mg_id in self._mini_games]

    def create_monster(
        self,
        template_id: str,
        instance_id: str | None = None,
    ) -> MonsterInstance | None:
        """Spawn an independent monster instance from a template."""
        return self._monsters.instantiate(template_id, instance_id)

    def known_flags(self) -> frozenset[str]:
        """Flags some content can set: location flags, dialogue and trial completion flags."""
        flags: set[str] = set()
        for location in self._locations.values():
            flags.update(location.flags)
        for npc in self._npcs.values():
            flags.update(npc.flags_set())
        for trial in self._trials.values():
            flags.add(trial.completion_flag)
        return frozenset(flags)

    # -- diagnostics -----------------------------------------------------

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self._diagnostics

    @property
    def load_errors(self) -> list[str]:
        """Every diagnostic message in the order it was recorded."""
        return [diagnostic.message for diagnostic in self._diagnostics]

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self._diagnostics if d.severity is Severity.WARNING)

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self._diagnostics if d.severity is Severity.ERROR)

    @property
    def has_errors(self) -> bool:
        """Whether anything at all was reported while loading."""
        return bool(self._diagnostics)

    def load_summary(self) -> dict[str, int]:
        """Entity counts per registry plus diagnostic counts."""
        return {
            "locations": len(self._locations),
            "npcs": len(self._npcs),
            "monsters": len(self._monsters),
            "weapons": len(self.weapons),
            "armor": len(self.armor),
            "magic_items": len(self.magic_items),
            "items": len(self._items),
            "trials": len(self._trials),
            "mini_games": len(self._mini_games),
            "warnings": len(self.warnings),
            "errors": len(self.errors),
        }


__all__ = [
    "Severity",
    "Diagnostic",
    "CampaignMetadata",
    "Campaign",
]
