"""Campaign content loading.

``ContentLoader`` reads a campaign directory in a fixed order: metadata,
monsters, NPCs, items, locations, mini-games, trials. Only the metadata
document is mandatory. Every other document, and every record inside
one, is loaded best-effort: problems become diagnostics on the resulting
campaign and loading carries on.

The registries are accumulated on a short-lived ``CampaignBuilder`` and
frozen into a ``Campaign`` once every stage has run. Cross-reference
findings are appended last and never make a load fail.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, NamedTuple, TypeVar

from questkeeper.core.config import Settings, get_settings
from questkeeper.core.constants import (
    CAMPAIGN_FILE,
    ITEMS_FILE,
    LOCATIONS_FILE,
    MINIGAMES_FILE,
    MONSTERS_FILE,
    NPCS_FILE,
    TRIALS_FILE,
)
from questkeeper.core.exceptions import (
    CampaignLoadError,
    DocumentDecodeError,
    DocumentNotFoundError,
    DocumentReadError,
    EmptyDocumentError,
    RecordParseError,
)
from questkeeper.core.logging import bind_context, get_logger, unbind_context
from questkeeper.engine.spawner import MonsterTemplateRegistry
from questkeeper.ingestion.cross_refs import validate_cross_references
from questkeeper.ingestion.documents import DocumentReader
from questkeeper.ingestion.parsers import (
    WarningSink,
    parse_armor,
    parse_item,
    parse_location,
    parse_magic_item,
    parse_metadata,
    parse_mini_game,
    parse_monster,
    parse_npc,
    parse_trial,
    parse_weapon,
)
from questkeeper.models.campaign import Campaign, CampaignMetadata, Diagnostic, Severity
from questkeeper.models.items import Item
from questkeeper.models.monsters import MonsterTemplate
from questkeeper.models.puzzles import MiniGame, Trial
from questkeeper.models.world import NPC, Location


logger = get_logger(__name__)

T = TypeVar("T")


# =============================================================================
# Load Result
# =============================================================================


class LoadResult(NamedTuple):
    """Outcome of loading one campaign.

    Attributes:
        campaign: The loaded campaign, or None when loading failed outright.
        errors: Every diagnostic message, in the order recorded.
        ok: False only when the mandatory metadata could not be loaded.
    """

    campaign: Campaign | None
    errors: list[str]
    ok: bool

    def require(self) -> Campaign:
        """Return the campaign, raising if loading failed.

        Raises:
            CampaignLoadError: If the campaign could not be loaded.
        """
        if not self.ok or self.campaign is None:
            cause = self.errors[0] if self.errors else "unknown error"
            raise CampaignLoadError(f"Campaign failed to load: {cause}", errors=self.errors)
        return self.campaign


# =============================================================================
# Builder
# =============================================================================


class CampaignBuilder:
    """Accumulates registries and diagnostics across the loading stages.

    Doubles as the ``WarningSink`` handed to the entity parsers; warnings
    are attributed to whichever document is currently being loaded.
    """

    def __init__(self, metadata: CampaignMetadata, root: Path | None = None) -> None:
        self.metadata = metadata
        self.root = root
        self.document: str | None = None
        self.monsters = MonsterTemplateRegistry()
        self.npcs: dict[str, NPC] = {}
        self.items: dict[str, Item] = {}
        self.locations: dict[str, Location] = {}
        self.mini_games: dict[str, MiniGame] = {}
        self.trials: dict[str, Trial] = {}
        self.diagnostics: list[Diagnostic] = []

    # -- diagnostics -----------------------------------------------------

    def warn(self, message: str, *, entity_id: str | None = None) -> None:
        self.diagnostics.append(
            Diagnostic(Severity.WARNING, message, document=self.document, entity_id=entity_id)
        )
        logger.warning("Content warning", message=message, document=self.document, entity_id=entity_id)

    def error(self, message: str, *, entity_id: str | None = None) -> None:
        self.diagnostics.append(
            Diagnostic(Severity.ERROR, message, document=self.document, entity_id=entity_id)
        )
        logger.error("Content error", message=message, document=self.document, entity_id=entity_id)

    # -- registration ----------------------------------------------------

    def _add(self, registry: dict[str, T], kind: str, entity_id: str, entity: T) -> None:
        if entity_id in registry:
            self.error(
                f"Duplicate {kind} id '{entity_id}' in {self.document}; keeping the first",
                entity_id=entity_id,
            )
            return
        registry[entity_id] = entity

    def add_monster(self, template: MonsterTemplate) -> None:
        if not self.monsters.register(template):
            self.error(
                f"Duplicate monster id '{template.id}' in {self.document}; keeping the first",
                entity_id=template.id,
            )

    def add_npc(self, npc: NPC) -> None:
        self._add(self.npcs, "NPC", npc.id, npc)

    def add_item(self, item: Item) -> None:
        self._add(self.items, "item", item.id, item)

    def add_location(self, location: Location) -> None:
        self._add(self.locations, "location", location.id, location)

    def add_mini_game(self, mini_game: MiniGame) -> None:
        self._add(self.mini_games, "mini-game", mini_game.id, mini_game)

    def add_trial(self, trial: Trial) -> None:
        self._add(self.trials, "trial", trial.id, trial)

    # -- finishing -------------------------------------------------------

    def _campaign(self) -> Campaign:
        return Campaign(
            self.metadata,
            monster_registry=self.monsters,
            locations=self.locations,
            npcs=self.npcs,
            items=self.items,
            trials=self.trials,
            mini_games=self.mini_games,
            diagnostics=tuple(self.diagnostics),
            root=self.root,
        )

    def build(self) -> Campaign:
        """Run the cross-reference pass and freeze the campaign."""
        self.document = None
        findings = validate_cross_references(self._campaign())
        self.diagnostics.extend(findings)
        logger.info("Cross-references checked", dangling=len(findings))
        return self._campaign()


# =============================================================================
# Loader
# =============================================================================


Parser = Callable[[Mapping[str, Any], WarningSink], T]


class ContentLoader:
    """Loads one campaign directory.

    Example:
        >>> result = ContentLoader(Path("campaigns/muddlebrook")).load()
        >>> result.ok, result.errors
        (True, [])
    """

    def __init__(self, root: Path | str, *, encoding: str = "utf-8") -> None:
        """Initialize the loader.

        Args:
            root: Campaign content directory.
            encoding: Text encoding of the content documents.
        """
        self._root = Path(root)
        self._reader = DocumentReader(self._root, encoding=encoding)

    @property
    def root(self) -> Path:
        return self._root

    def load(self) -> LoadResult:
        """Load the campaign.

        Never raises for content problems; see ``LoadResult``.
        """
        bind_context(campaign_root=str(self._root))
        try:
            return self._load()
        finally:
            unbind_context("campaign_root")

    def _load(self) -> LoadResult:
        if not self._root.is_dir():
            return self._fatal(f"Campaign directory not found: {self._root}")

        try:
            metadata = parse_metadata(self._reader.read(CAMPAIGN_FILE))
        except DocumentReadError as exc:
            return self._fatal(exc.message)

        logger.info("Loading campaign", campaign_id=metadata.id, name=metadata.name)
        builder = CampaignBuilder(metadata, self._root)

        self._load_records(builder, MONSTERS_FILE, "monsters", parse_monster, builder.add_monster)
        self._load_records(builder, NPCS_FILE, "npcs", parse_npc, builder.add_npc)
        self._load_items(builder)
        self._load_records(builder, LOCATIONS_FILE, "locations", parse_location, builder.add_location)
        self._load_records(builder, MINIGAMES_FILE, "minigames", parse_mini_game, builder.add_mini_game)

        trials = self._read_optional(builder, TRIALS_FILE)
        if trials is not None:
            self._parse_records(builder, trials, "minigames", parse_mini_game, builder.add_mini_game)
            self._parse_records(builder, trials, "trials", parse_trial, builder.add_trial)

        campaign = builder.build()
        logger.info("Campaign loaded", campaign_id=campaign.id, **campaign.load_summary())
        return LoadResult(campaign, campaign.load_errors, True)

    def _fatal(self, message: str) -> LoadResult:
        logger.error("Campaign load failed", reason=message)
        return LoadResult(None, [message], False)

    # -- stages ----------------------------------------------------------

    def _read_optional(self, builder: CampaignBuilder, name: str) -> dict[str, Any] | None:
        """Read an optional document; missing or empty gives None silently."""
        builder.document = name
        try:
            return self._reader.read(name)
        except (DocumentNotFoundError, EmptyDocumentError):
            logger.debug("Optional document skipped", document=name)
            return None
        except DocumentDecodeError as exc:
            builder.error(exc.message)
            return None

    def _load_records(
        self,
        builder: CampaignBuilder,
        name: str,
        key: str,
        parser: Parser[T],
        add: Callable[[T], None],
    ) -> None:
        data = self._read_optional(builder, name)
        if data is not None:
            self._parse_records(builder, data, key, parser, add)

    def _load_items(self, builder: CampaignBuilder) -> None:
        data = self._read_optional(builder, ITEMS_FILE)
        if data is None:
            return
        self._parse_records(builder, data, "weapons", parse_weapon, builder.add_item)
        self._parse_records(builder, data, "armor", parse_armor, builder.add_item)
        self._parse_records(builder, data, "items", parse_item, builder.add_item)
        self._parse_records(builder, data, "magic_items", parse_magic_item, builder.add_item)

    def _parse_records(
        self,
        builder: CampaignBuilder,
        data: Mapping[str, Any],
        key: str,
        parser: Parser[T],
        add: Callable[[T], None],
    ) -> None:
        """Parse every record under ``key``; bad records are skipped."""
        records = data.get(key)
        if records is None:
            return
        if not isinstance(records, list):
            builder.error(f"'{key}' in {builder.document} must be a list")
            return

        loaded = 0
        for index, record in enumerate(records):
            if not isinstance(record, Mapping):
                builder.error(f"{builder.document} {key}[{index}] is not a mapping; skipped")
                continue
            try:
                entity = parser(record, builder)
            except RecordParseError as exc:
                builder.error(f"{exc.message} ({builder.document} {key}[{index}])", entity_id=exc.record_id)
                continue
            add(entity)
            loaded += 1

        logger.debug("Records loaded", document=builder.document, key=key, count=loaded)


def load_campaign(campaign_id: str | None = None, settings: Settings | None = None) -> LoadResult:
    """Load a campaign from the configured campaigns directory.

    Args:
        campaign_id: Campaign directory name; the configured default when omitted.
        settings: Settings to use; the process settings when omitted.
    """
    settings = settings or get_settings()
    root = settings.content.campaign_path(campaign_id)
    return ContentLoader(root, encoding=settings.content.encoding).load()


__all__ = [
    "LoadResult",
    "CampaignBuilder",
    "ContentLoader",
    "load_campaign",
]
