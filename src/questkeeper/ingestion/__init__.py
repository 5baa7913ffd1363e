"""Campaign content ingestion.

Submodules:
    documents: Reading YAML documents from a campaign directory
    fields: Typed field access with defaults over decoded records
    parsers: One parser per record kind, with enumeration fallbacks
    cross_refs: Dangling-reference detection over a loaded campaign
    loader: Staged, best-effort campaign loading

Example:
    >>> from questkeeper.ingestion import ContentLoader
    >>> result = ContentLoader("campaigns/muddlebrook").load()
    >>> campaign = result.require()
    >>> campaign.load_summary()["locations"]
    4
"""

from __future__ import annotations

# =============================================================================
# Documents
# =============================================================================
from questkeeper.ingestion.documents import DocumentReader
from questkeeper.ingestion.fields import RecordFields

# =============================================================================
# Parsers
# =============================================================================
from questkeeper.ingestion.parsers import (
    WarningSink,
    parse_armor,
    parse_effect,
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

# =============================================================================
# Loading
# =============================================================================
from questkeeper.ingestion.cross_refs import validate_cross_references
from questkeeper.ingestion.loader import (
    CampaignBuilder,
    ContentLoader,
    LoadResult,
    load_campaign,
)


__all__ = [
    # Documents
    "DocumentReader",
    "RecordFields",
    # Parsers
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
    # Loading
    "validate_cross_references",
    "LoadResult",
    "CampaignBuilder",
    "ContentLoader",
    "load_campaign",
]
