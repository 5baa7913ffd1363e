"""Pydantic V2 schemas for the explorable world: locations and NPCs.

Locations and NPCs are built once by the content loader. Exits, ground
items, NPC placement and flags may later be changed by the game-state
layer; the loader only produces the initial snapshot.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


LOCKED_FLAG = "locked"
"""Reserved location flag that also toggles the lock state."""


# =============================================================================
# Location
# =============================================================================


class Location(BaseModel):
    """A place the party can visit.

    Attributes:
        id: Unique location identifier.
        name: Display name.
        description: Narrative description.
        read_aloud_text: Boxed text read to players on arrival.
        exits: Direction to destination location identifier.
        npc_ids: NPCs present at this location.
        item_ids: Items lying on the ground.
        flags: Opaque string flags; ``locked`` also sets ``locked``.
        locked: Whether the location is currently locked.
    """

    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        validate_assignment=True,
    )

    id: str = Field(min_length=1, description="Unique identifier")
    name: str = Field(description="Location name")
    description: str = ""
    read_aloud_text: str = ""
    exits: dict[str, str] = Field(default_factory=dict)
    npc_ids: list[str] = Field(default_factory=list)
    item_ids: list[str] = Field(default_factory=list)
    flags: set[str] = Field(default_factory=set)
    locked: bool = False

    def add_exit(self, direction: str, destination_id: str) -> None:
        """Add or replace an exit; directions are stored lowercase."""
        self.exits[direction.strip().lower()] = destination_id

    def get_exit(self, direction: str) -> str | None:
        """Look up the destination for a direction, case-insensitively.

        Args:
            direction: Direction token such as ``"North"``.

        Returns:
            The destination location identifier, or None if there is no exit.
        """
        return self.exits.get(direction.strip().lower())

    def has_exit(self, direction: str) -> bool:
        """Check whether an exit leads in the given direction."""
        return self.get_exit(direction) is not None

    @property
    def directions(self) -> list[str]:
        """Available exit directions in authoring order."""
        return list(self.exits)

    def lock(self) -> None:
        """Lock the location."""
        self.locked = True
        self.flags.add(LOCKED_FLAG)

    def unlock(self) -> None:
        """Unlock the location."""
        self.locked = False
        self.flags.discard(LOCKED_FLAG)

    def set_flag(self, flag: str) -> None:
        """Set a flag on this location."""
        if flag == LOCKED_FLAG:
            self.lock()
        else:
            self.flags.add(flag)

    def clear_flag(self, flag: str) -> None:
        """Clear a flag from this location."""
        if flag == LOCKED_FLAG:
            self.unlock()
        else:
            self.flags.discard(flag)

    def has_flag(self, flag: str) -> bool:
        """Check whether a flag is set."""
        return flag in self.flags


# =============================================================================
# NPC
# =============================================================================


class DialogueEntry(BaseModel):
    """A topic response, optionally gated by and setting story flags.

    Flags are opaque strings here; evaluating them is the game-state
    layer's job.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    text: str
    requires_flag: str | None = None
    sets_flag: str | None = None


class NPC(BaseModel):
    """A non-player character.

    Attributes:
        id: Unique NPC identifier.
        name: Display name.
        role: Narrative role (e.g., 'innkeeper').
        voice: Voice direction for the narrator.
        personality: Personality notes.
        description: Physical description.
        location_id: Home location; None means the NPC is not placed.
        shopkeeper: Whether the NPC trades.
        greeting: First-meeting greeting.
        return_greeting: Greeting on later meetings.
        dialogues: Topic to dialogue entry, keyed by lowercase topic.
        sample_lines: Ordered flavor lines.
    """

    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        validate_assignment=True,
    )

    id: str = Field(min_length=1, description="Unique identifier")
    name: str = Field(description="NPC name")
    role: str = ""
    voice: str = ""
    personality: str = ""
    description: str = ""
    location_id: str | None = None
    shopkeeper: bool = False
    greeting: str = ""
    return_greeting: str = ""
    dialogues: dict[str, DialogueEntry] = Field(default_factory=dict)
    sample_lines: list[str] = Field(default_factory=list)

    @property
    def is_placed(self) -> bool:
        """Whether the NPC has a home location."""
        return self.location_id is not None

    @property
    def topics(self) -> list[str]:
        """Dialogue topics in authoring order."""
        return list(self.dialogues)

    def add_dialogue(self, topic: str, entry: DialogueEntry | str) -> None:
        """Add a dialogue topic; plain strings become ungated entries."""
        if isinstance(entry, str):
            entry = DialogueEntry(text=entry)
        self.dialogues[topic.strip().lower()] = entry

    def get_dialogue(self, topic: str) -> DialogueEntry | None:
        """Look up a dialogue entry by topic, case-insensitively."""
        return self.dialogues.get(topic.strip().lower())

    def greet(self, *, returning: bool = False) -> str:
        """Pick the greeting for a first or later meeting."""
        if returning and self.return_greeting:
            return self.return_greeting
        return self.greeting

    def flags_set(self) -> set[str]:
        """Flags that some dialogue entry of this NPC can set."""
        return {entry.sets_flag for entry in self.dialogues.values() if entry.sets_flag}


__all__ = [
    "LOCKED_FLAG",
    "Location",
    "DialogueEntry",
    "NPC",
]
