"""Pydantic V2 schemas for trials and the mini-games they are built from.

Both are immutable content. Progress through a trial (which mini-games
are solved, whether the completion flag is set) belongs to the game-state
layer, not to these models.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from questkeeper.core.constants import DEFAULT_DC, DEFAULT_FAILURE_TEXT, DEFAULT_SUCCESS_TEXT, MIN_DC
from questkeeper.models.enums import MiniGameType, Skill


class MiniGame(BaseModel):
    """A single skill-check puzzle.

    Attributes:
        id: Unique mini-game identifier.
        name: Display name.
        game_type: Presentation style.
        description: Narrative setup.
        hint: Optional hint text.
        required_skill: Skill checked by default; None if content omitted it.
        alternate_skill: Another skill the caller may choose instead.
        dc: Difficulty class (at least 1).
        allow_retry: Whether a failed check may be attempted again.
        reward_item_id: Item granted on success.
        reward_text: Narrative reward when no item is granted.
        success_text: Text shown on success.
        failure_text: Text shown on failure.
        fail_consequence: Narrative consequence of failure.
        failure_damage: Hit points lost on failure.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    id: str = Field(min_length=1, description="Unique identifier")
    name: str = Field(description="Mini-game name")
    game_type: MiniGameType = MiniGameType.SKILL_CHECK
    description: str = ""
    hint: str = ""
    required_skill: Skill | None = None
    alternate_skill: Skill | None = None
    dc: int = Field(default=DEFAULT_DC, ge=MIN_DC)
    allow_retry: bool = False
    reward_item_id: str | None = None
    reward_text: str = ""
    success_text: str = DEFAULT_SUCCESS_TEXT
    failure_text: str = DEFAULT_FAILURE_TEXT
    fail_consequence: str = ""
    failure_damage: int = Field(default=0, ge=0)

    @property
    def allowed_skills(self) -> tuple[Skill, ...]:
        """Skills a caller may choose for this check, required skill first."""
        return tuple(
            skill for skill in (self.required_skill, self.alternate_skill) if skill is not None
        )

    @property
    def has_reward(self) -> bool:
        return self.reward_item_id is not None or bool(self.reward_text)


class Trial(BaseModel):
    """A themed sequence of mini-games.

    Attributes:
        id: Unique trial identifier.
        name: Display name.
        description: Narrative description.
        difficulty: Free-text difficulty label.
        location_id: Location where the trial takes place.
        entry_narrative: Text read when the trial starts.
        mini_game_ids: Member mini-games in play order.
        prerequisites: Flags that must be set before the trial opens.
        completion_reward: Reward text on completion.
        stinger: Closing narrative beat on completion.
        completion_flag: Flag set when the trial is completed.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    id: str = Field(min_length=1, description="Unique identifier")
    name: str = Field(description="Trial name")
    description: str = ""
    difficulty: str = ""
    location_id: str | None = None
    entry_narrative: str = ""
    mini_game_ids: tuple[str, ...] = ()
    prerequisites: frozenset[str] = frozenset()
    completion_reward: str = ""
    stinger: str = ""
    completion_flag: str = ""

    @model_validator(mode="before")
    @classmethod
    def default_completion_flag(cls, data: Any) -> Any:
        """Default the completion flag to ``<id>_complete``."""
        if isinstance(data, dict) and not data.get("completion_flag") and data.get("id"):
            return {**data, "completion_flag": f"{data['id']}_complete"}
        return data

    @property
    def mini_game_count(self) -> int:
        return len(self.mini_game_ids)

    def is_open(self, flags: set[str] | frozenset[str]) -> bool:
        """Whether every prerequisite flag is among ``flags``."""
        return self.prerequisites <= flags

    def completion_message(self) -> str:
        """Reward and stinger text shown when the trial is completed."""
        parts = []
        if self.completion_reward:
            parts.append(f"Reward: {self.completion_reward}")
        if self.stinger:
            parts.append(self.stinger)
        return "\n\n".join(parts)


__all__ = [
    "MiniGame",
    "Trial",
]
