"""Skill-check resolution for trial mini-games.

One call to ``SkillCheckResolver.evaluate`` is one attempt: one chosen
skill, one d20. Choosing the alternate skill or retrying after a failure
is the caller's decision; the result says which options remain.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from questkeeper.core.exceptions import SkillCheckError, ValidationError
from questkeeper.core.logging import get_logger
from questkeeper.engine.dice import D20Result, DiceRoller, RollType, get_default_roller
from questkeeper.models.character import SkillCheckSubject
from questkeeper.models.enums import Skill, parse_token
from questkeeper.models.puzzles import MiniGame


logger = get_logger(__name__)


class CheckOutcome(StrEnum):
    """Pass/fail outcome of one skill check. There is no partial credit."""

    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class SkillCheckResult:
    """Outcome of one mini-game attempt.

    Attributes:
        outcome: SUCCESS when roll plus modifier meets the DC.
        mini_game_id: Mini-game that was attempted.
        skill: Skill used for the check.
        roll: The d20 roll, including the skill modifier.
        dc: Difficulty class the total was compared against.
        message: Success or failure narrative.
        reward_item_id: Item granted on success.
        reward_text: Narrative reward granted on success.
        consequence: Narrative consequence on failure.
        damage_taken: Hit points the character lost on failure.
        can_retry: Whether the mini-game may be attempted again.
        retry_skills: Skills a retry may use.
    """

    outcome: CheckOutcome
    mini_game_id: str
    skill: Skill
    roll: D20Result
    dc: int
    message: str
    reward_item_id: str | None = None
    reward_text: str = ""
    consequence: str = ""
    damage_taken: int = 0
    can_retry: bool = False
    retry_skills: tuple[Skill, ...] = field(default_factory=tuple)

    @property
    def success(self) -> bool:
        return self.outcome is CheckOutcome.SUCCESS

    @property
    def total(self) -> int:
        return self.roll.total

    @property
    def natural_roll(self) -> int:
        return self.roll.natural

    @property
    def was_natural_20(self) -> bool:
        return self.roll.is_critical

    @property
    def was_natural_1(self) -> bool:
        return self.roll.is_fumble

    @property
    def roll_description(self) -> str:
        """E.g. ``d20(14) + Arcana(+3) = 17 vs DC 15``."""
        return (
            f"d20({self.roll.natural}) + {self.skill.display_name}"
            f"({self.roll.modifier:+d}) = {self.roll.total} vs DC {self.dc}"
        )

    def formatted(self) -> str:
        """Multi-line summary suitable for display."""
        lines = ["=== SKILL CHECK ===", self.roll_description]
        if self.was_natural_20:
            lines.append("*** NATURAL 20! ***")
        elif self.was_natural_1:
            lines.append("*** NATURAL 1! ***")
        lines.append("SUCCESS!" if self.success else "FAILURE")
        lines.append("")
        lines.append(self.message)
        if self.reward_item_id:
            lines.append(f"You received: {self.reward_item_id}")
        elif self.reward_text:
            lines.append(f"You received: {self.reward_text}")
        if self.consequence:
            lines.append(f"Consequence: {self.consequence}")
        if self.damage_taken:
            lines.append(f"You take {self.damage_taken} damage.")
        return "\n".join(lines)


class SkillCheckResolver:
    """Evaluates mini-game skill checks.

    Example:
        >>> resolver = SkillCheckResolver(DiceRoller(seed=1))
        >>> result = resolver.evaluate(lock_puzzle, hero, natural_roll=12)
        >>> result.total >= lock_puzzle.dc
        True
    """

    def __init__(self, roller: DiceRoller | None = None) -> None:
        """Initialize the resolver.

        Args:
            roller: Dice roller; the shared default roller when omitted.
        """
        self._roller = roller or get_default_roller()

    def resolve_skill(self, mini_game: MiniGame, skill: Skill | str | None) -> Skill:
        """Pick and validate the skill for an attempt.

        Args:
            mini_game: The mini-game being attempted.
            skill: Requested skill or skill token; None means the required skill.

        Returns:
            The skill to check.

        Raises:
            SkillCheckError: If the mini-game has no required skill, the token
                is not a skill, or the skill is not allowed for this mini-game.
        """
        if mini_game.required_skill is None:
            raise SkillCheckError(
                f"Mini-game '{mini_game.id}' has no required skill set",
                mini_game_id=mini_game.id,
            )
        if skill is None:
            return mini_game.required_skill

        chosen = skill if isinstance(skill, Skill) else parse_token(Skill, skill)
        if chosen is None:
            raise SkillCheckError(f"Invalid skill: {skill}", mini_game_id=mini_game.id)
        if chosen not in mini_game.allowed_skills:
            allowed = " or ".join(s.display_name for s in mini_game.allowed_skills)
            raise SkillCheckError(
                f"Skill {chosen.display_name} is not valid for this challenge. Use {allowed}",
                mini_game_id=mini_game.id,
            )
        return chosen

    def evaluate(
        self,
        mini_game: MiniGame,
        character: SkillCheckSubject | None,
        *,
        skill: Skill | str | None = None,
        roll_type: RollType = RollType.NORMAL,
        natural_roll: int | None = None,
    ) -> SkillCheckResult:
        """Attempt a mini-game once.

        The check succeeds when d20 plus the character's modifier for the
        chosen skill meets or beats the DC. On success the reward is
        granted; on failure ``failure_damage`` is applied to the character.

        Args:
            mini_game: The mini-game being attempted.
            character: The character making the check.
            skill: Skill to use; defaults to the required skill.
            roll_type: Normal, advantage, or disadvantage.
            natural_roll: Use this d20 face instead of rolling.

        Returns:
            The check result.

        Raises:
            ValidationError: If no character is given.
            SkillCheckError: If the skill cannot be used for this mini-game.
            DiceRollError: If ``natural_roll`` is not a d20 face.
        """
        if character is None:
            raise ValidationError("Character cannot be None", field_name="character")

        chosen = self.resolve_skill(mini_game, skill)
        modifier = character.skill_modifier(chosen)
        roll = self._roller.roll_d20(modifier, roll_type=roll_type, natural=natural_roll)
        success = roll.total >= mini_game.dc

        if success:
            result = SkillCheckResult(
                outcome=CheckOutcome.SUCCESS,
                mini_game_id=mini_game.id,
                skill=chosen,
                roll=roll,
                dc=mini_game.dc,
                message=mini_game.success_text,
                reward_item_id=mini_game.reward_item_id,
                reward_text="" if mini_game.reward_item_id else mini_game.reward_text,
            )
        else:
            damage = character.take_damage(mini_game.failure_damage) if mini_game.failure_damage else 0
            result = SkillCheckResult(
                outcome=CheckOutcome.FAILURE,
                mini_game_id=mini_game.id,
                skill=chosen,
                roll=roll,
                dc=mini_game.dc,
                message=mini_game.failure_text,
                consequence=mini_game.fail_consequence,
                damage_taken=damage,
                can_retry=mini_game.allow_retry,
                retry_skills=mini_game.allowed_skills if mini_game.allow_retry else (),
            )

        logger.info(
            "Skill check resolved",
            mini_game_id=mini_game.id,
            character=character.name,
            skill=chosen,
            natural=roll.natural,
            total=roll.total,
            dc=mini_game.dc,
            outcome=result.outcome,
        )
        return result


__all__ = [
    "CheckOutcome",
    "SkillCheckResult",
    "SkillCheckResolver",
]
