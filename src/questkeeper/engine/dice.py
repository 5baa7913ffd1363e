"""Dice rolling mechanics for D&D 5E.

This module wraps the d20 library with the handful of rolls the content
rule engines need: arbitrary expressions for monster damage, and d20
checks with advantage, disadvantage, and natural 20/1 detection for
attacks and skill checks.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from enum import StrEnum

import d20

from questkeeper.core.config import get_settings
from questkeeper.core.exceptions import DiceRollError
from questkeeper.core.logging import get_logger


logger = get_logger(__name__)

_DICE_TERM = re.compile(r"(\d*)d(\d+)")


class RollType(StrEnum):
    """Types of d20 rolls."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


_D20_EXPRESSIONS = {
    RollType.NORMAL: "1d20",
    RollType.ADVANTAGE: "2d20kh1",
    RollType.DISADVANTAGE: "2d20kl1",
}


@dataclass(frozen=True)
class DiceResult:
    """Result of rolling an arbitrary dice expression.

    Attributes:
        expression: The expression that was rolled.
        total: The total result of the roll.
        detail: d20's rendering of the individual dice.
    """

    expression: str
    total: int
    detail: str


@dataclass(frozen=True)
class D20Result:
    """Result of a single d20 check.

    Attributes:
        natural: The kept d20 face (1-20).
        modifier: Static modifier added to the die.
        roll_type: Normal, advantage, or disadvantage.
    """

    natural: int
    modifier: int
    roll_type: RollType = RollType.NORMAL

    @property
    def total(self) -> int:
        """Natural roll plus modifier."""
        return self.natural + self.modifier

    @property
    def is_critical(self) -> bool:
        """Whether the die showed a natural 20."""
        return self.natural == 20

    @property
    def is_fumble(self) -> bool:
        """Whether the die showed a natural 1."""
        return self.natural == 1

    @property
    def description(self) -> str:
        """Human-readable roll, e.g. ``d20 (14) + 3 = 17``."""
        sign = "+" if self.modifier >= 0 else "-"
        text = f"d20 ({self.natural}) {sign} {abs(self.modifier)} = {self.total}"
        if self.roll_type is not RollType.NORMAL:
            text += f" [{self.roll_type.value}]"
        if self.is_critical:
            text += " NATURAL 20!"
        elif self.is_fumble:
            text += " Natural 1..."
        return text


class DiceRoller:
    """Dice rolling with D&D 5E mechanics.

    Example:
        >>> roller = DiceRoller(seed=7)
        >>> result = roller.roll("2d6+3")
        >>> 5 <= result.total <= 15
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    @property
    def seed(self) -> int | None:
        """Seed the roller was created with, if any."""
        return self._seed

    def roll(self, expression: str) -> DiceResult:
        """Roll dice according to the given expression.

        Args:
            expression: Dice expression (e.g., '1d4', '2d6+3').

        Returns:
            DiceResult containing the total.

        Raises:
            DiceRollError: If the expression is empty or invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(
                f"Invalid dice expression: {exc}",
                expression=expression,
            ) from exc

        logger.debug("Dice rolled", expression=expression, total=result.total)
        return DiceResult(expression=expression, total=result.total, detail=str(result))

    def roll_d20(
        self,
        modifier: int = 0,
        *,
        roll_type: RollType = RollType.NORMAL,
        natural: int | None = None,
    ) -> D20Result:
        """Roll a d20 check.

        Args:
            modifier: Static modifier added to the die.
            roll_type: Type of roll (normal, advantage, disadvantage).
            natural: Use this face instead of rolling (e.g. a physical die).

        Returns:
            D20Result with the kept face and modifier.

        Raises:
            DiceRollError: If a supplied natural face is outside 1-20.
        """
        if natural is None:
            natural = d20.roll(_D20_EXPRESSIONS[roll_type]).total
        elif not 1 <= natural <= 20:
            raise DiceRollError(
                f"Natural d20 roll must be between 1 and 20, got {natural}",
                expression="1d20",
            )
        result = D20Result(natural=natural, modifier=modifier, roll_type=roll_type)
        logger.debug(
            "d20 rolled",
            natural=result.natural,
            modifier=modifier,
            total=result.total,
            roll_type=roll_type,
        )
        return result

    def roll_attack(
        self,
        attack_bonus: int,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> D20Result:
        """Roll an attack roll.

        Args:
            attack_bonus: The attack bonus to apply.
            roll_type: Type of roll (normal, advantage, disadvantage).

        Returns:
            D20Result containing roll results.
        """
        return self.roll_d20(attack_bonus, roll_type=roll_type)

    def roll_damage(self, damage_expression: str, *, is_critical: bool = False) -> DiceResult:
        """Roll damage, doubling the dice on a critical hit.

        Args:
            damage_expression: Damage dice expression (e.g., '2d6+3').
            is_critical: Whether this is a critical hit.

        Returns:
            DiceResult containing damage roll results.
        """
        if not is_critical:
            return self.roll(damage_expression)

        def double_dice(match: re.Match[str]) -> str:
            count = int(match.group(1) or 1) * 2
            return f"{count}d{match.group(2)}"

        return self.roll(_DICE_TERM.sub(double_dice, damage_expression))


# Module-level convenience roller
_default_roller: DiceRoller | None = None


def get_default_roller() -> DiceRoller:
    """Get the shared roller, creating it on first use.

    The roller is seeded from ``game.dice_seed`` when that setting is present.
    """
    global _default_roller  # noqa: PLW0603
    if _default_roller is None:
        seed = get_settings().game.dice_seed
        _default_roller = DiceRoller(seed=seed)
        logger.debug("Default roller created", seed=seed)
    return _default_roller


def reset_default_roller() -> None:
    """Discard the shared roller so the next use re-reads settings."""
    global _default_roller  # noqa: PLW0603
    _default_roller = None


def roll(expression: str) -> DiceResult:
    """Convenience function to roll dice.

    Args:
        expression: Dice expression (e.g., '1d20+5').

    Returns:
        DiceResult containing roll results.
    """
    return get_default_roller().roll(expression)


__all__ = [
    "RollType",
    "DiceResult",
    "D20Result",
    "DiceRoller",
    "get_default_roller",
    "reset_default_roller",
    "roll",
]
