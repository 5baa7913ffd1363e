"""Rule engines that run against loaded campaign content.

Submodules:
    dice: Dice rolling with D&D 5E mechanics (d20 library)
    spawner: Monster template registry and instantiation
    skill_checks: Mini-game skill-check resolution

Example:
    >>> from questkeeper.engine import DiceRoller, SkillCheckResolver
    >>> resolver = SkillCheckResolver(DiceRoller(seed=42))
    >>> result = resolver.evaluate(mini_game, hero)
    >>> print(result.formatted())
"""

from __future__ import annotations

# =============================================================================
# Dice Rolling
# =============================================================================
from questkeeper.engine.dice import (
    D20Result,
    DiceResult,
    DiceRoller,
    RollType,
    get_default_roller,
    reset_default_roller,
    roll,
)

# =============================================================================
# Monster Spawning
# =============================================================================
from questkeeper.engine.spawner import (
    MonsterTemplateRegistry,
    generate_instance_id,
)

# =============================================================================
# Skill Checks
# =============================================================================
from questkeeper.engine.skill_checks import (
    CheckOutcome,
    SkillCheckResolver,
    SkillCheckResult,
)


__all__ = [
    # Dice
    "RollType",
    "DiceResult",
    "D20Result",
    "DiceRoller",
    "get_default_roller",
    "reset_default_roller",
    "roll",
    # Spawning
    "MonsterTemplateRegistry",
    "generate_instance_id",
    # Skill checks
    "CheckOutcome",
    "SkillCheckResult",
    "SkillCheckResolver",
]
