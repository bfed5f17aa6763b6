"""Experience, level-up and daily recovery"""

import logging

from guildhall.core.enums import AdventurerStatus
from guildhall.core.random_source import RandomSource

from .models import Adventurer, CoreStats

logger = logging.getLogger(__name__)

MAX_LEVEL = 20

# per level-up, half-open ranges
STAT_GAIN_RANGE = (1, 3)
HEALTH_GAIN_RANGE = (5, 15)


def experience_to_next(level: int) -> int:
    """Experience needed to go from `level` to `level + 1`."""
    return level * 100


def add_experience(adventurer: Adventurer, amount: int, rng: RandomSource) -> int:
    """Add experience and resolve level-ups. Returns the number of levels gained.

    At MAX_LEVEL nothing is gained (0, experience unchanged).
    Each level-up: +1~2 to every core stat, +5~14 max health,
    full heal.
    """
    if amount <= 0 or adventurer.level >= MAX_LEVEL:
        return 0

    adventurer.experience += amount
    gained = 0
    while adventurer.level < MAX_LEVEL and adventurer.experience >= experience_to_next(
        adventurer.level
    ):
        adventurer.experience -= experience_to_next(adventurer.level)
        adventurer.level += 1
        _apply_level_up(adventurer, rng)
        gained += 1

    if adventurer.level >= MAX_LEVEL:
        adventurer.experience = 0

    if gained:
        logger.info(
            "Adventurer %s reached level %d (+%d)",
            adventurer.adventurer_id,
            adventurer.level,
            gained,
        )
    return gained


def _apply_level_up(adventurer: Adventurer, rng: RandomSource) -> None:
    for name in CoreStats.FIELDS:
        adventurer.stats.add(name, rng.range(*STAT_GAIN_RANGE))
    adventurer.max_health += rng.range(*HEALTH_GAIN_RANGE)
    adventurer.current_health = adventurer.max_health


def health_regen(stats: CoreStats) -> int:
    """Daily health regeneration: 1 + constitution * 0.1, rounded."""
    return round(1 + stats.constitution * 0.1)


def advance_day(adventurer: Adventurer) -> None:
    """New-day call-in for one adventurer.

    Living adventurers regenerate health and accrue a day of service;
    RESTING adventurers become AVAILABLE.
    """
    if not adventurer.is_alive:
        return
    adventurer.days_in_service += 1
    adventurer.heal(health_regen(adventurer.stats))
    if adventurer.status == AdventurerStatus.RESTING:
        adventurer.set_status(AdventurerStatus.AVAILABLE)
