"""Starting stat rolls for newly recruited adventurers.

Recruitment itself (costs, candidate pools) is handled outside the core;
this only turns (name, class, rng) into a level-1 Adventurer.
"""

import logging
import uuid
from typing import Optional

from guildhall.core.enums import AdventurerClass
from guildhall.core.random_source import RandomSource

from .models import Adventurer, CoreStats

logger = logging.getLogger(__name__)

# half-open ranges per class: (strength, intelligence, agility, constitution, charisma)
CLASS_STAT_RANGES: dict[AdventurerClass, dict[str, tuple[int, int]]] = {
    AdventurerClass.WARRIOR: {
        "strength": (15, 20),
        "intelligence": (8, 12),
        "agility": (10, 15),
        "constitution": (12, 18),
        "charisma": (8, 12),
    },
    AdventurerClass.MAGE: {
        "strength": (6, 10),
        "intelligence": (16, 20),
        "agility": (8, 12),
        "constitution": (6, 10),
        "charisma": (10, 15),
    },
    AdventurerClass.ROGUE: {
        "strength": (10, 15),
        "intelligence": (10, 15),
        "agility": (16, 20),
        "constitution": (10, 14),
        "charisma": (8, 12),
    },
    AdventurerClass.CLERIC: {
        "strength": (8, 12),
        "intelligence": (14, 18),
        "agility": (8, 12),
        "constitution": (10, 14),
        "charisma": (14, 18),
    },
    AdventurerClass.RANGER: {
        "strength": (12, 16),
        "intelligence": (10, 14),
        "agility": (14, 18),
        "constitution": (12, 16),
        "charisma": (10, 14),
    },
}

CLASS_BASE_HEALTH: dict[AdventurerClass, int] = {
    AdventurerClass.WARRIOR: 100,
    AdventurerClass.MAGE: 60,
    AdventurerClass.ROGUE: 80,
    AdventurerClass.CLERIC: 80,
    AdventurerClass.RANGER: 90,
}


def roll_adventurer(
    name: str,
    adventurer_class: AdventurerClass,
    rng: RandomSource,
    adventurer_id: Optional[str] = None,
    loyalty: float = 50.0,
) -> Adventurer:
    """Roll a level-1 adventurer at full health."""
    ranges = CLASS_STAT_RANGES[adventurer_class]
    stats = CoreStats(**{stat: rng.range(lo, hi) for stat, (lo, hi) in ranges.items()})
    adventurer = Adventurer(
        adventurer_id=adventurer_id or str(uuid.uuid4()),
        name=name,
        adventurer_class=adventurer_class,
        stats=stats,
        max_health=CLASS_BASE_HEALTH[adventurer_class],
        loyalty=loyalty,
    )
    logger.debug("Rolled %s (%s): %s", name, adventurer_class.value, stats.to_dict())
    return adventurer
