"""Equipment enhancement (+1 ~ +15).

Each attempt costs gold, may fail, and at higher levels may destroy the item.
A successful attempt returns a new EquipmentInstance; the input is untouched.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Optional

from guildhall.core.random_source import RandomSource

from .crafting import ResourceKind, ResourceLedger
from .models import EquipmentInstance

logger = logging.getLogger(__name__)

MAX_ENHANCEMENT_LEVEL = 15
BASE_SUCCESS_CHANCE = 0.8
SUCCESS_DECAY_PER_LEVEL = 0.1
MIN_SUCCESS_CHANCE = 0.1
BASE_DESTRUCTION_CHANCE = 0.05
DESTRUCTION_INCREASE_PER_LEVEL = 0.02
MAX_DESTRUCTION_CHANCE = 0.5
PROTECTION_SUCCESS_PENALTY = 0.8

_ENHANCE_SUFFIX = re.compile(r" \+\d+$")


@dataclass(frozen=True)
class EnhancementLevel:
    level: int
    gold_cost: int
    success_chance: float
    destruction_chance: float
    stat_bonuses: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class EnhancementResult:
    success: bool
    item: Optional[EquipmentInstance]  # new instance on success, the input item otherwise, None if destroyed
    new_level: int = 0
    destroyed: bool = False
    reason: Optional[str] = None  # "max_level" | "insufficient_funds" | "failed" | "destroyed"


def enhancement_level(level: int) -> EnhancementLevel:
    """Table row for reaching `level` (1 ~ MAX_ENHANCEMENT_LEVEL)."""
    if not 1 <= level <= MAX_ENHANCEMENT_LEVEL:
        raise ValueError(f"Enhancement level out of range: {level}")
    return EnhancementLevel(
        level=level,
        gold_cost=100 * level * level,
        success_chance=max(
            MIN_SUCCESS_CHANCE, BASE_SUCCESS_CHANCE - (level - 1) * SUCCESS_DECAY_PER_LEVEL
        ),
        destruction_chance=min(
            MAX_DESTRUCTION_CHANCE,
            BASE_DESTRUCTION_CHANCE + (level - 1) * DESTRUCTION_INCREASE_PER_LEVEL,
        ),
        stat_bonuses={
            "Attack": level * 2,
            "Defense": level * 2,
            "Strength": level,
            "Intelligence": level,
            "Agility": level,
        },
    )


def enhanced_copy(item: EquipmentInstance, level: int) -> EquipmentInstance:
    """New instance with the level's bonuses added and the name tagged +N."""
    row = enhancement_level(level)
    bonuses = dict(item.stat_bonuses)
    for key, value in row.stat_bonuses.items():
        bonuses[key] = bonuses.get(key, 0) + value
    base_name = _ENHANCE_SUFFIX.sub("", item.name)
    return replace(
        item,
        name=f"{base_name} +{level}",
        stat_bonuses=bonuses,
        enhancement_level=level,
    )


def enhance(
    item: EquipmentInstance,
    rng: RandomSource,
    ledger: Optional[ResourceLedger] = None,
    use_protection: bool = False,
) -> EnhancementResult:
    """Attempt one enhancement step.

    Refusals (no roll, no cost): already at MAX_ENHANCEMENT_LEVEL, or the
    ledger cannot cover the gold cost. Protection removes the destruction
    chance at the price of success * 0.8.
    """
    if item.enhancement_level >= MAX_ENHANCEMENT_LEVEL:
        return EnhancementResult(
            success=False, item=item, new_level=item.enhancement_level, reason="max_level"
        )

    target = item.enhancement_level + 1
    row = enhancement_level(target)

    if ledger is not None and not ledger.can_afford({ResourceKind.GOLD: row.gold_cost}):
        return EnhancementResult(
            success=False,
            item=item,
            new_level=item.enhancement_level,
            reason="insufficient_funds",
        )

    success_chance = row.success_chance
    destruction_chance = row.destruction_chance
    if use_protection:
        destruction_chance = 0.0
        success_chance *= PROTECTION_SUCCESS_PENALTY

    roll = rng.uniform(0.0, 1.0)
    if roll <= success_chance:
        upgraded = enhanced_copy(item, target)
        logger.info("Enhanced %s -> +%d", item.instance_id, target)
        return EnhancementResult(success=True, item=upgraded, new_level=target)

    if roll <= success_chance + destruction_chance:
        logger.info("Enhancement destroyed %s at +%d", item.instance_id, target)
        return EnhancementResult(
            success=False,
            item=None,
            new_level=item.enhancement_level,
            destroyed=True,
            reason="destroyed",
        )

    return EnhancementResult(
        success=False, item=item, new_level=item.enhancement_level, reason="failed"
    )
