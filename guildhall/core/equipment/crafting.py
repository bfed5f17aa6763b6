"""Crafting cost quotes and the affordability check.

Crafting itself (consuming resources, producing the item) belongs to the city
layer; this module only prices a craft and asks the ledger whether it fits.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Mapping, Protocol

from guildhall.core.enums import EquipmentSlot, Rarity

from .generator import level_multiplier, rarity_multiplier
from .models import EquipmentTemplate

logger = logging.getLogger(__name__)


class ResourceKind(str, Enum):
    GOLD = "gold"
    IRON = "iron"
    WOOD = "wood"
    LEATHER = "leather"
    MANA_CRYSTAL = "mana_crystal"


class ResourceLedger(Protocol):
    """City resource bookkeeping, consumed through this single check."""

    def can_afford(self, cost: Mapping[ResourceKind, int]) -> bool: ...


# Base materials per slot at Common / level 1
SLOT_MATERIALS: dict[EquipmentSlot, dict[ResourceKind, int]] = {
    EquipmentSlot.WEAPON: {ResourceKind.IRON: 5, ResourceKind.WOOD: 2},
    EquipmentSlot.ARMOR: {ResourceKind.IRON: 6, ResourceKind.LEATHER: 4},
    EquipmentSlot.HELMET: {ResourceKind.IRON: 3, ResourceKind.LEATHER: 1},
    EquipmentSlot.BOOTS: {ResourceKind.LEATHER: 4},
    EquipmentSlot.ACCESSORY: {ResourceKind.MANA_CRYSTAL: 2},
    EquipmentSlot.SHIELD: {ResourceKind.IRON: 4, ResourceKind.WOOD: 3},
}

# Rare and above also need mana crystals
MANA_CRYSTALS_BY_RARITY: dict[Rarity, int] = {
    Rarity.COMMON: 0,
    Rarity.UNCOMMON: 0,
    Rarity.RARE: 1,
    Rarity.EPIC: 3,
    Rarity.LEGENDARY: 6,
    Rarity.ARTIFACT: 10,
}


def crafting_cost(
    template: EquipmentTemplate, rarity: Rarity, level: int = 1
) -> dict[ResourceKind, int]:
    """Gold = template.base_value scaled by rarity and level; materials scaled by rarity.

    Example: Sword (base_value 100), Rare, lv3
        gold = round(100 * 1.7 * 1.2) = 204
        iron = round(5 * 1.7) = 8, wood = round(2 * 1.7) = 3, mana_crystal = 1
    """
    r_mult = rarity_multiplier(rarity)
    cost: dict[ResourceKind, int] = {
        ResourceKind.GOLD: round(template.base_value * r_mult * level_multiplier(level)),
    }
    for kind, amount in SLOT_MATERIALS[template.slot].items():
        cost[kind] = cost.get(kind, 0) + round(amount * r_mult)

    crystals = MANA_CRYSTALS_BY_RARITY[rarity]
    if crystals:
        cost[ResourceKind.MANA_CRYSTAL] = cost.get(ResourceKind.MANA_CRYSTAL, 0) + crystals
    return cost


def can_craft(
    ledger: ResourceLedger,
    template: EquipmentTemplate,
    rarity: Rarity,
    level: int = 1,
) -> bool:
    cost = crafting_cost(template, rarity, level)
    affordable = ledger.can_afford(cost)
    logger.debug(
        "Craft check %s (%s, lv%d): affordable=%s", template.template_id, rarity.value, level, affordable
    )
    return affordable
