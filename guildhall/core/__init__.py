"""Guildhall simulation core"""

from guildhall.core.adventurer import Adventurer, CoreStats, roll_adventurer
from guildhall.core.enums import (
    AdventurerClass,
    AdventurerStatus,
    EquipmentSlot,
    Formation,
    Rarity,
)
from guildhall.core.equipment import (
    EquipmentCatalog,
    EquipmentGenerator,
    EquipmentInstance,
    NoTemplateForSlotError,
    default_catalog,
)
from guildhall.core.party import Party, PartySummary, Synergy, evaluate_synergies
from guildhall.core.random_source import RandomSource

__all__ = [
    "Adventurer",
    "CoreStats",
    "roll_adventurer",
    "AdventurerClass",
    "AdventurerStatus",
    "EquipmentSlot",
    "Formation",
    "Rarity",
    "EquipmentCatalog",
    "EquipmentGenerator",
    "EquipmentInstance",
    "NoTemplateForSlotError",
    "default_catalog",
    "Party",
    "PartySummary",
    "Synergy",
    "evaluate_synergies",
    "RandomSource",
]
