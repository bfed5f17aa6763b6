"""Shared enumerations for equipment, adventurers and parties"""

from enum import Enum


class AdventurerClass(str, Enum):
    WARRIOR = "warrior"
    MAGE = "mage"
    ROGUE = "rogue"
    CLERIC = "cleric"
    RANGER = "ranger"


class AdventurerStatus(str, Enum):
    AVAILABLE = "available"
    ON_MISSION = "on_mission"
    INJURED = "injured"
    DEAD = "dead"
    RESTING = "resting"
    TRAINING = "training"


class EquipmentSlot(str, Enum):
    WEAPON = "weapon"
    ARMOR = "armor"
    HELMET = "helmet"
    BOOTS = "boots"
    ACCESSORY = "accessory"
    SHIELD = "shield"


class Rarity(str, Enum):
    """Ordinal quality tier. Declaration order is the rank."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    ARTIFACT = "artifact"

    @property
    def rank(self) -> int:
        return _RARITY_ORDER.index(self)

    def at_least(self, other: "Rarity") -> bool:
        return self.rank >= other.rank


_RARITY_ORDER: tuple[Rarity, ...] = tuple(Rarity)


class Formation(str, Enum):
    BALANCED = "balanced"
    OFFENSIVE = "offensive"
    DEFENSIVE = "defensive"
    MAGIC = "magic"
    STEALTH = "stealth"
    CUSTOM = "custom"


# Slots an adventurer can fill (shield templates exist but have no slot)
ADVENTURER_SLOTS: tuple[EquipmentSlot, ...] = (
    EquipmentSlot.WEAPON,
    EquipmentSlot.ARMOR,
    EquipmentSlot.ACCESSORY,
    EquipmentSlot.HELMET,
    EquipmentSlot.BOOTS,
)
