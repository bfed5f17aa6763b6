"""Adventurer domain model (DB-independent)"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from guildhall.core.enums import (
    ADVENTURER_SLOTS,
    AdventurerClass,
    AdventurerStatus,
    EquipmentSlot,
)
from guildhall.core.equipment.models import EquipmentInstance

logger = logging.getLogger(__name__)

INJURED_BELOW_RATIO = 0.3  # take_damage: below 30% -> INJURED
RECOVERED_ABOVE_RATIO = 0.5  # heal: above 50% clears INJURED
SUCCESS_EXPERIENCE = 50
FAILURE_EXPERIENCE = 10


@dataclass
class CoreStats:
    """Five core stats."""

    strength: int = 10
    intelligence: int = 10
    agility: int = 10
    constitution: int = 10
    charisma: int = 10

    FIELDS = ("strength", "intelligence", "agility", "constitution", "charisma")

    @property
    def total(self) -> int:
        return sum(getattr(self, name) for name in self.FIELDS)

    def get(self, name: str) -> int:
        if name not in self.FIELDS:
            raise KeyError(name)
        return getattr(self, name)

    def add(self, name: str, amount: int) -> None:
        setattr(self, name, self.get(name) + amount)

    def to_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in self.FIELDS}


@dataclass(eq=False)
class Adventurer:
    """Recruitable character. Identity semantics: two adventurers are never equal by value."""

    adventurer_id: str
    name: str
    adventurer_class: AdventurerClass
    level: int = 1
    experience: int = 0
    stats: CoreStats = field(default_factory=CoreStats)

    # health
    max_health: int = 100
    current_health: Optional[int] = None  # None = full health
    status: AdventurerStatus = AdventurerStatus.AVAILABLE

    loyalty: float = 50.0  # 0 ~ 100
    party_id: Optional[str] = None

    equipment: dict[EquipmentSlot, EquipmentInstance] = field(default_factory=dict)

    # mission history
    missions_completed: int = 0
    missions_successful: int = 0
    missions_failed: int = 0
    days_in_service: int = 0

    def __post_init__(self) -> None:
        if self.max_health < 1:
            raise ValueError(f"max_health must be positive: {self.max_health}")
        if self.current_health is None:
            self.current_health = self.max_health
        self.current_health = max(0, min(self.current_health, self.max_health))
        self.loyalty = max(0.0, min(float(self.loyalty), 100.0))

    # === Derived ===

    @property
    def is_available(self) -> bool:
        """Injured, dead, resting, training or on-mission adventurers are unavailable."""
        return self.status == AdventurerStatus.AVAILABLE

    @property
    def is_alive(self) -> bool:
        return self.status != AdventurerStatus.DEAD

    @property
    def is_in_party(self) -> bool:
        return self.party_id is not None

    @property
    def health_ratio(self) -> float:
        return self.current_health / self.max_health

    @property
    def success_rate(self) -> float:
        if self.missions_completed == 0:
            return 0.0
        return self.missions_successful / self.missions_completed

    @property
    def charisma(self) -> int:
        return self.stats.charisma

    def equipped_items(self) -> list[EquipmentInstance]:
        """Equipped items in slot order (weapon, armor, accessory, helmet, boots)."""
        return [self.equipment[s] for s in ADVENTURER_SLOTS if s in self.equipment]

    @property
    def equipment_power(self) -> int:
        return sum(item.item_power for item in self.equipped_items())

    @property
    def individual_combat_power(self) -> int:
        """stat sum * level + equipped item power"""
        return self.stats.total * self.level + self.equipment_power

    def get_total_stat(self, stat_key: str) -> int:
        """Equipment bonus for `stat_key` plus the matching core stat, if any.

        Equipment stat keys are capitalized ("Strength"); core stats are lowercase.
        """
        core_name = stat_key.lower()
        base = self.stats.get(core_name) if core_name in CoreStats.FIELDS else 0
        return base + sum(item.get_stat(stat_key) for item in self.equipped_items())

    # === Equipment ===

    def can_equip(self, item: Optional[EquipmentInstance]) -> bool:
        if item is None:
            return False
        if item.slot not in ADVENTURER_SLOTS:
            return False
        if self.level < item.required_level:
            return False
        if item.class_requirement is not None and item.class_requirement != self.adventurer_class:
            return False
        return True

    def equip(self, item: Optional[EquipmentInstance]) -> bool:
        """Place item in its slot, replacing any current item. False if not allowed."""
        if not self.can_equip(item):
            return False
        previous = self.equipment.get(item.slot)
        self.equipment[item.slot] = item
        logger.debug(
            "%s equipped %s (replaced=%s)",
            self.adventurer_id,
            item.instance_id,
            previous.instance_id if previous else None,
        )
        return True

    def unequip(self, slot: EquipmentSlot) -> Optional[EquipmentInstance]:
        """Remove and return the item in `slot` (None when empty)."""
        return self.equipment.pop(slot, None)

    # === Health / status ===

    def set_status(self, status: AdventurerStatus) -> None:
        self.status = status

    def take_damage(self, amount: int) -> None:
        """0 health -> DEAD; below 30% -> INJURED."""
        if amount <= 0 or not self.is_alive:
            return
        self.current_health = max(0, self.current_health - amount)
        if self.current_health == 0:
            self.status = AdventurerStatus.DEAD
            logger.info("Adventurer %s died", self.adventurer_id)
        elif self.current_health < self.max_health * INJURED_BELOW_RATIO:
            self.status = AdventurerStatus.INJURED

    def heal(self, amount: int) -> None:
        """Above 50% health an INJURED adventurer becomes AVAILABLE again."""
        if amount <= 0 or not self.is_alive:
            return
        self.current_health = min(self.max_health, self.current_health + amount)
        if (
            self.status == AdventurerStatus.INJURED
            and self.current_health > self.max_health * RECOVERED_ABOVE_RATIO
        ):
            self.status = AdventurerStatus.AVAILABLE

    def record_mission(self, success: bool) -> int:
        """Update mission counters. Returns the experience earned (applied by progression)."""
        self.missions_completed += 1
        if success:
            self.missions_successful += 1
            return SUCCESS_EXPERIENCE
        self.missions_failed += 1
        return FAILURE_EXPERIENCE

    # === Persistence boundary ===

    def to_record(self) -> dict[str, Any]:
        return {
            "adventurer_id": self.adventurer_id,
            "name": self.name,
            "adventurer_class": self.adventurer_class.value,
            "level": self.level,
            "experience": self.experience,
            "stats": self.stats.to_dict(),
            "max_health": self.max_health,
            "current_health": self.current_health,
            "status": self.status.value,
            "loyalty": self.loyalty,
            "party_id": self.party_id,
            "equipment": {
                slot.value: item.instance_id for slot, item in self.equipment.items()
            },
            "missions_completed": self.missions_completed,
            "missions_successful": self.missions_successful,
            "missions_failed": self.missions_failed,
            "days_in_service": self.days_in_service,
        }

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        items: Mapping[str, EquipmentInstance] | None = None,
    ) -> Adventurer:
        """Rebuild from to_record() output. `items` resolves equipment instance ids;
        ids missing from it are dropped with a warning."""
        items = items or {}
        equipment: dict[EquipmentSlot, EquipmentInstance] = {}
        for slot_value, instance_id in record.get("equipment", {}).items():
            item = items.get(instance_id)
            if item is None:
                logger.warning(
                    "Equipment %s for %s not found, slot left empty",
                    instance_id,
                    record["adventurer_id"],
                )
                continue
            equipment[EquipmentSlot(slot_value)] = item

        return cls(
            adventurer_id=record["adventurer_id"],
            name=record["name"],
            adventurer_class=AdventurerClass(record["adventurer_class"]),
            level=int(record.get("level", 1)),
            experience=int(record.get("experience", 0)),
            stats=CoreStats(**record.get("stats", {})),
            max_health=int(record.get("max_health", 100)),
            current_health=record.get("current_health"),
            status=AdventurerStatus(record.get("status", AdventurerStatus.AVAILABLE.value)),
            loyalty=float(record.get("loyalty", 50.0)),
            party_id=record.get("party_id"),
            equipment=equipment,
            missions_completed=int(record.get("missions_completed", 0)),
            missions_successful=int(record.get("missions_successful", 0)),
            missions_failed=int(record.get("missions_failed", 0)),
            days_in_service=int(record.get("days_in_service", 0)),
        )
