"""Equipment domain models (DB-independent)"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from guildhall.core.enums import AdventurerClass, EquipmentSlot, Rarity

# === Per-rarity tables ===
RARITY_MULTIPLIER: dict[Rarity, float] = {
    Rarity.COMMON: 1.0,
    Rarity.UNCOMMON: 1.3,
    Rarity.RARE: 1.7,
    Rarity.EPIC: 2.1,
    Rarity.LEGENDARY: 2.5,
    Rarity.ARTIFACT: 3.5,
}

# half-open [lo, hi)
AFFIX_COUNT_RANGE: dict[Rarity, tuple[int, int]] = {
    Rarity.COMMON: (0, 0),
    Rarity.UNCOMMON: (0, 2),
    Rarity.RARE: (1, 3),
    Rarity.EPIC: (2, 4),
    Rarity.LEGENDARY: (3, 5),
    Rarity.ARTIFACT: (4, 6),
}

# feeds party morale
EQUIPMENT_QUALITY: dict[Rarity, float] = {
    Rarity.COMMON: 0.2,
    Rarity.UNCOMMON: 0.4,
    Rarity.RARE: 0.6,
    Rarity.EPIC: 0.8,
    Rarity.LEGENDARY: 1.0,
    Rarity.ARTIFACT: 1.2,
}


def _frozen_map(values: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class EquipmentTemplate:
    """Base item archetype for one slot. Immutable, owned by the catalog."""

    template_id: str  # "wpn_sword"
    name: str
    slot: EquipmentSlot
    base_stats: Mapping[str, int]  # {"Attack": 15, "Strength": 5}
    preferred_classes: tuple[AdventurerClass, ...] = ()

    description: str = ""
    base_value: int = 0
    required_level: int = 1
    # None = any class may equip
    class_requirement: Optional[AdventurerClass] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_stats", _frozen_map(self.base_stats))
        object.__setattr__(self, "preferred_classes", tuple(self.preferred_classes))

    def prefers(self, adventurer_class: AdventurerClass) -> bool:
        return adventurer_class in self.preferred_classes


@dataclass(frozen=True)
class AffixDefinition:
    """Named prefix/suffix modifier, gated by rarity, drawn by weight."""

    affix_id: str
    name: str
    is_prefix: bool
    stat_deltas: Mapping[str, int]  # additive, may be negative
    min_rarity: Rarity = Rarity.UNCOMMON
    weight: float = 1.0

    def __post_init__(self) -> None:
        if self.weight <= 0:
            raise ValueError(f"Affix weight must be positive: {self.affix_id}={self.weight}")
        object.__setattr__(self, "stat_deltas", _frozen_map(self.stat_deltas))

    def available_at(self, rarity: Rarity) -> bool:
        return rarity.at_least(self.min_rarity)


@dataclass(frozen=True)
class EquipmentInstance:
    """Concrete generated item. Never mutated; upgrades produce a new instance."""

    instance_id: str  # UUID
    template_id: str
    name: str
    slot: EquipmentSlot
    rarity: Rarity
    level: int
    stat_bonuses: Mapping[str, int] = field(default_factory=dict)
    affixes: tuple[str, ...] = ()  # applied affix ids, draw order

    required_level: int = 1
    class_requirement: Optional[AdventurerClass] = None
    enhancement_level: int = 0
    value: int = 0

    def __post_init__(self) -> None:
        if len(set(self.affixes)) != len(self.affixes):
            raise ValueError(f"Duplicate affix on {self.instance_id}: {self.affixes}")
        object.__setattr__(self, "stat_bonuses", _frozen_map(self.stat_bonuses))
        object.__setattr__(self, "affixes", tuple(self.affixes))

    @property
    def item_power(self) -> int:
        """Sum of every stat bonus (negative affix deltas included)."""
        return sum(self.stat_bonuses.values())

    @property
    def quality(self) -> float:
        return EQUIPMENT_QUALITY[self.rarity]

    def get_stat(self, stat_key: str) -> int:
        return self.stat_bonuses.get(stat_key, 0)

    def to_record(self) -> dict[str, Any]:
        """Plain key-value record for an external save system."""
        return {
            "instance_id": self.instance_id,
            "template_id": self.template_id,
            "name": self.name,
            "slot": self.slot.value,
            "rarity": self.rarity.value,
            "level": self.level,
            "stat_bonuses": dict(self.stat_bonuses),
            "affixes": list(self.affixes),
            "required_level": self.required_level,
            "class_requirement": (
                self.class_requirement.value if self.class_requirement else None
            ),
            "enhancement_level": self.enhancement_level,
            "value": self.value,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> EquipmentInstance:
        class_requirement = record.get("class_requirement")
        return cls(
            instance_id=record["instance_id"],
            template_id=record["template_id"],
            name=record["name"],
            slot=EquipmentSlot(record["slot"]),
            rarity=Rarity(record["rarity"]),
            level=int(record["level"]),
            stat_bonuses={k: int(v) for k, v in record.get("stat_bonuses", {}).items()},
            affixes=tuple(record.get("affixes", ())),
            required_level=int(record.get("required_level", 1)),
            class_requirement=(
                AdventurerClass(class_requirement) if class_requirement else None
            ),
            enhancement_level=int(record.get("enhancement_level", 0)),
            value=int(record.get("value", 0)),
        )
