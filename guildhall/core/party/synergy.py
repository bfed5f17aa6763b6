"""Party synergy evaluation - pure function over (members, formation).

Rules are data: adding a synergy means adding a table row, not a branch.
Class rules are all checked; only the active formation's rule is checked.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Sequence

from guildhall.core.adventurer.models import Adventurer
from guildhall.core.enums import AdventurerClass, Formation

MIN_MEMBERS_FOR_SYNERGY = 2

DAMAGE_DEALERS = frozenset(
    {
        AdventurerClass.WARRIOR,
        AdventurerClass.MAGE,
        AdventurerClass.ROGUE,
        AdventurerClass.RANGER,
    }
)
TANKS_AND_HEALERS = frozenset({AdventurerClass.WARRIOR, AdventurerClass.CLERIC})
MAGIC_USERS = frozenset({AdventurerClass.MAGE, AdventurerClass.CLERIC})


@dataclass(frozen=True)
class Synergy:
    """An active bonus condition. `bonuses` is a read-only view."""

    name: str
    description: str
    bonuses: Mapping[str, float]

    def __post_init__(self) -> None:
        object.__setattr__(self, "bonuses", MappingProxyType(dict(self.bonuses)))


ClassCounts = Mapping[AdventurerClass, int]


@dataclass(frozen=True)
class SynergyRule:
    name: str
    description: str
    bonuses: Mapping[str, float]
    applies: Callable[[ClassCounts], bool]

    def build(self) -> Synergy:
        return Synergy(self.name, self.description, self.bonuses)


def count_in(counts: ClassCounts, classes: Iterable[AdventurerClass]) -> int:
    """Number of members whose class is in `classes`."""
    return sum(counts.get(c, 0) for c in classes)


CLASS_SYNERGY_RULES: tuple[SynergyRule, ...] = (
    SynergyRule(
        "Tank & Heal",
        "Improved survivability",
        {"Defense": 15.0, "HealthRegen": 10.0},
        lambda c: c.get(AdventurerClass.WARRIOR, 0) >= 1 and c.get(AdventurerClass.CLERIC, 0) >= 1,
    ),
    SynergyRule(
        "Arcane Focus",
        "Enhanced magical power",
        {"MagicDamage": 25.0, "ManaRegen": 15.0},
        lambda c: c.get(AdventurerClass.MAGE, 0) >= 2,
    ),
    SynergyRule(
        "Shadow Strike",
        "Increased critical chance",
        {"CriticalChance": 20.0, "Initiative": 10.0},
        lambda c: c.get(AdventurerClass.ROGUE, 0) >= 2,
    ),
    SynergyRule(
        "Perfect Balance",
        "All stats boosted",
        {"AllStats": 10.0},
        lambda c: sum(1 for n in c.values() if n > 0) >= 4,
    ),
)

FORMATION_SYNERGY_RULES: dict[Formation, SynergyRule] = {
    Formation.OFFENSIVE: SynergyRule(
        "All-Out Attack",
        "Maximum damage output",
        {"Damage": 30.0, "AttackSpeed": 15.0},
        lambda c: count_in(c, DAMAGE_DEALERS) >= 3,
    ),
    Formation.DEFENSIVE: SynergyRule(
        "Fortress",
        "Maximum defense",
        {"Defense": 25.0, "HealthRegen": 20.0},
        lambda c: count_in(c, TANKS_AND_HEALERS) >= 2,
    ),
    Formation.MAGIC: SynergyRule(
        "Magical Circle",
        "Enhanced spellcasting",
        {"MagicPower": 35.0, "ManaEfficiency": 20.0},
        lambda c: count_in(c, MAGIC_USERS) >= 3,
    ),
}


def class_distribution(members: Iterable[Adventurer]) -> dict[AdventurerClass, int]:
    return dict(Counter(m.adventurer_class for m in members))


def evaluate_synergies(
    members: Sequence[Adventurer], formation: Formation
) -> list[Synergy]:
    """Every synergy the roster currently earns. Empty below two members.

    Records are independent; overlapping bonus keys are summed later by the
    aggregator.
    """
    if len(members) < MIN_MEMBERS_FOR_SYNERGY:
        return []

    counts = class_distribution(members)
    active = [rule.build() for rule in CLASS_SYNERGY_RULES if rule.applies(counts)]

    formation_rule = FORMATION_SYNERGY_RULES.get(formation)
    if formation_rule is not None and formation_rule.applies(counts):
        active.append(formation_rule.build())
    return active
