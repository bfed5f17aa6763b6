"""Adventurer party: roster, leader, formation and derived stats.

Every roster/formation change rebuilds the synergy list from scratch through
recalculate(). Cohesion, morale, bonuses, combat power and health are
aggregated from the current members each time they are read, so damage,
healing and equipment changes show up without a roster change.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Mapping, Optional

from guildhall.core.adventurer.models import Adventurer
from guildhall.core.enums import AdventurerClass, AdventurerStatus, Formation

from .aggregation import PartyStats, aggregate_party_stats
from .synergy import (
    DAMAGE_DEALERS,
    MAGIC_USERS,
    TANKS_AND_HEALERS,
    Synergy,
    class_distribution,
    evaluate_synergies,
)

if TYPE_CHECKING:
    from .mission import MissionOutcome

logger = logging.getLogger(__name__)

MIN_PARTY_SIZE = 1
MAX_PARTY_SIZE = 6
DEFAULT_PARTY_SIZE = 4

FORMATION_DESCRIPTIONS: dict[Formation, str] = {
    Formation.BALANCED: "Balanced formation for any situation",
    Formation.OFFENSIVE: "Formation focused on maximum damage",
    Formation.DEFENSIVE: "Defensive formation for survival",
    Formation.MAGIC: "Magic formation for powerful spells",
    Formation.STEALTH: "Stealth formation for infiltration",
    Formation.CUSTOM: "Custom formation",
}


@dataclass(frozen=True)
class PartySummary:
    name: str
    size: int
    max_size: int
    avg_level: int
    combat_power: float
    cohesion: float
    morale: float
    success_rate: float
    formation: Formation
    active_synergy_names: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["formation"] = self.formation.value
        data["active_synergy_names"] = list(self.active_synergy_names)
        return data


class Party:
    """A group of up to six adventurers sent on missions together."""

    def __init__(self, party_id: str, name: str, max_size: int = DEFAULT_PARTY_SIZE):
        self.party_id = party_id
        self.name = name
        self.max_size = max(MIN_PARTY_SIZE, min(max_size, MAX_PARTY_SIZE))
        self.formation = Formation.BALANCED
        self.is_active = True
        self.is_on_mission = False

        self.missions_completed = 0
        self.success_rate = 0.0

        self._members: list[Adventurer] = []
        self._leader: Optional[Adventurer] = None

        self._synergies: tuple[Synergy, ...] = ()

        self.recalculate()

    def __repr__(self) -> str:
        return f"Party({self.name!r}, {self.size}/{self.max_size}, {self.formation.value})"

    # === Read-only views ===

    @property
    def members(self) -> tuple[Adventurer, ...]:
        return tuple(self._members)

    @property
    def leader(self) -> Optional[Adventurer]:
        return self._leader

    @property
    def synergies(self) -> tuple[Synergy, ...]:
        return self._synergies

    @property
    def stats(self) -> PartyStats:
        return aggregate_party_stats(
            self._members,
            self._leader,
            self._synergies,
            self.missions_completed,
            self.success_rate,
        )

    @property
    def combined_bonuses(self) -> Mapping[str, float]:
        return self.stats.combined_bonuses

    @property
    def cohesion(self) -> float:
        return self.stats.cohesion

    @property
    def morale(self) -> float:
        return self.stats.morale

    @property
    def combat_power(self) -> float:
        return self.stats.combat_power

    @property
    def overall_health(self) -> float:
        return self.stats.overall_health

    @property
    def size(self) -> int:
        return len(self._members)

    @property
    def is_full(self) -> bool:
        return self.size >= self.max_size

    @property
    def is_empty(self) -> bool:
        return not self._members

    @property
    def has_leader(self) -> bool:
        return self._leader is not None

    @property
    def total_level(self) -> int:
        return sum(m.level for m in self._members)

    @property
    def average_level(self) -> int:
        """Integer average, 0 for an empty party."""
        if not self._members:
            return 0
        return self.total_level // self.size

    def has_member(self, adventurer: Optional[Adventurer]) -> bool:
        return any(m is adventurer for m in self._members)

    def class_distribution(self) -> dict[AdventurerClass, int]:
        return class_distribution(self._members)

    # === Roster ===

    def add_member(
        self, adventurer: Optional[Adventurer], position: Optional[int] = None
    ) -> bool:
        """Append (or insert at `position`) an available adventurer.

        The first member of a leaderless party leads it.
        """
        if adventurer is None or self.has_member(adventurer):
            return False
        if self.is_full or not adventurer.is_available:
            return False

        if position is None:
            self._members.append(adventurer)
        else:
            self._members.insert(position, adventurer)
        adventurer.party_id = self.party_id
        if self._leader is None:
            self._leader = adventurer

        logger.debug("Party %s: added %s", self.party_id, adventurer.adventurer_id)
        self.recalculate()
        return True

    def remove_member(self, adventurer: Optional[Adventurer]) -> bool:
        if not self.has_member(adventurer):
            return False

        self._members = [m for m in self._members if m is not adventurer]
        adventurer.party_id = None
        if self._leader is adventurer:
            self._leader = self.best_leader_candidate()

        logger.debug("Party %s: removed %s", self.party_id, adventurer.adventurer_id)
        self.recalculate()
        return True

    def set_leader(self, adventurer: Optional[Adventurer]) -> bool:
        if not self.has_member(adventurer):
            return False
        self._leader = adventurer
        self.recalculate()
        return True

    def set_formation(self, formation: Formation) -> bool:
        self.formation = formation
        self.recalculate()
        return True

    def best_leader_candidate(self) -> Optional[Adventurer]:
        """Member with the highest charisma + level; the earliest added wins ties."""
        best: Optional[Adventurer] = None
        best_score = None
        for member in self._members:
            score = member.charisma + member.level
            if best_score is None or score > best_score:
                best, best_score = member, score
        return best

    def rename(self, name: str) -> bool:
        name = name.strip()
        if not name:
            return False
        self.name = name
        return True

    def set_mission_status(self, on_mission: bool) -> None:
        """Flag the party and its members as away (or back from) a mission."""
        self.is_on_mission = on_mission
        for member in self._members:
            if on_mission:
                member.set_status(AdventurerStatus.ON_MISSION)
            elif member.status == AdventurerStatus.ON_MISSION:
                member.set_status(AdventurerStatus.AVAILABLE)

    # === Formation ===

    def is_valid_formation(self) -> bool:
        """Whether the roster suits the chosen formation (advisory only)."""
        counts = self.class_distribution()
        if self.formation == Formation.BALANCED:
            return self.size >= 2
        if self.formation == Formation.OFFENSIVE:
            return sum(counts.get(c, 0) for c in DAMAGE_DEALERS) >= 2
        if self.formation == Formation.DEFENSIVE:
            return sum(counts.get(c, 0) for c in TANKS_AND_HEALERS) >= 1
        if self.formation == Formation.MAGIC:
            return sum(counts.get(c, 0) for c in MAGIC_USERS) >= 2
        if self.formation == Formation.STEALTH:
            return counts.get(AdventurerClass.ROGUE, 0) >= 1
        return True

    def formation_description(self) -> str:
        return FORMATION_DESCRIPTIONS[self.formation]

    # === Derived stats ===

    def recalculate(self) -> None:
        """Rebuild the synergy list from the current roster and formation."""
        self._synergies = tuple(evaluate_synergies(self._members, self.formation))

    def complete_mission(self, success: bool) -> MissionOutcome:
        """Apply a mission result; see mission.apply_mission_outcome."""
        from .mission import apply_mission_outcome

        return apply_mission_outcome(self, success)

    # === Output ===

    def get_summary(self) -> PartySummary:
        stats = self.stats
        return PartySummary(
            name=self.name,
            size=self.size,
            max_size=self.max_size,
            avg_level=self.average_level,
            combat_power=stats.combat_power,
            cohesion=stats.cohesion,
            morale=stats.morale,
            success_rate=self.success_rate,
            formation=self.formation,
            active_synergy_names=tuple(s.name for s in self._synergies),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "party_id": self.party_id,
            "name": self.name,
            "max_size": self.max_size,
            "formation": self.formation.value,
            "member_ids": [m.adventurer_id for m in self._members],
            "leader_id": self._leader.adventurer_id if self._leader else None,
            "is_active": self.is_active,
            "is_on_mission": self.is_on_mission,
            "missions_completed": self.missions_completed,
            "success_rate": self.success_rate,
        }

    @classmethod
    def from_record(
        cls, record: Mapping[str, Any], adventurers: Mapping[str, Adventurer]
    ) -> Party:
        """Rebuild a party from to_record() output.

        Members are attached directly (availability is not re-checked: a saved
        party may be on a mission). Unknown member ids are skipped.
        """
        party = cls(
            record["party_id"],
            record["name"],
            int(record.get("max_size", DEFAULT_PARTY_SIZE)),
        )
        party.formation = Formation(record.get("formation", Formation.BALANCED.value))
        party.is_active = bool(record.get("is_active", True))
        party.is_on_mission = bool(record.get("is_on_mission", False))
        party.missions_completed = int(record.get("missions_completed", 0))
        party.success_rate = float(record.get("success_rate", 0.0))

        for adventurer_id in record.get("member_ids", []):
            adventurer = adventurers.get(adventurer_id)
            if adventurer is None:
                logger.warning("Party %s: member %s not found", party.party_id, adventurer_id)
                continue
            if party.is_full:
                break
            party._members.append(adventurer)
            adventurer.party_id = party.party_id

        leader_id = record.get("leader_id")
        party._leader = next(
            (m for m in party._members if m.adventurer_id == leader_id), None
        ) or party.best_leader_candidate()
        party.recalculate()
        return party
