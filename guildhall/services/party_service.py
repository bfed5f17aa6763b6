"""Party Service - owns the guild's parties and talks to the scheduler via EventBus.

Service -> Core is allowed; services never import each other.
Scheduler call-ins (MISSION_COMPLETED, NEW_DAY) arrive as events.
"""

import logging
import uuid
from typing import Optional

from guildhall.core.adventurer.models import Adventurer
from guildhall.core.adventurer.progression import advance_day
from guildhall.core.enums import AdventurerClass, Formation
from guildhall.core.event_bus import EventBus, GameEvent
from guildhall.core.event_types import EventTypes
from guildhall.core.party.mission import (
    MissionOutcome,
    apply_mission_outcome,
    record_member_outcomes,
)
from guildhall.core.party.party import DEFAULT_PARTY_SIZE, Party
from guildhall.core.party.synergy import (
    DAMAGE_DEALERS,
    MAGIC_USERS,
    TANKS_AND_HEALERS,
)
from guildhall.core.random_source import RandomSource

logger = logging.getLogger(__name__)

SOURCE = "party_service"
DEFAULT_MAX_PARTIES = 5

# auto-assign scoring
EMPTY_PARTY_SCORE = 1.0
NEW_CLASS_SCORE = 2.0
DUPLICATE_CLASS_PENALTY = 0.5
FORMATION_FIT_SCORE = 1.0

# Offensive fit excludes rangers, unlike the All-Out Attack synergy
FORMATION_FIT: dict[Formation, frozenset[AdventurerClass]] = {
    Formation.OFFENSIVE: DAMAGE_DEALERS - {AdventurerClass.RANGER},
    Formation.DEFENSIVE: TANKS_AND_HEALERS,
    Formation.MAGIC: MAGIC_USERS,
}


class UnknownPartyError(LookupError):
    def __init__(self, party_id: str) -> None:
        super().__init__(f"Unknown party: {party_id}")
        self.party_id = party_id


class PartyService:
    """Party CRUD, roster rules across parties, mission and day call-ins"""

    def __init__(
        self,
        event_bus: EventBus,
        rng: RandomSource,
        max_parties: int = DEFAULT_MAX_PARTIES,
        default_party_size: int = DEFAULT_PARTY_SIZE,
    ):
        self._bus = event_bus
        self._rng = rng
        self._max_parties = max_parties
        self._default_party_size = default_party_size
        self._parties: dict[str, Party] = {}
        self._next_number = 1
        self._register_event_handlers()

    def _register_event_handlers(self) -> None:
        """EventBus subscriptions"""
        self._bus.subscribe(EventTypes.MISSION_COMPLETED, self._on_mission_completed)
        self._bus.subscribe(EventTypes.NEW_DAY, self._on_new_day)

    # === Queries ===

    @property
    def parties(self) -> list[Party]:
        return list(self._parties.values())

    @property
    def can_create_party(self) -> bool:
        return len(self._parties) < self._max_parties

    @property
    def active_party_count(self) -> int:
        return sum(1 for p in self._parties.values() if p.is_active and not p.is_empty)

    def get_party(self, party_id: str) -> Party:
        party = self._parties.get(party_id)
        if party is None:
            raise UnknownPartyError(party_id)
        return party

    def find_party_by_name(self, name: str) -> Optional[Party]:
        wanted = name.casefold()
        return next((p for p in self._parties.values() if p.name.casefold() == wanted), None)

    def find_party_of(self, adventurer: Adventurer) -> Optional[Party]:
        if not adventurer.is_in_party:
            return None
        return next((p for p in self._parties.values() if p.has_member(adventurer)), None)

    def available_parties(self) -> list[Party]:
        return [p for p in self._parties.values() if p.is_active and not p.is_on_mission]

    def parties_on_mission(self) -> list[Party]:
        return [p for p in self._parties.values() if p.is_on_mission]

    # === Party lifecycle ===

    def create_party(self, name: Optional[str] = None, size: Optional[int] = None) -> Optional[Party]:
        """New empty party, or None when the guild already has max_parties."""
        if not self.can_create_party:
            logger.info("Party limit reached (%d)", self._max_parties)
            return None

        number = self._next_number
        self._next_number += 1
        party = Party(
            party_id=str(uuid.uuid4()),
            name=name or f"Party {number}",
            max_size=size if size and size > 0 else self._default_party_size,
        )
        self._parties[party.party_id] = party

        self._emit(EventTypes.PARTY_CREATED, {"party_id": party.party_id, "name": party.name})
        logger.info("Created party %s (%s)", party.name, party.party_id)
        return party

    def disband_party(self, party_id: str) -> bool:
        party = self.get_party(party_id)
        if party.is_on_mission:
            logger.info("Cannot disband %s while on mission", party.name)
            return False

        for member in party.members:
            party.remove_member(member)
        del self._parties[party_id]

        self._emit(EventTypes.PARTY_DISBANDED, {"party_id": party_id})
        logger.info("Disbanded party %s", party.name)
        return True

    # === Roster ===

    def add_adventurer(self, party_id: str, adventurer: Adventurer) -> bool:
        party = self.get_party(party_id)
        if adventurer.is_in_party:
            logger.debug("%s is already in a party", adventurer.adventurer_id)
            return False
        if not party.add_member(adventurer):
            return False

        self._emit(
            EventTypes.PARTY_MEMBER_ADDED,
            {"party_id": party_id, "adventurer_id": adventurer.adventurer_id},
        )
        return True

    def remove_adventurer(self, party_id: str, adventurer: Adventurer) -> bool:
        party = self.get_party(party_id)
        if party.is_on_mission:
            return False
        if not party.remove_member(adventurer):
            return False

        self._emit(
            EventTypes.PARTY_MEMBER_REMOVED,
            {"party_id": party_id, "adventurer_id": adventurer.adventurer_id},
        )
        return True

    def transfer_adventurer(
        self, from_party_id: str, to_party_id: str, adventurer: Adventurer
    ) -> bool:
        """Move an adventurer between two different parties.

        On failure the adventurer goes back to its old slot in the source
        party, leadership included.
        """
        if from_party_id == to_party_id:
            return False
        source = self.get_party(from_party_id)
        target = self.get_party(to_party_id)
        if source.is_on_mission or target.is_on_mission or target.is_full:
            return False
        if not adventurer.is_available or not source.has_member(adventurer):
            return False

        position = next(i for i, m in enumerate(source.members) if m is adventurer)
        was_leader = source.leader is adventurer
        source.remove_member(adventurer)

        if not target.add_member(adventurer):
            source.add_member(adventurer, position)
            if was_leader:
                source.set_leader(adventurer)
            return False

        self._emit(
            EventTypes.PARTY_MEMBER_REMOVED,
            {"party_id": from_party_id, "adventurer_id": adventurer.adventurer_id},
        )
        self._emit(
            EventTypes.PARTY_MEMBER_ADDED,
            {"party_id": to_party_id, "adventurer_id": adventurer.adventurer_id},
        )
        logger.info(
            "Transferred %s from %s to %s", adventurer.adventurer_id, source.name, target.name
        )
        return True

    def set_leader(self, party_id: str, adventurer: Adventurer) -> bool:
        party = self.get_party(party_id)
        if not party.set_leader(adventurer):
            return False
        self._emit(
            EventTypes.PARTY_LEADER_CHANGED,
            {"party_id": party_id, "adventurer_id": adventurer.adventurer_id},
        )
        return True

    def set_formation(self, party_id: str, formation: Formation) -> bool:
        party = self.get_party(party_id)
        party.set_formation(formation)
        self._emit(
            EventTypes.PARTY_FORMATION_CHANGED,
            {"party_id": party_id, "formation": formation.value},
        )
        return True

    def auto_assign(self, adventurer: Adventurer) -> Optional[Party]:
        """Place an unassigned adventurer in the party it fits best.

        Opens a new party when none has room. Returns the chosen party,
        or None when the adventurer could not be placed.
        """
        if not adventurer.is_available or adventurer.is_in_party:
            return None

        candidates = [p for p in self._parties.values() if not p.is_full and not p.is_on_mission]
        if candidates:
            party = max(candidates, key=lambda p: self.assignment_score(p, adventurer))
        else:
            party = self.create_party()
            if party is None:
                return None

        if not self.add_adventurer(party.party_id, adventurer):
            return None
        return party

    @staticmethod
    def assignment_score(party: Party, adventurer: Adventurer) -> float:
        """Higher is better: new classes add diversity, duplicates are penalized,
        and classes that fit the formation get a bonus."""
        if party.is_empty:
            return EMPTY_PARTY_SCORE

        distribution = party.class_distribution()
        existing = distribution.get(adventurer.adventurer_class, 0)
        score = NEW_CLASS_SCORE if existing == 0 else -existing * DUPLICATE_CLASS_PENALTY
        if adventurer.adventurer_class in FORMATION_FIT.get(party.formation, ()):
            score += FORMATION_FIT_SCORE
        return score

    # === Missions ===

    def start_mission(self, party_id: str) -> bool:
        """Send a party out. Refused for empty parties or parties already away."""
        party = self.get_party(party_id)
        if party.is_empty or party.is_on_mission or not party.is_active:
            return False
        party.set_mission_status(True)
        logger.info("Party %s left on a mission", party.name)
        return True

    def complete_mission(self, party_id: str, success: bool) -> Optional[MissionOutcome]:
        """Apply a mission result to the party and its members, then bring them home.

        Returns None (and changes nothing) when the party is not on a mission.
        """
        party = self.get_party(party_id)
        if not party.is_on_mission:
            logger.warning("Party %s is not on a mission, result ignored", party_id)
            return None
        party.set_mission_status(False)
        levels = record_member_outcomes(party, success, self._rng)
        outcome = apply_mission_outcome(party, success)
        leveled = {k: v for k, v in levels.items() if v}

        # one event per chain: every member who leveled goes in the same payload
        if leveled:
            self._emit(
                EventTypes.ADVENTURER_LEVELED_UP,
                {
                    "party_id": party_id,
                    "levels_gained": leveled,
                    "levels": {
                        m.adventurer_id: m.level
                        for m in party.members
                        if m.adventurer_id in leveled
                    },
                },
            )
        self._emit(
            EventTypes.PARTY_MISSION_RESOLVED,
            {
                "party_id": party_id,
                "success": success,
                "missions_completed": outcome.missions_completed,
                "success_rate": outcome.success_rate,
                "cohesion": outcome.cohesion,
                "morale": outcome.morale,
                "levels_gained": leveled,
            },
        )
        return outcome

    def advance_day(self) -> None:
        for party in self._parties.values():
            for member in party.members:
                advance_day(member)
            party.recalculate()

    # === Scheduler call-ins ===

    def _on_mission_completed(self, event: GameEvent) -> None:
        party_id = event.data.get("party_id")
        if party_id not in self._parties:
            logger.warning("Mission result for unknown party %s ignored", party_id)
            return
        self.complete_mission(party_id, bool(event.data.get("success", False)))

    def _on_new_day(self, event: GameEvent) -> None:
        logger.debug("New day %s", event.data.get("day"))
        self.advance_day()

    def _emit(self, event_type: str, data: dict) -> None:
        self._bus.emit(GameEvent(event_type=event_type, data=data, source=SOURCE))
