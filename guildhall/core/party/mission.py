"""Mission outcome processing for parties and their members.

The turn scheduler decides success or failure; this module only applies the
consequences.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from guildhall.core.adventurer.progression import add_experience
from guildhall.core.random_source import RandomSource

from .aggregation import clamp_percent
from .party import Party

logger = logging.getLogger(__name__)

SUCCESS_COHESION_BUMP = 2.0
SUCCESS_MORALE_BUMP = 3.0
FAILURE_MORALE_DROP = 5.0


@dataclass(frozen=True)
class MissionOutcome:
    """What a completed mission did to a party.

    `cohesion_bump` / `morale_bump` are the immediate post-mission values;
    `cohesion` / `morale` are the values after the full recomputation,
    which is what the party holds.
    """

    party_id: str
    success: bool
    missions_completed: int
    success_rate: float
    cohesion_bump: float
    morale_bump: float
    cohesion: float
    morale: float


def next_success_rate(old_rate: float, missions_completed: int, success: bool) -> float:
    """Running average; `missions_completed` already includes this mission."""
    if missions_completed <= 0:
        return 0.0
    successful = round(old_rate * (missions_completed - 1)) + (1 if success else 0)
    return max(0.0, min(1.0, successful / missions_completed))


def apply_mission_outcome(party: Party, success: bool) -> MissionOutcome:
    """Count the mission, bump cohesion/morale, update the success rate, recompute.

    The bumps are reported on the outcome; the party itself keeps deriving
    cohesion and morale from its members and history.
    """
    cohesion, morale = party.cohesion, party.morale
    if success:
        cohesion_bump = clamp_percent(cohesion + SUCCESS_COHESION_BUMP)
        morale_bump = clamp_percent(morale + SUCCESS_MORALE_BUMP)
    else:
        cohesion_bump = cohesion
        morale_bump = clamp_percent(morale - FAILURE_MORALE_DROP)

    party.missions_completed += 1
    party.success_rate = next_success_rate(
        party.success_rate, party.missions_completed, success
    )
    party.recalculate()

    logger.info(
        "Party %s mission %s (total=%d, rate=%.2f)",
        party.party_id,
        "succeeded" if success else "failed",
        party.missions_completed,
        party.success_rate,
    )
    return MissionOutcome(
        party_id=party.party_id,
        success=success,
        missions_completed=party.missions_completed,
        success_rate=party.success_rate,
        cohesion_bump=cohesion_bump,
        morale_bump=morale_bump,
        cohesion=party.cohesion,
        morale=party.morale,
    )


def record_member_outcomes(
    party: Party, success: bool, rng: RandomSource
) -> dict[str, int]:
    """Per-member mission counters and experience. Returns levels gained by adventurer id.

    Dead members are skipped.
    """
    levels: dict[str, int] = {}
    for member in party.members:
        if not member.is_alive:
            continue
        experience = member.record_mission(success)
        levels[member.adventurer_id] = add_experience(member, experience, rng)
    if any(levels.values()):
        party.recalculate()
    return levels
