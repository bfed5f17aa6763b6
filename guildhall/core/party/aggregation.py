"""Party stat aggregation.

Pure functions from (members, leader, synergies, mission history) to
cohesion, morale, combined bonuses, combat power and overall health.
Every percentage output goes through clamp_percent.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence

from guildhall.core.adventurer.models import Adventurer

from .synergy import Synergy

PERCENT_MIN = 0.0
PERCENT_MAX = 100.0
NEUTRAL = 50.0

# cohesion
SOLO_COHESION = 100.0
DIVERSE_CLASS_THRESHOLD = 3
DIVERSITY_BONUS = 20.0
MONOCLASS_PENALTY = 10.0
LEADER_CHARISMA_FACTOR = 2.0
MISSION_COHESION_PER_MISSION = 2.0
MISSION_COHESION_CAP = 30.0

# morale
EMPTY_MORALE = 50.0
HIGH_SUCCESS_RATE = 0.7
LOW_SUCCESS_RATE = 0.3
SUCCESS_RATE_MORALE = 20.0
EQUIPMENT_QUALITY_FACTOR = 10.0

# bonus scaling
COHESION_BONUS_WEIGHT = 0.2
MORALE_BONUS_WEIGHT = 0.15

# combat power
COHESION_POWER_WEIGHT = 0.3
MORALE_POWER_WEIGHT = 0.2


def clamp_percent(value: float) -> float:
    return max(PERCENT_MIN, min(PERCENT_MAX, value))


def _distinct_classes(members: Iterable[Adventurer]) -> int:
    return len({m.adventurer_class for m in members})


def calculate_cohesion(
    members: Sequence[Adventurer],
    leader: Optional[Adventurer],
    missions_completed: int,
) -> float:
    """Cohesion in [0, 100].

    An empty roster sits at the neutral 50 whatever its history. A lone
    adventurer is perfectly cohesive. Otherwise: 50, +20 with three
    or more distinct classes, -10 when everyone shares one class, plus twice
    the leader's charisma, plus 2 per completed mission (capped at 30).
    """
    if not members:
        return NEUTRAL
    if len(members) == 1:
        return SOLO_COHESION

    cohesion = NEUTRAL
    distinct = _distinct_classes(members)
    if distinct >= DIVERSE_CLASS_THRESHOLD:
        cohesion += DIVERSITY_BONUS
    elif distinct == 1:
        cohesion -= MONOCLASS_PENALTY

    if leader is not None:
        cohesion += leader.charisma * LEADER_CHARISMA_FACTOR

    cohesion += min(missions_completed * MISSION_COHESION_PER_MISSION, MISSION_COHESION_CAP)
    return clamp_percent(cohesion)


def average_equipment_quality(members: Iterable[Adventurer]) -> float:
    """Mean quality over every equipped slot of every member; 0 when nothing is equipped."""
    qualities = [item.quality for m in members for item in m.equipped_items()]
    if not qualities:
        return 0.0
    return sum(qualities) / len(qualities)


def calculate_morale(members: Sequence[Adventurer], success_rate: float) -> float:
    """Morale in [0, 100], 50 for an empty party."""
    if not members:
        return EMPTY_MORALE

    morale = sum(m.loyalty for m in members) / len(members)
    if success_rate > HIGH_SUCCESS_RATE:
        morale += SUCCESS_RATE_MORALE
    elif success_rate < LOW_SUCCESS_RATE:
        morale -= SUCCESS_RATE_MORALE

    morale += average_equipment_quality(members) * EQUIPMENT_QUALITY_FACTOR
    return clamp_percent(morale)


def combine_bonuses(
    synergies: Iterable[Synergy], cohesion: float, morale: float
) -> Mapping[str, float]:
    """Sum synergy bonus maps by key, then scale each entry by cohesion and morale.

    final = raw * (1 + (cohesion-50)/100 * 0.2 + (morale-50)/100 * 0.15)
    """
    raw: dict[str, float] = {}
    for synergy in synergies:
        for key, value in synergy.bonuses.items():
            raw[key] = raw.get(key, 0.0) + value

    cohesion_mod = (cohesion - NEUTRAL) / 100
    morale_mod = (morale - NEUTRAL) / 100
    factor = 1 + cohesion_mod * COHESION_BONUS_WEIGHT + morale_mod * MORALE_BONUS_WEIGHT
    return MappingProxyType({key: value * factor for key, value in raw.items()})


def calculate_combat_power(
    members: Sequence[Adventurer],
    combined_bonuses: Mapping[str, float],
    cohesion: float,
    morale: float,
) -> float:
    if not members:
        return 0.0

    base_power = sum(m.individual_combat_power for m in members)
    synergy_multiplier = (
        1
        + combined_bonuses.get("AllStats", 0.0) / 100
        + combined_bonuses.get("Damage", 0.0) / 100
    )
    cohesion_bonus = (cohesion - NEUTRAL) / 100 * COHESION_POWER_WEIGHT
    morale_bonus = (morale - NEUTRAL) / 100 * MORALE_POWER_WEIGHT
    return base_power * synergy_multiplier * (1 + cohesion_bonus + morale_bonus)


def calculate_overall_health(members: Sequence[Adventurer]) -> float:
    """Average health ratio of the members, 0 for an empty party."""
    if not members:
        return 0.0
    return sum(m.health_ratio for m in members) / len(members)


@dataclass(frozen=True)
class PartyStats:
    cohesion: float
    morale: float
    combined_bonuses: Mapping[str, float]
    combat_power: float
    overall_health: float


def aggregate_party_stats(
    members: Sequence[Adventurer],
    leader: Optional[Adventurer],
    synergies: Iterable[Synergy],
    missions_completed: int,
    success_rate: float,
) -> PartyStats:
    """Recompute every derived party stat from its inputs."""
    cohesion = calculate_cohesion(members, leader, missions_completed)
    morale = calculate_morale(members, success_rate)
    bonuses = combine_bonuses(synergies, cohesion, morale)
    return PartyStats(
        cohesion=cohesion,
        morale=morale,
        combined_bonuses=bonuses,
        combat_power=calculate_combat_power(members, bonuses, cohesion, morale),
        overall_health=calculate_overall_health(members),
    )
