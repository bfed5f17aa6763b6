"""Party system core - roster, synergies, aggregated stats, mission outcomes"""

from .aggregation import PartyStats, aggregate_party_stats, clamp_percent
from .mission import MissionOutcome, apply_mission_outcome, record_member_outcomes
from .party import Party, PartySummary
from .synergy import Synergy, evaluate_synergies

__all__ = [
    "Party",
    "PartySummary",
    "PartyStats",
    "aggregate_party_stats",
    "clamp_percent",
    "Synergy",
    "evaluate_synergies",
    "MissionOutcome",
    "apply_mission_outcome",
    "record_member_outcomes",
]
