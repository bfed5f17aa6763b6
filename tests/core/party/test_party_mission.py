"""Mission outcome processing"""

from __future__ import annotations

import pytest

from guildhall.core.adventurer.models import Adventurer, CoreStats
from guildhall.core.enums import AdventurerClass, AdventurerStatus
from guildhall.core.party.mission import (
    apply_mission_outcome,
    next_success_rate,
    record_member_outcomes,
)
from guildhall.core.party.party import Party
from guildhall.core.random_source import RandomSource


def _make_adventurer(
    adventurer_id: str,
    adventurer_class: AdventurerClass = AdventurerClass.WARRIOR,
    loyalty: float = 50.0,
) -> Adventurer:
    return Adventurer(
        adventurer_id=adventurer_id,
        name=adventurer_id,
        adventurer_class=adventurer_class,
        stats=CoreStats(charisma=5),
        loyalty=loyalty,
    )


class TestSuccessRate:
    @pytest.mark.parametrize(
        "old_rate, completed, success, expected",
        [
            (0.0, 1, True, 1.0),
            (0.0, 1, False, 0.0),
            (1.0, 2, False, 0.5),
            (0.5, 3, True, pytest.approx(2 / 3)),
            (2 / 3, 4, False, 0.5),
        ],
    )
    def test_running_average(self, old_rate, completed, success, expected) -> None:
        assert next_success_rate(old_rate, completed, success) == expected

    def test_no_missions(self) -> None:
        assert next_success_rate(0.7, 0, True) == 0.0


class TestApplyMissionOutcome:
    def test_fresh_party_success(self) -> None:
        party = Party("p-1", "Fresh")
        cohesion, morale = party.cohesion, party.morale

        outcome = apply_mission_outcome(party, True)

        assert party.missions_completed == 1
        assert party.success_rate == 1.0
        assert outcome.cohesion_bump == cohesion + 2
        assert outcome.morale_bump == morale + 3
        # nobody to bond: an empty roster stays neutral
        assert party.cohesion == 50.0

    def test_failure_after_success(self) -> None:
        party = Party("p-1", "Veterans")
        party.add_member(_make_adventurer("a"))
        party.add_member(_make_adventurer("b", AdventurerClass.MAGE))
        party.complete_mission(True)
        assert (party.missions_completed, party.success_rate) == (1, 1.0)
        morale = party.morale

        outcome = party.complete_mission(False)

        assert party.success_rate == 0.5
        assert outcome.morale_bump == max(0.0, morale - 5)
        assert outcome.missions_completed == 2

    def test_morale_bump_clamped_at_zero(self) -> None:
        party = Party("p-1", "Gloomy")
        party.add_member(_make_adventurer("a", loyalty=0))
        party.add_member(_make_adventurer("b", loyalty=0))
        assert party.morale == 0.0
        outcome = apply_mission_outcome(party, False)
        assert outcome.morale_bump == 0.0
        assert party.morale == 0.0

    def test_cohesion_bump_clamped_at_hundred(self) -> None:
        party = Party("p-1", "Solo")
        party.add_member(_make_adventurer("a"))
        assert party.cohesion == 100.0
        outcome = apply_mission_outcome(party, True)
        assert outcome.cohesion_bump == 100.0

    def test_recompute_uses_new_success_rate(self) -> None:
        party = Party("p-1", "Rising")
        party.add_member(_make_adventurer("a", loyalty=50))
        party.add_member(_make_adventurer("b", AdventurerClass.MAGE, loyalty=50))
        # success_rate 0 < 0.3 -> 50 - 20
        assert party.morale == 30.0
        party.complete_mission(True)
        # success_rate 1.0 > 0.7 -> 50 + 20
        assert party.morale == 70.0


class TestMemberOutcomes:
    def test_counters_and_experience(self) -> None:
        a, b = _make_adventurer("a"), _make_adventurer("b")
        party = Party("p-1", "Crew")
        party.add_member(a)
        party.add_member(b)
        a.experience = 60

        levels = record_member_outcomes(party, True, RandomSource(4))

        assert levels == {"a": 1, "b": 0}
        assert a.level == 2 and a.experience == 10
        assert b.experience == 50
        assert a.missions_successful == b.missions_successful == 1

    def test_failure_experience(self) -> None:
        a = _make_adventurer("a")
        party = Party("p-1", "Crew")
        party.add_member(a)
        record_member_outcomes(party, False, RandomSource(4))
        assert a.missions_failed == 1
        assert a.experience == 10

    def test_dead_members_skipped(self) -> None:
        a, b = _make_adventurer("a"), _make_adventurer("b")
        party = Party("p-1", "Crew")
        party.add_member(a)
        party.add_member(b)
        b.take_damage(1000)
        assert b.status == AdventurerStatus.DEAD
        levels = record_member_outcomes(party, True, RandomSource(4))
        assert "b" not in levels
        assert b.missions_completed == 0
