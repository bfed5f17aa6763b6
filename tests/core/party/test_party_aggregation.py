"""Party stat aggregation formulas"""

from __future__ import annotations

import pytest

from guildhall.core.adventurer.models import Adventurer, CoreStats
from guildhall.core.enums import AdventurerClass, EquipmentSlot, Rarity
from guildhall.core.equipment.models import EquipmentInstance
from guildhall.core.party.aggregation import (
    aggregate_party_stats,
    average_equipment_quality,
    calculate_cohesion,
    calculate_combat_power,
    calculate_morale,
    calculate_overall_health,
    clamp_percent,
    combine_bonuses,
)
from guildhall.core.party.synergy import Synergy


def _make_adventurer(
    adventurer_class: AdventurerClass = AdventurerClass.WARRIOR,
    charisma: int = 10,
    level: int = 1,
    loyalty: float = 50.0,
    adventurer_id: str = "a",
) -> Adventurer:
    return Adventurer(
        adventurer_id=adventurer_id,
        name=adventurer_id,
        adventurer_class=adventurer_class,
        level=level,
        stats=CoreStats(charisma=charisma),
        loyalty=loyalty,
    )


def _make_item(rarity: Rarity, slot: EquipmentSlot = EquipmentSlot.WEAPON) -> EquipmentInstance:
    return EquipmentInstance(
        instance_id=f"{rarity.value}-{slot.value}",
        template_id="t",
        name="Thing",
        slot=slot,
        rarity=rarity,
        level=1,
        stat_bonuses={"Attack": 10},
    )


# ── Cohesion ──────────────────────────────────────────────────


class TestCohesion:
    def test_single_member_is_perfect(self) -> None:
        solo = _make_adventurer(charisma=1)
        assert calculate_cohesion([solo], solo, 0) == 100.0

    def test_empty_party_baseline(self) -> None:
        assert calculate_cohesion([], None, 0) == 50.0
        assert calculate_cohesion([], None, 3) == 50.0

    def test_diversity_bonus(self) -> None:
        members = [
            _make_adventurer(AdventurerClass.WARRIOR, charisma=3),
            _make_adventurer(AdventurerClass.CLERIC),
            _make_adventurer(AdventurerClass.MAGE),
        ]
        # 50 + 20 + 3*2
        assert calculate_cohesion(members, members[0], 0) == 76.0

    def test_single_class_penalty(self) -> None:
        members = [_make_adventurer(charisma=5), _make_adventurer(charisma=5)]
        # 50 - 10 + 10
        assert calculate_cohesion(members, members[0], 0) == 50.0
        assert calculate_cohesion(members, None, 0) == 40.0

    def test_two_classes_neutral(self) -> None:
        members = [_make_adventurer(AdventurerClass.WARRIOR), _make_adventurer(AdventurerClass.MAGE)]
        assert calculate_cohesion(members, None, 0) == 50.0

    def test_mission_history_capped(self) -> None:
        members = [_make_adventurer(AdventurerClass.WARRIOR), _make_adventurer(AdventurerClass.MAGE)]
        assert calculate_cohesion(members, None, 5) == 60.0
        assert calculate_cohesion(members, None, 40) == 80.0

    def test_clamped_to_hundred(self) -> None:
        members = [_make_adventurer(AdventurerClass.WARRIOR, charisma=30), _make_adventurer(AdventurerClass.MAGE)]
        assert calculate_cohesion(members, members[0], 0) == 100.0


# ── Morale ────────────────────────────────────────────────────


class TestMorale:
    def test_empty_party(self) -> None:
        assert calculate_morale([], 1.0) == 50.0

    def test_average_loyalty(self) -> None:
        members = [_make_adventurer(loyalty=40), _make_adventurer(loyalty=60)]
        assert calculate_morale(members, 0.5) == pytest.approx(50.0)

    def test_success_rate_thresholds(self) -> None:
        members = [_make_adventurer(loyalty=50)]
        assert calculate_morale(members, 0.71) == pytest.approx(70.0)
        assert calculate_morale(members, 0.7) == pytest.approx(50.0)
        assert calculate_morale(members, 0.3) == pytest.approx(50.0)
        assert calculate_morale(members, 0.0) == pytest.approx(30.0)

    def test_equipment_quality(self) -> None:
        a = _make_adventurer(loyalty=50)
        b = _make_adventurer(loyalty=50)
        a.equip(_make_item(Rarity.LEGENDARY))
        a.equip(_make_item(Rarity.COMMON, EquipmentSlot.BOOTS))
        b.equip(_make_item(Rarity.RARE))
        # (1.0 + 0.2 + 0.6) / 3 = 0.6
        assert average_equipment_quality([a, b]) == pytest.approx(0.6)
        assert calculate_morale([a, b], 0.5) == pytest.approx(56.0)

    def test_no_equipment_zero_quality(self) -> None:
        assert average_equipment_quality([_make_adventurer()]) == 0.0

    def test_clamped(self) -> None:
        assert calculate_morale([_make_adventurer(loyalty=100)], 1.0) == 100.0
        assert calculate_morale([_make_adventurer(loyalty=0)], 0.0) == 0.0


# ── Bonuses / power / health ──────────────────────────────────


class TestCombinedBonuses:
    def test_sum_then_scale(self) -> None:
        synergies = [
            Synergy("Tank & Heal", "", {"Defense": 15.0, "HealthRegen": 10.0}),
            Synergy("Fortress", "", {"Defense": 25.0, "HealthRegen": 20.0}),
        ]
        bonuses = combine_bonuses(synergies, cohesion=80.0, morale=30.0)
        factor = 1 + 0.3 * 0.2 + (-0.2) * 0.15
        assert bonuses["Defense"] == pytest.approx(40.0 * factor)
        assert bonuses["HealthRegen"] == pytest.approx(30.0 * factor)

    def test_neutral_is_raw(self) -> None:
        bonuses = combine_bonuses([Synergy("x", "", {"AllStats": 10.0})], 50.0, 50.0)
        assert dict(bonuses) == {"AllStats": 10.0}

    def test_read_only(self) -> None:
        bonuses = combine_bonuses([], 50.0, 50.0)
        with pytest.raises(TypeError):
            bonuses["Damage"] = 1.0  # type: ignore[index]


class TestCombatPower:
    def test_empty(self) -> None:
        assert calculate_combat_power([], {"Damage": 30.0}, 100.0, 100.0) == 0.0

    def test_formula(self) -> None:
        members = [_make_adventurer(level=2), _make_adventurer(level=1)]
        members[0].equip(_make_item(Rarity.COMMON))
        # base = 50*2 + 10 + 50*1 = 160
        bonuses = {"AllStats": 10.0, "Damage": 30.0}
        power = calculate_combat_power(members, bonuses, cohesion=70.0, morale=40.0)
        expected = 160 * 1.4 * (1 + 0.2 * 0.3 + (-0.1) * 0.2)
        assert power == pytest.approx(expected)


class TestOverallHealth:
    def test_average_ratio(self) -> None:
        a, b = _make_adventurer(), _make_adventurer()
        a.take_damage(50)
        assert calculate_overall_health([a, b]) == pytest.approx(0.75)
        assert calculate_overall_health([]) == 0.0


class TestAggregate:
    def test_clamp_percent(self) -> None:
        assert clamp_percent(-3) == 0.0
        assert clamp_percent(130) == 100.0
        assert clamp_percent(42.5) == 42.5

    def test_aggregate_empty(self) -> None:
        stats = aggregate_party_stats([], None, [], 0, 0.0)
        assert stats.cohesion == 50.0
        assert stats.morale == 50.0
        assert stats.combat_power == 0.0
        assert stats.overall_health == 0.0
        assert dict(stats.combined_bonuses) == {}
