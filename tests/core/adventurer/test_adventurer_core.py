"""Adventurer core: equipment rules, health/status, progression, records"""

from __future__ import annotations

import pytest

from guildhall.core.adventurer.generation import (
    CLASS_BASE_HEALTH,
    CLASS_STAT_RANGES,
    roll_adventurer,
)
from guildhall.core.adventurer.models import Adventurer, CoreStats
from guildhall.core.adventurer.progression import (
    MAX_LEVEL,
    add_experience,
    advance_day,
    experience_to_next,
    health_regen,
)
from guildhall.core.enums import AdventurerClass, AdventurerStatus, EquipmentSlot, Rarity
from guildhall.core.equipment.models import EquipmentInstance
from guildhall.core.random_source import RandomSource


def _make_adventurer(
    adventurer_class: AdventurerClass = AdventurerClass.WARRIOR,
    level: int = 1,
    charisma: int = 10,
    max_health: int = 100,
    **kwargs,
) -> Adventurer:
    return Adventurer(
        adventurer_id=kwargs.pop("adventurer_id", "adv-1"),
        name=kwargs.pop("name", "Brom"),
        adventurer_class=adventurer_class,
        level=level,
        stats=CoreStats(charisma=charisma),
        max_health=max_health,
        **kwargs,
    )


def _make_item(
    slot: EquipmentSlot = EquipmentSlot.WEAPON,
    required_level: int = 1,
    class_requirement: AdventurerClass | None = None,
    instance_id: str = "inst-1",
    bonuses: dict[str, int] | None = None,
) -> EquipmentInstance:
    return EquipmentInstance(
        instance_id=instance_id,
        template_id="t",
        name="Thing",
        slot=slot,
        rarity=Rarity.RARE,
        level=1,
        stat_bonuses=bonuses if bonuses is not None else {"Attack": 10},
        required_level=required_level,
        class_requirement=class_requirement,
    )


# ── Construction ──────────────────────────────────────────────


class TestConstruction:
    def test_defaults(self) -> None:
        adv = _make_adventurer()
        assert adv.current_health == 100
        assert adv.status == AdventurerStatus.AVAILABLE
        assert adv.loyalty == 50.0
        assert not adv.is_in_party
        assert adv.success_rate == 0.0

    def test_health_and_loyalty_clamped(self) -> None:
        adv = _make_adventurer(current_health=500, loyalty=140)
        assert adv.current_health == 100
        assert adv.loyalty == 100.0
        assert _make_adventurer(current_health=-5).current_health == 0

    def test_identity_semantics(self) -> None:
        assert _make_adventurer() != _make_adventurer()

    def test_core_stats(self) -> None:
        stats = CoreStats(strength=15, intelligence=8, agility=12, constitution=14, charisma=9)
        assert stats.total == 58
        stats.add("agility", 3)
        assert stats.get("agility") == 15
        with pytest.raises(KeyError):
            stats.get("luck")


# ── Equipment ─────────────────────────────────────────────────


class TestEquipment:
    def test_equip_and_power(self) -> None:
        adv = _make_adventurer(level=2)
        assert adv.equip(_make_item(bonuses={"Attack": 10, "Strength": 4}))
        assert adv.equipment_power == 14
        # stat total 50 * level 2 + 14
        assert adv.individual_combat_power == 114
        assert adv.get_total_stat("Strength") == 14

    def test_equip_replaces_existing(self) -> None:
        adv = _make_adventurer()
        adv.equip(_make_item(instance_id="old"))
        adv.equip(_make_item(instance_id="new"))
        assert adv.equipment[EquipmentSlot.WEAPON].instance_id == "new"
        assert len(adv.equipped_items()) == 1

    def test_cannot_equip_none_or_shield(self) -> None:
        adv = _make_adventurer()
        assert not adv.equip(None)
        assert not adv.equip(_make_item(slot=EquipmentSlot.SHIELD))
        assert adv.equipment == {}

    def test_level_requirement(self) -> None:
        adv = _make_adventurer(level=4)
        assert not adv.can_equip(_make_item(required_level=5))
        assert adv.can_equip(_make_item(required_level=4))

    def test_class_requirement_none_means_any(self) -> None:
        mage = _make_adventurer(AdventurerClass.MAGE)
        assert mage.can_equip(_make_item(class_requirement=None))
        assert mage.can_equip(_make_item(class_requirement=AdventurerClass.MAGE))
        assert not mage.can_equip(_make_item(class_requirement=AdventurerClass.WARRIOR))

    def test_unequip(self) -> None:
        adv = _make_adventurer()
        item = _make_item()
        adv.equip(item)
        assert adv.unequip(EquipmentSlot.WEAPON) is item
        assert adv.unequip(EquipmentSlot.WEAPON) is None

    def test_equipped_items_slot_order(self) -> None:
        adv = _make_adventurer()
        adv.equip(_make_item(slot=EquipmentSlot.BOOTS, instance_id="b"))
        adv.equip(_make_item(slot=EquipmentSlot.WEAPON, instance_id="w"))
        adv.equip(_make_item(slot=EquipmentSlot.ACCESSORY, instance_id="a"))
        assert [i.instance_id for i in adv.equipped_items()] == ["w", "a", "b"]


# ── Health / status ───────────────────────────────────────────


class TestHealth:
    def test_injured_below_thirty_percent(self) -> None:
        adv = _make_adventurer()
        adv.take_damage(70)
        assert adv.status == AdventurerStatus.AVAILABLE
        adv.take_damage(1)
        assert adv.status == AdventurerStatus.INJURED
        assert not adv.is_available

    def test_death_at_zero(self) -> None:
        adv = _make_adventurer()
        adv.take_damage(1000)
        assert adv.current_health == 0
        assert adv.status == AdventurerStatus.DEAD
        adv.heal(50)
        assert adv.current_health == 0

    def test_heal_recovers_above_half(self) -> None:
        adv = _make_adventurer()
        adv.take_damage(80)
        adv.heal(30)
        assert adv.status == AdventurerStatus.INJURED
        adv.heal(1)
        assert adv.status == AdventurerStatus.AVAILABLE

    def test_heal_clamped(self) -> None:
        adv = _make_adventurer()
        adv.take_damage(10)
        adv.heal(999)
        assert adv.current_health == adv.max_health
        assert adv.health_ratio == 1.0

    def test_record_mission(self) -> None:
        adv = _make_adventurer()
        assert adv.record_mission(True) == 50
        assert adv.record_mission(False) == 10
        assert (adv.missions_completed, adv.missions_successful, adv.missions_failed) == (2, 1, 1)
        assert adv.success_rate == pytest.approx(0.5)


# ── Progression ───────────────────────────────────────────────


class TestProgression:
    def test_experience_curve(self) -> None:
        assert experience_to_next(1) == 100
        assert experience_to_next(7) == 700

    def test_level_up_gains(self) -> None:
        adv = _make_adventurer()
        adv.take_damage(40)
        before = adv.stats.to_dict()
        gained = add_experience(adv, 150, RandomSource(2))
        assert gained == 1
        assert adv.level == 2
        assert adv.experience == 50
        for name, value in adv.stats.to_dict().items():
            assert 1 <= value - before[name] <= 2
        assert 105 <= adv.max_health <= 114
        assert adv.current_health == adv.max_health

    def test_multiple_levels_at_once(self) -> None:
        adv = _make_adventurer()
        # 100 + 200 + 300
        assert add_experience(adv, 600, RandomSource(2)) == 3
        assert adv.level == 4
        assert adv.experience == 0

    def test_nothing_past_max_level(self) -> None:
        adv = _make_adventurer(level=MAX_LEVEL)
        rng = RandomSource(2)
        assert add_experience(adv, 10_000, rng) == 0
        assert adv.experience == 0
        assert rng.draw_count == 0

    def test_reaching_max_level_clears_experience(self) -> None:
        adv = _make_adventurer(level=MAX_LEVEL - 1)
        assert add_experience(adv, 100_000, RandomSource(2)) == 1
        assert adv.level == MAX_LEVEL
        assert adv.experience == 0

    def test_advance_day(self) -> None:
        adv = _make_adventurer(status=AdventurerStatus.RESTING)
        adv.take_damage(20)
        advance_day(adv)
        # constitution 10 -> round(1 + 1.0) = 2
        assert health_regen(adv.stats) == 2
        assert adv.current_health == 82
        assert adv.days_in_service == 1
        assert adv.status == AdventurerStatus.AVAILABLE

    def test_advance_day_skips_dead(self) -> None:
        adv = _make_adventurer()
        adv.take_damage(100)
        advance_day(adv)
        assert adv.days_in_service == 0


# ── Generation / records ──────────────────────────────────────


class TestRollAdventurer:
    def test_rolls_within_class_ranges(self) -> None:
        rng = RandomSource(17)
        for adventurer_class in AdventurerClass:
            adv = roll_adventurer("Recruit", adventurer_class, rng)
            for name, (lo, hi) in CLASS_STAT_RANGES[adventurer_class].items():
                assert lo <= adv.stats.get(name) < hi
            assert adv.max_health == CLASS_BASE_HEALTH[adventurer_class]
            assert adv.current_health == adv.max_health
            assert adv.level == 1

    def test_explicit_id(self) -> None:
        adv = roll_adventurer("Ysolde", AdventurerClass.CLERIC, RandomSource(1), adventurer_id="a-9")
        assert adv.adventurer_id == "a-9"


class TestRecords:
    def test_round_trip_with_equipment(self) -> None:
        adv = _make_adventurer(party_id="p-1", loyalty=72)
        item = _make_item()
        adv.equip(item)
        adv.record_mission(True)

        record = adv.to_record()
        assert record["adventurer_class"] == "warrior"
        assert record["equipment"] == {"weapon": "inst-1"}

        restored = Adventurer.from_record(record, {"inst-1": item})
        assert restored.to_record() == record
        assert restored.equipment[EquipmentSlot.WEAPON] is item

    def test_missing_item_dropped(self) -> None:
        adv = _make_adventurer()
        adv.equip(_make_item())
        restored = Adventurer.from_record(adv.to_record(), {})
        assert restored.equipment == {}
