"""Synergy evaluation over roster composition and formation"""

from __future__ import annotations

import pytest

from guildhall.core.adventurer.models import Adventurer
from guildhall.core.enums import AdventurerClass, Formation
from guildhall.core.party.synergy import evaluate_synergies

W, M, R, C, RA = (
    AdventurerClass.WARRIOR,
    AdventurerClass.MAGE,
    AdventurerClass.ROGUE,
    AdventurerClass.CLERIC,
    AdventurerClass.RANGER,
)


def _roster(*classes: AdventurerClass) -> list[Adventurer]:
    return [
        Adventurer(adventurer_id=f"a{i}", name=f"A{i}", adventurer_class=c)
        for i, c in enumerate(classes)
    ]


def _names(members, formation: Formation = Formation.BALANCED) -> set[str]:
    return {s.name for s in evaluate_synergies(members, formation)}


class TestClassSynergies:
    def test_fewer_than_two_members(self) -> None:
        assert evaluate_synergies([], Formation.OFFENSIVE) == []
        assert evaluate_synergies(_roster(M), Formation.MAGIC) == []

    def test_tank_and_heal(self) -> None:
        synergies = evaluate_synergies(_roster(W, C), Formation.BALANCED)
        assert [s.name for s in synergies] == ["Tank & Heal"]
        assert dict(synergies[0].bonuses) == {"Defense": 15.0, "HealthRegen": 10.0}

    def test_arcane_focus_and_shadow_strike(self) -> None:
        assert _names(_roster(M, M)) == {"Arcane Focus"}
        assert _names(_roster(R, R)) == {"Shadow Strike"}
        assert _names(_roster(M, M, R, R)) == {"Arcane Focus", "Shadow Strike"}

    def test_perfect_balance_needs_four_classes(self) -> None:
        assert "Perfect Balance" not in _names(_roster(W, M, R))
        assert _names(_roster(W, M, R, RA)) == {"Perfect Balance"}

    def test_rules_are_independent(self) -> None:
        assert _names(_roster(W, C, M, M)) == {"Tank & Heal", "Arcane Focus"}
        assert _names(_roster(W, C, M, M, R)) == {"Tank & Heal", "Arcane Focus", "Perfect Balance"}

    def test_no_synergy(self) -> None:
        assert _names(_roster(W, W)) == set()


class TestFormationSynergies:
    def test_all_out_attack(self) -> None:
        members = _roster(W, M, RA)
        assert "All-Out Attack" in _names(members, Formation.OFFENSIVE)
        assert "All-Out Attack" not in _names(members, Formation.BALANCED)
        assert "All-Out Attack" not in _names(_roster(W, C, M), Formation.OFFENSIVE)

    def test_fortress(self) -> None:
        assert "Fortress" in _names(_roster(W, C), Formation.DEFENSIVE)
        assert "Fortress" in _names(_roster(W, W), Formation.DEFENSIVE)
        assert "Fortress" not in _names(_roster(W, M), Formation.DEFENSIVE)

    def test_magical_circle(self) -> None:
        assert "Magical Circle" in _names(_roster(M, M, C), Formation.MAGIC)
        assert "Magical Circle" not in _names(_roster(M, C, W), Formation.MAGIC)

    def test_only_active_formation_checked(self) -> None:
        members = _roster(W, C, M, M, C)
        names = _names(members, Formation.DEFENSIVE)
        assert "Fortress" in names
        assert "Magical Circle" not in names
        assert "All-Out Attack" not in names

    @pytest.mark.parametrize("formation", [Formation.STEALTH, Formation.CUSTOM, Formation.BALANCED])
    def test_formations_without_rules(self, formation: Formation) -> None:
        assert _names(_roster(R, R, R), formation) == {"Shadow Strike"}


class TestSynergyRecords:
    def test_bonuses_read_only(self) -> None:
        synergy = evaluate_synergies(_roster(M, M), Formation.BALANCED)[0]
        with pytest.raises(TypeError):
            synergy.bonuses["MagicDamage"] = 0  # type: ignore[index]

    def test_fresh_records_each_call(self) -> None:
        members = _roster(W, C)
        first = evaluate_synergies(members, Formation.BALANCED)
        second = evaluate_synergies(members, Formation.BALANCED)
        assert first == second
        assert first is not second
