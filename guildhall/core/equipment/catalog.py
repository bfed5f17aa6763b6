"""Equipment catalog - item templates per slot and affix definitions"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from guildhall.core.enums import AdventurerClass, EquipmentSlot, Rarity

from .models import AffixDefinition, EquipmentTemplate

logger = logging.getLogger(__name__)


class EquipmentCatalog:
    """
    Static registry of item templates (grouped by slot, registration order kept)
    and affix definitions (prefixes and suffixes).
    Passed explicitly to the generator; there is no global instance.
    """

    def __init__(self) -> None:
        self._templates: dict[EquipmentSlot, list[EquipmentTemplate]] = {
            slot: [] for slot in EquipmentSlot
        }
        self._prefixes: dict[str, AffixDefinition] = {}
        self._suffixes: dict[str, AffixDefinition] = {}

    def register_template(self, template: EquipmentTemplate) -> None:
        """Append a template to its slot. A duplicate template_id replaces the old entry in place."""
        templates = self._templates[template.slot]
        for i, existing in enumerate(templates):
            if existing.template_id == template.template_id:
                logger.warning("Overwriting existing template: %s", template.template_id)
                templates[i] = template
                return
        templates.append(template)

    def register_affix(self, affix: AffixDefinition) -> None:
        if affix.affix_id in self._prefixes or affix.affix_id in self._suffixes:
            logger.warning("Overwriting existing affix: %s", affix.affix_id)
            self._prefixes.pop(affix.affix_id, None)
            self._suffixes.pop(affix.affix_id, None)
        target = self._prefixes if affix.is_prefix else self._suffixes
        target[affix.affix_id] = affix

    def templates_for(self, slot: EquipmentSlot) -> list[EquipmentTemplate]:
        return list(self._templates[slot])

    def get_template(self, template_id: str) -> EquipmentTemplate | None:
        for templates in self._templates.values():
            for template in templates:
                if template.template_id == template_id:
                    return template
        return None

    @property
    def prefixes(self) -> list[AffixDefinition]:
        return list(self._prefixes.values())

    @property
    def suffixes(self) -> list[AffixDefinition]:
        return list(self._suffixes.values())

    def get_affix(self, affix_id: str) -> AffixDefinition | None:
        return self._prefixes.get(affix_id) or self._suffixes.get(affix_id)

    def affix_pool(self, rarity: Rarity) -> list[AffixDefinition]:
        """Prefixes then suffixes whose min_rarity <= rarity. Fresh list per call."""
        pool = [a for a in self._prefixes.values() if a.available_at(rarity)]
        pool.extend(a for a in self._suffixes.values() if a.available_at(rarity))
        return pool

    @property
    def template_count(self) -> int:
        return sum(len(t) for t in self._templates.values())

    @property
    def affix_count(self) -> int:
        return len(self._prefixes) + len(self._suffixes)

    def load_from_json(self, path: str | Path) -> int:
        """Load {"templates": [...], "affixes": [...]}. Returns loaded record count.

        Malformed records are skipped with a warning.
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw: dict[str, list[dict[str, Any]]] = json.load(f)

        count = 0
        for raw_template in raw.get("templates", []):
            try:
                self.register_template(_template_from_raw(raw_template))
                count += 1
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(
                    "Failed to load template: %s - %s", raw_template.get("template_id", "?"), e
                )
        for raw_affix in raw.get("affixes", []):
            try:
                self.register_affix(_affix_from_raw(raw_affix))
                count += 1
            except (KeyError, ValueError, TypeError) as e:
                logger.warning("Failed to load affix: %s - %s", raw_affix.get("affix_id", "?"), e)

        logger.info("Loaded %d catalog records from %s", count, path)
        return count


def _template_from_raw(raw: dict[str, Any]) -> EquipmentTemplate:
    class_requirement = raw.get("class_requirement")
    return EquipmentTemplate(
        template_id=raw["template_id"],
        name=raw["name"],
        slot=EquipmentSlot(raw["slot"]),
        base_stats={k: int(v) for k, v in raw["base_stats"].items()},
        preferred_classes=tuple(AdventurerClass(c) for c in raw.get("preferred_classes", [])),
        description=raw.get("description", ""),
        base_value=int(raw.get("base_value", 0)),
        required_level=int(raw.get("required_level", 1)),
        class_requirement=AdventurerClass(class_requirement) if class_requirement else None,
    )


def _affix_from_raw(raw: dict[str, Any]) -> AffixDefinition:
    return AffixDefinition(
        affix_id=raw["affix_id"],
        name=raw["name"],
        is_prefix=bool(raw["is_prefix"]),
        stat_deltas={k: int(v) for k, v in raw["stat_deltas"].items()},
        min_rarity=Rarity(raw.get("min_rarity", Rarity.UNCOMMON.value)),
        weight=float(raw.get("weight", 1.0)),
    )


# === Built-in data ===

_DEFAULT_TEMPLATES: tuple[EquipmentTemplate, ...] = (
    # weapons
    EquipmentTemplate(
        "wpn_sword", "Sword", EquipmentSlot.WEAPON, {"Attack": 15, "Strength": 5},
        (AdventurerClass.WARRIOR,), "A well balanced blade", 100,
    ),
    EquipmentTemplate(
        "wpn_staff", "Staff", EquipmentSlot.WEAPON, {"Attack": 8, "Intelligence": 12},
        (AdventurerClass.MAGE,), "A channeling staff", 120,
    ),
    EquipmentTemplate(
        "wpn_dagger", "Dagger", EquipmentSlot.WEAPON, {"Attack": 12, "Agility": 8},
        (AdventurerClass.ROGUE,), "A quick, precise blade", 80,
    ),
    EquipmentTemplate(
        "wpn_mace", "Mace", EquipmentSlot.WEAPON, {"Attack": 13, "Constitution": 6},
        (AdventurerClass.CLERIC,), "A consecrated mace", 110,
    ),
    EquipmentTemplate(
        "wpn_bow", "Bow", EquipmentSlot.WEAPON, {"Attack": 14, "Agility": 7},
        (AdventurerClass.RANGER,), "A precision bow", 95,
    ),
    # armor
    EquipmentTemplate(
        "arm_chainmail", "Chain Mail", EquipmentSlot.ARMOR, {"Defense": 20, "Constitution": 8},
        (AdventurerClass.WARRIOR, AdventurerClass.CLERIC), "Light but sturdy armor", 150,
    ),
    EquipmentTemplate(
        "arm_robe", "Robe", EquipmentSlot.ARMOR, {"Defense": 10, "Intelligence": 15},
        (AdventurerClass.MAGE,), "An enchanted robe", 120,
    ),
    EquipmentTemplate(
        "arm_leather", "Leather Armor", EquipmentSlot.ARMOR, {"Defense": 15, "Agility": 10},
        (AdventurerClass.ROGUE, AdventurerClass.RANGER), "Supple armor for stealth", 100,
    ),
    # helmets
    EquipmentTemplate(
        "hlm_helm", "Helm", EquipmentSlot.HELMET, {"Defense": 8, "Constitution": 5},
        (AdventurerClass.WARRIOR,), "A protective helm", 80,
    ),
    EquipmentTemplate(
        "hlm_circlet", "Circlet", EquipmentSlot.HELMET, {"Defense": 4, "Intelligence": 10},
        (AdventurerClass.MAGE, AdventurerClass.CLERIC), "A circlet humming with power", 100,
    ),
    # boots
    EquipmentTemplate(
        "bts_boots", "Boots", EquipmentSlot.BOOTS, {"Defense": 6, "Agility": 8},
        (), "Sturdy travelling boots", 60,
    ),
    # accessories
    EquipmentTemplate(
        "acc_ring", "Ring", EquipmentSlot.ACCESSORY, {"Luck": 10, "Charisma": 5},
        (), "A magic ring", 150,
    ),
    EquipmentTemplate(
        "acc_amulet", "Amulet", EquipmentSlot.ACCESSORY, {"Defense": 5, "Luck": 8},
        (AdventurerClass.CLERIC,), "A warding amulet", 120,
    ),
    # shields
    EquipmentTemplate(
        "shd_shield", "Shield", EquipmentSlot.SHIELD, {"Defense": 15, "Constitution": 8},
        (AdventurerClass.WARRIOR,), "A solid shield", 100,
    ),
)

_DEFAULT_AFFIXES: tuple[AffixDefinition, ...] = (
    AffixDefinition("pre_sharp", "Sharp", True, {"Attack": 5}, Rarity.UNCOMMON, 1.0),
    AffixDefinition("pre_heavy", "Heavy", True, {"Defense": 8, "Agility": -3}, Rarity.UNCOMMON, 0.8),
    AffixDefinition("pre_blessed", "Blessed", True, {"Luck": 10, "Charisma": 5}, Rarity.RARE, 0.6),
    AffixDefinition("suf_power", "of Power", False, {"Strength": 8}, Rarity.UNCOMMON, 1.0),
    AffixDefinition("suf_wisdom", "of Wisdom", False, {"Intelligence": 10}, Rarity.UNCOMMON, 1.0),
    AffixDefinition("suf_swiftness", "of Swiftness", False, {"Agility": 12}, Rarity.RARE, 0.8),
    AffixDefinition(
        "suf_protection", "of Protection", False, {"Defense": 10, "Constitution": 5}, Rarity.RARE, 0.7
    ),
)


def default_catalog() -> EquipmentCatalog:
    """Catalog populated with the built-in templates and affixes."""
    catalog = EquipmentCatalog()
    for template in _DEFAULT_TEMPLATES:
        catalog.register_template(template)
    for affix in _DEFAULT_AFFIXES:
        catalog.register_affix(affix)
    return catalog
