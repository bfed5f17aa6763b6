"""Procedural equipment generation - template scaling + weighted affix draws"""

from __future__ import annotations

import logging
import uuid
from typing import Optional, Sequence

from guildhall.core.enums import AdventurerClass, EquipmentSlot, Rarity
from guildhall.core.random_source import RandomSource

from .catalog import EquipmentCatalog
from .models import (
    AFFIX_COUNT_RANGE,
    RARITY_MULTIPLIER,
    AffixDefinition,
    EquipmentInstance,
    EquipmentTemplate,
)

logger = logging.getLogger(__name__)

LEVEL_SCALING_PER_LEVEL = 0.1


class NoTemplateForSlotError(LookupError):
    """The catalog has no template for the requested slot (catalog misconfiguration)."""

    def __init__(self, slot: EquipmentSlot) -> None:
        super().__init__(f"No equipment template registered for slot: {slot.value}")
        self.slot = slot


def rarity_multiplier(rarity: Rarity) -> float:
    return RARITY_MULTIPLIER[rarity]


def level_multiplier(level: int) -> float:
    """1.0 at level 1, +0.1 per level above."""
    return 1.0 + (level - 1) * LEVEL_SCALING_PER_LEVEL


def scale_base_stats(
    template: EquipmentTemplate, rarity: Rarity, level: int
) -> dict[str, int]:
    """round(base * rarity_multiplier * level_multiplier) for every template stat."""
    r_mult = rarity_multiplier(rarity)
    l_mult = level_multiplier(level)
    return {key: round(base * r_mult * l_mult) for key, base in template.base_stats.items()}


def select_weighted_affix(
    pool: Sequence[AffixDefinition], rng: RandomSource
) -> Optional[AffixDefinition]:
    """Cumulative-weight scan against uniform(0, total_weight).

    Returns None for an empty pool. Falls back to the first entry if float
    accumulation leaves the roll just past the last boundary.
    """
    if not pool:
        return None

    total_weight = sum(a.weight for a in pool)
    roll = rng.uniform(0.0, total_weight)

    cumulative = 0.0
    for affix in pool:
        cumulative += affix.weight
        if roll <= cumulative:
            return affix
    return pool[0]


class EquipmentGenerator:
    """Synthesizes EquipmentInstance values from catalog templates."""

    def __init__(self, catalog: EquipmentCatalog, rng: RandomSource) -> None:
        self._catalog = catalog
        self._rng = rng

    @property
    def catalog(self) -> EquipmentCatalog:
        return self._catalog

    def generate(
        self,
        slot: EquipmentSlot,
        rarity: Rarity,
        level: int = 1,
        class_hint: Optional[AdventurerClass] = None,
    ) -> EquipmentInstance:
        """Generate one item.

        1. template: first one preferring class_hint, else uniform random choice
        2. base stats scaled by rarity and level
        3. affix count drawn from the rarity's half-open range
        4. weighted draws without replacement from the rarity-gated pool;
           an exhausted pool ends the draws early

        Raises:
            NoTemplateForSlotError: the catalog has no template for `slot`.
        """
        template = self._select_template(slot, class_hint)
        bonuses = scale_base_stats(template, rarity, level)

        lo, hi = AFFIX_COUNT_RANGE[rarity]
        affix_count = self._rng.range(lo, hi)
        pool = self._catalog.affix_pool(rarity)

        applied: list[str] = []
        prefix_names: list[str] = []
        suffix_names: list[str] = []
        for _ in range(affix_count):
            affix = select_weighted_affix(pool, self._rng)
            if affix is None:
                logger.debug(
                    "Affix pool exhausted for %s (%s): %d/%d applied",
                    template.template_id,
                    rarity.value,
                    len(applied),
                    affix_count,
                )
                break
            pool.remove(affix)
            for key, delta in affix.stat_deltas.items():
                bonuses[key] = bonuses.get(key, 0) + delta
            applied.append(affix.affix_id)
            if affix.is_prefix:
                prefix_names.insert(0, affix.name)
            else:
                suffix_names.append(affix.name)

        name = " ".join([*prefix_names, template.name, *suffix_names])
        item = EquipmentInstance(
            instance_id=str(uuid.uuid4()),
            template_id=template.template_id,
            name=name,
            slot=slot,
            rarity=rarity,
            level=level,
            stat_bonuses=bonuses,
            affixes=tuple(applied),
            required_level=template.required_level,
            class_requirement=template.class_requirement,
            value=round(template.base_value * rarity_multiplier(rarity)),
        )
        logger.debug(
            "Generated %s (%s, lv%d, affixes=%s)", item.name, rarity.value, level, applied
        )
        return item

    def _select_template(
        self, slot: EquipmentSlot, class_hint: Optional[AdventurerClass]
    ) -> EquipmentTemplate:
        templates = self._catalog.templates_for(slot)
        if not templates:
            logger.warning("Catalog has no templates for slot %s", slot.value)
            raise NoTemplateForSlotError(slot)

        if class_hint is not None:
            for template in templates:
                if template.prefers(class_hint):
                    return template
        return self._rng.choice(templates)
