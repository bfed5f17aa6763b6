"""Equipment Service - generation, loadouts, enhancement and craft quotes.

Wraps the pure equipment core and announces results on the EventBus.
"""

import logging
from typing import Optional

from guildhall.core.adventurer.models import Adventurer
from guildhall.core.enums import ADVENTURER_SLOTS, AdventurerClass, EquipmentSlot, Rarity
from guildhall.core.equipment.crafting import (
    ResourceKind,
    ResourceLedger,
    can_craft,
    crafting_cost,
)
from guildhall.core.equipment.enhancement import EnhancementResult, enhance
from guildhall.core.equipment.generator import EquipmentGenerator, NoTemplateForSlotError
from guildhall.core.equipment.models import EquipmentInstance, EquipmentTemplate
from guildhall.core.event_bus import EventBus, GameEvent
from guildhall.core.event_types import EventTypes
from guildhall.core.random_source import RandomSource

logger = logging.getLogger(__name__)

SOURCE = "equipment_service"


class UnknownTemplateError(LookupError):
    def __init__(self, template_id: str) -> None:
        super().__init__(f"Unknown equipment template: {template_id}")
        self.template_id = template_id


class EquipmentService:
    """Equipment generation and upgrades"""

    def __init__(
        self,
        generator: EquipmentGenerator,
        event_bus: EventBus,
        rng: RandomSource,
        ledger: Optional[ResourceLedger] = None,
    ):
        self._generator = generator
        self._bus = event_bus
        self._rng = rng
        self._ledger = ledger

    def generate(
        self,
        slot: EquipmentSlot,
        rarity: Rarity,
        level: int = 1,
        class_hint: Optional[AdventurerClass] = None,
    ) -> EquipmentInstance:
        """Generate one item. NoTemplateForSlotError propagates to the caller."""
        item = self._generator.generate(slot, rarity, level, class_hint)
        self._bus.emit(
            GameEvent(
                event_type=EventTypes.EQUIPMENT_GENERATED,
                data={
                    "instance_id": item.instance_id,
                    "template_id": item.template_id,
                    "rarity": item.rarity.value,
                    "level": item.level,
                },
                source=SOURCE,
            )
        )
        return item

    def generate_loadout(
        self, adventurer: Adventurer, rarity: Rarity, level: Optional[int] = None
    ) -> list[EquipmentInstance]:
        """One item per adventurer slot, generated for the adventurer's class and equipped.

        Slots the catalog cannot fill are skipped with a warning. Items the
        adventurer cannot wear are still returned but left unequipped.
        """
        item_level = level if level is not None else adventurer.level
        items: list[EquipmentInstance] = []
        for slot in ADVENTURER_SLOTS:
            try:
                item = self._generator.generate(
                    slot, rarity, item_level, adventurer.adventurer_class
                )
            except NoTemplateForSlotError:
                logger.warning("No template for %s, loadout slot skipped", slot.value)
                continue
            items.append(item)
            adventurer.equip(item)

        logger.info(
            "Loadout for %s: %d items (%s)",
            adventurer.adventurer_id,
            len(items),
            rarity.value,
        )
        self._bus.emit(
            GameEvent(
                event_type=EventTypes.ADVENTURER_EQUIPPED,
                data={
                    "adventurer_id": adventurer.adventurer_id,
                    "instance_ids": [i.instance_id for i in adventurer.equipped_items()],
                },
                source=SOURCE,
            )
        )
        return items

    def enhance(self, item: EquipmentInstance, use_protection: bool = False) -> EnhancementResult:
        result = enhance(item, self._rng, self._ledger, use_protection)
        if result.success:
            self._bus.emit(
                GameEvent(
                    event_type=EventTypes.EQUIPMENT_ENHANCED,
                    data={"instance_id": item.instance_id, "level": result.new_level},
                    source=SOURCE,
                )
            )
        elif result.destroyed:
            self._bus.emit(
                GameEvent(
                    event_type=EventTypes.EQUIPMENT_DESTROYED,
                    data={"instance_id": item.instance_id},
                    source=SOURCE,
                )
            )
        return result

    # === Crafting ===

    def _template(self, template_id: str) -> EquipmentTemplate:
        template = self._generator.catalog.get_template(template_id)
        if template is None:
            raise UnknownTemplateError(template_id)
        return template

    def craft_quote(
        self, template_id: str, rarity: Rarity, level: int = 1
    ) -> dict[ResourceKind, int]:
        return crafting_cost(self._template(template_id), rarity, level)

    def can_craft(self, template_id: str, rarity: Rarity, level: int = 1) -> bool:
        """False without a ledger: nothing can be paid for."""
        if self._ledger is None:
            return False
        return can_craft(self._ledger, self._template(template_id), rarity, level)
