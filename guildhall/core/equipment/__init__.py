"""Equipment system core - pure Python, DB-independent"""

from .catalog import EquipmentCatalog, default_catalog
from .crafting import ResourceKind, ResourceLedger, can_craft, crafting_cost
from .enhancement import MAX_ENHANCEMENT_LEVEL, EnhancementResult, enhance
from .generator import EquipmentGenerator, NoTemplateForSlotError
from .models import (
    AFFIX_COUNT_RANGE,
    EQUIPMENT_QUALITY,
    RARITY_MULTIPLIER,
    AffixDefinition,
    EquipmentInstance,
    EquipmentTemplate,
)

__all__ = [
    "AFFIX_COUNT_RANGE",
    "EQUIPMENT_QUALITY",
    "RARITY_MULTIPLIER",
    "AffixDefinition",
    "EquipmentInstance",
    "EquipmentTemplate",
    "EquipmentCatalog",
    "default_catalog",
    "EquipmentGenerator",
    "NoTemplateForSlotError",
    "ResourceKind",
    "ResourceLedger",
    "crafting_cost",
    "can_craft",
    "MAX_ENHANCEMENT_LEVEL",
    "EnhancementResult",
    "enhance",
]
