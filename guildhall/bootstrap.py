"""Composition root: wires settings, logging, the EventBus and services.

The simulation host (turn scheduler, UI, save system) builds one Guild per
run and drives it through the bus.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from guildhall.config import Settings, settings as default_settings
from guildhall.core.equipment.catalog import EquipmentCatalog, default_catalog
from guildhall.core.equipment.crafting import ResourceLedger
from guildhall.core.equipment.generator import EquipmentGenerator
from guildhall.core.event_bus import EventBus
from guildhall.core.logging import get_logger, setup_logging
from guildhall.core.random_source import RandomSource
from guildhall.services.equipment_service import EquipmentService
from guildhall.services.party_service import PartyService
from guildhall.services.roster_repository import RosterRepository

logger = get_logger(__name__)


@dataclass
class Guild:
    settings: Settings
    rng: RandomSource
    bus: EventBus
    catalog: EquipmentCatalog
    parties: PartyService
    equipment: EquipmentService
    roster: Optional[RosterRepository] = None


def build_guild(
    settings: Optional[Settings] = None,
    db: Optional[Session] = None,
    ledger: Optional[ResourceLedger] = None,
    catalog_path: Optional[Path] = None,
    configure_logging: bool = True,
) -> Guild:
    """Build every service for one simulation run.

    One RandomSource (seeded from RANDOM_SEED) is shared by all stochastic
    operations. Extra catalog records are loaded on top of the built-in ones
    when `catalog_path` is given.
    """
    settings = settings or default_settings
    if configure_logging:
        setup_logging(settings.LOG_LEVEL, debug_sql=settings.DEBUG)

    rng = RandomSource(settings.RANDOM_SEED)
    bus = EventBus()

    catalog = default_catalog()
    if catalog_path is not None:
        catalog.load_from_json(catalog_path)

    guild = Guild(
        settings=settings,
        rng=rng,
        bus=bus,
        catalog=catalog,
        parties=PartyService(
            bus,
            rng,
            max_parties=settings.MAX_PARTIES,
            default_party_size=min(settings.DEFAULT_PARTY_SIZE, settings.MAX_PARTY_SIZE),
        ),
        equipment=EquipmentService(EquipmentGenerator(catalog, rng), bus, rng, ledger),
        roster=RosterRepository(db) if db is not None else None,
    )
    logger.info(
        "Guild ready (seed=%s, templates=%d, affixes=%d, max_parties=%d)",
        settings.RANDOM_SEED,
        catalog.template_count,
        catalog.affix_count,
        settings.MAX_PARTIES,
    )
    return guild
