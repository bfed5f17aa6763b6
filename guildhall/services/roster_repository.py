"""Roster Repository - Core <-> DB conversion for adventurers, parties and equipment.

The core objects never see ORM rows; rows never hold core objects.
"""

import logging
from typing import Any, Mapping

from sqlalchemy.orm import Session

from guildhall.core.adventurer.models import Adventurer
from guildhall.core.equipment.models import EquipmentInstance
from guildhall.core.party.party import Party
from guildhall.db.models import AdventurerModel, EquipmentModel, PartyModel

logger = logging.getLogger(__name__)


class UnknownAdventurerError(LookupError):
    def __init__(self, adventurer_id: str) -> None:
        super().__init__(f"Unknown adventurer: {adventurer_id}")
        self.adventurer_id = adventurer_id


class RosterRepository:
    """Save/load of the guild roster through SQLAlchemy rows"""

    def __init__(self, db: Session):
        self._db = db

    # === Equipment ===

    def save_equipment(self, item: EquipmentInstance) -> None:
        self._db.merge(EquipmentModel(**item.to_record()))
        self._db.commit()

    def load_equipment(self, instance_id: str) -> EquipmentInstance | None:
        orm = self._db.get(EquipmentModel, instance_id)
        if orm is None:
            return None
        return self._equipment_to_core(orm)

    def delete_equipment(self, instance_id: str) -> bool:
        orm = self._db.get(EquipmentModel, instance_id)
        if orm is None:
            return False
        self._db.delete(orm)
        self._db.commit()
        return True

    # === Adventurers ===

    def save_adventurer(self, adventurer: Adventurer) -> None:
        """Upsert the adventurer and every item it has equipped."""
        for item in adventurer.equipped_items():
            self._db.merge(EquipmentModel(**item.to_record()))
        self._db.merge(AdventurerModel(**adventurer.to_record()))
        self._db.commit()
        logger.debug("Saved adventurer %s", adventurer.adventurer_id)

    def load_adventurer(self, adventurer_id: str) -> Adventurer:
        orm = self._db.get(AdventurerModel, adventurer_id)
        if orm is None:
            raise UnknownAdventurerError(adventurer_id)
        return self._adventurer_to_core(orm)

    def list_adventurers(self) -> list[Adventurer]:
        rows = self._db.query(AdventurerModel).order_by(AdventurerModel.adventurer_id).all()
        return [self._adventurer_to_core(orm) for orm in rows]

    # === Parties ===

    def save_party(self, party: Party) -> None:
        """Upsert the party row, its members and their equipped items."""
        self._db.merge(PartyModel(**party.to_record()))
        for member in party.members:
            for item in member.equipped_items():
                self._db.merge(EquipmentModel(**item.to_record()))
            self._db.merge(AdventurerModel(**member.to_record()))
        self._db.commit()
        logger.info("Saved party %s (%d members)", party.party_id, party.size)

    def load_party_record(self, party_id: str) -> dict[str, Any] | None:
        orm = self._db.get(PartyModel, party_id)
        if orm is None:
            return None
        return {
            "party_id": orm.party_id,
            "name": orm.name,
            "max_size": orm.max_size,
            "formation": orm.formation,
            "member_ids": list(orm.member_ids or []),
            "leader_id": orm.leader_id,
            "is_active": orm.is_active,
            "is_on_mission": orm.is_on_mission,
            "missions_completed": orm.missions_completed,
            "success_rate": orm.success_rate,
        }

    def load_party(self, party_id: str) -> Party | None:
        """Rebuild a party with freshly loaded members."""
        record = self.load_party_record(party_id)
        if record is None:
            return None
        members: dict[str, Adventurer] = {}
        for adventurer_id in record["member_ids"]:
            orm = self._db.get(AdventurerModel, adventurer_id)
            if orm is not None:
                members[adventurer_id] = self._adventurer_to_core(orm)
        return Party.from_record(record, members)

    # === Conversion ===

    def _equipment_to_core(self, orm: EquipmentModel) -> EquipmentInstance:
        return EquipmentInstance.from_record(
            {
                "instance_id": orm.instance_id,
                "template_id": orm.template_id,
                "name": orm.name,
                "slot": orm.slot,
                "rarity": orm.rarity,
                "level": orm.level,
                "stat_bonuses": orm.stat_bonuses or {},
                "affixes": orm.affixes or [],
                "required_level": orm.required_level,
                "class_requirement": orm.class_requirement,
                "enhancement_level": orm.enhancement_level,
                "value": orm.value,
            }
        )

    def _adventurer_to_core(self, orm: AdventurerModel) -> Adventurer:
        items: dict[str, EquipmentInstance] = {}
        for instance_id in (orm.equipment or {}).values():
            item = self.load_equipment(instance_id)
            if item is not None:
                items[instance_id] = item
        record: Mapping[str, Any] = {
            "adventurer_id": orm.adventurer_id,
            "name": orm.name,
            "adventurer_class": orm.adventurer_class,
            "level": orm.level,
            "experience": orm.experience,
            "stats": orm.stats,
            "max_health": orm.max_health,
            "current_health": orm.current_health,
            "status": orm.status,
            "loyalty": orm.loyalty,
            "party_id": orm.party_id,
            "equipment": orm.equipment or {},
            "missions_completed": orm.missions_completed,
            "missions_successful": orm.missions_successful,
            "missions_failed": orm.missions_failed,
            "days_in_service": orm.days_in_service,
        }
        return Adventurer.from_record(record, items)
