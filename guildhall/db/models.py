"""SQLAlchemy declarative models for the roster save boundary.

Rows hold primitives only: enum values as strings, stat maps as JSON,
references as ids. Conversion lives in RosterRepository.
"""

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import JSON


class Base(DeclarativeBase):
    """Base class for all database models."""


class PartyModel(Base):
    """ORM model for parties."""

    __tablename__ = "parties"

    party_id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    max_size: Mapped[int] = mapped_column(Integer, nullable=False, default=4)
    formation: Mapped[str] = mapped_column(String, nullable=False, default="balanced")
    member_ids: Mapped[list] = mapped_column(JSON, default=list)
    leader_id: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_on_mission: Mapped[bool] = mapped_column(Boolean, default=False)
    missions_completed: Mapped[int] = mapped_column(Integer, default=0)
    success_rate: Mapped[float] = mapped_column(Float, default=0.0)


class AdventurerModel(Base):
    """ORM model for adventurers."""

    __tablename__ = "adventurers"

    adventurer_id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    adventurer_class: Mapped[str] = mapped_column(String, nullable=False)
    level: Mapped[int] = mapped_column(Integer, default=1)
    experience: Mapped[int] = mapped_column(Integer, default=0)
    stats: Mapped[dict] = mapped_column(JSON, nullable=False)
    max_health: Mapped[int] = mapped_column(Integer, nullable=False)
    current_health: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="available")
    loyalty: Mapped[float] = mapped_column(Float, default=50.0)
    party_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("parties.party_id", ondelete="SET NULL"), nullable=True
    )
    # slot value -> equipment instance id
    equipment: Mapped[dict] = mapped_column(JSON, default=dict)
    missions_completed: Mapped[int] = mapped_column(Integer, default=0)
    missions_successful: Mapped[int] = mapped_column(Integer, default=0)
    missions_failed: Mapped[int] = mapped_column(Integer, default=0)
    days_in_service: Mapped[int] = mapped_column(Integer, default=0)


class EquipmentModel(Base):
    """ORM model for generated equipment instances."""

    __tablename__ = "equipment"

    instance_id: Mapped[str] = mapped_column(String, primary_key=True)
    template_id: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    slot: Mapped[str] = mapped_column(String, nullable=False)
    rarity: Mapped[str] = mapped_column(String, nullable=False)
    level: Mapped[int] = mapped_column(Integer, default=1)
    stat_bonuses: Mapped[dict] = mapped_column(JSON, default=dict)
    affixes: Mapped[list] = mapped_column(JSON, default=list)
    required_level: Mapped[int] = mapped_column(Integer, default=1)
    class_requirement: Mapped[str | None] = mapped_column(String, nullable=True)
    enhancement_level: Mapped[int] = mapped_column(Integer, default=0)
    value: Mapped[int] = mapped_column(Integer, default=0)
