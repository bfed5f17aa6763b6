"""Shared test fixtures."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from guildhall.core.equipment.catalog import EquipmentCatalog, default_catalog
from guildhall.core.equipment.generator import EquipmentGenerator
from guildhall.core.event_bus import EventBus
from guildhall.core.random_source import RandomSource
from guildhall.db.models import Base

TEST_SEED = 1234


@pytest.fixture()
def rng() -> RandomSource:
    """Seeded random source so rolls are reproducible."""
    return RandomSource(TEST_SEED)


@pytest.fixture()
def catalog() -> EquipmentCatalog:
    return default_catalog()


@pytest.fixture()
def generator(catalog: EquipmentCatalog, rng: RandomSource) -> EquipmentGenerator:
    return EquipmentGenerator(catalog, rng)


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def db_session() -> Session:
    """In-memory SQLite session with every roster table created."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
