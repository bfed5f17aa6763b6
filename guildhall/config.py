"""Simulation configuration loaded from environment variables and .env file."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """guildhall settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    Core code never reads these directly; services receive them
    as constructor arguments.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DATABASE_URL: str = "sqlite:///./guildhall.db"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Simulation
    RANDOM_SEED: Optional[int] = None
    DEFAULT_PARTY_SIZE: int = Field(default=4, ge=1, le=6)
    MAX_PARTY_SIZE: int = Field(default=6, ge=1)
    MAX_PARTIES: int = Field(default=5, ge=1)


settings = Settings()
