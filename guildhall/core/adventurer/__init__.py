"""Adventurer core - stats, equipment slots, health and progression"""

from .generation import roll_adventurer
from .models import Adventurer, CoreStats
from .progression import MAX_LEVEL, add_experience, advance_day, experience_to_next

__all__ = [
    "Adventurer",
    "CoreStats",
    "roll_adventurer",
    "MAX_LEVEL",
    "add_experience",
    "advance_day",
    "experience_to_next",
]
