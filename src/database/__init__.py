"""
Cut the Cheese Database Layer.

Supabase persistence for game snapshots.
"""

from src.database.game_store import (
    ConcurrentUpdateError,
    GameNotFoundError,
    GameStore,
    PersistenceError,
)
from src.database.models import CardModel, GameRecord, GameSnapshot, PlayerModel

__all__ = [
    "CardModel",
    "ConcurrentUpdateError",
    "GameNotFoundError",
    "GameRecord",
    "GameSnapshot",
    "GameStore",
    "PersistenceError",
    "PlayerModel",
]
