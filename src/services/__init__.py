"""
Cut the Cheese Services.

Load-transition-save orchestration over the engine and the store.
"""

from src.services.game_service import GameService, get_game_service

__all__ = ["GameService", "get_game_service"]
