"""
Cut the Cheese Game Engine.

Pure Python game logic with zero UI/database dependencies.
Handles dice scoring, the card deck, seating and the turn state machine.
"""

from src.engine.base import (
    ALLOWED_PHASES,
    Card,
    CardKind,
    CatalogEntry,
    DiceRoll,
    GameState,
    MacroState,
    Player,
    ScoringDetail,
    ScoringReason,
    ScoringResult,
    TurnAction,
    TurnPhase,
)
from src.engine.deck import DEFAULT_CATALOG, DeckManager
from src.engine.entropy import EntropySource, RandomEntropy
from src.engine.errors import (
    AuthorizationError,
    ErrorCode,
    GameRuleError,
    IllegalTransitionError,
    ValidationError,
)
from src.engine.roster import RosterGuard
from src.engine.scoring import DiceScorer, score_dice
from src.engine.turn import TurnStateMachine

__all__ = [
    # Data Classes
    "Card",
    "CatalogEntry",
    "DiceRoll",
    "GameState",
    "Player",
    "ScoringDetail",
    "ScoringResult",
    # Enums
    "CardKind",
    "MacroState",
    "ScoringReason",
    "TurnAction",
    "TurnPhase",
    "ALLOWED_PHASES",
    # Errors
    "AuthorizationError",
    "ErrorCode",
    "GameRuleError",
    "IllegalTransitionError",
    "ValidationError",
    # Randomness
    "EntropySource",
    "RandomEntropy",
    # Engines
    "DEFAULT_CATALOG",
    "DeckManager",
    "DiceScorer",
    "RosterGuard",
    "TurnStateMachine",
    "score_dice",
]
