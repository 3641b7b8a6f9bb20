"""
Cut the Cheese - Engine Rejections

Every rejected transition raises one of the exceptions below. They all
derive from ValueError, so callers that only care about "bad input" can
keep catching that.
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable reason attached to every rejection."""

    # Validation
    INVALID_DICE_COUNT = "invalid_dice_count"
    INVALID_DIE_VALUE = "invalid_die_value"
    INVALID_INDEX = "invalid_index"
    EXHAUSTED_DECK = "exhausted_deck"
    INVALID_CONFIG = "invalid_config"
    NOT_ENOUGH_PLAYERS = "not_enough_players"

    # Authorization
    WRONG_PLAYER = "wrong_player"
    NOT_CREATOR = "not_creator"
    MAX_PLAYERS = "max_players"
    DUPLICATE_USER = "duplicate_user"

    # Illegal transitions
    TURN_NOT_COMPLETE = "turn_not_complete"
    WRONG_PHASE = "wrong_phase"
    GAME_NOT_IN_PROGRESS = "game_not_in_progress"


class GameRuleError(ValueError):
    """Base class for all engine rejections."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code


class ValidationError(GameRuleError):
    """Malformed input: dice counts, indices, exhausted deck, bad config."""


class AuthorizationError(GameRuleError):
    """The actor is not entitled to perform the action."""


class IllegalTransitionError(GameRuleError):
    """The action is not allowed in the current phase of the game."""
