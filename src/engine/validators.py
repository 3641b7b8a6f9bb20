"""
Cut the Cheese - Input Validation Utilities

Provides validation functions for game engine inputs. All validators
either return validated data or raise a descriptive GameRuleError.
"""

from typing import Sequence

from src.engine.base import (
    ALLOWED_PHASES,
    DIE_FACES,
    NUM_DICE,
    GameState,
    MacroState,
    TurnAction,
)
from src.engine.errors import (
    AuthorizationError,
    ErrorCode,
    IllegalTransitionError,
    ValidationError,
)

MAX_SEATS = 10
MAX_NAME_LENGTH = 30


def validate_dice_values(
    values: Sequence[int],
    min_count: int = 0,
    max_count: int | None = NUM_DICE
) -> tuple[int, ...]:
    """
    Validate and normalize dice values.

    Args:
        values: Sequence of dice values to validate
        min_count: Minimum number of dice required
        max_count: Maximum number of dice allowed (None = no limit)

    Returns:
        Validated values as a tuple

    Raises:
        ValidationError: If validation fails
    """
    values_tuple = tuple(values)
    count = len(values_tuple)

    if count < min_count:
        raise ValidationError(
            ErrorCode.INVALID_DICE_COUNT,
            f"At least {min_count} dice required, got {count}.",
        )

    if max_count is not None and count > max_count:
        raise ValidationError(
            ErrorCode.INVALID_DICE_COUNT,
            f"At most {max_count} dice allowed, got {count}.",
        )

    for i, value in enumerate(values_tuple):
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValidationError(
                ErrorCode.INVALID_DIE_VALUE,
                f"Die value at index {i} must be an integer, got {type(value).__name__}.",
            )
        if not (1 <= value <= DIE_FACES):
            raise ValidationError(
                ErrorCode.INVALID_DIE_VALUE,
                f"Die value at index {i} is {value}, must be between 1 and {DIE_FACES}.",
            )

    return values_tuple


def validate_set_aside_indices(
    indices: Sequence[int],
    dice_count: int
) -> tuple[int, ...]:
    """
    Validate indices of dice being set aside.

    Args:
        indices: Indices into the dice currently in play
        dice_count: Number of dice currently in play

    Returns:
        Validated indices as a tuple, in the order given

    Raises:
        ValidationError: If no index is given, an index repeats or is out of range
    """
    indices_tuple = tuple(indices)
    if not indices_tuple:
        raise ValidationError(ErrorCode.INVALID_INDEX, "Select at least one die to set aside.")

    if len(set(indices_tuple)) != len(indices_tuple):
        raise ValidationError(ErrorCode.INVALID_INDEX, "Each die can only be set aside once.")

    for idx in indices_tuple:
        if not isinstance(idx, int) or isinstance(idx, bool):
            raise ValidationError(
                ErrorCode.INVALID_INDEX,
                f"Dice index must be an integer, got {type(idx).__name__}.",
            )
        if not (0 <= idx < dice_count):
            raise ValidationError(
                ErrorCode.INVALID_INDEX,
                f"Dice index {idx} is out of range. Must be between 0 and {dice_count - 1}.",
            )

    return indices_tuple


def validate_max_players(count: int) -> int:
    """
    Validate the number of seats in a game.

    Raises:
        ValidationError: If count is not 1-10
    """
    if not isinstance(count, int) or isinstance(count, bool):
        raise ValidationError(
            ErrorCode.INVALID_CONFIG,
            f"Max players must be an integer, got {type(count).__name__}.",
        )

    if not (1 <= count <= MAX_SEATS):
        raise ValidationError(
            ErrorCode.INVALID_CONFIG,
            f"Max players must be 1-{MAX_SEATS}, got {count}.",
        )

    return count


def validate_score_goal(score: int) -> int:
    """
    Validate the target score for a game.

    Raises:
        ValidationError: If score is not a positive integer
    """
    if not isinstance(score, int) or isinstance(score, bool):
        raise ValidationError(
            ErrorCode.INVALID_CONFIG,
            f"Score goal must be an integer, got {type(score).__name__}.",
        )

    if score <= 0:
        raise ValidationError(ErrorCode.INVALID_CONFIG, f"Score goal must be positive, got {score}.")

    return score


def validate_player_name(name: str) -> str:
    """
    Validate a display name for a seat.

    Raises:
        ValidationError: If name is blank or longer than 30 characters
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(ErrorCode.INVALID_CONFIG, "Player name cannot be empty.")

    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            ErrorCode.INVALID_CONFIG,
            f"Player name must be at most {MAX_NAME_LENGTH} characters, got {len(name)}.",
        )

    return name


def require_in_progress(state: GameState) -> None:
    """Reject any turn action unless the game is being played."""
    if state.macro_state is not MacroState.IN_PROGRESS:
        raise IllegalTransitionError(
            ErrorCode.GAME_NOT_IN_PROGRESS,
            f"Game is not in progress (state: {state.macro_state.value}).",
        )


def require_phase(state: GameState, action: TurnAction) -> None:
    """Reject an action taken outside the turn phases allowed for it."""
    require_in_progress(state)
    if state.turn_state not in ALLOWED_PHASES[action]:
        allowed = ", ".join(sorted(phase.value for phase in ALLOWED_PHASES[action]))
        raise IllegalTransitionError(
            ErrorCode.WRONG_PHASE,
            f"Cannot {action.name.lower().replace('_', ' ')} while {state.turn_state.value} "
            f"(allowed: {allowed}).",
        )


def require_current_player(state: GameState, actor_uid: str) -> None:
    """
    Reject a turn action taken by anyone but the active player.

    The seat is checked before the game state.
    """
    seat = state.current_player - 1
    if 0 <= seat < state.player_count and state.players[seat].uid != actor_uid:
        raise AuthorizationError(
            ErrorCode.WRONG_PLAYER, "It is not your turn."
        )
    require_in_progress(state)
