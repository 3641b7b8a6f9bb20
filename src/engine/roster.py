"""
Cut the Cheese - Roster and Session Guard

Admission rules for a game: creating it, seating players and letting the
creator start play.
"""

import secrets
from dataclasses import replace
from typing import Sequence

from src.engine.base import CatalogEntry, GameState, MacroState, Player, TurnPhase
from src.engine.deck import DEFAULT_CATALOG, DeckManager
from src.engine.entropy import EntropySource
from src.engine.errors import (
    AuthorizationError,
    ErrorCode,
    IllegalTransitionError,
    ValidationError,
)
from src.engine.validators import (
    validate_max_players,
    validate_player_name,
    validate_score_goal,
)


def _generate_game_id() -> str:
    """Short opaque identifier for a new game."""
    return secrets.token_hex(4)


class RosterGuard:
    """Stateless admission rules for a game session."""

    @classmethod
    def create_game(
        cls,
        max_players: int,
        score_goal: int,
        created_by: str,
        entropy: EntropySource,
        catalog: Sequence[CatalogEntry] = DEFAULT_CATALOG,
    ) -> tuple[str, GameState]:
        """
        Create a new game waiting for players.

        Args:
            max_players: Seats available (1-10)
            score_goal: Score needed to win
            created_by: UID of the only user allowed to start the game
            entropy: Shuffles the initial deck
            catalog: Card designs for the deck

        Returns:
            Tuple of (game_id, initial_state)
        """
        validate_max_players(max_players)
        validate_score_goal(score_goal)
        if not created_by:
            raise ValidationError(ErrorCode.INVALID_CONFIG, "A game needs a creator.")

        state = GameState(
            score_goal=score_goal,
            max_players=max_players,
            created_by=created_by,
            deck=DeckManager.create_and_shuffle_deck(catalog, entropy),
        )
        return _generate_game_id(), state

    @classmethod
    def is_player_in_game(cls, players: Sequence[Player], uid: str) -> bool:
        return any(player.uid == uid for player in players)

    @classmethod
    def add_player(cls, state: GameState, name: str, uid: str) -> GameState:
        """
        Seat a new player at the end of the turn order.

        Raises:
            ValidationError: If the name is blank or too long
            IllegalTransitionError: If the game has already started
            AuthorizationError: If the game is full or the user already joined
        """
        validate_player_name(name)

        if state.macro_state is not MacroState.WAITING:
            raise IllegalTransitionError(
                ErrorCode.WRONG_PHASE, "Players can only join before the game starts."
            )

        if state.player_count >= state.max_players:
            raise AuthorizationError(ErrorCode.MAX_PLAYERS, "Maximum number of players reached.")

        if cls.is_player_in_game(state.players, uid):
            raise AuthorizationError(ErrorCode.DUPLICATE_USER, "User is already in the game.")

        player = Player(uid=uid, name=name, score=0)
        return replace(state, players=state.players + (player,))

    @classmethod
    def start_game(cls, state: GameState, actor_uid: str) -> GameState:
        """
        Move a waiting game into play, first player to draw.

        Raises:
            AuthorizationError: If the actor did not create the game
            IllegalTransitionError: If the game is not waiting
            ValidationError: If nobody has joined
        """
        if state.created_by != actor_uid:
            raise AuthorizationError(
                ErrorCode.NOT_CREATOR, "Only the game creator can start the game."
            )

        if state.macro_state is not MacroState.WAITING:
            raise IllegalTransitionError(
                ErrorCode.WRONG_PHASE,
                f"Game cannot be started from state {state.macro_state.value}.",
            )

        if not state.players:
            raise ValidationError(
                ErrorCode.NOT_ENOUGH_PLAYERS, "At least one player must join first."
            )

        return replace(
            state,
            macro_state=MacroState.IN_PROGRESS,
            turn_state=TurnPhase.DRAWING,
            current_player=1,
        )
