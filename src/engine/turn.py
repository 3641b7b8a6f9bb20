"""
Cut the Cheese - Turn State Machine

Drives a single turn: rolling, setting scoring dice aside, ending the turn
(banking or busting), win detection and handing the dice to the next
player.

    drawing -> rolling -> settingAside -> deciding -> drawing (next turn)
                  ^                          |
                  +------- roll again -------+

Which actions are legal in which phase is looked up in ALLOWED_PHASES.
All methods are stateless class methods; every transition returns a new
GameState.
"""

from dataclasses import replace

from src.engine.base import (
    INITIAL_DICE_VALUE,
    NUM_DICE,
    DiceRoll,
    GameState,
    MacroState,
    Player,
    TurnAction,
    TurnPhase,
)
from src.engine.entropy import EntropySource
from src.engine.errors import ErrorCode, IllegalTransitionError
from src.engine.scoring import DiceScorer
from src.engine.validators import (
    require_current_player,
    require_in_progress,
    require_phase,
    validate_dice_values,
    validate_set_aside_indices,
)


class TurnStateMachine:
    """
    Stateless engine for a player's turn.

    All methods are class methods operating on immutable data.
    State is passed in and returned, never stored.
    """

    FRESH_DICE = (INITIAL_DICE_VALUE,) * NUM_DICE

    @classmethod
    def roll_dice(cls, count: int, entropy: EntropySource) -> DiceRoll:
        """
        Roll the specified number of D6 dice.

        Args:
            count: Number of dice to roll
            entropy: Source of the face values

        Returns:
            DiceRoll with `count` values
        """
        return DiceRoll(values=tuple(entropy.randint(1, 6) for _ in range(count)))

    @classmethod
    def dice_to_roll(cls, state: GameState) -> int:
        """Dice still available this turn."""
        return NUM_DICE - len(state.scoring_dice)

    @classmethod
    def pre_roll(cls, state: GameState, actor_uid: str) -> GameState:
        """
        Pick up the dice.

        Raises:
            IllegalTransitionError: Game not in progress, dice already rolling,
                wrong phase, or every die already banked
            AuthorizationError: If the actor is not the current player
        """
        require_current_player(state, actor_uid)

        if state.rolling:
            raise IllegalTransitionError(ErrorCode.WRONG_PHASE, "Dice are already rolling.")

        require_phase(state, TurnAction.ROLL)

        if cls.dice_to_roll(state) == 0:
            raise IllegalTransitionError(
                ErrorCode.WRONG_PHASE, "Every die is already set aside; end the turn."
            )

        return replace(state, rolling=True)

    @classmethod
    def post_roll(
        cls,
        state: GameState,
        entropy: EntropySource,
        roll: DiceRoll | None = None,
    ) -> GameState:
        """
        Land the dice that were picked up.

        Args:
            state: State returned by pre_roll
            entropy: Source of the face values
            roll: Optional pre-determined roll (for testing and replays)

        Returns:
            New state in the setting-aside phase

        Raises:
            IllegalTransitionError: If the dice were not picked up first
            ValidationError: If a supplied roll has the wrong number of dice
        """
        require_in_progress(state)
        if not state.rolling:
            raise IllegalTransitionError(ErrorCode.WRONG_PHASE, "Dice must be picked up first.")

        count = cls.dice_to_roll(state)
        if roll is None:
            roll = cls.roll_dice(count, entropy)
        else:
            validate_dice_values(roll.values, min_count=count, max_count=count)

        return replace(
            state,
            dice_values=roll.values,
            rolling=False,
            turn_state=TurnPhase.SETTING_ASIDE,
        )

    @classmethod
    def set_aside_dice(cls, state: GameState, indices: list[int] | tuple[int, ...]) -> GameState:
        """
        Bank the selected dice and add their score to the turn.

        Args:
            state: Current game state
            indices: Positions in `dice_values` of the dice to bank

        Returns:
            New state in the deciding phase

        Raises:
            IllegalTransitionError: Game not in progress or wrong phase
            ValidationError: Empty, repeated or out-of-range indices
        """
        require_phase(state, TurnAction.SET_ASIDE)
        selected = validate_set_aside_indices(indices, len(state.dice_values))

        dice_to_score = tuple(state.dice_values[i] for i in selected)
        remaining = tuple(
            value for i, value in enumerate(state.dice_values)
            if i not in selected
        )
        result = DiceScorer.score_dice(dice_to_score)

        return replace(
            state,
            dice_values=remaining,
            scoring_dice=state.scoring_dice + dice_to_score,
            turn_score=state.turn_score + result.total_score,
            turn_state=TurnPhase.DECIDING,
        )

    @classmethod
    def has_passed_the_cheese(cls, state: GameState) -> bool:
        """Every die of the turn has been banked."""
        return len(state.dice_values) == 0

    @classmethod
    def has_cut_the_cheese(cls, state: GameState) -> bool:
        """The fresh roll scored nothing (or there was nothing left to roll)."""
        if state.turn_state is not TurnPhase.SETTING_ASIDE:
            return False
        return cls.has_passed_the_cheese(state) or DiceScorer.score_dice(state.dice_values).is_bust

    @classmethod
    def can_end_turn(cls, state: GameState) -> bool:
        """
        Whether the active player may end the turn now.

        A bust or a fully banked turn can always end. Otherwise a MustPass
        card keeps the turn going while dice remain, and a normal turn can
        only end after dice have been set aside.
        """
        if state.macro_state is not MacroState.IN_PROGRESS:
            return False

        if cls.has_passed_the_cheese(state) or cls.has_cut_the_cheese(state):
            return True

        card = state.current_card
        if card is not None and card.is_must_pass and state.dice_values:
            return False

        return state.turn_state is TurnPhase.DECIDING

    @classmethod
    def end_turn(cls, state: GameState, cut_the_cheese: bool) -> GameState:
        """
        Finish the active turn.

        Args:
            state: Current game state
            cut_the_cheese: True to forfeit the turn score (bust)

        Returns:
            New state; game over if the player reached the goal, otherwise
            the next player's drawing phase

        Raises:
            IllegalTransitionError: Game over, or the turn cannot end yet
        """
        require_in_progress(state)
        if not cls.can_end_turn(state):
            raise IllegalTransitionError(
                ErrorCode.TURN_NOT_COMPLETE,
                "You must fill the card requirements before ending the turn.",
            )

        players = state.players if cut_the_cheese else cls._commit_turn_score(state)
        game_over = players[state.current_player - 1].score >= state.score_goal

        if game_over:
            next_player = state.current_player
        else:
            next_player = (state.current_player % len(players)) + 1

        return replace(
            state,
            players=players,
            current_player=next_player,
            macro_state=MacroState.GAME_OVER if game_over else MacroState.IN_PROGRESS,
            turn_score=0,
            scoring_dice=(),
            dice_values=cls.FRESH_DICE,
            rolling=False,
            turn_state=TurnPhase.DRAWING,
        )

    @classmethod
    def winner(cls, state: GameState) -> Player | None:
        """The player who reached the goal, once the game is over."""
        if not state.is_over:
            return None
        return state.active_player

    @classmethod
    def _commit_turn_score(cls, state: GameState) -> tuple[Player, ...]:
        """Players with the turn score (and a passing bonus) credited."""
        gained = state.turn_score
        if cls.has_passed_the_cheese(state) and state.current_card is not None:
            gained += state.current_card.bonus

        index = state.current_player - 1
        current = state.players[index]
        updated = replace(current, score=current.score + gained)
        return state.players[:index] + (updated,) + state.players[index + 1:]
