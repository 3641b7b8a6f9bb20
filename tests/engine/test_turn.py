"""
Cut the Cheese - Turn State Machine Tests

Tests for rolling, setting aside, ending turns and winning.
"""

from dataclasses import replace

import pytest
from src.engine.base import (
    CardKind,
    CatalogEntry,
    DiceRoll,
    GameState,
    MacroState,
    Player,
    TurnPhase,
)
from src.engine.deck import DeckManager
from src.engine.errors import (
    AuthorizationError,
    ErrorCode,
    IllegalTransitionError,
    ValidationError,
)
from src.engine.roster import RosterGuard
from src.engine.turn import TurnStateMachine


@pytest.fixture
def drawn_game(started_game: GameState, scripted) -> GameState:
    """Alice has drawn her card and may roll."""
    return DeckManager.draw_card(started_game, scripted())


class TestRollDice:
    def test_rolls_requested_count(self, scripted):
        roll = TurnStateMachine.roll_dice(3, scripted([6, 2, 5]))
        assert roll == DiceRoll(values=(6, 2, 5))

    def test_dice_to_roll_excludes_banked(self, rolled_game: GameState):
        assert TurnStateMachine.dice_to_roll(rolled_game) == 6
        assert TurnStateMachine.dice_to_roll(replace(rolled_game, scoring_dice=(1, 5))) == 4


class TestPreRoll:
    def test_sets_rolling(self, drawn_game: GameState):
        state = TurnStateMachine.pre_roll(drawn_game, "alice")
        assert state.rolling is True
        assert drawn_game.rolling is False

    def test_wrong_player_rejected(self, drawn_game: GameState):
        with pytest.raises(AuthorizationError) as exc:
            TurnStateMachine.pre_roll(drawn_game, "bob")
        assert exc.value.code is ErrorCode.WRONG_PLAYER

    def test_already_rolling_rejected(self, drawn_game: GameState):
        state = TurnStateMachine.pre_roll(drawn_game, "alice")
        with pytest.raises(IllegalTransitionError) as exc:
            TurnStateMachine.pre_roll(state, "alice")
        assert exc.value.code is ErrorCode.WRONG_PHASE

    def test_game_over_rejected(self, drawn_game: GameState):
        state = replace(drawn_game, macro_state=MacroState.GAME_OVER)
        with pytest.raises(IllegalTransitionError) as exc:
            TurnStateMachine.pre_roll(state, "alice")
        assert exc.value.code is ErrorCode.GAME_NOT_IN_PROGRESS

    def test_wrong_player_reported_after_game_over(self, drawn_game: GameState):
        state = replace(drawn_game, macro_state=MacroState.GAME_OVER)
        with pytest.raises(AuthorizationError) as exc:
            TurnStateMachine.pre_roll(state, "bob")
        assert exc.value.code is ErrorCode.WRONG_PLAYER

    def test_must_draw_before_rolling(self, started_game: GameState):
        with pytest.raises(IllegalTransitionError) as exc:
            TurnStateMachine.pre_roll(started_game, "alice")
        assert exc.value.code is ErrorCode.WRONG_PHASE

    def test_can_roll_again_while_deciding(self, rolled_game: GameState):
        state = TurnStateMachine.set_aside_dice(rolled_game, [0])
        assert TurnStateMachine.pre_roll(state, "alice").rolling

    def test_nothing_left_to_roll_rejected(self, rolled_game: GameState):
        state = TurnStateMachine.set_aside_dice(rolled_game, [0, 1, 2, 3, 4, 5])
        with pytest.raises(IllegalTransitionError):
            TurnStateMachine.pre_roll(state, "alice")


class TestPostRoll:
    def test_rolls_fresh_dice(self, drawn_game: GameState, scripted):
        state = TurnStateMachine.pre_roll(drawn_game, "alice")
        state = TurnStateMachine.post_roll(state, scripted([1, 1, 1, 2, 3, 4]))

        assert state.dice_values == (1, 1, 1, 2, 3, 4)
        assert state.rolling is False
        assert state.turn_state is TurnPhase.SETTING_ASIDE

    def test_rolls_only_unbanked_dice(self, rolled_game: GameState, scripted):
        state = TurnStateMachine.set_aside_dice(rolled_game, [0, 1, 2])
        state = TurnStateMachine.pre_roll(state, "alice")
        state = TurnStateMachine.post_roll(state, scripted([5, 6, 6]))

        assert state.dice_values == (5, 6, 6)
        assert state.scoring_dice == (1, 1, 1)
        assert len(state.dice_values) + len(state.scoring_dice) == 6

    def test_accepts_predetermined_roll(self, drawn_game: GameState, scripted):
        state = TurnStateMachine.pre_roll(drawn_game, "alice")
        state = TurnStateMachine.post_roll(state, scripted(), roll=DiceRoll((2, 2, 2, 3, 4, 6)))
        assert state.dice_values == (2, 2, 2, 3, 4, 6)

    def test_predetermined_roll_must_match_dice_count(self, drawn_game: GameState, scripted):
        state = TurnStateMachine.pre_roll(drawn_game, "alice")
        with pytest.raises(ValidationError):
            TurnStateMachine.post_roll(state, scripted(), roll=DiceRoll((2, 2)))

    def test_requires_pre_roll(self, drawn_game: GameState, scripted):
        with pytest.raises(IllegalTransitionError):
            TurnStateMachine.post_roll(drawn_game, scripted([1] * 6))


class TestSetAsideDice:
    def test_banks_selected_dice(self, rolled_game: GameState):
        state = TurnStateMachine.set_aside_dice(rolled_game, [0, 1, 2])

        assert state.dice_values == (2, 3, 4)
        assert state.scoring_dice == (1, 1, 1)
        assert state.turn_score == 1000
        assert state.turn_state is TurnPhase.DECIDING

    def test_accumulates_turn_score(self, rolled_game: GameState):
        state = TurnStateMachine.set_aside_dice(rolled_game, [0])
        state = TurnStateMachine.set_aside_dice(state, [0])

        assert state.turn_score == 200
        assert state.scoring_dice == (1, 1)
        assert state.dice_values == (1, 2, 3, 4)

    def test_selection_order_kept_in_scoring_dice(self, rolled_game: GameState):
        state = TurnStateMachine.set_aside_dice(rolled_game, [3, 0])
        assert state.scoring_dice == (2, 1)
        assert state.dice_values == (1, 1, 3, 4)

    @pytest.mark.parametrize("indices", [[6], [-1], [], [0, 0]])
    def test_invalid_index_rejected(self, rolled_game: GameState, indices):
        with pytest.raises(ValidationError) as exc:
            TurnStateMachine.set_aside_dice(rolled_game, indices)
        assert exc.value.code is ErrorCode.INVALID_INDEX

    def test_after_game_over_rejected(self, rolled_game: GameState):
        state = replace(rolled_game, macro_state=MacroState.GAME_OVER)
        with pytest.raises(IllegalTransitionError) as exc:
            TurnStateMachine.set_aside_dice(state, [0])
        assert exc.value.code is ErrorCode.GAME_NOT_IN_PROGRESS

    def test_before_rolling_rejected(self, drawn_game: GameState):
        with pytest.raises(IllegalTransitionError) as exc:
            TurnStateMachine.set_aside_dice(drawn_game, [0])
        assert exc.value.code is ErrorCode.WRONG_PHASE


class TestCanEndTurn:
    def test_cannot_end_right_after_rolling_scoring_dice(self, rolled_game: GameState):
        assert not TurnStateMachine.can_end_turn(rolled_game)

    def test_can_end_after_setting_aside(self, rolled_game: GameState):
        state = TurnStateMachine.set_aside_dice(rolled_game, [0, 1, 2])
        assert TurnStateMachine.can_end_turn(state)

    def test_bust_roll_can_end(self, rolled_game: GameState):
        state = replace(rolled_game, dice_values=(2, 3, 4, 6, 6, 2))
        assert TurnStateMachine.has_cut_the_cheese(state)
        assert TurnStateMachine.can_end_turn(state)

    def test_all_dice_passed_can_end(self, rolled_game: GameState):
        state = replace(rolled_game, dice_values=(), turn_state=TurnPhase.DECIDING)
        assert TurnStateMachine.has_passed_the_cheese(state)
        assert TurnStateMachine.can_end_turn(state)

    def test_must_pass_blocks_ending_with_dice_left(self, rolled_game: GameState, must_pass_card):
        state = replace(rolled_game, current_card=must_pass_card)
        state = TurnStateMachine.set_aside_dice(state, [0, 1, 2])

        assert state.turn_state is TurnPhase.DECIDING
        assert not TurnStateMachine.can_end_turn(state)

    def test_must_pass_allows_bust(self, rolled_game: GameState, must_pass_card):
        state = replace(rolled_game, current_card=must_pass_card, dice_values=(2, 3, 4))
        assert TurnStateMachine.can_end_turn(state)

    def test_must_pass_allows_passing(self, rolled_game: GameState, must_pass_card):
        state = replace(rolled_game, current_card=must_pass_card)
        state = TurnStateMachine.set_aside_dice(state, [0, 1, 2, 3, 4, 5])
        assert TurnStateMachine.can_end_turn(state)

    def test_drawing_phase_cannot_end(self, started_game: GameState):
        assert not TurnStateMachine.can_end_turn(started_game)

    def test_game_over_cannot_end(self, rolled_game: GameState):
        state = replace(rolled_game, macro_state=MacroState.GAME_OVER, dice_values=())
        assert not TurnStateMachine.can_end_turn(state)


class TestEndTurn:
    def test_commits_turn_score_and_rotates(self, rolled_game: GameState):
        state = TurnStateMachine.set_aside_dice(rolled_game, [0])
        state = TurnStateMachine.end_turn(state, cut_the_cheese=False)

        assert state.players[0].score == 100
        assert state.current_player == 2
        assert state.macro_state is MacroState.IN_PROGRESS

    def test_resets_turn(self, rolled_game: GameState):
        state = TurnStateMachine.set_aside_dice(rolled_game, [0])
        state = TurnStateMachine.end_turn(state, cut_the_cheese=False)

        assert state.dice_values == (1, 1, 1, 1, 1, 1)
        assert state.scoring_dice == ()
        assert state.turn_score == 0
        assert state.turn_state is TurnPhase.DRAWING
        assert state.rolling is False

    def test_cut_the_cheese_discards_turn_score(self, rolled_game: GameState):
        state = TurnStateMachine.set_aside_dice(rolled_game, [0])
        state = TurnStateMachine.end_turn(state, cut_the_cheese=True)

        assert state.players[0].score == 0
        assert state.current_player == 2
        assert state.turn_score == 0

    def test_bonus_added_when_all_dice_banked(self, rolled_game: GameState):
        state = replace(rolled_game, dice_values=(1, 1, 1, 5, 5, 5))
        state = TurnStateMachine.set_aside_dice(state, [0, 1, 2, 3, 4, 5])
        state = TurnStateMachine.end_turn(state, cut_the_cheese=False)

        assert state.players[0].score == 1500 + rolled_game.current_card.bonus

    def test_no_bonus_with_dice_left(self, rolled_game: GameState):
        state = TurnStateMachine.set_aside_dice(rolled_game, [0, 1, 2])
        state = TurnStateMachine.end_turn(state, cut_the_cheese=False)
        assert state.players[0].score == 1000

    def test_rotation_wraps_around(self, rolled_game: GameState):
        state = replace(rolled_game, current_player=2)
        state = TurnStateMachine.set_aside_dice(state, [0])
        state = TurnStateMachine.end_turn(state, cut_the_cheese=False)

        assert state.current_player == 1
        assert state.players[1].score == 100

    def test_reaching_goal_ends_game(self, rolled_game: GameState):
        state = replace(rolled_game, score_goal=1000)
        state = TurnStateMachine.set_aside_dice(state, [0, 1, 2])
        state = TurnStateMachine.end_turn(state, cut_the_cheese=False)

        assert state.macro_state is MacroState.GAME_OVER
        assert state.current_player == 1
        assert TurnStateMachine.winner(state) == Player(uid="alice", name="Alice", score=1000)

    def test_incomplete_turn_rejected(self, rolled_game: GameState):
        with pytest.raises(IllegalTransitionError) as exc:
            TurnStateMachine.end_turn(rolled_game, cut_the_cheese=False)
        assert exc.value.code is ErrorCode.TURN_NOT_COMPLETE

    def test_game_over_is_terminal(self, rolled_game: GameState):
        state = replace(rolled_game, score_goal=100)
        state = TurnStateMachine.set_aside_dice(state, [0])
        state = TurnStateMachine.end_turn(state, cut_the_cheese=False)

        with pytest.raises(IllegalTransitionError) as exc:
            TurnStateMachine.end_turn(state, cut_the_cheese=True)
        assert exc.value.code is ErrorCode.GAME_NOT_IN_PROGRESS

    def test_input_state_untouched(self, rolled_game: GameState):
        state = TurnStateMachine.set_aside_dice(rolled_game, [0])
        TurnStateMachine.end_turn(state, cut_the_cheese=False)

        assert state.players[0].score == 0
        assert state.turn_score == 100

    def test_no_winner_while_playing(self, rolled_game: GameState):
        assert TurnStateMachine.winner(rolled_game) is None


class TestFullGame:
    def test_first_player_wins_with_three_ones(self, scripted):
        catalog = (CatalogEntry(kind=CardKind.BONUS, bonus=300, quantity=4),)
        entropy = scripted([1, 1, 1, 2, 3, 4])

        _, state = RosterGuard.create_game(2, 100, "p1", entropy, catalog)
        state = RosterGuard.add_player(state, "Player 1", "p1")
        state = RosterGuard.add_player(state, "Player 2", "p2")
        state = RosterGuard.start_game(state, "p1")
        state = DeckManager.draw_card(state, entropy)
        state = TurnStateMachine.pre_roll(state, "p1")
        state = TurnStateMachine.post_roll(state, entropy)
        assert state.dice_values == (1, 1, 1, 2, 3, 4)

        state = TurnStateMachine.set_aside_dice(state, [0, 1, 2])
        assert state.turn_score == 1000

        state = TurnStateMachine.end_turn(state, cut_the_cheese=False)

        assert state.players[0].score == 1000
        assert state.macro_state is MacroState.GAME_OVER
        assert state.current_player == 1

    def test_bust_passes_dice_to_next_player(self, scripted):
        catalog = (CatalogEntry(kind=CardKind.MUST_PASS, bonus=1000, quantity=2),)
        entropy = scripted([2, 3, 4, 6, 6, 2])

        _, state = RosterGuard.create_game(2, 5000, "p1", entropy, catalog)
        state = RosterGuard.add_player(state, "Player 1", "p1")
        state = RosterGuard.add_player(state, "Player 2", "p2")
        state = RosterGuard.start_game(state, "p1")
        state = DeckManager.draw_card(state, entropy)
        state = TurnStateMachine.post_roll(TurnStateMachine.pre_roll(state, "p1"), entropy)

        assert TurnStateMachine.has_cut_the_cheese(state)
        state = TurnStateMachine.end_turn(state, cut_the_cheese=True)

        assert state.current_player == 2
        assert state.players[0].score == 0
        assert state.turn_state is TurnPhase.DRAWING

        state = DeckManager.draw_card(state, entropy)
        assert state.discarded_cards[0].kind is CardKind.MUST_PASS
        assert state.card_count == 2
