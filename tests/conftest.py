"""
Cut the Cheese - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

from dataclasses import replace
from typing import Sequence, TypeVar

import pytest

from src.engine.base import (
    Card,
    CardKind,
    CatalogEntry,
    GameState,
    MacroState,
    Player,
    TurnPhase,
)

T = TypeVar("T")


class ScriptedEntropy:
    """Entropy source that plays back fixed dice and never reorders."""

    def __init__(self, rolls: Sequence[int] = ()) -> None:
        self.rolls = list(rolls)
        self.shuffles = 0

    def randint(self, low: int, high: int) -> int:
        if not self.rolls:
            raise AssertionError("No scripted rolls left")
        value = self.rolls.pop(0)
        assert low <= value <= high
        return value

    def shuffle(self, items: Sequence[T]) -> list[T]:
        self.shuffles += 1
        return list(items)


# =============================================================================
# SCORING TEST DATA
# =============================================================================

@pytest.fixture
def scoring_rolls() -> dict[str, tuple[tuple[int, ...], int, str]]:
    """
    Common roll patterns with expected scores.

    Returns:
        Dict mapping name to (dice_values, expected_points, description)
    """
    return {
        "single_one": ((1,), 100, "Single 1"),
        "single_five": ((5,), 50, "Single 5"),
        "one_and_five": ((1, 5), 150, "One 1 and one 5"),
        "three_ones": ((1, 1, 1), 1000, "Three 1s"),
        "three_twos": ((2, 2, 2), 200, "Three 2s"),
        "three_fives": ((5, 5, 5), 500, "Three 5s"),
        "four_ones": ((1, 1, 1, 1), 1100, "Three 1s + single 1"),
        "five_fives": ((5, 5, 5, 5, 5), 600, "Three 5s + two single 5s"),
        "two_triples": ((2, 2, 2, 3, 3, 3), 500, "Three 2s + three 3s"),
        "six_ones": ((1, 1, 1, 1, 1, 1), 1300, "Three 1s + three single 1s"),
        "straight": ((1, 2, 3, 4, 5, 6), 1500, "Straight"),
        "straight_shuffled": ((6, 4, 2, 5, 3, 1), 1500, "Straight shuffled"),
        "bust_roll": ((2, 3, 4, 6), 0, "Bust roll"),
    }


# =============================================================================
# CARDS
# =============================================================================

@pytest.fixture
def bonus_card() -> Card:
    return Card(kind=CardKind.BONUS, bonus=300)


@pytest.fixture
def must_pass_card() -> Card:
    return Card(kind=CardKind.MUST_PASS, bonus=1500)


@pytest.fixture
def small_catalog() -> tuple[CatalogEntry, ...]:
    """Three bonus cards and one MustPass card, in that order."""
    return (
        CatalogEntry(kind=CardKind.BONUS, bonus=200, quantity=2),
        CatalogEntry(kind=CardKind.BONUS, bonus=500, quantity=1),
        CatalogEntry(kind=CardKind.MUST_PASS, bonus=1000, quantity=1),
    )


@pytest.fixture
def bonus_only_catalog() -> tuple[CatalogEntry, ...]:
    return (CatalogEntry(kind=CardKind.BONUS, bonus=300, quantity=5),)


# =============================================================================
# GAME STATE FIXTURES
# =============================================================================

@pytest.fixture
def waiting_game() -> GameState:
    """A fresh game created by alice, nobody seated."""
    return GameState(score_goal=10000, max_players=2, created_by="alice")


@pytest.fixture
def started_game(bonus_card: Card) -> GameState:
    """Two players, alice to draw."""
    return GameState(
        score_goal=10000,
        max_players=2,
        created_by="alice",
        macro_state=MacroState.IN_PROGRESS,
        turn_state=TurnPhase.DRAWING,
        players=(
            Player(uid="alice", name="Alice"),
            Player(uid="bob", name="Bob"),
        ),
        deck=(bonus_card,) * 3,
    )


@pytest.fixture
def rolled_game(started_game: GameState, bonus_card: Card) -> GameState:
    """Alice drew a bonus card and rolled 1-1-1-2-3-4."""
    return replace(
        started_game,
        turn_state=TurnPhase.SETTING_ASIDE,
        deck=(bonus_card,) * 2,
        current_card=bonus_card,
        dice_values=(1, 1, 1, 2, 3, 4),
    )


@pytest.fixture
def scripted() -> type[ScriptedEntropy]:
    """Factory for entropy sources with fixed dice, e.g. scripted([1, 5])."""
    return ScriptedEntropy
