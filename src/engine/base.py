"""
Cut the Cheese - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine. All classes are immutable (frozen dataclasses) so every
transition returns a fresh snapshot and never touches one held elsewhere.
"""

from dataclasses import dataclass, field
from enum import Enum, auto

from src.engine.errors import ErrorCode, ValidationError


NUM_DICE = 6
DIE_FACES = 6
INITIAL_DICE_VALUE = 1


class MacroState(Enum):
    """Overall game lifecycle."""
    WAITING = "waiting"
    IN_PROGRESS = "inProgress"
    GAME_OVER = "gameOver"


class TurnPhase(Enum):
    """Phase within the active player's turn."""
    DRAWING = "drawing"
    ROLLING = "rolling"
    SETTING_ASIDE = "settingAside"
    DECIDING = "deciding"


class CardKind(Enum):
    """Kinds of cards in the modifier deck."""
    BONUS = "Bonus"
    MUST_PASS = "MustPass"


class ScoringReason(Enum):
    """Scoring rules, labelled as they appear in a breakdown."""
    STRAIGHT = "Straight"
    THREE_OF_A_KIND = "Three of a kind"
    SINGLE_ONES = "Single 1s"
    SINGLE_FIVES = "Single 5s"


class TurnAction(Enum):
    """Phase-gated actions of a turn."""
    DRAW = auto()
    ROLL = auto()
    SET_ASIDE = auto()


# Turn phases in which each action may be taken.
ALLOWED_PHASES: dict[TurnAction, frozenset[TurnPhase]] = {
    TurnAction.DRAW: frozenset({TurnPhase.DRAWING}),
    TurnAction.ROLL: frozenset({TurnPhase.ROLLING, TurnPhase.DECIDING}),
    TurnAction.SET_ASIDE: frozenset({TurnPhase.SETTING_ASIDE, TurnPhase.DECIDING}),
}


@dataclass(frozen=True)
class ScoringDetail:
    """
    A single scoring component within a set of dice.

    Attributes:
        reason: The rule that awarded the points
        values: The face values consumed by the rule
        points: Points awarded
    """
    reason: ScoringReason
    values: tuple[int, ...]
    points: int


@dataclass(frozen=True)
class ScoringResult:
    """
    Complete scoring result for a set of dice.

    Attributes:
        total_score: Total points scored
        unscored_dice: Face values that did not contribute, ascending
        scoring_details: Contributing rules in evaluation order
    """
    total_score: int
    unscored_dice: tuple[int, ...] = ()
    scoring_details: tuple[ScoringDetail, ...] = ()

    @property
    def is_bust(self) -> bool:
        """Returns True if nothing scored."""
        return self.total_score == 0


@dataclass(frozen=True)
class DiceRoll:
    """
    Immutable representation of a D6 dice roll.

    Attributes:
        values: Tuple of dice face values
    """
    values: tuple[int, ...]

    def __post_init__(self) -> None:
        """Validate dice values are within valid range."""
        for value in self.values:
            if not (1 <= value <= DIE_FACES):
                raise ValidationError(
                    ErrorCode.INVALID_DIE_VALUE,
                    f"Invalid die value {value}. Must be between 1 and {DIE_FACES}.",
                )


@dataclass(frozen=True)
class Card:
    """A card in play: its kind and the bonus it awards for passing."""
    kind: CardKind
    bonus: int

    @property
    def is_must_pass(self) -> bool:
        return self.kind is CardKind.MUST_PASS


@dataclass(frozen=True)
class CatalogEntry:
    """
    A catalog line describing one card design.

    Attributes:
        kind: Card kind
        bonus: Bonus points printed on the card
        quantity: Number of copies placed in a fresh deck
    """
    kind: CardKind
    bonus: int
    quantity: int

    def to_card(self) -> Card:
        return Card(kind=self.kind, bonus=self.bonus)


@dataclass(frozen=True)
class Player:
    """A seated player. `uid` is unique within a game."""
    uid: str
    name: str
    score: int = 0


@dataclass(frozen=True)
class GameState:
    """
    Complete snapshot of a game.

    Attributes:
        score_goal: Score needed to win
        max_players: Seats available in the game
        created_by: UID of the player allowed to start the game
        macro_state: Overall lifecycle
        turn_state: Phase of the active turn
        players: Seated players in join (and turn) order
        current_player: 1-based index of the active player
        rolling: Whether dice are in the air
        dice_values: Dice still in play this turn
        scoring_dice: Dice banked this turn
        turn_score: Points accumulated this turn (not yet committed)
        deck: Draw pile; the last element is the top card
        current_card: Modifier card for the active turn
        discarded_cards: Discard pile
    """
    score_goal: int
    max_players: int
    created_by: str
    macro_state: MacroState = MacroState.WAITING
    turn_state: TurnPhase = TurnPhase.DRAWING
    players: tuple[Player, ...] = field(default_factory=tuple)
    current_player: int = 1
    rolling: bool = False
    dice_values: tuple[int, ...] = (INITIAL_DICE_VALUE,) * NUM_DICE
    scoring_dice: tuple[int, ...] = field(default_factory=tuple)
    turn_score: int = 0
    deck: tuple[Card, ...] = field(default_factory=tuple)
    current_card: Card | None = None
    discarded_cards: tuple[Card, ...] = field(default_factory=tuple)

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def active_player(self) -> Player:
        """The player whose turn it is."""
        return self.players[self.current_player - 1]

    @property
    def card_count(self) -> int:
        """Cards in the deck, the discard pile and in play."""
        in_play = 1 if self.current_card is not None else 0
        return len(self.deck) + len(self.discarded_cards) + in_play

    @property
    def is_over(self) -> bool:
        return self.macro_state is MacroState.GAME_OVER
