"""
Cut the Cheese - Dice Scoring

Scoring rules for a set of D6 dice. All methods are stateless class
methods operating on immutable inputs; only the multiset of faces
matters, never the order the dice are given in.

Scoring Rules:
    - 1-2-3-4-5-6 (Straight, exactly six dice): 1,500 points, nothing else
    - Three 1s: 1,000 points
    - Three of X (2-6): X × 100 points (once per face; extra dice fall
      through to the singles)
    - Single 1: 100 points
    - Single 5: 50 points
"""

from collections import Counter
from typing import Sequence

from src.engine.base import (
    DIE_FACES,
    NUM_DICE,
    DiceRoll,
    ScoringDetail,
    ScoringReason,
    ScoringResult,
)
from src.engine.validators import validate_dice_values


class DiceScorer:
    """
    Stateless scorer for a set of dice.

    State is passed in and returned, never stored.
    """

    STRAIGHT_POINTS = 1500
    THREE_ONES_POINTS = 1000
    THREE_OF_A_KIND_MULTIPLIER = 100
    SINGLE_ONE_POINTS = 100
    SINGLE_FIVE_POINTS = 50

    @classmethod
    def score_dice(cls, dice: Sequence[int] | DiceRoll) -> ScoringResult:
        """
        Calculate the score for a set of dice.

        Rules are evaluated in a fixed order (straight, three of a kind by
        ascending face, single 1s, single 5s) and the breakdown follows it.

        Args:
            dice: Up to six dice values (sequence or DiceRoll)

        Returns:
            ScoringResult with total, unscored dice and breakdown

        Raises:
            ValidationError: More than six dice, or a face outside 1-6
        """
        values = dice.values if isinstance(dice, DiceRoll) else dice
        values = validate_dice_values(values, min_count=0, max_count=NUM_DICE)

        if not values:
            return ScoringResult(total_score=0)

        counts = Counter(values)

        if cls._is_straight(values, counts):
            return ScoringResult(
                total_score=cls.STRAIGHT_POINTS,
                scoring_details=(
                    ScoringDetail(
                        reason=ScoringReason.STRAIGHT,
                        values=tuple(sorted(values)),
                        points=cls.STRAIGHT_POINTS,
                    ),
                ),
            )

        details: list[ScoringDetail] = []
        details.extend(cls._score_three_of_a_kind(counts))
        details.extend(cls._score_singles(counts))

        unscored = tuple(
            face
            for face in range(1, DIE_FACES + 1)
            for _ in range(counts[face])
        )

        return ScoringResult(
            total_score=sum(item.points for item in details),
            unscored_dice=unscored,
            scoring_details=tuple(details),
        )

    @classmethod
    def is_bust(cls, dice: Sequence[int] | DiceRoll) -> bool:
        """
        Check if a roll scores nothing.

        An empty set of dice is not a bust: there is nothing to score.
        """
        values = dice.values if isinstance(dice, DiceRoll) else dice
        if not values:
            return False
        return cls.score_dice(values).is_bust

    @classmethod
    def _is_straight(cls, values: tuple[int, ...], counts: Counter[int]) -> bool:
        return len(values) == NUM_DICE and all(
            counts[face] == 1 for face in range(1, DIE_FACES + 1)
        )

    @classmethod
    def _score_three_of_a_kind(cls, counts: Counter[int]) -> list[ScoringDetail]:
        """Award each face with three or more dice once; consumes exactly three."""
        details: list[ScoringDetail] = []

        for face in range(1, DIE_FACES + 1):
            if counts[face] >= 3:
                if face == 1:
                    points = cls.THREE_ONES_POINTS
                else:
                    points = face * cls.THREE_OF_A_KIND_MULTIPLIER
                counts[face] -= 3
                details.append(ScoringDetail(
                    reason=ScoringReason.THREE_OF_A_KIND,
                    values=(face,) * 3,
                    points=points,
                ))

        return details

    @classmethod
    def _score_singles(cls, counts: Counter[int]) -> list[ScoringDetail]:
        """Score leftover 1s and 5s; consumes them."""
        details: list[ScoringDetail] = []

        for face, reason, each in (
            (1, ScoringReason.SINGLE_ONES, cls.SINGLE_ONE_POINTS),
            (5, ScoringReason.SINGLE_FIVES, cls.SINGLE_FIVE_POINTS),
        ):
            count = counts[face]
            if count > 0:
                details.append(ScoringDetail(
                    reason=reason,
                    values=(face,) * count,
                    points=count * each,
                ))
                counts[face] = 0

        return details


def score_dice(dice: Sequence[int] | DiceRoll) -> ScoringResult:
    """Module-level shortcut for DiceScorer.score_dice."""
    return DiceScorer.score_dice(dice)
