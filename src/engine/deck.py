"""
Cut the Cheese - Card Deck

Builds the modifier deck from a catalog, shuffles it with an injected
entropy source and deals one card per turn. When the draw pile runs out
the discard pile is shuffled back in, so the number of cards in a game
never changes.
"""

import logging
from dataclasses import replace
from typing import Sequence

from src.engine.base import Card, CardKind, CatalogEntry, GameState, TurnAction, TurnPhase
from src.engine.entropy import EntropySource
from src.engine.errors import ErrorCode, ValidationError
from src.engine.validators import require_phase

logger = logging.getLogger(__name__)


DEFAULT_CATALOG: tuple[CatalogEntry, ...] = (
    CatalogEntry(kind=CardKind.BONUS, bonus=200, quantity=6),
    CatalogEntry(kind=CardKind.BONUS, bonus=300, quantity=5),
    CatalogEntry(kind=CardKind.BONUS, bonus=400, quantity=4),
    CatalogEntry(kind=CardKind.BONUS, bonus=500, quantity=3),
    CatalogEntry(kind=CardKind.BONUS, bonus=1000, quantity=2),
    CatalogEntry(kind=CardKind.MUST_PASS, bonus=1500, quantity=4),
)


class DeckManager:
    """
    Stateless deck operations.

    All methods are class methods operating on immutable data.
    """

    @classmethod
    def catalog_size(cls, catalog: Sequence[CatalogEntry]) -> int:
        """
        Total number of cards a catalog produces.

        Raises:
            ValidationError: If any entry has a negative quantity
        """
        total = 0
        for entry in catalog:
            if entry.quantity < 0:
                raise ValidationError(
                    ErrorCode.INVALID_CONFIG,
                    f"Card quantity cannot be negative, got {entry.quantity} "
                    f"for {entry.kind.value} ({entry.bonus}).",
                )
            total += entry.quantity
        return total

    @classmethod
    def build_deck(cls, catalog: Sequence[CatalogEntry]) -> tuple[Card, ...]:
        """Expand a catalog into an unshuffled deck, in catalog order."""
        cls.catalog_size(catalog)
        return tuple(
            entry.to_card()
            for entry in catalog
            for _ in range(entry.quantity)
        )

    @classmethod
    def create_and_shuffle_deck(
        cls,
        catalog: Sequence[CatalogEntry],
        entropy: EntropySource,
    ) -> tuple[Card, ...]:
        """
        Build a deck from a catalog and shuffle it.

        Args:
            catalog: Card designs and their quantities
            entropy: Source of the permutation

        Returns:
            Shuffled deck with one card per catalog copy
        """
        return tuple(entropy.shuffle(cls.build_deck(catalog)))

    @classmethod
    def draw_card(cls, state: GameState, entropy: EntropySource) -> GameState:
        """
        Deal the top card for the active turn.

        The previous card moves to the discard pile. An empty deck is
        rebuilt from the shuffled discard pile first.

        Args:
            state: Current game state (must be in the drawing phase)
            entropy: Used only when the discard pile is reshuffled

        Returns:
            New state in the rolling phase

        Raises:
            IllegalTransitionError: Outside the drawing phase
            ValidationError: If both deck and discard pile are empty
        """
        require_phase(state, TurnAction.DRAW)

        deck = state.deck
        discarded = state.discarded_cards

        if not deck:
            if not discarded:
                raise ValidationError(
                    ErrorCode.EXHAUSTED_DECK,
                    "No cards left in the deck or discard pile.",
                )
            logger.debug("Reshuffling %d discarded cards into the deck", len(discarded))
            deck = tuple(entropy.shuffle(discarded))
            discarded = ()

        drawn = deck[-1]
        deck = deck[:-1]
        if state.current_card is not None:
            discarded = discarded + (state.current_card,)

        return replace(
            state,
            deck=deck,
            current_card=drawn,
            discarded_cards=discarded,
            turn_state=TurnPhase.ROLLING,
        )
