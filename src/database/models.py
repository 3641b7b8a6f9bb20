"""
Cut the Cheese - Database Models

Pydantic models that mirror the Supabase `games` table. The whole engine
snapshot is stored as one jsonb document next to a version counter.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.engine.base import Card, CardKind, GameState, MacroState, Player, TurnPhase
from src.engine.validators import MAX_NAME_LENGTH


class CardModel(BaseModel):
    """A card inside the stored snapshot."""

    kind: CardKind
    bonus: int

    @classmethod
    def from_engine(cls, card: Card) -> "CardModel":
        return cls(kind=card.kind, bonus=card.bonus)

    def to_engine(self) -> Card:
        return Card(kind=self.kind, bonus=self.bonus)


class PlayerModel(BaseModel):
    """A player inside the stored snapshot."""

    uid: str
    name: str = Field(max_length=MAX_NAME_LENGTH)
    score: int = Field(default=0, ge=0)

    @classmethod
    def from_engine(cls, player: Player) -> "PlayerModel":
        return cls(uid=player.uid, name=player.name, score=player.score)

    def to_engine(self) -> Player:
        return Player(uid=self.uid, name=self.name, score=self.score)


class GameSnapshot(BaseModel):
    """Mirrors the `state` jsonb column: one full GameState."""

    score_goal: int = Field(gt=0)
    max_players: int = Field(gt=0)
    created_by: str
    macro_state: MacroState = MacroState.WAITING
    turn_state: TurnPhase = TurnPhase.DRAWING
    players: list[PlayerModel] = Field(default_factory=list)
    current_player: int = Field(default=1, ge=1)
    rolling: bool = False
    dice_values: list[int] = Field(default_factory=lambda: [1] * 6, max_length=6)
    scoring_dice: list[int] = Field(default_factory=list, max_length=6)
    turn_score: int = Field(default=0, ge=0)
    deck: list[CardModel] = Field(default_factory=list)
    current_card: CardModel | None = None
    discarded_cards: list[CardModel] = Field(default_factory=list)

    @classmethod
    def from_engine(cls, state: GameState) -> "GameSnapshot":
        """Build a snapshot document from an engine state."""
        return cls(
            score_goal=state.score_goal,
            max_players=state.max_players,
            created_by=state.created_by,
            macro_state=state.macro_state,
            turn_state=state.turn_state,
            players=[PlayerModel.from_engine(p) for p in state.players],
            current_player=state.current_player,
            rolling=state.rolling,
            dice_values=list(state.dice_values),
            scoring_dice=list(state.scoring_dice),
            turn_score=state.turn_score,
            deck=[CardModel.from_engine(c) for c in state.deck],
            current_card=(
                CardModel.from_engine(state.current_card)
                if state.current_card is not None else None
            ),
            discarded_cards=[CardModel.from_engine(c) for c in state.discarded_cards],
        )

    def to_engine(self) -> GameState:
        """Rebuild the immutable engine state."""
        return GameState(
            score_goal=self.score_goal,
            max_players=self.max_players,
            created_by=self.created_by,
            macro_state=self.macro_state,
            turn_state=self.turn_state,
            players=tuple(p.to_engine() for p in self.players),
            current_player=self.current_player,
            rolling=self.rolling,
            dice_values=tuple(self.dice_values),
            scoring_dice=tuple(self.scoring_dice),
            turn_score=self.turn_score,
            deck=tuple(c.to_engine() for c in self.deck),
            current_card=self.current_card.to_engine() if self.current_card else None,
            discarded_cards=tuple(c.to_engine() for c in self.discarded_cards),
        )


class GameRecord(BaseModel):
    """Mirrors the `games` table."""

    id: str
    state: GameSnapshot
    version: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @property
    def game_state(self) -> GameState:
        return self.state.to_engine()
