"""
Cut the Cheese - Game Service

Ties the pure engine to the store: every call loads the current snapshot,
applies exactly one transition and saves the result against the version it
was loaded at. Engine rejections and lost races are raised to the caller
unchanged; only transient transport errors are retried, and a write whose
response was lost is recognised by re-reading the row first.
"""

from __future__ import annotations

import logging
import time
from functools import lru_cache
from typing import Callable, Sequence, TypeVar

from httpx import RemoteProtocolError
from supabase import create_client

from src.config.settings import configure_logging, get_settings
from src.database.game_store import ConcurrentUpdateError, GameStore
from src.database.models import GameRecord
from src.engine.base import CatalogEntry, GameState
from src.engine.deck import DEFAULT_CATALOG, DeckManager
from src.engine.entropy import EntropySource, RandomEntropy
from src.engine.roster import RosterGuard
from src.engine.turn import TurnStateMachine
from src.engine.validators import require_current_player

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS = (RemoteProtocolError, ConnectionError, OSError)


class GameService:
    """Load, transition and save games on behalf of players."""

    def __init__(
        self,
        store: GameStore,
        entropy: EntropySource,
        *,
        catalog: Sequence[CatalogEntry] = DEFAULT_CATALOG,
        default_score_goal: int = 10000,
        default_max_players: int = 4,
        retries: int = 2,
        retry_delay: float = 0.3,
    ) -> None:
        self.store = store
        self.entropy = entropy
        self.catalog = tuple(catalog)
        self.default_score_goal = default_score_goal
        self.default_max_players = default_max_players
        self.retries = retries
        self.retry_delay = retry_delay

    # -- Session -----------------------------------------------------------

    def create_game(
        self,
        created_by: str,
        *,
        max_players: int | None = None,
        score_goal: int | None = None,
    ) -> tuple[str, GameState]:
        """Create and store a new waiting game."""
        game_id, state = RosterGuard.create_game(
            max_players=self.default_max_players if max_players is None else max_players,
            score_goal=self.default_score_goal if score_goal is None else score_goal,
            created_by=created_by,
            entropy=self.entropy,
            catalog=self.catalog,
        )
        record = self._write_retry(
            game_id, state, 0,
            lambda: self.store.create(game_id, state),
        )
        logger.info(
            "Game %s created by %s (goal %d, %d seats, %d cards)",
            game_id, created_by, state.score_goal, state.max_players, len(state.deck),
        )
        return game_id, record.game_state

    def get_state(self, game_id: str) -> GameState:
        """Current snapshot of a game."""
        return self._db_retry(self.store.load, game_id).game_state

    def join_game(self, game_id: str, name: str, uid: str) -> GameState:
        return self._apply(
            game_id, "join",
            lambda state: RosterGuard.add_player(state, name, uid),
        )

    def start_game(self, game_id: str, actor_uid: str) -> GameState:
        return self._apply(
            game_id, "start",
            lambda state: RosterGuard.start_game(state, actor_uid),
        )

    # -- Turn actions ------------------------------------------------------

    def draw_card(self, game_id: str, actor_uid: str) -> GameState:
        def transition(state: GameState) -> GameState:
            require_current_player(state, actor_uid)
            return DeckManager.draw_card(state, self.entropy)

        return self._apply(game_id, "draw", transition)

    def roll_dice(self, game_id: str, actor_uid: str) -> GameState:
        """Pick up and land the dice in one save."""
        def transition(state: GameState) -> GameState:
            rolling = TurnStateMachine.pre_roll(state, actor_uid)
            return TurnStateMachine.post_roll(rolling, self.entropy)

        return self._apply(game_id, "roll", transition)

    def set_aside_dice(self, game_id: str, actor_uid: str, indices: Sequence[int]) -> GameState:
        def transition(state: GameState) -> GameState:
            require_current_player(state, actor_uid)
            return TurnStateMachine.set_aside_dice(state, tuple(indices))

        return self._apply(game_id, "set aside", transition)

    def end_turn(self, game_id: str, actor_uid: str, cut_the_cheese: bool = False) -> GameState:
        def transition(state: GameState) -> GameState:
            require_current_player(state, actor_uid)
            return TurnStateMachine.end_turn(state, cut_the_cheese)

        new_state = self._apply(game_id, "end turn", transition)
        winner = TurnStateMachine.winner(new_state)
        if winner is not None:
            logger.info("Game %s won by %s with %d points", game_id, winner.name, winner.score)
        return new_state

    # -- Internals ---------------------------------------------------------

    def _apply(
        self,
        game_id: str,
        action: str,
        transition: Callable[[GameState], GameState],
    ) -> GameState:
        """Load, transition and compare-and-swap save a game."""
        record = self._db_retry(self.store.load, game_id)
        new_state = transition(record.game_state)

        try:
            saved = self._write_retry(
                game_id, new_state, record.version + 1,
                lambda: self.store.save(game_id, new_state, record.version),
            )
        except ConcurrentUpdateError:
            logger.warning("Game %s changed during %s (version %d)", game_id, action, record.version)
            raise

        logger.info(
            "Game %s: %s -> %s/%s (version %d)",
            game_id, action, new_state.macro_state.value, new_state.turn_state.value, saved.version,
        )
        return saved.game_state

    def _write_retry(
        self,
        game_id: str,
        state: GameState,
        version: int,
        write: Callable[[], GameRecord],
    ) -> GameRecord:
        """
        Run a write, retrying transient connection errors.

        A dropped response does not mean the write failed. Before writing
        again the row is re-read, and if it already holds *state* at
        *version* that record is returned as the result.
        """
        for attempt in range(self.retries + 1):
            try:
                return write()
            except TRANSIENT_ERRORS as exc:
                if attempt == self.retries:
                    raise
                logger.warning(
                    "Transient store error on write (%s), retry %d/%d", exc, attempt + 1, self.retries
                )
                time.sleep(self.retry_delay)

            current = self._db_retry(self.store.get, game_id)
            if current is not None and current.version == version and current.game_state == state:
                logger.info("Game %s write had landed before the connection dropped", game_id)
                return current

    def _db_retry(self, fn: Callable[..., T], *args) -> T:
        """Call *fn* with simple retry on transient connection errors."""
        for attempt in range(self.retries + 1):
            try:
                return fn(*args)
            except TRANSIENT_ERRORS as exc:
                if attempt == self.retries:
                    raise
                logger.warning(
                    "Transient store error (%s), retry %d/%d", exc, attempt + 1, self.retries
                )
                time.sleep(self.retry_delay)


@lru_cache(maxsize=1)
def get_game_service() -> GameService:
    """Cached service wired from settings."""
    settings = get_settings()
    configure_logging(settings)
    client = create_client(settings.supabase_url, settings.supabase_anon_key)
    return GameService(
        GameStore(client),
        RandomEntropy(settings.rng_seed),
        default_score_goal=settings.default_score_goal,
        default_max_players=settings.default_max_players,
        retries=settings.store_retries,
    )
