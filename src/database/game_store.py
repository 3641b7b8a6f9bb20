"""
Cut the Cheese - Game Store

CRUD operations for the `games` table. Saves are compare-and-swap on the
`version` column: a write only lands if nobody else saved since the
snapshot was loaded.
"""

import logging

from supabase import Client

from src.database.models import GameRecord, GameSnapshot
from src.engine.base import GameState

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Base class for store failures surfaced to callers."""


class GameNotFoundError(PersistenceError):
    """No game is stored under the requested id."""

    def __init__(self, game_id: str) -> None:
        super().__init__(f"Game {game_id} not found.")
        self.game_id = game_id


class ConcurrentUpdateError(PersistenceError):
    """The stored game changed since it was loaded."""

    def __init__(self, game_id: str, expected_version: int) -> None:
        super().__init__(
            f"Game {game_id} was modified concurrently (expected version {expected_version})."
        )
        self.game_id = game_id
        self.expected_version = expected_version


def _dump(state: GameState) -> dict:
    return GameSnapshot.from_engine(state).model_dump(mode="json")


class GameStore:
    """Loads and saves game snapshots in Supabase."""

    def __init__(self, client: Client) -> None:
        self.client = client
        self.table = client.table("games")

    def create(self, game_id: str, state: GameState) -> GameRecord:
        """Insert a new game at version 0."""
        data = (
            self.table
            .insert({
                "id": game_id,
                "state": _dump(state),
                "version": 0,
            })
            .execute()
        )
        logger.info("Created game %s", game_id)
        return GameRecord.model_validate(data.data[0])

    def get(self, game_id: str) -> GameRecord | None:
        """Load a game, or None if it does not exist."""
        data = (
            self.table
            .select("*")
            .eq("id", game_id)
            .execute()
        )
        if data.data:
            return GameRecord.model_validate(data.data[0])
        return None

    def load(self, game_id: str) -> GameRecord:
        """Load a game that must exist."""
        record = self.get(game_id)
        if record is None:
            raise GameNotFoundError(game_id)
        return record

    def save(self, game_id: str, state: GameState, expected_version: int) -> GameRecord:
        """
        Replace the stored snapshot if it is still at `expected_version`.

        Raises:
            ConcurrentUpdateError: If another writer saved first (or the
                game no longer exists)
        """
        data = (
            self.table
            .update({
                "state": _dump(state),
                "version": expected_version + 1,
            })
            .eq("id", game_id)
            .eq("version", expected_version)
            .execute()
        )
        if not data.data:
            raise ConcurrentUpdateError(game_id, expected_version)
        return GameRecord.model_validate(data.data[0])

    def delete(self, game_id: str) -> None:
        """Delete a finished or abandoned game."""
        self.table.delete().eq("id", game_id).execute()
        logger.info("Deleted game %s", game_id)
