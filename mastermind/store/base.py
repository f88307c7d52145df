"""
Store Interfaces

Abstract persistence contracts for games and leaderboard entries. Any
backend must provide an atomic conditional write keyed by record identity;
the ``version`` field on each record is the comparison token.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from ..models.game import Game, GameChange
from ..models.leaderboard import LeaderboardEntry

# (started_at, game_id) of the last row returned; listings resume strictly after it
PageKey = Tuple[datetime, str]


class GameStore(ABC):
    """Persistence for game records."""

    def __init__(self, change_feed=None):
        self.change_feed = change_feed

    def _publish(self, old: Optional[Game], new: Game) -> None:
        if self.change_feed is not None:
            self.change_feed.publish(GameChange(old=old, new=new))

    @abstractmethod
    def insert(self, game: Game) -> None:
        """Store a new record. Raises ConflictError if the id exists."""

    @abstractmethod
    def get(self, game_id: str, user_id: str) -> Optional[Game]:
        """Return the record owned by user_id, or None (missing, foreign or expired)."""

    @abstractmethod
    def compare_and_swap(self, old: Game, new: Game) -> bool:
        """
        Replace ``old`` with ``new`` only if the stored version still equals
        ``old.version``. Returns False when another writer got there first.
        """

    @abstractmethod
    def query_by_owner(self, user_id: str, difficulty: Optional[str] = None,
                       limit: int = 50, start_after: Optional[PageKey] = None
                       ) -> Tuple[List[Game], Optional[PageKey]]:
        """Newest-first page of a user's games and the key to resume from."""

    @abstractmethod
    def purge_expired(self, now: datetime) -> int:
        """Delete records whose expires_at has passed. Returns the count."""

    def close(self) -> None:
        pass


class LeaderboardStore(ABC):
    """Persistence for leaderboard aggregates."""

    @abstractmethod
    def get(self, user_id: str, difficulty: str) -> Optional[LeaderboardEntry]:
        """Return the entry for (user_id, difficulty), if any."""

    @abstractmethod
    def put(self, entry: LeaderboardEntry, expected_version: Optional[int]) -> bool:
        """
        Write ``entry`` if the stored version equals ``expected_version``.
        ``expected_version=None`` means the entry must not exist yet.
        """

    @abstractmethod
    def scan(self, difficulty: Optional[str] = None) -> List[LeaderboardEntry]:
        """All entries, optionally for one difficulty, in no particular order."""

    def close(self) -> None:
        pass
