"""
In-Memory Stores

Lock-guarded dictionaries. Default backend for development and tests.
"""

import threading
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..exceptions import ConflictError
from ..models.game import Game, utcnow
from ..models.leaderboard import LeaderboardEntry
from .base import GameStore, LeaderboardStore, PageKey


def _is_expired(game: Game, now: datetime) -> bool:
    return game.expires_at is not None and game.expires_at <= now


class MemoryGameStore(GameStore):
    """Games keyed by game_id."""

    def __init__(self, change_feed=None):
        super().__init__(change_feed)
        self._games: Dict[str, Game] = {}
        self._lock = threading.RLock()

    def __len__(self):
        return len(self._games)

    def insert(self, game: Game) -> None:
        with self._lock:
            if game.game_id in self._games:
                raise ConflictError(f"Game {game.game_id} already exists")
            self._games[game.game_id] = game
            self._publish(None, game)

    def get(self, game_id: str, user_id: str) -> Optional[Game]:
        with self._lock:
            game = self._games.get(game_id)
        if game is None or game.user_id != user_id or _is_expired(game, utcnow()):
            return None
        return game

    def compare_and_swap(self, old: Game, new: Game) -> bool:
        with self._lock:
            current = self._games.get(old.game_id)
            if current is None or current.user_id != old.user_id or current.version != old.version:
                return False
            self._games[new.game_id] = new
            # Published under the lock so per-game changes keep commit order
            self._publish(current, new)
            return True

    def query_by_owner(self, user_id: str, difficulty: Optional[str] = None,
                       limit: int = 50, start_after: Optional[PageKey] = None
                       ) -> Tuple[List[Game], Optional[PageKey]]:
        now = utcnow()
        with self._lock:
            games = [
                g for g in self._games.values()
                if g.user_id == user_id
                and (difficulty is None or g.difficulty.value == difficulty)
                and not _is_expired(g, now)
            ]

        games.sort(key=lambda g: (g.started_at, g.game_id), reverse=True)
        if start_after is not None:
            games = [g for g in games if (g.started_at, g.game_id) < start_after]

        page = games[:limit]
        next_key = None
        if len(games) > limit and page:
            next_key = (page[-1].started_at, page[-1].game_id)
        return page, next_key

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [gid for gid, g in self._games.items() if _is_expired(g, now)]
            for game_id in expired:
                del self._games[game_id]
        return len(expired)


class MemoryLeaderboardStore(LeaderboardStore):
    """Entries keyed by (user_id, difficulty)."""

    def __init__(self):
        self._entries: Dict[Tuple[str, str], LeaderboardEntry] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str, difficulty: str) -> Optional[LeaderboardEntry]:
        with self._lock:
            return self._entries.get((user_id, difficulty))

    def put(self, entry: LeaderboardEntry, expected_version: Optional[int]) -> bool:
        with self._lock:
            current = self._entries.get(entry.key)
            if expected_version is None:
                if current is not None:
                    return False
            elif current is None or current.version != expected_version:
                return False
            self._entries[entry.key] = entry
            return True

    def scan(self, difficulty: Optional[str] = None) -> List[LeaderboardEntry]:
        with self._lock:
            return [
                e for e in self._entries.values()
                if difficulty is None or e.difficulty.value == difficulty
            ]
