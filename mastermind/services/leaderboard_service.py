"""
Leaderboard Service

Folds newly won games into per-user, per-difficulty standings. Driven by the
change feed; each notification is an atomic read-modify-write against the
(user, difficulty) key using the entry's version as a compare-and-swap token.
"""

from typing import Callable, List, Optional

from ..exceptions import ConflictError
from ..models.game import Difficulty, Game, GameChange, GameStatus, utcnow
from ..models.leaderboard import LeaderboardEntry
from ..store.base import LeaderboardStore
from ..utils.game_logger import game_logger


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounded to nearest, ties upward (2.5 -> 3)."""
    return (2 * numerator + denominator) // (2 * denominator)


def fold_win(existing: Optional[LeaderboardEntry], game: Game, won_at) -> LeaderboardEntry:
    """
    Combine one win into the running entry for the game's owner and difficulty.

    The score of a win is the number of guesses it took; lower is better.
    """
    score = game.total_guesses

    if existing is None:
        return LeaderboardEntry(
            user_id=game.user_id,
            username=game.username,
            difficulty=game.difficulty,
            games_won=1,
            total_games=1,
            best_score=score,
            average_score=score,
            last_won_at=won_at,
            version=1,
            last_game_id=game.game_id,
        )

    games_won = existing.games_won + 1
    return LeaderboardEntry(
        user_id=existing.user_id,
        username=game.username or existing.username,
        difficulty=existing.difficulty,
        games_won=games_won,
        total_games=existing.total_games + 1,
        best_score=min(existing.best_score, score),
        average_score=round_half_up(existing.average_score * existing.games_won + score, games_won),
        last_won_at=won_at,
        version=existing.version + 1,
        last_game_id=game.game_id,
    )


def is_new_win(old: Optional[Game], new: Optional[Game]) -> bool:
    """Only a transition into WON counts; later changes to a won game see old already WON."""
    if new is None or new.status != GameStatus.WON:
        return False
    return old is None or old.status != GameStatus.WON


class LeaderboardService:
    """
    Leaderboard aggregation and ranking.

    This class handles:
    - Idempotent folding of win transitions from the change feed
    - Lost-update protection with a bounded compare-and-swap retry loop
    - Best-effort real-time publication after each committed write
    - Ranked reads per difficulty
    """

    def __init__(self, store: LeaderboardStore, notifier=None, cas_retries: int = 5,
                 clock: Callable = utcnow):
        self.store = store
        self.notifier = notifier
        self.cas_retries = max(1, cas_retries)
        self.clock = clock

    def handle_change(self, change: GameChange) -> Optional[LeaderboardEntry]:
        """Change-feed consumer."""
        return self.on_game_transition(change.old, change.new)

    def on_game_transition(self, old: Optional[Game], new: Game) -> Optional[LeaderboardEntry]:
        """
        Update standings if this change is a game being won.

        Args:
            old: Record before the write (None for inserts)
            new: Record after the write

        Returns:
            The written LeaderboardEntry, or None when the change is not a new win

        Raises:
            ConflictError: If every compare-and-swap attempt lost a race
            PersistenceError: If the leaderboard store is unavailable
        """
        if not is_new_win(old, new):
            return None

        difficulty = new.difficulty.value
        for attempt in range(1, self.cas_retries + 1):
            existing = self.store.get(new.user_id, difficulty)
            if existing is not None and existing.last_game_id == new.game_id:
                game_logger.logger.info(f"Win of game {new.game_id} already counted, skipping")
                return None
            entry = fold_win(existing, new, self.clock())
            expected_version = existing.version if existing else None

            if self.store.put(entry, expected_version):
                game_logger.log_game_event(
                    new.game_id, 'leaderboard_updated', new.user_id,
                    username=new.username, difficulty=difficulty, score=new.total_guesses,
                    games_won=entry.games_won, best_score=entry.best_score,
                    average_score=entry.average_score
                )
                self._publish(entry, existing)
                return entry

            game_logger.logger.info(
                f"Leaderboard write for {new.user_id}/{difficulty} lost a race "
                f"(attempt {attempt}/{self.cas_retries}), retrying"
            )

        raise ConflictError(
            f"Could not update leaderboard for {new.user_id}/{difficulty} "
            f"after {self.cas_retries} attempts"
        )

    def _publish(self, entry: LeaderboardEntry, previous: Optional[LeaderboardEntry]) -> None:
        # The aggregate is already committed; a failed push must not undo it
        if self.notifier is None:
            return
        try:
            self.notifier.publish_leaderboard_update(entry, previous)
        except Exception as e:
            game_logger.logger.warning(f"Leaderboard publish failed for {entry.user_id}: {e}")

    def get_leaderboard(self, difficulty=None) -> List[LeaderboardEntry]:
        """
        Ranked entries: best score ascending, then games won descending.

        Args:
            difficulty: Optional difficulty filter

        Raises:
            InvalidDifficulty: If difficulty is given and unknown
        """
        tier = Difficulty.parse(difficulty).value if difficulty else None
        return sorted(self.store.scan(tier), key=LeaderboardEntry.sort_key)


# Global service instance
_leaderboard_service = None


def get_leaderboard_service() -> Optional[LeaderboardService]:
    """Get the global leaderboard service instance."""
    return _leaderboard_service


def initialize_leaderboard_service(store: LeaderboardStore, **kwargs) -> LeaderboardService:
    """Initialize the global leaderboard service instance."""
    global _leaderboard_service
    _leaderboard_service = LeaderboardService(store, **kwargs)
    return _leaderboard_service
