"""
Game Service

Orchestrates the game lifecycle against a store: creation, reads with the
secret hidden, guess submission through the state machine with an atomic
conditional write, and owner listings.
"""

import base64
import binascii
import json
from datetime import datetime
from typing import Optional, Sequence

from ..config.game_settings import MAX_ATTEMPTS
from ..exceptions import ConflictError, InvalidPageToken, NotFoundError, ValidationError
from ..models.game import Difficulty, Game, GamePage, GameStatus, GuessResult, parse_datetime, utcnow
from ..store.base import GameStore, PageKey
from ..utils.game_logger import game_logger
from .game_engine import apply_guess, check_guess_shape, new_game


def encode_page_token(key: Optional[PageKey]) -> Optional[str]:
    """Opaque, URL-safe cursor for the next page."""
    if key is None:
        return None
    started_at, game_id = key
    raw = json.dumps({'started_at': started_at.isoformat(), 'game_id': game_id})
    return base64.urlsafe_b64encode(raw.encode('utf-8')).decode('ascii').rstrip('=')


def decode_page_token(token: Optional[str]) -> Optional[PageKey]:
    if not token:
        return None
    try:
        padded = token + '=' * (-len(token) % 4)
        data = json.loads(base64.urlsafe_b64decode(padded.encode('ascii')).decode('utf-8'))
        started_at = parse_datetime(data['started_at'])
        if started_at is None:
            raise ValueError('missing started_at')
        return started_at, str(data['game_id'])
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError):
        raise InvalidPageToken("Invalid page token")


class GameService:
    """
    Core game service managing game sessions.

    This class handles:
    - Game creation with a server-side secret code
    - Guess validation, scoring and status transitions
    - At-most-once turn application through conditional writes
    - Game state views that never expose an active secret
    """

    def __init__(self, store: GameStore, notifier=None, max_attempts: int = MAX_ATTEMPTS,
                 ttl_seconds: Optional[int] = None, default_page_limit: int = 50,
                 max_page_limit: int = 100):
        self.store = store
        self.notifier = notifier
        self.max_attempts = max_attempts
        self.ttl_seconds = ttl_seconds
        self.default_page_limit = default_page_limit
        self.max_page_limit = max_page_limit

    def create_game(self, difficulty, user_id: str, username: Optional[str] = None,
                    secret_code: Optional[Sequence[str]] = None) -> Game:
        """
        Creates and persists a new game in PLAYING status.

        Args:
            difficulty: 'easy', 'medium' or 'hard'
            user_id: Owner of the game
            username: Owner display name, carried to the leaderboard
            secret_code: Fixed secret for tests; random otherwise

        Returns:
            Game: The stored record
        """
        game = new_game(difficulty, user_id, username=username,
                        ttl_seconds=self.ttl_seconds, secret_code=secret_code)
        self.store.insert(game)
        game_logger.log_game_event(
            game.game_id, 'game_created', user_id,
            username=username, difficulty=game.difficulty.value, slots=game.slots
        )
        return game

    def get_game(self, game_id: str, user_id: str) -> Game:
        """
        Returns the game owned by user_id.

        Raises:
            NotFoundError: If no such game exists for this owner
        """
        game = self.store.get(game_id, user_id)
        if game is None:
            raise NotFoundError("Game not found")
        return game

    def get_game_state(self, game_id: str, user_id: str) -> dict:
        """Client view of a game; the secret code is omitted while playing."""
        return self.get_game(game_id, user_id).to_public_dict(self.max_attempts)

    def submit_guess(self, game_id: str, user_id: str, guess: Sequence[str],
                     expected_turn: Optional[int] = None) -> GuessResult:
        """
        Processes a guess and commits the updated game.

        Args:
            game_id: Unique game identifier
            user_id: Owner of the game
            guess: Color ids, one per slot
            expected_turn: Number of guesses the caller saw before submitting.
                A retry of an already applied guess replays its result.

        Returns:
            GuessResult with the feedback and the committed game

        Raises:
            ValidationError: Wrong length, unknown color or malformed expected_turn
            NotFoundError: Unknown game for this owner
            ConflictError: Game over, stale expected_turn or concurrent update lost
            PersistenceError: Store unavailable; the guess was not applied
        """
        if expected_turn is not None and (isinstance(expected_turn, bool)
                                          or not isinstance(expected_turn, int)
                                          or expected_turn < 0):
            raise ValidationError("expected_turn must be a non-negative integer")

        game = self.get_game(game_id, user_id)
        guess = check_guess_shape(game, guess)

        if expected_turn is not None and expected_turn != game.total_guesses:
            replay = self._replay(game, expected_turn, guess)
            if replay is not None:
                return replay
            raise ConflictError(
                f"Game is at turn {game.total_guesses}, not {expected_turn}; re-fetch game state"
            )

        _, updated = apply_guess(game, guess, self.max_attempts)

        if not self.store.compare_and_swap(game, updated):
            raise ConflictError("Game was updated by another request; re-fetch game state")

        result = GuessResult(game=updated, turn=updated.turns[-1])
        self._log_transition(updated)

        if self.notifier is not None:
            self.notifier.publish_guess_result(result)

        return result

    def _replay(self, game: Game, expected_turn: int, guess: Sequence[str]) -> Optional[GuessResult]:
        """Result of turn expected_turn + 1 if it recorded this exact guess."""
        if expected_turn >= game.total_guesses:
            return None
        turn = game.turns[expected_turn]
        if turn.guess != tuple(guess):
            return None
        return GuessResult(game=game, turn=turn, replayed=True)

    def _log_transition(self, game: Game) -> None:
        if game.status == GameStatus.WON:
            game_logger.log_game_event(
                game.game_id, 'game_won', game.user_id, username=game.username,
                difficulty=game.difficulty.value, guesses_used=game.total_guesses
            )
        elif game.status == GameStatus.LOST:
            game_logger.log_game_event(
                game.game_id, 'game_lost', game.user_id, username=game.username,
                difficulty=game.difficulty.value, guesses_used=game.total_guesses
            )

    def list_games(self, user_id: str, difficulty=None, page_token: Optional[str] = None,
                   limit: Optional[int] = None) -> GamePage:
        """
        Lists a user's games, newest first.

        Args:
            user_id: Owner
            difficulty: Optional difficulty filter
            page_token: Cursor returned by the previous page
            limit: Page size, capped at max_page_limit

        Returns:
            GamePage with summaries and the next page token (None on the last page)
        """
        tier = Difficulty.parse(difficulty).value if difficulty else None

        if limit is None:
            limit = self.default_page_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValidationError("limit must be a positive integer")
        limit = min(limit, self.max_page_limit)

        games, next_key = self.store.query_by_owner(
            user_id, difficulty=tier, limit=limit, start_after=decode_page_token(page_token)
        )
        return GamePage(games=games, next_page_token=encode_page_token(next_key))

    def purge_expired_games(self, now: Optional[datetime] = None) -> int:
        """Removes games past their expiry. Returns the number removed."""
        removed = self.store.purge_expired(now or utcnow())
        if removed:
            game_logger.logger.info(f"Purged {removed} expired game(s)")
        return removed


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(store: GameStore, **kwargs) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(store, **kwargs)
    return _game_service
