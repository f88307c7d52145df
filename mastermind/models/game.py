"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..config.game_settings import DIFFICULTY_SLOTS
from ..exceptions import InvalidDifficulty


class Difficulty(str, Enum):
    """Difficulty tiers. Each maps to a fixed slot count."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def slots(self) -> int:
        return DIFFICULTY_SLOTS[self.value]

    @classmethod
    def parse(cls, value) -> "Difficulty":
        """Coerce a raw value into a Difficulty, raising InvalidDifficulty."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except (ValueError, AttributeError):
            allowed = ', '.join(d.value for d in cls)
            raise InvalidDifficulty(f"Invalid difficulty '{value}'. Must be one of: {allowed}")


class GameStatus(str, Enum):
    """Game lifecycle status. WON and LOST are terminal."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def parse_datetime(value) -> Optional[datetime]:
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        # pymongo hands back naive UTC datetimes
        value = value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class Feedback:
    """Result of scoring one guess."""
    exact_matches: int
    color_matches: int

    def to_dict(self) -> Dict[str, int]:
        return {'exact_matches': self.exact_matches, 'color_matches': self.color_matches}


@dataclass(frozen=True)
class Turn:
    """One entry of the append-only turn history."""
    number: int
    guess: Tuple[str, ...]
    feedback: Feedback

    def to_dict(self) -> Dict[str, Any]:
        return {
            'number': self.number,
            'guess': list(self.guess),
            'feedback': self.feedback.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Turn":
        return cls(
            number=data['number'],
            guess=tuple(data['guess']),
            feedback=Feedback(**data['feedback']),
        )


@dataclass(frozen=True)
class Game:
    """
    Server-side game record.

    The record is immutable; every accepted guess produces a new record with
    ``version`` incremented. ``version`` is the optimistic concurrency token
    the stores compare against on write.
    """
    game_id: str
    user_id: str
    difficulty: Difficulty
    secret_code: Tuple[str, ...]
    username: Optional[str] = None
    turns: Tuple[Turn, ...] = ()
    status: GameStatus = GameStatus.PLAYING
    version: int = 0
    started_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    @property
    def slots(self) -> int:
        return len(self.secret_code)

    @property
    def total_guesses(self) -> int:
        return len(self.turns)

    @property
    def is_playing(self) -> bool:
        return self.status == GameStatus.PLAYING

    def attempts_remaining(self, max_attempts: int) -> int:
        return max(0, max_attempts - self.total_guesses)

    def to_dict(self) -> Dict[str, Any]:
        """Full record, including the secret code. Storage use only."""
        return {
            'game_id': self.game_id,
            'user_id': self.user_id,
            'username': self.username,
            'difficulty': self.difficulty.value,
            'secret_code': list(self.secret_code),
            'turns': [turn.to_dict() for turn in self.turns],
            'total_guesses': self.total_guesses,
            'status': self.status.value,
            'version': self.version,
            'started_at': self.started_at,
            'updated_at': self.updated_at,
            'expires_at': self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Game":
        return cls(
            game_id=data['game_id'],
            user_id=data['user_id'],
            username=data.get('username'),
            difficulty=Difficulty(data['difficulty']),
            secret_code=tuple(data['secret_code']),
            turns=tuple(Turn.from_dict(t) for t in data.get('turns', [])),
            status=GameStatus(data.get('status', GameStatus.PLAYING.value)),
            version=data.get('version', 0),
            started_at=parse_datetime(data['started_at']),
            updated_at=parse_datetime(data.get('updated_at')),
            expires_at=parse_datetime(data.get('expires_at')),
        )

    def to_public_dict(self, max_attempts: int) -> Dict[str, Any]:
        """Client-facing view. The secret code is omitted while playing."""
        return {
            'game_id': self.game_id,
            'difficulty': self.difficulty.value,
            'slots': self.slots,
            'status': self.status.value,
            'turns': [turn.to_dict() for turn in self.turns],
            'total_guesses': self.total_guesses,
            'max_attempts': max_attempts,
            'attempts_remaining': self.attempts_remaining(max_attempts),
            'started_at': isoformat(self.started_at),
            'updated_at': isoformat(self.updated_at),
            'secret_code': None if self.is_playing else list(self.secret_code),
        }

    def to_summary_dict(self) -> Dict[str, Any]:
        """Row for game listings."""
        return {
            'game_id': self.game_id,
            'difficulty': self.difficulty.value,
            'status': self.status.value,
            'created_at': isoformat(self.started_at),
            'updated_at': isoformat(self.updated_at),
            'total_guesses': self.total_guesses,
        }


@dataclass(frozen=True)
class GuessResult:
    """Outcome of one submitted guess."""
    game: Game
    turn: Turn
    replayed: bool = False

    @property
    def feedback(self) -> Feedback:
        return self.turn.feedback

    def to_dict(self) -> Dict[str, Any]:
        return {
            'game_id': self.game.game_id,
            'guess': list(self.turn.guess),
            'exact_matches': self.feedback.exact_matches,
            'color_matches': self.feedback.color_matches,
            'guess_number': self.turn.number,
            'status': self.game.status.value,
            'secret_code': None if self.game.is_playing else list(self.game.secret_code),
            'replayed': self.replayed,
        }


@dataclass(frozen=True)
class GamePage:
    """One page of a user's games, newest first."""
    games: List[Game]
    next_page_token: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'games': [game.to_summary_dict() for game in self.games],
            'count': len(self.games),
            'next_page_token': self.next_page_token,
        }


@dataclass(frozen=True)
class GameChange:
    """A change-feed record: the game before and after one committed write."""
    old: Optional[Game]
    new: Game

    @property
    def key(self) -> str:
        return self.new.game_id
