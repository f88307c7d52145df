"""
Leaderboard Data Models

Contains the per-user, per-difficulty aggregate of winning games.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from .game import Difficulty, isoformat, parse_datetime


@dataclass(frozen=True)
class LeaderboardEntry:
    """Running statistics for one (user, difficulty) key."""
    user_id: str
    difficulty: Difficulty
    games_won: int
    total_games: int
    best_score: int
    average_score: int
    last_won_at: datetime
    username: Optional[str] = None
    version: int = 0
    last_game_id: Optional[str] = None

    @property
    def key(self):
        return (self.user_id, self.difficulty.value)

    def sort_key(self):
        """Lower best score first, more wins next, then average, then who got there first."""
        return (self.best_score, -self.games_won, self.average_score, self.last_won_at)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'user_id': self.user_id,
            'username': self.username,
            'difficulty': self.difficulty.value,
            'games_won': self.games_won,
            'total_games': self.total_games,
            'best_score': self.best_score,
            'average_score': self.average_score,
            'last_won_at': self.last_won_at,
            'version': self.version,
            'last_game_id': self.last_game_id,
        }

    def to_public_dict(self) -> Dict[str, Any]:
        data = self.to_dict()
        data['last_won_at'] = isoformat(self.last_won_at)
        del data['version']
        del data['last_game_id']
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeaderboardEntry":
        return cls(
            user_id=data['user_id'],
            username=data.get('username'),
            difficulty=Difficulty(data['difficulty']),
            games_won=data['games_won'],
            total_games=data['total_games'],
            best_score=data['best_score'],
            average_score=data['average_score'],
            last_won_at=parse_datetime(data['last_won_at']),
            version=data.get('version', 0),
            last_game_id=data.get('last_game_id'),
        )
