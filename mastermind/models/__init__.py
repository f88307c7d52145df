"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import Difficulty, Feedback, Game, GameChange, GamePage, GameStatus, GuessResult, Turn
from .leaderboard import LeaderboardEntry

__all__ = [
    'Difficulty', 'Feedback', 'Game', 'GameChange', 'GamePage', 'GameStatus',
    'GuessResult', 'Turn', 'LeaderboardEntry'
]
