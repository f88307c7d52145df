"""
Store Package

Persistence backends for games and leaderboard entries.
"""

from .base import GameStore, LeaderboardStore
from .memory import MemoryGameStore, MemoryLeaderboardStore
from .mongo import MongoGameStore, MongoLeaderboardStore, connect_mongo

__all__ = [
    'GameStore', 'LeaderboardStore',
    'MemoryGameStore', 'MemoryLeaderboardStore',
    'MongoGameStore', 'MongoLeaderboardStore', 'connect_mongo'
]
