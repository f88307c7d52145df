"""
Controllers Package

HTTP blueprints for games and the leaderboard.
"""

from .game_controller import game_bp
from .leaderboard_controller import leaderboard_bp

__all__ = ['game_bp', 'leaderboard_bp']
