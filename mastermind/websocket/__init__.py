"""
WebSocket Package

Socket.IO event handlers and the real-time notifier.
"""

from .notifier import RealtimeNotifier, game_room, leaderboard_room

__all__ = ['RealtimeNotifier', 'game_room', 'leaderboard_room']
