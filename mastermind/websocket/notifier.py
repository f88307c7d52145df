"""
Real-time Notifier

Best-effort fan-out of guess results and leaderboard updates to Socket.IO
rooms. Publishing sits after the durable write and never fails the caller.
"""

from typing import Optional

from ..models.game import GuessResult
from ..models.leaderboard import LeaderboardEntry
from ..utils.game_logger import game_logger


def game_room(game_id: str) -> str:
    return f"game_{game_id}"


def leaderboard_room(difficulty: str) -> str:
    return f"leaderboard_{difficulty}"


class RealtimeNotifier:
    """Wraps a SocketIO server; without one every publish is a no-op."""

    def __init__(self, socketio=None):
        self.socketio = socketio

    def attach(self, socketio) -> None:
        self.socketio = socketio

    def _emit(self, event: str, payload: dict, room: str) -> bool:
        if self.socketio is None:
            return False
        try:
            self.socketio.emit(event, payload, room=room)
            return True
        except Exception as e:
            game_logger.logger.warning(f"Realtime publish of '{event}' to {room} failed: {e}")
            return False

    def publish_guess_result(self, result: GuessResult) -> bool:
        return self._emit('guess_result', {'success': True, 'result': result.to_dict()},
                          game_room(result.game.game_id))

    def publish_leaderboard_update(self, entry: LeaderboardEntry,
                                   previous: Optional[LeaderboardEntry] = None) -> bool:
        payload = {
            'entry': entry.to_public_dict(),
            'previous_best_score': previous.best_score if previous else None,
        }
        return self._emit('leaderboard_update', payload, leaderboard_room(entry.difficulty.value))
