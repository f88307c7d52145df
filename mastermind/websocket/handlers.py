"""
WebSocket Event Handlers

Handles WebSocket events for live game and leaderboard updates.
"""

from flask import request
from flask_socketio import emit, join_room, leave_room
from ..exceptions import MastermindError, ServiceUnavailable, ValidationError
from ..models.game import Difficulty
from ..services.game_service import get_game_service
from ..services.leaderboard_service import get_leaderboard_service
from ..utils.decorators import websocket_auth_required
from ..utils.helpers import error_envelope, parse_guess, parse_optional_int
from ..utils.game_logger import game_logger
from .notifier import game_room, leaderboard_room


def _emit_error(event, error):
    """Reply to the caller with the error envelope."""
    if not isinstance(error, MastermindError):
        game_logger.logger.error(f"WebSocket {event} failed: {error}")
    emit(event, error_envelope(error)[0])


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        game_logger.logger.info(f"WebSocket: client connected ({request.sid})")

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """Handle WebSocket disconnection. Rooms are left automatically."""
        game_logger.logger.info(f"WebSocket: client disconnected ({request.sid})")

    @socketio.on('join_game')
    @websocket_auth_required
    def handle_join_game(data, user=None):
        """Join a game room for real-time guess results."""
        try:
            game_service = get_game_service()
            if not game_service:
                _emit_error('error', ServiceUnavailable('Game service unavailable'))
                return

            game_id = data.get('game_id')
            if not game_id:
                _emit_error('error', ValidationError('Game ID is required'))
                return

            # Only the owner may watch a game; raises NotFoundError otherwise
            state = game_service.get_game_state(game_id, user['id'])

            join_room(game_room(game_id))
            game_logger.logger.info(f"WebSocket: {user['username'] or user['id']} joined game {game_id}")

            emit('game_state_update', {
                'success': True,
                'state': state
            })

        except Exception as e:
            _emit_error('game_state_update', e)

    @socketio.on('leave_game')
    @websocket_auth_required
    def handle_leave_game(data, user=None):
        """Leave a game room."""
        game_id = data.get('game_id')
        if not game_id:
            _emit_error('error', ValidationError('Game ID is required'))
            return

        leave_room(game_room(game_id))
        game_logger.logger.info(f"WebSocket: {user['username'] or user['id']} left game {game_id}")

    @socketio.on('submit_guess')
    @websocket_auth_required
    def handle_submit_guess(data, user=None):
        """Submit a guess via WebSocket."""
        try:
            game_service = get_game_service()
            if not game_service:
                _emit_error('error', ServiceUnavailable('Game service unavailable'))
                return

            game_id = data.get('game_id')
            if not game_id or 'guess' not in data:
                raise ValidationError('Game ID and guess required')

            guess = parse_guess(data['guess'])
            expected_turn = parse_optional_int(data.get('expected_turn'), 'expected_turn')

            result = game_service.submit_guess(game_id, user['id'], guess, expected_turn=expected_turn)

            emit('guess_result', {
                'success': True,
                'result': result.to_dict(),
                'state': result.game.to_public_dict(game_service.max_attempts)
            })

        except Exception as e:
            _emit_error('guess_result', e)

    @socketio.on('join_leaderboard')
    @websocket_auth_required
    def handle_join_leaderboard(data, user=None):
        """Subscribe to leaderboard updates for one difficulty."""
        try:
            leaderboard_service = get_leaderboard_service()
            if not leaderboard_service:
                _emit_error('error', ServiceUnavailable('Leaderboard service unavailable'))
                return

            difficulty = Difficulty.parse(data.get('difficulty')).value
            entries = leaderboard_service.get_leaderboard(difficulty)

            join_room(leaderboard_room(difficulty))

            emit('leaderboard_state', {
                'success': True,
                'difficulty': difficulty,
                'leaderboard': [entry.to_public_dict() for entry in entries],
                'count': len(entries)
            })

        except Exception as e:
            _emit_error('leaderboard_state', e)

    @socketio.on('leave_leaderboard')
    @websocket_auth_required
    def handle_leave_leaderboard(data, user=None):
        """Unsubscribe from leaderboard updates."""
        try:
            difficulty = Difficulty.parse(data.get('difficulty')).value
        except MastermindError as e:
            _emit_error('error', e)
            return

        leave_room(leaderboard_room(difficulty))
