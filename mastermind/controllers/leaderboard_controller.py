"""
Leaderboard Controller

Handles the public leaderboard HTTP endpoint.
"""

from flask import Blueprint, request, jsonify
from ..exceptions import ServiceUnavailable
from ..services.leaderboard_service import get_leaderboard_service
from ..utils.game_logger import game_logger
from ..utils.helpers import error_envelope

leaderboard_bp = Blueprint('leaderboard', __name__)


@leaderboard_bp.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    """Ranked standings, optionally filtered by difficulty."""
    difficulty = request.args.get('difficulty') or None

    try:
        leaderboard_service = get_leaderboard_service()
        if not leaderboard_service:
            raise ServiceUnavailable('Leaderboard service unavailable')

        game_logger.log_user_action(request, 'get_leaderboard', difficulty=difficulty)

        entries = leaderboard_service.get_leaderboard(difficulty)

        response_data = {
            'success': True,
            'difficulty': difficulty,
            'leaderboard': [entry.to_public_dict() for entry in entries],
            'count': len(entries)
        }

        game_logger.log_server_response(request, 'get_leaderboard', True, response_data)

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_leaderboard')
        error_response, status_code = error_envelope(e)
        game_logger.log_server_response(request, 'get_leaderboard', False, error_response)
        return jsonify(error_response), status_code
