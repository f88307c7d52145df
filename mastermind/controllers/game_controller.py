"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from ..config.game_settings import get_difficulty_config
from ..exceptions import ServiceUnavailable, ValidationError
from ..services import get_change_feed
from ..services.game_service import get_game_service
from ..services.auth_service import get_auth_service
from ..services.leaderboard_service import get_leaderboard_service
from ..utils.decorators import require_auth
from ..utils.helpers import error_envelope, parse_guess, parse_optional_int
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)


def _service_unavailable(action, game_id=None):
    error_response, status_code = error_envelope(ServiceUnavailable('Game service unavailable'))
    game_logger.log_server_response(request, action, False, error_response, game_id)
    return jsonify(error_response), status_code


def _error_response(action, error, game_id=None):
    """Translate an exception into the error envelope and its status code."""
    game_logger.log_error(request, error, action, game_id)

    error_response, status_code = error_envelope(error)
    game_logger.log_server_response(request, action, False, error_response, game_id)
    return jsonify(error_response), status_code


@game_bp.route('/games', methods=['POST'])
@require_auth
def create_game():
    """Create a new game for the authenticated user."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable('create_game')

        data = request.get_json(silent=True) or {}
        difficulty = data.get('difficulty')

        # Log user action
        game_logger.log_user_action(request, 'create_game', difficulty=difficulty)

        game = game_service.create_game(
            difficulty, request.user['id'], username=request.user.get('username')
        )

        response_data = {
            'success': True,
            'game_id': game.game_id,
            'difficulty': game.difficulty.value,
            'state': game.to_public_dict(game_service.max_attempts)
        }

        game_logger.log_server_response(
            request, 'create_game', True, response_data, game.game_id,
            slots=game.slots, max_attempts=game_service.max_attempts
        )

        return jsonify(response_data), 201

    except Exception as e:
        return _error_response('create_game', e)


@game_bp.route('/games', methods=['GET'])
@require_auth
def list_games():
    """List the authenticated user's games, newest first."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable('list_games')

        difficulty = request.args.get('difficulty') or None
        page_token = request.args.get('page_token') or None
        limit = parse_optional_int(request.args.get('limit'), 'limit')

        game_logger.log_user_action(
            request, 'list_games', difficulty=difficulty, limit=limit,
            paginated=page_token is not None
        )

        page = game_service.list_games(
            request.user['id'], difficulty=difficulty, page_token=page_token, limit=limit
        )

        response_data = {
            'success': True,
            **page.to_dict()
        }

        game_logger.log_server_response(
            request, 'list_games', True, response_data,
            has_more=page.next_page_token is not None
        )

        return jsonify(response_data)

    except Exception as e:
        return _error_response('list_games', e)


@game_bp.route('/games/<game_id>', methods=['GET'])
@require_auth
def get_game(game_id):
    """Get current game state."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable('get_game', game_id)

        game_logger.log_user_action(request, 'get_game', game_id)

        state = game_service.get_game_state(game_id, request.user['id'])

        response_data = {
            'success': True,
            'state': state
        }

        game_logger.log_server_response(
            request, 'get_game', True, response_data, game_id,
            status=state['status'], total_guesses=state['total_guesses']
        )

        return jsonify(response_data)

    except Exception as e:
        return _error_response('get_game', e, game_id)


@game_bp.route('/games/<game_id>/guess', methods=['POST'])
@require_auth
def submit_guess(game_id):
    """Submit a guess for scoring."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable('submit_guess', game_id)

        data = request.get_json(silent=True)
        if not data or 'guess' not in data:
            raise ValidationError('Guess is required')

        guess = parse_guess(data['guess'])
        expected_turn = parse_optional_int(data.get('expected_turn'), 'expected_turn')

        # Log user action
        game_logger.log_user_action(
            request, 'submit_guess', game_id,
            guess_length=len(guess), expected_turn=expected_turn
        )

        result = game_service.submit_guess(
            game_id, request.user['id'], guess, expected_turn=expected_turn
        )

        response_data = {
            'success': True,
            'result': result.to_dict(),
            'state': result.game.to_public_dict(game_service.max_attempts)
        }

        game_logger.log_server_response(
            request, 'submit_guess', True, response_data, game_id,
            guess_number=result.turn.number, exact_matches=result.feedback.exact_matches,
            color_matches=result.feedback.color_matches, replayed=result.replayed
        )

        return jsonify(response_data)

    except Exception as e:
        return _error_response('submit_guess', e, game_id)


@game_bp.route('/config', methods=['GET'])
def get_config():
    """Palette, slots per difficulty and attempt limit for clients."""
    try:
        game_logger.log_user_action(request, 'get_config')

        response_data = {
            'success': True,
            **get_difficulty_config()
        }

        game_logger.log_server_response(request, 'get_config', True, response_data)

        return jsonify(response_data)

    except Exception as e:
        return _error_response('get_config', e)


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        game_service = get_game_service()
        leaderboard_service = get_leaderboard_service()
        auth_service = get_auth_service()
        change_feed = get_change_feed()

        # Log user action
        game_logger.log_user_action(request, 'health_check')

        # Get log statistics
        log_stats = game_logger.get_log_stats()

        services_ready = all([game_service, leaderboard_service, auth_service])

        response_data = {
            'status': 'healthy' if services_ready else 'degraded',
            'game_service': game_service is not None,
            'leaderboard_service': leaderboard_service is not None,
            'auth_available': auth_service is not None,
            'change_feed': {
                'pending': change_feed.pending(),
                'dead_letters': len(change_feed.dead_letters),
                'dead_letter_total': change_feed.dead_letter_total
            } if change_feed else None,
            'log_stats': log_stats
        }

        game_logger.log_server_response(request, 'health_check', True, response_data)

        return jsonify(response_data), 200 if services_ready else 503

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        error_response = {
            'status': 'error',
            'error': str(e)
        }
        game_logger.log_server_response(request, 'health_check', False, error_response)
        return jsonify(error_response), 500
