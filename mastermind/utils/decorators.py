"""
Authentication Decorators

Guards for HTTP routes and Socket.IO events. Both resolve the caller from a
JWT and report failures with the same error envelope as the controllers.
"""

from functools import wraps
from typing import Dict, Optional

from flask import request, jsonify
from flask_socketio import emit

from ..exceptions import AuthenticationError, ServiceUnavailable
from .game_logger import game_logger
from .helpers import error_envelope


def _bearer_token() -> Optional[str]:
    scheme, _, token = request.headers.get('Authorization', '').partition(' ')
    if scheme != 'Bearer':
        return None
    return token.strip() or None


def authenticate(token: Optional[str], missing_message: str) -> Dict[str, Optional[str]]:
    """
    Resolve a token to ``{'id', 'username'}``.

    Raises:
        ServiceUnavailable: If the auth service was never initialized
        AuthenticationError: If the token is missing or rejected
    """
    from ..services.auth_service import get_auth_service

    auth_service = get_auth_service()
    if not auth_service:
        raise ServiceUnavailable('Authentication service unavailable')
    if not token:
        raise AuthenticationError(missing_message)

    result = auth_service.verify_token(token)
    if not result['success']:
        raise AuthenticationError(result['error'])
    return result['user']


def require_auth(f):
    """
    Decorator to require authentication for protected HTTP endpoints.

    Sets ``request.user`` for the wrapped view.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            request.user = authenticate(_bearer_token(), 'Authorization token required')
        except (AuthenticationError, ServiceUnavailable) as e:
            error_response, status_code = error_envelope(e)
            game_logger.log_server_response(request, f.__name__, False, error_response)
            return jsonify(error_response), status_code

        return f(*args, **kwargs)

    return decorated_function


def websocket_auth_required(f):
    """Decorator for WebSocket events; the payload must carry ``token``."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        data = args[0] if args and isinstance(args[0], dict) else {}
        try:
            kwargs['user'] = authenticate(data.get('token'), 'Authentication required')
        except (AuthenticationError, ServiceUnavailable) as e:
            emit('error', error_envelope(e)[0])
            return

        return f(*args, **kwargs)

    return decorated_function
