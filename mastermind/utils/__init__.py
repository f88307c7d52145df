"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_auth, websocket_auth_required
from .helpers import error_envelope, parse_guess, parse_optional_int
from .game_logger import game_logger

__all__ = [
    'require_auth', 'websocket_auth_required',
    'error_envelope', 'parse_guess', 'parse_optional_int',
    'game_logger'
]
