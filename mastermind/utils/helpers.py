"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Any, Dict, List, Optional, Tuple

from ..exceptions import MastermindError, ValidationError


def error_envelope(error: Exception) -> Tuple[Dict[str, Any], int]:
    """
    Build the ``{'success': False, ...}`` body and status code for an error.

    Unexpected exceptions are reported as a generic 500.
    """
    if isinstance(error, MastermindError):
        return {
            'success': False,
            'error': error.message,
            'error_type': type(error).__name__
        }, error.status_code
    return {
        'success': False,
        'error': 'Internal server error',
        'error_type': type(error).__name__
    }, 500


def parse_guess(raw) -> List[str]:
    """
    Normalize a guess payload to a list of color ids.

    Accepts plain ids (``["red", "blue"]``) or color objects
    (``[{"id": "red", "name": "Red"}]``).
    """
    if not isinstance(raw, list):
        raise ValidationError("Guess must be a list of colors")

    guess = []
    for peg in raw:
        if isinstance(peg, dict):
            peg = peg.get('id')
        if not isinstance(peg, str):
            raise ValidationError("Each guess entry must be a color id or an object with an 'id'")
        guess.append(peg)
    return guess


def parse_optional_int(value, name: str) -> Optional[int]:
    """Read an optional integer from JSON bodies or query strings."""
    if value is None or value == '':
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")
