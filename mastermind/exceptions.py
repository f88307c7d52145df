"""
Error Taxonomy

Exceptions raised by the game engine, the stores and the services.
Controllers translate them into ``{'success': False, 'error': ...}``
responses using ``status_code``.
"""


class MastermindError(Exception):
    """Base class for all game server errors."""
    status_code = 500

    def __init__(self, message: str = ''):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class ValidationError(MastermindError):
    """Bad input. Raised before any state is touched."""
    status_code = 400


class InvalidDifficulty(ValidationError):
    """Difficulty is not one of the configured tiers."""


class InvalidColor(ValidationError):
    """A guess contains an id outside the palette."""


class LengthMismatch(ValidationError):
    """Guess and secret code lengths differ."""


class InvalidPageToken(ValidationError):
    """A pagination token could not be decoded."""


class NotFoundError(MastermindError):
    """Unknown game id for the given owner."""
    status_code = 404


class ConflictError(MastermindError):
    """The guess cannot be applied to the current game state."""
    status_code = 409


class GameNotPlaying(ConflictError):
    """The game is already won or lost."""


class PersistenceError(MastermindError):
    """The backing store is unavailable or rejected the write."""
    status_code = 503


class AuthenticationError(MastermindError):
    """Missing, malformed or rejected bearer token."""
    status_code = 401


class ServiceUnavailable(MastermindError):
    """A required service has not been initialized."""
    status_code = 503
