"""Tests for request helpers."""

import pytest

from mastermind.exceptions import AuthenticationError, NotFoundError, ValidationError
from mastermind.utils.helpers import error_envelope, parse_guess, parse_optional_int


class TestParseGuess:
    """Test suite for parse_guess."""

    def test_color_ids(self):
        """Test plain id lists."""
        assert parse_guess(['red', 'blue']) == ['red', 'blue']

    def test_color_objects(self):
        """Test color objects as sent by the web client."""
        guess = [{'id': 'red', 'name': 'Red', 'hex': '#EF4444'}, {'id': 'pink'}]
        assert parse_guess(guess) == ['red', 'pink']

    @pytest.mark.parametrize('raw', ['red', None, [None], [{'name': 'Red'}], [3]])
    def test_malformed(self, raw):
        """Test that anything else is a validation error."""
        with pytest.raises(ValidationError):
            parse_guess(raw)


class TestParseOptionalInt:
    """Test suite for parse_optional_int."""

    def test_values(self):
        """Test integers from JSON and query strings."""
        assert parse_optional_int(None, 'limit') is None
        assert parse_optional_int('', 'limit') is None
        assert parse_optional_int('5', 'limit') == 5
        assert parse_optional_int(0, 'expected_turn') == 0

    @pytest.mark.parametrize('raw', ['abc', True, [1]])
    def test_invalid(self, raw):
        """Test that non-integers are rejected."""
        with pytest.raises(ValidationError):
            parse_optional_int(raw, 'limit')


class TestErrorEnvelope:
    """Test suite for error_envelope."""

    def test_known_errors_keep_status(self):
        """Test that game server errors map to their own status codes."""
        assert error_envelope(NotFoundError("Game not found")) == (
            {'success': False, 'error': 'Game not found', 'error_type': 'NotFoundError'}, 404
        )
        assert error_envelope(AuthenticationError("Invalid token"))[1] == 401

    def test_unexpected_errors_are_generic(self):
        """Test that internal messages are not leaked."""
        body, status = error_envelope(RuntimeError("db password is hunter2"))
        assert status == 500
        assert body['error'] == 'Internal server error'
