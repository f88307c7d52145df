"""Tests for the game state machine."""

import pytest

from mastermind.config import MAX_ATTEMPTS
from mastermind.exceptions import GameNotPlaying, InvalidColor, InvalidDifficulty, LengthMismatch
from mastermind.models import Difficulty, Feedback, GameStatus
from mastermind.services.game_engine import (
    apply_guess, check_guess_shape, new_game, next_status, validate_guess
)

SECRET = ['red', 'red', 'blue', 'green']
MISS = ['yellow', 'yellow', 'yellow', 'yellow']


def _easy_game():
    return new_game('easy', 'user-1', username='alice', secret_code=SECRET)


class TestNewGame:
    """Test suite for new_game."""

    def test_initial_state(self):
        """Test a fresh game is playing with no turns."""
        game = _easy_game()
        assert game.status == GameStatus.PLAYING
        assert game.difficulty == Difficulty.EASY
        assert game.turns == ()
        assert game.total_guesses == 0
        assert game.version == 0
        assert game.secret_code == tuple(SECRET)

    def test_generated_secret_matches_slots(self):
        """Test the generated secret length per difficulty."""
        assert new_game('hard', 'user-1').slots == 8

    def test_unique_ids(self):
        """Test that every game gets its own id."""
        assert _easy_game().game_id != _easy_game().game_id

    def test_ttl_sets_expiry(self):
        """Test that expires_at follows started_at by the ttl."""
        game = new_game('easy', 'user-1', ttl_seconds=3600)
        assert (game.expires_at - game.started_at).total_seconds() == 3600

    def test_no_ttl(self):
        """Test that games without ttl never expire."""
        assert new_game('easy', 'user-1').expires_at is None

    def test_invalid_difficulty(self):
        """Test that unknown difficulties are rejected."""
        with pytest.raises(InvalidDifficulty):
            new_game('extreme', 'user-1')

    def test_secret_length_checked(self):
        """Test that a fixed secret must match the slot count."""
        with pytest.raises(LengthMismatch):
            new_game('medium', 'user-1', secret_code=SECRET)


class TestValidateGuess:
    """Test suite for validate_guess."""

    def test_valid_guess(self):
        """Test that a well-formed guess is returned as a tuple."""
        assert validate_guess(_easy_game(), ['pink', 'brown', 'red', 'red']) == ('pink', 'brown', 'red', 'red')

    def test_wrong_length(self):
        """Test that an easy game rejects a 6-color guess."""
        with pytest.raises(LengthMismatch):
            validate_guess(_easy_game(), ['red'] * 6)

    def test_unknown_color(self):
        """Test that colors outside the palette are rejected."""
        with pytest.raises(InvalidColor):
            validate_guess(_easy_game(), ['red', 'red', 'blue', 'teal'])

    def test_terminal_game(self):
        """Test that finished games reject further guesses."""
        _, won = apply_guess(_easy_game(), SECRET)
        with pytest.raises(GameNotPlaying):
            validate_guess(won, SECRET)

    def test_shape_check_ignores_status(self):
        """Test that the palette and length check runs on finished games too."""
        _, won = apply_guess(_easy_game(), SECRET)
        assert check_guess_shape(won, SECRET) == tuple(SECRET)
        with pytest.raises(InvalidColor):
            check_guess_shape(won, ['red', 'red', 'blue', 'teal'])


class TestNextStatus:
    """Test suite for next_status."""

    def test_win_on_last_attempt(self):
        """Test that a correct final guess wins rather than loses."""
        assert next_status(Feedback(4, 0), MAX_ATTEMPTS, 4) == GameStatus.WON

    def test_loss_after_attempt_limit(self):
        """Test that a wrong final guess loses."""
        assert next_status(Feedback(3, 0), MAX_ATTEMPTS, 4) == GameStatus.LOST

    def test_still_playing(self):
        """Test that a wrong guess within the attempt limit keeps playing."""
        assert next_status(Feedback(0, 2), 3, 4) == GameStatus.PLAYING


class TestApplyGuess:
    """Test suite for apply_guess."""

    def test_appends_turn_and_bumps_version(self):
        """Test the successor record of a non-winning guess."""
        game = _easy_game()
        feedback, updated = apply_guess(game, ['red', 'blue', 'yellow', 'blue'])
        assert feedback == Feedback(exact_matches=1, color_matches=1)
        assert updated.total_guesses == 1
        assert updated.turns[0].number == 1
        assert updated.turns[0].guess == ('red', 'blue', 'yellow', 'blue')
        assert updated.version == game.version + 1
        assert updated.status == GameStatus.PLAYING
        assert updated.updated_at is not None

    def test_input_record_unchanged(self):
        """Test that the original record is not modified."""
        game = _easy_game()
        apply_guess(game, MISS)
        assert game.total_guesses == 0
        assert game.version == 0

    def test_win_on_first_guess(self):
        """Test that an exact guess wins regardless of remaining attempts."""
        feedback, updated = apply_guess(_easy_game(), SECRET)
        assert feedback == Feedback(exact_matches=4, color_matches=0)
        assert updated.status == GameStatus.WON
        assert updated.total_guesses == 1

    def test_lost_after_ten_misses(self):
        """Test that the tenth wrong guess loses and an eleventh is refused."""
        game = _easy_game()
        for turn in range(1, MAX_ATTEMPTS + 1):
            _, game = apply_guess(game, MISS)
            expected = GameStatus.LOST if turn == MAX_ATTEMPTS else GameStatus.PLAYING
            assert game.status == expected
        assert game.total_guesses == MAX_ATTEMPTS
        with pytest.raises(GameNotPlaying):
            apply_guess(game, MISS)

    def test_win_on_tenth_guess(self):
        """Test that a correct tenth guess is a win."""
        game = _easy_game()
        for _ in range(MAX_ATTEMPTS - 1):
            _, game = apply_guess(game, MISS)
        _, game = apply_guess(game, SECRET)
        assert game.status == GameStatus.WON

    def test_turn_numbers_are_sequential(self):
        """Test that the history is ordered by turn number."""
        game = _easy_game()
        for _ in range(3):
            _, game = apply_guess(game, MISS)
        assert [turn.number for turn in game.turns] == [1, 2, 3]

    def test_rejected_guess_leaves_state(self):
        """Test that validation failures happen before any change."""
        game = _easy_game()
        with pytest.raises(LengthMismatch):
            apply_guess(game, ['red'] * 6)
        assert game.total_guesses == 0
