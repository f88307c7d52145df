"""
Game State Machine

Pure transition logic for a single game: validates a guess, scores it,
appends the turn and decides the next status. Persistence is handled by
GameService; nothing here touches a store.

    playing --guess--> playing | won | lost
    won, lost: terminal
"""

import uuid
from dataclasses import replace
from datetime import timedelta
from typing import Iterable, Optional, Tuple

from ..config.game_settings import COLOR_IDS, MAX_ATTEMPTS, get_color
from ..exceptions import GameNotPlaying, InvalidColor, LengthMismatch
from ..models.game import Difficulty, Feedback, Game, GameStatus, Turn, utcnow
from .code_generator import generate_secret_code
from .scoring import score_guess


def new_game(difficulty, user_id: str, username: Optional[str] = None,
             ttl_seconds: Optional[int] = None, secret_code: Optional[Iterable[str]] = None) -> Game:
    """
    Build a fresh game record in PLAYING status with an empty history.

    Args:
        difficulty: Difficulty or its string value
        user_id: Owning user
        username: Display name of the owner
        ttl_seconds: Lifetime of the record; None keeps it forever
        secret_code: Fixed secret (tests and replays); generated when omitted
    """
    tier = Difficulty.parse(difficulty)
    now = utcnow()
    code = tuple(secret_code) if secret_code is not None else tuple(generate_secret_code(tier))
    if len(code) != tier.slots:
        raise LengthMismatch(f"Secret code for {tier.value} must have {tier.slots} colors")
    return Game(
        game_id=str(uuid.uuid4()),
        user_id=user_id,
        username=username,
        difficulty=tier,
        secret_code=code,
        started_at=now,
        expires_at=now + timedelta(seconds=ttl_seconds) if ttl_seconds else None,
    )


def check_guess_shape(game: Game, guess) -> Tuple[str, ...]:
    """
    Check a guess against the game's slot count and the palette.

    Returns:
        The guess as a tuple of color ids

    Raises:
        LengthMismatch: If the guess length differs from the slot count
        InvalidColor: If a color id is not in the palette
    """
    colors = tuple(guess)
    if len(colors) != game.slots:
        raise LengthMismatch(
            f"Guess must have exactly {game.slots} colors for {game.difficulty.value}, "
            f"but got {len(colors)}"
        )

    for color in colors:
        try:
            get_color(color)
        except KeyError:
            allowed = ', '.join(COLOR_IDS)
            raise InvalidColor(f"Invalid color '{color}'. Allowed: {allowed}")

    return colors


def validate_guess(game: Game, guess) -> Tuple[str, ...]:
    """
    Check that a guess can be applied to this game.

    Raises:
        GameNotPlaying: If the game is already won or lost
        ValidationError: See check_guess_shape
    """
    if not game.is_playing:
        raise GameNotPlaying(f"Game is already over ({game.status.value})")
    return check_guess_shape(game, guess)


def next_status(feedback: Feedback, turn_number: int, slots: int,
                max_attempts: int = MAX_ATTEMPTS) -> GameStatus:
    """Win check first, so a correct final guess is a win, not a loss."""
    if feedback.exact_matches == slots:
        return GameStatus.WON
    if turn_number >= max_attempts:
        return GameStatus.LOST
    return GameStatus.PLAYING


def apply_guess(game: Game, guess, max_attempts: int = MAX_ATTEMPTS) -> Tuple[Feedback, Game]:
    """
    Apply one guess and return the feedback with the successor record.

    The input record is left untouched; the successor carries the new turn,
    the new status and ``version + 1``.
    """
    colors = validate_guess(game, guess)
    feedback = score_guess(colors, game.secret_code)

    number = game.total_guesses + 1
    turn = Turn(number=number, guess=colors, feedback=feedback)

    updated = replace(
        game,
        turns=game.turns + (turn,),
        status=next_status(feedback, number, game.slots, max_attempts),
        version=game.version + 1,
        updated_at=utcnow(),
    )
    return feedback, updated
