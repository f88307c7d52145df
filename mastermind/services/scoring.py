"""
Guess Scorer

Implements Mastermind feedback: exact position matches and extra color
matches, counted with multiplicity.
"""

from typing import List, Optional, Sequence

from ..exceptions import LengthMismatch
from ..models.game import Feedback


def score_guess(guess: Sequence[str], secret: Sequence[str]) -> Feedback:
    """
    Score a guess against the secret code.

    Args:
        guess: Submitted color ids
        secret: Hidden color ids

    Returns:
        Feedback with exact_matches and color_matches

    Raises:
        LengthMismatch: If the sequences differ in length
    """
    if len(guess) != len(secret):
        raise LengthMismatch(
            f"Guess must have exactly {len(secret)} colors, but got {len(guess)}"
        )

    # Working copies to track consumption
    remaining_secret: List[Optional[str]] = list(secret)
    remaining_guess: List[Optional[str]] = list(guess)

    # First pass: exact position matches
    exact = 0
    for i in range(len(secret)):
        if guess[i] == secret[i]:
            exact += 1
            remaining_secret[i] = None
            remaining_guess[i] = None

    # Second pass: right color, wrong position; each secret slot matches once
    color = 0
    for candidate in remaining_guess:
        if candidate is not None and candidate in remaining_secret:
            color += 1
            remaining_secret[remaining_secret.index(candidate)] = None

    return Feedback(exact_matches=exact, color_matches=color)
