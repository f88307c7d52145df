"""
Code Generator

Produces the hidden color sequence for a new game.
"""

import secrets
from typing import List, Optional, Sequence

from ..config.game_settings import COLOR_IDS
from ..models.game import Difficulty

# OS entropy; the secret must not be reproducible from anything the player sees
_system_random = secrets.SystemRandom()


def generate_secret_code(difficulty, palette: Optional[Sequence[str]] = None,
                         rng=None) -> List[str]:
    """
    Draw a secret code for the given difficulty.

    Each slot is chosen independently and uniformly from the palette, so
    colors may repeat.

    Args:
        difficulty: Difficulty or its string value
        palette: Color ids to draw from (defaults to the game palette)
        rng: random.Random-compatible source (defaults to SystemRandom)

    Returns:
        List[str]: Color ids, one per slot

    Raises:
        InvalidDifficulty: If difficulty is not a known tier
    """
    tier = Difficulty.parse(difficulty)
    colors = list(palette or COLOR_IDS)
    source = rng or _system_random
    return source.choices(colors, k=tier.slots)
