"""
Game Configuration Constants Module

Defines the color palette, the difficulty tiers and the attempt limit.
All game parameters are centralized here so the engine, the HTTP layer and
the tests agree on a single source of truth.
"""

from dataclasses import dataclass, field
from typing import Dict, Final, List


@dataclass(frozen=True)
class Color:
    """A palette entry. Equality is by ``id``; name and hex are display only."""
    id: str
    name: str = field(compare=False)
    hex: str = field(compare=False)


# Core Game Configuration Constants
MAX_ATTEMPTS: Final[int] = 10
"""
Maximum number of guesses per game, independent of difficulty.
Type: Final[int] - Immutable to prevent accidental modification
"""

COLORS: Final[List[Color]] = [
    Color('red', 'Red', '#EF4444'),
    Color('blue', 'Blue', '#3B82F6'),
    Color('green', 'Green', '#10B981'),
    Color('yellow', 'Yellow', '#F59E0B'),
    Color('purple', 'Purple', '#8B5CF6'),
    Color('orange', 'Orange', '#F97316'),
    Color('pink', 'Pink', '#EC4899'),
    Color('brown', 'Brown', '#A16207'),
]

COLOR_IDS: Final[List[str]] = [color.id for color in COLORS]

DIFFICULTY_SLOTS: Final[Dict[str, int]] = {
    'easy': 4,
    'medium': 6,
    'hard': 8,
}


def get_color(color_id: str) -> Color:
    """
    Look up a palette color by id.

    Raises:
        KeyError: If the id is not part of the palette
    """
    for color in COLORS:
        if color.id == color_id:
            return color
    raise KeyError(color_id)


def get_difficulty_config() -> dict:
    """
    Describe the game rules for clients.

    Returns:
        dict: palette, slots per difficulty and the attempt limit
    """
    return {
        'colors': [{'id': c.id, 'name': c.name, 'hex': c.hex} for c in COLORS],
        'difficulties': {
            name: {'slots': slots, 'max_attempts': MAX_ATTEMPTS}
            for name, slots in DIFFICULTY_SLOTS.items()
        },
        'max_attempts': MAX_ATTEMPTS,
    }


def validate_game_settings_integrity() -> bool:
    """
    Validates the consistency of the palette and difficulty table.

    This function performs validation to ensure:
    1. Palette size: exactly 8 colors
    2. Uniqueness validation: no duplicate color ids
    3. Slot validation: every difficulty has a positive slot count

    Returns:
        bool: True if the settings pass all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if len(COLORS) != 8:
        raise ValueError(f"Palette must contain 8 colors, found {len(COLORS)}")

    if len(set(COLOR_IDS)) != len(COLOR_IDS):
        duplicates = [cid for cid in COLOR_IDS if COLOR_IDS.count(cid) > 1]
        raise ValueError(f"Duplicate color ids found in palette: {duplicates}")

    for name, slots in DIFFICULTY_SLOTS.items():
        if slots <= 0:
            raise ValueError(f"Difficulty '{name}' must have a positive slot count")

    if MAX_ATTEMPTS <= 0:
        raise ValueError("MAX_ATTEMPTS must be positive")

    return True


if __name__ == "__main__":

    try:
        validate_game_settings_integrity()
        print(" Game settings validation passed")
        print(f" Game rules: {get_difficulty_config()}")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
