"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules and constants (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    COLORS, COLOR_IDS, DIFFICULTY_SLOTS, MAX_ATTEMPTS, Color,
    get_color, get_difficulty_config, validate_game_settings_integrity
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'COLORS', 'COLOR_IDS', 'DIFFICULTY_SLOTS', 'MAX_ATTEMPTS', 'Color',
    'get_color', 'get_difficulty_config', 'validate_game_settings_integrity'
]
