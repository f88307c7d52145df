"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5000))

    # Database Settings
    MONGO_URI = os.getenv('MONGO_URI')
    MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'mastermind')
    # "memory" or "mongo"; defaults to mongo whenever a URI is configured
    STORE_BACKEND = os.getenv('STORE_BACKEND', 'mongo' if os.getenv('MONGO_URI') else 'memory')

    # Authentication Settings
    JWT_SECRET = os.getenv('JWT_SECRET')
    JWT_EXPIRATION_DAYS = int(os.getenv('JWT_EXPIRATION_DAYS', 7))

    # Game Settings
    GAME_TTL_SECONDS = int(os.getenv('GAME_TTL_SECONDS', 3600))
    GAME_LIST_DEFAULT_LIMIT = int(os.getenv('GAME_LIST_DEFAULT_LIMIT', 50))
    GAME_LIST_MAX_LIMIT = int(os.getenv('GAME_LIST_MAX_LIMIT', 100))
    PURGE_INTERVAL_SECONDS = int(os.getenv('PURGE_INTERVAL_SECONDS', 60))

    # Leaderboard / change feed Settings
    LEADERBOARD_CAS_RETRIES = int(os.getenv('LEADERBOARD_CAS_RETRIES', 5))
    FEED_MAX_DELIVERY_ATTEMPTS = int(os.getenv('FEED_MAX_DELIVERY_ATTEMPTS', 3))
    FEED_RETRY_DELAY_SECONDS = float(os.getenv('FEED_RETRY_DELAY_SECONDS', 0.5))
    FEED_DEAD_LETTER_LIMIT = int(os.getenv('FEED_DEAD_LETTER_LIMIT', 1000))

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    JWT_SECRET = Config.JWT_SECRET or 'dev-jwt-secret-change-me-before-deploying'


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    STORE_BACKEND = 'memory'
    JWT_SECRET = 'testing-jwt-secret-not-for-production-use'
    FEED_RETRY_DELAY_SECONDS = 0


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
