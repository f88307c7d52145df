"""
Services Package

Contains all business logic and service classes, and the wiring that
builds them from a configuration class.
"""

from typing import Any, Dict, Optional

from .auth_service import TokenService, get_auth_service, initialize_auth_service
from .change_feed import ChangeFeed
from .game_service import GameService, get_game_service, initialize_game_service
from .leaderboard_service import (
    LeaderboardService, get_leaderboard_service, initialize_leaderboard_service
)
from ..store import MemoryGameStore, MemoryLeaderboardStore, MongoGameStore, MongoLeaderboardStore, connect_mongo
from ..utils.game_logger import game_logger
from ..websocket.notifier import RealtimeNotifier

# Global infrastructure instances
_change_feed = None
_notifier = None


def get_change_feed() -> Optional[ChangeFeed]:
    """Get the global change feed instance."""
    return _change_feed


def get_notifier() -> Optional[RealtimeNotifier]:
    """Get the global real-time notifier instance."""
    return _notifier


def _build_stores(config_class, change_feed: ChangeFeed):
    backend = str(config_class.STORE_BACKEND).lower()

    if backend == 'memory':
        return MemoryGameStore(change_feed=change_feed), MemoryLeaderboardStore()

    if backend == 'mongo':
        if not config_class.MONGO_URI:
            raise ValueError("STORE_BACKEND is 'mongo' but MONGO_URI is not set")
        client, db = connect_mongo(config_class.MONGO_URI, config_class.MONGO_DB_NAME)
        game_store = MongoGameStore(db.games, change_feed=change_feed, client=client)
        leaderboard_store = MongoLeaderboardStore(db.leaderboard)
        game_store.ensure_indexes()
        leaderboard_store.ensure_indexes()
        return game_store, leaderboard_store

    raise ValueError(f"Unknown STORE_BACKEND: {config_class.STORE_BACKEND}")


def initialize_services(config_class, socketio=None) -> Dict[str, Any]:
    """
    Build stores, change feed, notifier and services, and register the
    global instances.

    Args:
        config_class: Configuration class (see config.app_config)
        socketio: Optional SocketIO server for real-time publishing

    Returns:
        Dictionary of the created components
    """
    global _change_feed, _notifier

    _change_feed = ChangeFeed(
        max_delivery_attempts=config_class.FEED_MAX_DELIVERY_ATTEMPTS,
        retry_delay_seconds=config_class.FEED_RETRY_DELAY_SECONDS,
        dead_letter_limit=config_class.FEED_DEAD_LETTER_LIMIT,
        synchronous=bool(config_class.TESTING)
    )
    _notifier = RealtimeNotifier(socketio)

    game_store, leaderboard_store = _build_stores(config_class, _change_feed)

    auth_service = initialize_auth_service(config_class.JWT_SECRET, config_class.JWT_EXPIRATION_DAYS)
    game_service = initialize_game_service(
        game_store,
        notifier=_notifier,
        ttl_seconds=config_class.GAME_TTL_SECONDS,
        default_page_limit=config_class.GAME_LIST_DEFAULT_LIMIT,
        max_page_limit=config_class.GAME_LIST_MAX_LIMIT
    )
    leaderboard_service = initialize_leaderboard_service(
        leaderboard_store,
        notifier=_notifier,
        cas_retries=config_class.LEADERBOARD_CAS_RETRIES
    )

    _change_feed.subscribe(leaderboard_service.handle_change, name='leaderboard')

    game_logger.logger.info(
        f"Services initialized (store={config_class.STORE_BACKEND}, "
        f"feed={'synchronous' if _change_feed.synchronous else 'threaded'})"
    )

    return {
        'auth_service': auth_service,
        'game_service': game_service,
        'leaderboard_service': leaderboard_service,
        'change_feed': _change_feed,
        'notifier': _notifier
    }


__all__ = [
    'TokenService', 'get_auth_service',
    'GameService', 'get_game_service',
    'LeaderboardService', 'get_leaderboard_service',
    'ChangeFeed', 'get_change_feed', 'get_notifier',
    'initialize_services'
]
