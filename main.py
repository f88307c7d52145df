"""
Mastermind Game Server - Main Entry Point

This is the main entry point for the Mastermind game server.
It initializes all services and starts the Flask-SocketIO application.
"""

import os
import threading
import time
from mastermind import create_app
from mastermind.config import config, validate_game_settings_integrity
from mastermind.services import initialize_services, get_game_service
from mastermind.utils.game_logger import game_logger


def expired_game_purge_worker(interval_seconds):
    """
    Background worker that periodically removes games past their expiry.
    MongoDB's TTL index does the same server-side; this keeps the memory
    backend bounded.
    """
    game_logger.logger.info(f"Expired game purge worker started - every {interval_seconds}s")
    while True:
        try:
            game_service = get_game_service()
            if game_service:
                game_service.purge_expired_games()
        except Exception as e:
            game_logger.logger.error(f"Error in expired game purge worker: {e}")

        time.sleep(interval_seconds)


def main():
    """Main function to initialize services and start the server."""
    config_class = config[os.getenv('FLASK_ENV', 'default')]
    change_feed = None

    try:
        print("Initializing services...")
        validate_game_settings_integrity()

        if not config_class.JWT_SECRET:
            raise ValueError("JWT_SECRET is not configured")

        services = initialize_services(config_class)
        change_feed = services['change_feed']
        print(f"✓ Services initialized ({config_class.STORE_BACKEND} store)")

        # Create Flask app
        print("Creating Flask application...")
        app, socketio = create_app(config_class)
        print("✓ Flask application created successfully")

        # Deliver committed game changes to the leaderboard
        change_feed.start()
        print("✓ Change feed dispatcher started")

        purge_thread = threading.Thread(
            target=expired_game_purge_worker, args=(config_class.PURGE_INTERVAL_SECONDS,),
            name='game-purge', daemon=True
        )
        purge_thread.start()
        print(f"✓ Expired game purge worker started - checking every {config_class.PURGE_INTERVAL_SECONDS} seconds")

        game_logger.logger.info("Mastermind Server Starting")

        print(f"\nStarting Mastermind Game Server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print("=" * 50)

        # Start the server
        socketio.run(app, host=config_class.HOST, port=config_class.PORT, debug=config_class.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Mastermind Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise
    finally:
        if change_feed is not None:
            change_feed.stop()


if __name__ == '__main__':
    main()
