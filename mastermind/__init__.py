"""
Mastermind Game Server Application Package

Flask and Flask-SocketIO server for single-player Mastermind: games are
scored server-side and wins feed a per-difficulty leaderboard.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    Services must be initialized first (see services.initialize_services);
    the SocketIO server created here is attached to the real-time notifier.

    Args:
        config_class: Configuration class to use

    Returns:
        Tuple of (Flask application, SocketIO server)
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", logger=False, engineio_logger=False)

    # Register blueprints
    from .controllers.game_controller import game_bp
    from .controllers.leaderboard_controller import leaderboard_bp

    app.register_blueprint(game_bp, url_prefix='/api')
    app.register_blueprint(leaderboard_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)

    # Route real-time publishes through this server
    from .services import get_notifier
    notifier = get_notifier()
    if notifier is not None:
        notifier.attach(socketio)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio
