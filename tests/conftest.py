"""Pytest configuration and fixtures."""

import os
import tempfile

# The global game logger creates its log directory on import
os.environ['LOG_DIR'] = tempfile.mkdtemp(prefix='mastermind-test-logs-')

import pytest

from mastermind import create_app
from mastermind.config import TestingConfig
from mastermind.services import initialize_services


@pytest.fixture
def services():
    """Fresh in-memory services with a synchronous change feed."""
    return initialize_services(TestingConfig)


@pytest.fixture
def game_service(services):
    """Game service backed by the memory store."""
    return services['game_service']


@pytest.fixture
def leaderboard_service(services):
    """Leaderboard service subscribed to the change feed."""
    return services['leaderboard_service']


@pytest.fixture
def auth_service(services):
    """Token service using the testing secret."""
    return services['auth_service']


@pytest.fixture
def app(services):
    """Flask application wired to the test services."""
    flask_app, _ = create_app(TestingConfig)
    return flask_app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def socketio(app):
    """SocketIO server of the test application."""
    return app.socketio


@pytest.fixture
def token(auth_service):
    """Token for the default test user."""
    return auth_service.issue_token('user-1', 'alice')


@pytest.fixture
def auth_headers(token):
    """Authorization header for the default test user."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def other_headers(auth_service):
    """Authorization header for a second user."""
    return {'Authorization': f"Bearer {auth_service.issue_token('user-2', 'bob')}"}


@pytest.fixture
def easy_secret():
    """Known secret code for easy games."""
    return ['red', 'red', 'blue', 'green']
