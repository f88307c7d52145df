"""Tests for the Socket.IO events."""

import pytest


def _events(ws_client, name):
    return [event['args'][0] for event in ws_client.get_received() if event['name'] == name]


@pytest.fixture
def ws_client(app, socketio):
    """Connected Socket.IO test client."""
    client = socketio.test_client(app)
    yield client
    if client.is_connected():
        client.disconnect()


class TestWebSocketAuth:
    """Test suite for socket authentication."""

    def test_missing_token(self, ws_client):
        """Test that events without a token are refused."""
        ws_client.emit('join_game', {'game_id': 'x'})
        errors = _events(ws_client, 'error')
        assert errors == [{
            'success': False, 'error': 'Authentication required', 'error_type': 'AuthenticationError'
        }]

    def test_invalid_token(self, ws_client):
        """Test that bad tokens are refused."""
        ws_client.emit('join_leaderboard', {'token': 'bad', 'difficulty': 'easy'})
        errors = _events(ws_client, 'error')
        assert [e['error'] for e in errors] == ['Invalid token']
        assert errors[0]['error_type'] == 'AuthenticationError'


class TestGameEvents:
    """Test suite for game room events."""

    def test_join_game(self, ws_client, token, game_service):
        """Test that joining sends the current state."""
        game = game_service.create_game('easy', 'user-1')
        ws_client.emit('join_game', {'token': token, 'game_id': game.game_id})
        states = _events(ws_client, 'game_state_update')
        assert len(states) == 1
        assert states[0]['success'] is True
        assert states[0]['state']['game_id'] == game.game_id
        assert states[0]['state']['secret_code'] is None

    def test_join_foreign_game(self, ws_client, auth_service, game_service):
        """Test that only the owner can join a game room."""
        game = game_service.create_game('easy', 'user-1')
        other = auth_service.issue_token('user-2', 'bob')
        ws_client.emit('join_game', {'token': other, 'game_id': game.game_id})
        states = _events(ws_client, 'game_state_update')
        assert states[0]['success'] is False
        assert states[0]['error_type'] == 'NotFoundError'

    def test_submit_guess(self, ws_client, token, game_service, easy_secret):
        """Test scoring a guess over the socket."""
        game = game_service.create_game('easy', 'user-1', secret_code=easy_secret)
        ws_client.emit('submit_guess', {
            'token': token, 'game_id': game.game_id,
            'guess': ['red', 'blue', 'yellow', 'blue'], 'expected_turn': 0
        })
        results = _events(ws_client, 'guess_result')
        assert len(results) == 1
        assert results[0]['success'] is True
        assert results[0]['result']['exact_matches'] == 1
        assert results[0]['result']['color_matches'] == 1
        assert results[0]['state']['total_guesses'] == 1

    def test_submit_invalid_guess(self, ws_client, token, game_service, easy_secret):
        """Test that rejected guesses reply with the error envelope."""
        game = game_service.create_game('easy', 'user-1', secret_code=easy_secret)
        ws_client.emit('submit_guess', {'token': token, 'game_id': game.game_id, 'guess': ['red']})
        results = _events(ws_client, 'guess_result')
        assert results[0]['success'] is False
        assert results[0]['error_type'] == 'LengthMismatch'

    def test_room_receives_http_guess(self, ws_client, token, client, auth_headers, game_service, easy_secret):
        """Test that guesses made over HTTP are pushed to the game room."""
        game = game_service.create_game('easy', 'user-1', secret_code=easy_secret)
        ws_client.emit('join_game', {'token': token, 'game_id': game.game_id})
        ws_client.get_received()

        client.post(f'/api/games/{game.game_id}/guess', json={'guess': easy_secret}, headers=auth_headers)

        pushed = _events(ws_client, 'guess_result')
        assert len(pushed) == 1
        assert pushed[0]['result']['status'] == 'won'
        assert pushed[0]['result']['secret_code'] == easy_secret

    def test_leave_game(self, ws_client, token, client, auth_headers, game_service, easy_secret):
        """Test that leaving a room stops updates."""
        game = game_service.create_game('easy', 'user-1', secret_code=easy_secret)
        ws_client.emit('join_game', {'token': token, 'game_id': game.game_id})
        ws_client.emit('leave_game', {'token': token, 'game_id': game.game_id})
        ws_client.get_received()

        client.post(f'/api/games/{game.game_id}/guess', json={'guess': ['pink'] * 4}, headers=auth_headers)
        assert _events(ws_client, 'guess_result') == []


class TestLeaderboardEvents:
    """Test suite for leaderboard subscriptions."""

    def test_join_leaderboard(self, ws_client, token):
        """Test that subscribing sends the current standings."""
        ws_client.emit('join_leaderboard', {'token': token, 'difficulty': 'hard'})
        states = _events(ws_client, 'leaderboard_state')
        assert states == [{'success': True, 'difficulty': 'hard', 'leaderboard': [], 'count': 0}]

    def test_join_invalid_difficulty(self, ws_client, token):
        """Test that unknown difficulties are refused."""
        ws_client.emit('join_leaderboard', {'token': token, 'difficulty': 'cosmic'})
        states = _events(ws_client, 'leaderboard_state')
        assert states[0]['success'] is False
        assert states[0]['error_type'] == 'InvalidDifficulty'

    def test_win_pushes_update(self, ws_client, token, game_service, easy_secret):
        """Test that a win is pushed to the difficulty's subscribers."""
        ws_client.emit('join_leaderboard', {'token': token, 'difficulty': 'easy'})
        ws_client.get_received()

        game = game_service.create_game('easy', 'user-1', username='alice', secret_code=easy_secret)
        game_service.submit_guess(game.game_id, 'user-1', easy_secret)

        updates = _events(ws_client, 'leaderboard_update')
        assert len(updates) == 1
        assert updates[0]['entry']['username'] == 'alice'
        assert updates[0]['entry']['best_score'] == 1
        assert updates[0]['previous_best_score'] is None

    def test_other_difficulty_not_pushed(self, ws_client, token, game_service, easy_secret):
        """Test that subscribers only hear about their difficulty."""
        ws_client.emit('join_leaderboard', {'token': token, 'difficulty': 'hard'})
        ws_client.get_received()

        game = game_service.create_game('easy', 'user-1', secret_code=easy_secret)
        game_service.submit_guess(game.game_id, 'user-1', easy_secret)
        assert _events(ws_client, 'leaderboard_update') == []

    def test_leave_leaderboard(self, ws_client, token, game_service, easy_secret):
        """Test that unsubscribing stops updates."""
        ws_client.emit('join_leaderboard', {'token': token, 'difficulty': 'easy'})
        ws_client.emit('leave_leaderboard', {'token': token, 'difficulty': 'easy'})
        ws_client.get_received()

        game = game_service.create_game('easy', 'user-1', secret_code=easy_secret)
        game_service.submit_guess(game.game_id, 'user-1', easy_secret)
        assert _events(ws_client, 'leaderboard_update') == []
