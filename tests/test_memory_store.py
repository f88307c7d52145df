"""Tests for the in-memory stores."""

import dataclasses
from datetime import timedelta

import pytest

from mastermind.exceptions import ConflictError
from mastermind.models import Difficulty, LeaderboardEntry
from mastermind.models.game import utcnow
from mastermind.services.change_feed import ChangeFeed
from mastermind.services.game_engine import apply_guess, new_game
from mastermind.store import MemoryGameStore, MemoryLeaderboardStore


class TestMemoryGameStore:
    """Test suite for MemoryGameStore."""

    def test_insert_and_get(self):
        """Test that stored games are returned to their owner."""
        store = MemoryGameStore()
        game = new_game('easy', 'user-1')
        store.insert(game)
        assert store.get(game.game_id, 'user-1') == game
        assert store.get(game.game_id, 'user-2') is None

    def test_duplicate_insert(self):
        """Test that ids are unique."""
        store = MemoryGameStore()
        game = new_game('easy', 'user-1')
        store.insert(game)
        with pytest.raises(ConflictError):
            store.insert(game)

    def test_compare_and_swap(self):
        """Test that only the first writer from a version wins."""
        store = MemoryGameStore()
        game = new_game('easy', 'user-1', secret_code=['red'] * 4)
        store.insert(game)

        _, first = apply_guess(game, ['blue'] * 4)
        _, second = apply_guess(game, ['green'] * 4)
        assert store.compare_and_swap(game, first) is True
        assert store.compare_and_swap(game, second) is False
        assert store.get(game.game_id, 'user-1') == first

    def test_compare_and_swap_missing(self):
        """Test that swapping an unknown record fails."""
        store = MemoryGameStore()
        game = new_game('easy', 'user-1', secret_code=['red'] * 4)
        _, updated = apply_guess(game, ['blue'] * 4)
        assert store.compare_and_swap(game, updated) is False

    def test_publishes_changes(self):
        """Test that inserts and swaps reach the change feed with old and new."""
        feed = ChangeFeed(synchronous=True)
        changes = []
        feed.subscribe(changes.append)
        store = MemoryGameStore(change_feed=feed)

        game = new_game('easy', 'user-1', secret_code=['red'] * 4)
        store.insert(game)
        _, updated = apply_guess(game, ['red'] * 4)
        store.compare_and_swap(game, updated)
        _, stale = apply_guess(game, ['blue'] * 4)
        store.compare_and_swap(game, stale)

        assert len(changes) == 2
        assert changes[0].old is None and changes[0].new == game
        assert changes[1].old == game and changes[1].new == updated

    def test_query_pages(self):
        """Test resuming strictly after the returned key."""
        store = MemoryGameStore()
        games = []
        for minutes in range(5):
            game = dataclasses.replace(new_game('easy', 'user-1'),
                                       started_at=utcnow() - timedelta(minutes=minutes))
            store.insert(game)
            games.append(game)

        page, key = store.query_by_owner('user-1', limit=2)
        assert page == games[:2]
        assert key == (games[1].started_at, games[1].game_id)

        page, key = store.query_by_owner('user-1', limit=2, start_after=key)
        assert page == games[2:4]

        page, key = store.query_by_owner('user-1', limit=2, start_after=key)
        assert page == games[4:]
        assert key is None

    def test_purge_expired(self):
        """Test that expired games are removed and hidden."""
        store = MemoryGameStore()
        game = new_game('easy', 'user-1', ttl_seconds=60)
        store.insert(game)
        assert store.purge_expired(utcnow()) == 0
        assert store.purge_expired(utcnow() + timedelta(minutes=2)) == 1
        assert len(store) == 0


class TestMemoryLeaderboardStore:
    """Test suite for MemoryLeaderboardStore."""

    def _entry(self, version):
        return LeaderboardEntry(
            user_id='user-1', username='alice', difficulty=Difficulty.HARD,
            games_won=version, total_games=version, best_score=5, average_score=5,
            last_won_at=utcnow(), version=version
        )

    def test_create_only_once(self):
        """Test that expected_version None requires a missing entry."""
        store = MemoryLeaderboardStore()
        assert store.put(self._entry(1), None) is True
        assert store.put(self._entry(1), None) is False

    def test_versioned_update(self):
        """Test that updates must name the stored version."""
        store = MemoryLeaderboardStore()
        store.put(self._entry(1), None)
        assert store.put(self._entry(2), 5) is False
        assert store.put(self._entry(2), 1) is True
        assert store.get('user-1', 'hard').version == 2

    def test_scan_filters(self):
        """Test scanning by difficulty."""
        store = MemoryLeaderboardStore()
        store.put(self._entry(1), None)
        assert len(store.scan()) == 1
        assert len(store.scan('hard')) == 1
        assert store.scan('easy') == []
