"""
MongoDB Stores

pymongo-backed game and leaderboard persistence. Conditional writes use
``replace_one`` filtered on the record's ``version``; driver failures are
surfaced as PersistenceError.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..exceptions import ConflictError, PersistenceError
from ..models.game import Game, utcnow
from ..models.leaderboard import LeaderboardEntry
from ..utils.game_logger import game_logger
from .base import GameStore, LeaderboardStore, PageKey


def connect_mongo(mongo_uri: str, db_name: str):
    """
    Open a MongoDB connection and verify it with a ping.

    Returns:
        Tuple of (MongoClient, Database)
    """
    client = MongoClient(mongo_uri, server_api=ServerApi('1'), tz_aware=True)
    try:
        client.admin.command('ping')
        game_logger.logger.info("Successfully connected to MongoDB")
    except PyMongoError as e:
        game_logger.logger.error(f"MongoDB connection error: {e}")
        client.close()
        raise PersistenceError(f"MongoDB unavailable: {e}")
    return client, client[db_name]


class MongoGameStore(GameStore):
    """Games stored one document per game, ``_id`` = game_id."""

    def __init__(self, collection, change_feed=None, client=None):
        super().__init__(change_feed)
        self.collection = collection
        self.client = client

    def ensure_indexes(self) -> None:
        # Owner listing, newest first
        self.collection.create_index([("user_id", ASCENDING), ("started_at", DESCENDING)])
        # Abandoned games disappear on their own
        self.collection.create_index("expires_at", expireAfterSeconds=0)

    @staticmethod
    def _to_document(game: Game) -> Dict[str, Any]:
        document = game.to_dict()
        document['_id'] = document.pop('game_id')
        return document

    @staticmethod
    def _from_document(document: Dict[str, Any]) -> Game:
        data = dict(document)
        data['game_id'] = data.pop('_id')
        return Game.from_dict(data)

    def insert(self, game: Game) -> None:
        try:
            self.collection.insert_one(self._to_document(game))
        except DuplicateKeyError:
            raise ConflictError(f"Game {game.game_id} already exists")
        except PyMongoError as e:
            raise PersistenceError(f"Failed to create game: {e}")
        self._publish(None, game)

    def get(self, game_id: str, user_id: str) -> Optional[Game]:
        try:
            document = self.collection.find_one({"_id": game_id, "user_id": user_id})
        except PyMongoError as e:
            raise PersistenceError(f"Failed to load game: {e}")
        if not document:
            return None
        game = self._from_document(document)
        # TTL deletion runs about once a minute; hide stragglers
        if game.expires_at is not None and game.expires_at <= utcnow():
            return None
        return game

    def compare_and_swap(self, old: Game, new: Game) -> bool:
        try:
            result = self.collection.replace_one(
                {"_id": old.game_id, "user_id": old.user_id, "version": old.version},
                self._to_document(new)
            )
        except PyMongoError as e:
            raise PersistenceError(f"Failed to save game: {e}")
        if result.matched_count != 1:
            return False
        self._publish(old, new)
        return True

    def query_by_owner(self, user_id: str, difficulty: Optional[str] = None,
                       limit: int = 50, start_after: Optional[PageKey] = None
                       ) -> Tuple[List[Game], Optional[PageKey]]:
        query: Dict[str, Any] = {"user_id": user_id}
        if difficulty:
            query["difficulty"] = difficulty
        if start_after is not None:
            started_at, game_id = start_after
            query["$or"] = [
                {"started_at": {"$lt": started_at}},
                {"started_at": started_at, "_id": {"$lt": game_id}},
            ]

        try:
            cursor = (self.collection.find(query)
                      .sort([("started_at", DESCENDING), ("_id", DESCENDING)])
                      .limit(limit + 1))
            games = [self._from_document(doc) for doc in cursor]
        except PyMongoError as e:
            raise PersistenceError(f"Failed to list games: {e}")

        page = games[:limit]
        next_key = None
        if len(games) > limit and page:
            next_key = (page[-1].started_at, page[-1].game_id)
        return page, next_key

    def purge_expired(self, now: datetime) -> int:
        try:
            return self.collection.delete_many({"expires_at": {"$lte": now}}).deleted_count
        except PyMongoError as e:
            raise PersistenceError(f"Failed to purge games: {e}")

    def close(self) -> None:
        if self.client:
            self.client.close()


class MongoLeaderboardStore(LeaderboardStore):
    """One document per (user_id, difficulty)."""

    def __init__(self, collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        self.collection.create_index([("user_id", ASCENDING), ("difficulty", ASCENDING)], unique=True)
        self.collection.create_index("difficulty")

    @staticmethod
    def _from_document(document: Dict[str, Any]) -> LeaderboardEntry:
        data = dict(document)
        data.pop('_id', None)
        return LeaderboardEntry.from_dict(data)

    def get(self, user_id: str, difficulty: str) -> Optional[LeaderboardEntry]:
        try:
            document = self.collection.find_one({"user_id": user_id, "difficulty": difficulty})
        except PyMongoError as e:
            raise PersistenceError(f"Failed to load leaderboard entry: {e}")
        return self._from_document(document) if document else None

    def put(self, entry: LeaderboardEntry, expected_version: Optional[int]) -> bool:
        document = entry.to_dict()
        try:
            if expected_version is None:
                # The unique index turns a concurrent first win into a lost race
                self.collection.insert_one(document)
                return True
            result = self.collection.replace_one(
                {"user_id": entry.user_id, "difficulty": entry.difficulty.value,
                 "version": expected_version},
                document
            )
            return result.matched_count == 1
        except DuplicateKeyError:
            return False
        except PyMongoError as e:
            raise PersistenceError(f"Failed to save leaderboard entry: {e}")

    def scan(self, difficulty: Optional[str] = None) -> List[LeaderboardEntry]:
        query = {"difficulty": difficulty} if difficulty else {}
        try:
            return [self._from_document(doc) for doc in self.collection.find(query)]
        except PyMongoError as e:
            raise PersistenceError(f"Failed to read leaderboard: {e}")
