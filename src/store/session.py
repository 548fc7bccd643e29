"""Document store session lifecycle.

A single ``StoreSession`` is created per process. It is connected when the
application starts and closed on shutdown; request handlers share it and the
driver's connection pool.
"""

import logging
from typing import Any, Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from src.api.exceptions import StoreError
from src.config import Settings

# Configure module logger
logger = logging.getLogger(__name__)

# Collection names
RECIPES = "recipes"
REVIEWS = "reviews"
FAVORITES = "favorites"


class StoreSession:
    """Owns the MongoDB client and hands out collections.

    A pre-built client may be injected (tests use an in-memory one), in
    which case ``connect`` only pings it and creates indexes.
    """

    def __init__(self, settings: Settings, client: Optional[Any] = None):
        self.settings = settings
        self._client = client
        self._db: Optional[Database] = None

    @property
    def connected(self) -> bool:
        return self._db is not None

    @property
    def database_name(self) -> str:
        return self.settings.db_name

    def connect(self) -> None:
        """Open the client, verify it answers and create indexes.

        A store that cannot be reached is logged rather than raised so the
        service still starts and reports itself degraded on ``/status``.
        """
        if self._client is None:
            try:
                self._client = MongoClient(
                    self.settings.resolved_mongodb_uri,
                    server_api=ServerApi("1", strict=True, deprecation_errors=True),
                    serverSelectionTimeoutMS=self.settings.server_selection_timeout_ms,
                )
            except PyMongoError as e:
                # SRV and URI errors surface here, before any ping
                logger.error(
                    f"Failed to create MongoDB client: {e}",
                    extra={"database": self.settings.db_name},
                    exc_info=True,
                )
                return

        self._db = self._client[self.settings.db_name]

        if self.ping():
            logger.info(
                "Pinged deployment, connected to MongoDB",
                extra={"database": self.settings.db_name},
            )
            try:
                ensure_indexes(self._db)
            except PyMongoError as e:
                logger.error(f"Failed to create indexes: {e}", exc_info=True)
        else:
            logger.error(
                "MongoDB connection error, serving in degraded mode",
                extra={"database": self.settings.db_name},
            )

    def close(self) -> None:
        """Release the client and its connection pool."""
        if self._client is not None:
            self._client.close()
            logger.info("MongoDB client closed")
        self._client = None
        self._db = None

    def ping(self) -> bool:
        """Return True if the store answers a ping command."""
        if self._client is None:
            return False
        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    def collection(self, name: str) -> Collection:
        if self._db is None:
            raise StoreError(f"access collection '{name}' before the store was connected")
        return self._db[name]


def ensure_indexes(db: Database) -> None:
    """Create the indexes backing the listing filters and sorts."""
    db[RECIPES].create_index([("email", ASCENDING)])
    db[RECIPES].create_index([("createdAt", DESCENDING)])
    db[RECIPES].create_index([("rating", DESCENDING)])
    db[RECIPES].create_index([("likes", DESCENDING), ("createdAt", DESCENDING)])

    db[REVIEWS].create_index([("recipe_id", ASCENDING)])
    db[REVIEWS].create_index([("email", ASCENDING)])
    db[REVIEWS].create_index([("bookmarkedBy", ASCENDING)])
    db[REVIEWS].create_index([("createdAt", DESCENDING)])

    db[FAVORITES].create_index([("userEmail", ASCENDING)])
