import logging
import copy
from typing import Dict, Any, List, Optional, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import IndexModel
from pymongo.errors import DuplicateKeyError
from pymongo.results import InsertOneResult, UpdateResult

from walletauth.config import Settings

logger = logging.getLogger(__name__)


class MemoryCollection:
    """
    In-process collection exposing the subset of the motor collection API
    used by the repositories. Selected with DATABASE_BACKEND=memory for
    development and tests; data is lost when the process exits.
    """

    def __init__(self, name: str):
        self.name = name
        self.data: List[Dict[str, Any]] = []
        self._unique_keys: List[Tuple[str, ...]] = []
        logger.info(f"Created in-memory collection: {name}")

    @staticmethod
    def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
        for key, value in query.items():
            if key not in document or document[key] != value:
                return False
        return True

    def _check_unique(self, candidate: Dict[str, Any], ignore_id: Any = None):
        for fields in self._unique_keys:
            if not all(field in candidate for field in fields):
                continue
            for doc in self.data:
                if doc.get("_id") == ignore_id:
                    continue
                if all(doc.get(field) == candidate[field] for field in fields):
                    raise DuplicateKeyError(
                        f"E11000 duplicate key error collection: {self.name} "
                        f"index: {'_'.join(fields)} dup key"
                    )

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Return a copy of the first document matching every query field"""
        for item in self.data:
            if self._matches(item, query):
                return copy.deepcopy(item)
        return None

    async def insert_one(self, document: Dict[str, Any]) -> InsertOneResult:
        document = copy.deepcopy(document)
        if "_id" not in document:
            document["_id"] = ObjectId()

        self._check_unique(document)
        self.data.append(document)
        return InsertOneResult(document["_id"], True)

    async def update_one(
        self,
        query: Dict[str, Any],
        update: Dict[str, Any],
        upsert: bool = False
    ) -> UpdateResult:
        """Apply $set (and $setOnInsert when upserting) to the first match"""
        for doc in self.data:
            if self._matches(doc, query):
                changes = update.get("$set", {})
                updated = {**doc, **changes}
                self._check_unique(updated, ignore_id=doc["_id"])
                modified = 1 if updated != doc else 0
                doc.update(changes)
                return UpdateResult({"n": 1, "nModified": modified}, True)

        if not upsert:
            return UpdateResult({"n": 0, "nModified": 0}, True)

        document = {key: value for key, value in query.items()}
        document.update(update.get("$setOnInsert", {}))
        document.update(update.get("$set", {}))
        result = await self.insert_one(document)
        return UpdateResult(
            {"n": 1, "nModified": 0, "upserted": result.inserted_id}, True
        )

    async def create_indexes(self, indexes: List[IndexModel]) -> List[str]:
        names = []
        for index in indexes:
            spec = index.document
            fields = tuple(spec["key"].keys())
            if spec.get("unique") and fields not in self._unique_keys:
                self._unique_keys.append(fields)
            names.append(spec["name"])
        return names


class DatabaseClient:
    """
    Database client owning the storage connection and collections.
    Constructed once by the application lifespan and shared by every request.
    """

    def __init__(self, settings: Settings):
        """
        Initialize without connecting.

        Args:
            settings: Application settings with the database configuration
        """
        self.settings = settings
        self.client = None
        self.db = None
        self.auth_collection = None
        self.using_memory = settings.database_backend == "memory"

    def connect(self) -> "DatabaseClient":
        """Open the MongoDB client, or set up in-memory collections."""
        if self.auth_collection is not None:
            return self

        if self.using_memory:
            self.auth_collection = MemoryCollection(self.settings.auth_collection_name)
            logger.warning("Using in-memory database; nonces will not survive a restart")
            return self

        self.client = AsyncIOMotorClient(
            self.settings.mongo_uri,
            serverSelectionTimeoutMS=self.settings.mongo_timeout_ms
        )
        self.db = self.client[self.settings.mongo_db_name]
        self.auth_collection = self.db[self.settings.auth_collection_name]

        logger.info(f"Connected to MongoDB database: {self.settings.mongo_db_name}")
        return self

    async def ping(self) -> bool:
        """Test database connection"""
        try:
            if self.using_memory:
                return self.auth_collection is not None
            await self.client.admin.command('ping')
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {str(e)}")
            return False

    def close(self):
        """Close the MongoDB connection."""
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.db = None
        self.auth_collection = None
