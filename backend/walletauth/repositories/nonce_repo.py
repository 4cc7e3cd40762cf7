from typing import Optional, Dict, Any
import logging
from datetime import datetime, timezone
from pymongo import ASCENDING, IndexModel
from pymongo.errors import DuplicateKeyError, PyMongoError

from walletauth.exceptions import StorageError

logger = logging.getLogger(__name__)


class NonceRepository:
    """
    Repository for identity records in MongoDB.
    Each record maps one wallet address to its outstanding nonce.
    """

    def __init__(self, db_client):
        """
        Initialize with database client.

        Args:
            db_client: The connected database client exposing auth_collection
        """
        self.auth_collection = db_client.auth_collection

    async def create_indexes(self):
        """Create the unique wallet address index"""
        indexes = [
            IndexModel([("walletAddress", ASCENDING)], unique=True),
        ]
        try:
            await self.auth_collection.create_indexes(indexes)
        except PyMongoError as e:
            logger.error(f"Error creating auth indexes: {str(e)}")
            raise StorageError("create_indexes", str(e)) from e

    async def get_auth_record(self, wallet_address: str) -> Optional[Dict[str, Any]]:
        """
        Get auth record for a wallet address.

        Args:
            wallet_address: The wallet address to get record for

        Returns:
            Auth record if found, None otherwise
        """
        try:
            auth_record = await self.auth_collection.find_one({"walletAddress": wallet_address})

            if auth_record:
                auth_record["_id"] = str(auth_record["_id"])

            return auth_record

        except PyMongoError as e:
            logger.error(f"Error getting auth record: {str(e)}")
            raise StorageError("get_auth_record", str(e)) from e

    async def insert_if_absent(self, wallet_address: str, data: Dict[str, Any]) -> bool:
        """
        Insert an auth record unless one already exists for the address.

        Args:
            wallet_address: The wallet address the record belongs to
            data: Fields to write only when the record is created

        Returns:
            True if this call created the record, False if it already existed
        """
        now = datetime.now(timezone.utc)
        try:
            result = await self.auth_collection.update_one(
                {"walletAddress": wallet_address},
                {"$setOnInsert": {**data, "createdAt": now, "updatedAt": now}},
                upsert=True
            )
            return result.upserted_id is not None

        except DuplicateKeyError:
            # Lost an upsert race on the unique index; the other writer's record stands
            logger.debug(f"Concurrent insert for {wallet_address}, keeping existing record")
            return False
        except PyMongoError as e:
            logger.error(f"Error inserting auth record: {str(e)}")
            raise StorageError("insert_if_absent", str(e)) from e

    async def update_nonce(
        self,
        wallet_address: str,
        new_nonce: str,
        expected_nonce: Optional[str] = None
    ) -> bool:
        """
        Replace the nonce of an existing record.

        Args:
            wallet_address: The wallet address whose nonce is replaced
            new_nonce: The nonce to store
            expected_nonce: If given, only replace when the stored nonce still equals it

        Returns:
            True if a record was updated, False if nothing matched
        """
        query = {"walletAddress": wallet_address}
        if expected_nonce is not None:
            query["nonce"] = expected_nonce

        try:
            result = await self.auth_collection.update_one(
                query,
                {"$set": {"nonce": new_nonce, "updatedAt": datetime.now(timezone.utc)}}
            )
            return result.matched_count > 0

        except PyMongoError as e:
            logger.error(f"Error updating nonce: {str(e)}")
            raise StorageError("update_nonce", str(e)) from e
