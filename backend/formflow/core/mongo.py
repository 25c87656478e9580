"""
MongoDB connection for the document store.

Collections: users, forms, responses, private_users. Every document is keyed by
the application-generated `id` field; the native `_id` never leaves this layer.
"""
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from formflow.core.logging_config import logger


class MongoConnection:
    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    def __init__(self, uri: str, db_name: str):
        self.uri = uri
        self.db_name = db_name

    async def connect(self) -> AsyncIOMotorDatabase:
        if self.db is not None:
            return self.db
        try:
            self.client = AsyncIOMotorClient(self.uri)
            self.db = self.client[self.db_name]
            # Verify connection
            await self.db.command("ping")
            logger.info(f"Connected to MongoDB: {self.db_name}")
            await self._create_indexes()
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            self.client = None
            self.db = None
            raise
        return self.db

    async def close(self) -> None:
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.db = None

    async def _create_indexes(self) -> None:
        db = self.db
        await db.users.create_index("id", unique=True)
        await db.users.create_index("email", unique=True)
        await db.users.create_index("verificationToken", sparse=True)

        await db.forms.create_index("id", unique=True)
        await db.forms.create_index([("userId", 1), ("updatedAt", -1)])

        await db.responses.create_index("id", unique=True)
        await db.responses.create_index([("formId", 1), ("submittedAt", -1)])
        await db.responses.create_index([("formId", 1), ("respondentKey", 1)], sparse=True)

        await db.private_users.create_index("id", unique=True)
        await db.private_users.create_index("name", unique=True)
        await db.private_users.create_index("userId")
        logger.info("MongoDB indexes created/verified")
