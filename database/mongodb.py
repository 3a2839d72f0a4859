"""
MongoDB connection for the AMP records backend

One motor client per process, opened by the app lifespan. Besides the
connection, the holder owns the indexes the eligibility lookups rely on:
aircraft by fleet, documents by certificate, certificates by fleet.
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from typing import List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

# (collection, field) pairs indexed on startup
LOOKUP_INDEXES: List[Tuple[str, str]] = [
    ("aircrafts", "fleet_id"),
    ("aircrafts", "serial_number"),
    ("certificates", "applicable_fleet_ids"),
    ("documents", "certificate_ids"),
    ("documents", "doc_type"),
    ("organizations", "type_id"),
    ("amps", "fleet_id"),
]


class Database:
    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self, mongo_url: str, db_name: str):
        try:
            self.client = AsyncIOMotorClient(mongo_url)
            self.db = self.client[db_name]
            await self.client.admin.command('ping')
            logger.info(f"Connected to AMP records database: {db_name}")
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    async def ensure_indexes(self) -> List[str]:
        """Create the lookup indexes (idempotent); returns the index names"""
        database = self.get_db()
        names = []
        for collection, field in LOOKUP_INDEXES:
            names.append(await database[collection].create_index(field))
        logger.info(f"Ensured {len(names)} lookup indexes")
        return names

    async def disconnect(self):
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("Disconnected from MongoDB")

    def get_db(self) -> AsyncIOMotorDatabase:
        if self.db is None:
            raise RuntimeError("AMP records database not connected")
        return self.db


db = Database()


async def get_database() -> AsyncIOMotorDatabase:
    return db.get_db()
