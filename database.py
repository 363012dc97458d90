"""
MongoDB connection lifecycle.

The client is opened once by the application lifespan and closed on shutdown;
request handlers receive stores built on the database handle, never the
client itself.
"""
import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from config import Settings

logger = logging.getLogger(__name__)


class Mongo:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.client: Optional[MongoClient] = None

    def open(self) -> Database:
        if self.client is None:
            logger.info("Connecting to MongoDB database %s", self.settings.database_name)
            self.client = MongoClient(self.settings.database_url, tz_aware=True)
        return self.client[self.settings.database_name]

    @property
    def db(self) -> Database:
        if self.client is None:
            raise RuntimeError("MongoDB connection is not open")
        return self.client[self.settings.database_name]

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None
            logger.info("MongoDB connection closed")


def ping(db: Database) -> bool:
    try:
        db.command("ping")
    except PyMongoError:
        logger.warning("MongoDB ping failed", exc_info=True)
        return False
    return True
