"""
MongoDB connection management.

The client is created and pinged during application startup; a failed ping
aborts startup. The client handle is stored on the application state and
shared by all requests.
"""

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection

from todo_api.config import Settings

logger = structlog.get_logger(__name__)


async def connect_to_mongo(settings: Settings) -> AsyncMongoClient:
    """
    Create a MongoDB client and verify connectivity.

    Args:
        settings: Application settings

    Returns:
        Connected async MongoDB client

    Raises:
        PyMongoError: If the server cannot be reached
    """
    client = AsyncMongoClient(settings.mongodb_uri)

    try:
        await client.admin.command("ping")
    except Exception:
        await client.close()
        raise

    logger.info(
        "mongodb_connected",
        database=settings.mongodb_database,
        collection=settings.mongodb_collection
    )
    return client


def get_todo_collection(client: AsyncMongoClient, settings: Settings) -> AsyncCollection:
    """Return the collection holding todo documents."""
    return client[settings.mongodb_database][settings.mongodb_collection]


async def ping(client: AsyncMongoClient) -> bool:
    """
    Check MongoDB connectivity.

    Returns:
        True if the server answered the ping
    """
    try:
        await client.admin.command("ping")
        return True
    except Exception as e:
        logger.error("mongodb_ping_failed", error=str(e))
        return False
