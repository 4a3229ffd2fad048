"""MongoDB async client for the community snippet catalog."""

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection

from casino.config import settings

SNIPPETS_COLLECTION = "code_snippets"

mongo_client: AsyncMongoClient | None = None


def get_mongo_client() -> AsyncMongoClient:
    """Get or create the MongoDB client singleton (lazy init, no I/O)."""
    global mongo_client
    if mongo_client is None:
        mongo_client = AsyncMongoClient(
            settings.MONGODB_URL,
            serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
        )
    return mongo_client


def get_snippet_collection() -> AsyncCollection:
    return get_mongo_client()[settings.MONGODB_DATABASE][SNIPPETS_COLLECTION]


async def close_mongo() -> None:
    """Close the MongoDB client if open."""
    global mongo_client
    if mongo_client is not None:
        await mongo_client.close()
        mongo_client = None
