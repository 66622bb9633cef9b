import logging

from pymongo import ASCENDING, DESCENDING, MongoClient

import config
from store import EntityStore

logger = logging.getLogger(__name__)

_timeout_ms = int(config.DB_TIMEOUT_SECONDS * 1000)

client = MongoClient(
    config.MONGO_URL,
    serverSelectionTimeoutMS=_timeout_ms,
    connectTimeoutMS=_timeout_ms,
    socketTimeoutMS=_timeout_ms,
)
db = client[config.DATABASE_NAME]
store = EntityStore(db, timeout=config.DB_TIMEOUT_SECONDS)


def get_store() -> EntityStore:
    return store


def ensure_indexes(database):
    """Create the secondary indexes the repositories query by."""
    users = database[config.USERS_COLLECTION]
    users.create_index([("customer_id", ASCENDING)], unique=True, name="customer_id_index")
    users.create_index([("email", ASCENDING)], name="email_index")
    users.create_index([("role", ASCENDING)], name="role_index")

    requests = database[config.SERVICE_REQUESTS_COLLECTION]
    requests.create_index([("customer_id", ASCENDING)], name="customer_id_index")
    requests.create_index([("professional_id", ASCENDING)], name="professional_id_index")
    requests.create_index([("status", ASCENDING)], name="status_index")
    requests.create_index([("created_at", DESCENDING)], name="created_at_index")

    # one message per (session, timestamp); the chat repository relies on it
    database[config.CHAT_COLLECTION].create_index(
        [("session_id", ASCENDING), ("timestamp", ASCENDING)],
        unique=True,
        name="session_timestamp_index",
    )
    logger.info("Indexes ensured on database %s", database.name)
