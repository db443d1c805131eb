import logging
from datetime import datetime, timezone

from bson import ObjectId
from flask import current_app
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from syncvision.errors import StoreConnectError

logger = logging.getLogger(__name__)


def init_store(uri, db_name, timeout_ms=2000):
    """Dial MongoDB and ping it once so a bad URI fails at startup.

    Returns ``(client, database)``. Raises StoreConnectError on any failure.
    """
    logger.info("Attempting to connect to MongoDB...")
    client = None
    try:
        client = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
        client.admin.command("ping")
    except PyMongoError as exc:
        if client is not None:
            client.close()
        raise StoreConnectError(f"MongoDB connection failed: {exc}") from exc
    logger.info("Connected to MongoDB database %r", db_name)
    return client, client[db_name]


def init_app(app, db=None):
    """Attach the store handle to ``app``; dial it from config when not given."""
    client = None
    if db is None:
        client, db = init_store(
            app.config["MONGO_URI"],
            app.config["MONGO_DB_NAME"],
            app.config.get("MONGO_TIMEOUT_MS", 2000),
        )
    app.mongo_client = client
    app.db = db


def close_db(app):
    client = getattr(app, "mongo_client", None)
    if client is not None:
        client.close()
        logger.info("MongoDB connection closed")
    app.mongo_client = None
    app.db = None


def get_db():
    return current_app.db


def _isoformat(dt):
    # pymongo hands back naive datetimes that are already UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def serialize_doc(doc):
    """Make a Mongo document JSON-safe: ObjectIds to hex, datetimes to ISO UTC."""
    if doc is None:
        return None
    out = {}
    for key, value in doc.items():
        if isinstance(value, ObjectId):
            out[key] = str(value)
        elif isinstance(value, datetime):
            out[key] = _isoformat(value)
        else:
            out[key] = value
    return out
