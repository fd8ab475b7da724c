# models/__init__.py
import logging
from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient

logger = logging.getLogger(__name__)


class MongoDB:
    """Holds the shared client and database handle for the running app."""

    def __init__(self, app=None):
        self.client = None
        self.database = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        client = app.config.get("MONGO_CLIENT")
        if client is None:
            client = MongoClient(app.config["MONGO_URI"])
        self.client = client
        self.database = client[app.config["MONGO_DB_NAME"]]
        app.extensions["mongodb"] = self

    def collection(self, name):
        if self.database is None:
            raise RuntimeError("MongoDB is not initialised; call db.init_app(app) first")
        return self.database[name]


db = MongoDB()


def utcnow():
    return datetime.now(timezone.utc)


def to_object_id(value):
    """Parse a hex id from a URL or form field; ``None`` when malformed."""
    if not value:
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def isoformat(value):
    if not isinstance(value, datetime):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def init_db(max_reviews):
    """
    Flatten legacy nested reviews, then create indexes.
    Safe to run repeatedly; the migration has to come first because legacy
    parents would break the unique (studentId, reviewNo) index.
    """
    from models.project_model import Project
    from models.user_model import User

    migrated = Project.migrate_nested_reviews(max_reviews)
    if migrated:
        logger.info("Migrated %d legacy review(s) into flat projects", migrated)
    User.create_indexes()
    Project.create_indexes()
