"""
MongoDB Connection Utility

MongoDB stores:
- users: profile + role for every identity
- jobs: job postings (pending/approved)
- applications: student applications to jobs
- accounts / revoked_tokens: identity gateway bookkeeping

The store offers no joins; screens that need "application + job + applicant"
compose them in services/read_join.py.
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from careerbridge.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
            tz_aware=False,
        )
    return _client


def get_mongo_db() -> Database:
    """Get the careerbridge database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_database() -> Database:
    """
    Dependency for FastAPI route injection.
    Usage:
        @router.get("/jobs")
        def list_jobs(db: Database = Depends(get_database)):
            ...
    """
    return get_mongo_db()


def get_collection(name: str, db: Database = None) -> Collection:
    """Get a specific collection (see COLLECTIONS)."""
    if db is None:
        db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "jobs": "jobs",
    "applications": "applications",
    "accounts": "accounts",
    "revoked_tokens": "revoked_tokens",
}


def init_mongo_indexes(db: Database = None):
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    if db is None:
        db = get_mongo_db()

    # Employer dashboard and approved browse list
    db[COLLECTIONS["jobs"]].create_index([("employerId", ASCENDING), ("createdAt", DESCENDING)])
    db[COLLECTIONS["jobs"]].create_index([("status", ASCENDING), ("createdAt", DESCENDING)])

    # One application per (student, job); catches the check-then-insert race
    db[COLLECTIONS["applications"]].create_index(
        [("userId", ASCENDING), ("jobId", ASCENDING)],
        unique=True,
    )
    db[COLLECTIONS["applications"]].create_index("employerId")

    db[COLLECTIONS["accounts"]].create_index("email", unique=True)

    # Revoked tokens disappear once they would have expired anyway
    db[COLLECTIONS["revoked_tokens"]].create_index("expiresAt", expireAfterSeconds=0)

    logger.info("MongoDB indexes created successfully")
