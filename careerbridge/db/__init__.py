"""
Database module - MongoDB connection and collection names.
"""
from careerbridge.db.mongodb import (
    COLLECTIONS,
    get_database,
    get_mongo_db,
    init_mongo_indexes,
    test_mongo_connection,
)

__all__ = [
    "COLLECTIONS",
    "get_database",
    "get_mongo_db",
    "init_mongo_indexes",
    "test_mongo_connection",
]
