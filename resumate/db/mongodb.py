"""
MongoDB Connection Utility

MongoDB stores everything in this backend:
- users (id, role) for header-based auth
- alumni directory rows imported from the alumni CSV export
- alumni mentor profiles with session metrics
- student profiles (including the n8n parsed resume)
- job postings and mentorship sessions
"""
import logging

from pymongo import MongoClient, ASCENDING, DESCENDING, TEXT
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from resumate.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the application database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection (see COLLECTIONS)."""
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
    except PyMongoError as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "alumni": "alumni",
    "alumni_profiles": "alumni_profiles",
    "student_profiles": "student_profiles",
    "jobs": "jobs",
    "sessions": "mentorship_sessions",
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["users"]].create_index("userId", unique=True)
    db[COLLECTIONS["alumni"]].create_index("id", unique=True)
    db[COLLECTIONS["alumni_profiles"]].create_index("userId", unique=True)
    db[COLLECTIONS["student_profiles"]].create_index("userId", unique=True)
    db[COLLECTIONS["jobs"]].create_index("jobId", unique=True)
    db[COLLECTIONS["sessions"]].create_index([("alumniId", ASCENDING), ("status", ASCENDING)])
    db[COLLECTIONS["sessions"]].create_index("sessionId", unique=True)
    db[COLLECTIONS["sessions"]].create_index([("studentId", ASCENDING), ("scheduledDate", DESCENDING)])

    # Directory search
    db[COLLECTIONS["alumni"]].create_index([
        ("name", TEXT),
        ("email", TEXT),
        ("skills", TEXT),
        ("experience", TEXT),
        ("course.name", TEXT),
        ("batch.year", TEXT),
        ("livesIn.city", TEXT),
    ], name="alumni_text_search")

    # Leaderboard ordering
    db[COLLECTIONS["alumni_profiles"]].create_index([
        ("impactScore", DESCENDING),
        ("averageRating", DESCENDING),
        ("sessionsCompleted", DESCENDING),
    ])

    logger.info("MongoDB indexes created successfully")
