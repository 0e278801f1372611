# storage.py
import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from config import get_settings

logger = logging.getLogger(__name__)

USERS = "users"
JOBS = "job_descriptions"
ANALYSES = "analyses"


def is_valid_id(value: str) -> bool:
    return ObjectId.is_valid(value)


def serialize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Make a MongoDB document JSON friendly (``_id`` as a string)."""
    out = dict(doc)
    if "_id" in out:
        out["_id"] = str(out["_id"])
    return out


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MongoStore:
    """Thin wrapper over the three collections the service uses."""

    def __init__(self, db: Database):
        self.db = db

    # ---------- Jobs ----------

    def list_jobs(self) -> List[Dict[str, Any]]:
        cursor = self.db[JOBS].find({}).sort("title", ASCENDING)
        return [serialize_document(doc) for doc in cursor]

    def create_job(self, title: str, description: str) -> str:
        result = self.db[JOBS].insert_one(
            {"title": title, "description": description, "createdAt": _now()}
        )
        return str(result.inserted_id)

    def update_job(self, job_id: str, title: str, description: str) -> bool:
        result = self.db[JOBS].update_one(
            {"_id": ObjectId(job_id)},
            {"$set": {"title": title, "description": description}},
        )
        return result.matched_count > 0

    def delete_job(self, job_id: str) -> bool:
        result = self.db[JOBS].delete_one({"_id": ObjectId(job_id)})
        return result.deleted_count > 0

    # ---------- Users ----------

    def find_user(self, email: str, phone_number: str) -> Optional[Dict[str, Any]]:
        """Find a user whose email or phone number matches."""
        doc = self.db[USERS].find_one({"$or": [{"email": email}, {"phoneNumber": phone_number}]})
        return serialize_document(doc) if doc else None

    def create_user(self, username: str, email: str, phone_number: str, password_hash: str) -> str:
        result = self.db[USERS].insert_one(
            {
                "username": username,
                "email": email,
                "phoneNumber": phone_number,
                "password": password_hash,
                "createdAt": _now(),
            }
        )
        return str(result.inserted_id)

    def list_users(self) -> List[Dict[str, Any]]:
        cursor = self.db[USERS].find({}, {"password": 0}).sort("createdAt", DESCENDING)
        return [serialize_document(doc) for doc in cursor]

    def delete_user(self, user_id: str) -> bool:
        result = self.db[USERS].delete_one({"_id": ObjectId(user_id)})
        return result.deleted_count > 0

    # ---------- Analyses ----------

    def save_analysis(
        self,
        user_email: str,
        resume_file_name: str,
        job_description: str,
        match_score: float,
    ) -> str:
        result = self.db[ANALYSES].insert_one(
            {
                "userEmail": user_email,
                "resumeFileName": resume_file_name,
                "jobDescription": job_description,
                "matchScore": match_score,
                "createdAt": _now(),
            }
        )
        return str(result.inserted_id)

    def list_history(self, user_email: str) -> List[Dict[str, Any]]:
        cursor = self.db[ANALYSES].find({"userEmail": user_email}).sort("createdAt", DESCENDING)
        return [serialize_document(doc) for doc in cursor]


@lru_cache(maxsize=1)
def get_mongo_client() -> MongoClient:
    settings = get_settings()
    logger.info("Connecting to MongoDB")
    return MongoClient(settings.mongodb_uri)


def get_store() -> MongoStore:
    """FastAPI dependency: a store bound to the configured database."""
    client = get_mongo_client()
    db = client.get_default_database(default=get_settings().mongodb_db)
    return MongoStore(db)
