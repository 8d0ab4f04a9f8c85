"""
MongoDB Service - CRUD operations for the three application collections.

Collections in this database:
1. users         - profile + role, keyed by identity uid
2. jobs          - job postings, keyed by ObjectId
3. applications  - student applications, keyed by ObjectId

Every document read passes through the stored-document models in
careerbridge.models. A document that does not fit its model is logged and
treated as absent rather than handed to workflow code.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import ValidationError
from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database

from careerbridge.db.mongodb import COLLECTIONS, get_collection
from careerbridge.models import (
    ApplicationDocument,
    JobDocument,
    UserDocument,
    UserRole,
)

logger = logging.getLogger(__name__)


# ============================================================
# HELPERS
# ============================================================

def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse a string id; malformed ids can never match a document."""
    if isinstance(value, ObjectId):
        return value
    if not value:
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class DocumentService:
    """
    Base CRUD wrapper around one collection.

    Subclasses set ``collection_name`` and ``model``.
    """

    collection_name: str = None
    model = None

    def __init__(self, db: Database = None):
        self.collection: Collection = get_collection(self.collection_name, db)

    def _key(self, doc_id: str):
        return to_object_id(doc_id)

    def _parse(self, doc: Optional[dict]):
        if doc is None:
            return None
        try:
            return self.model.from_mongo(doc)
        except ValidationError as e:
            logger.warning(
                "Ignoring malformed %s document %s (%d validation errors)",
                self.collection_name, doc.get("_id"), e.error_count()
            )
            return None

    def get_by_id(self, doc_id: str):
        """Fetch one document by id, or None."""
        key = self._key(doc_id)
        if key is None:
            return None
        return self._parse(self.collection.find_one({"_id": key}))

    def find(self, predicates: Dict[str, Any] = None, newest_first: bool = True) -> list:
        """
        Query by equality predicates.

        Args:
            predicates: field -> value equality conditions (camelCase names)
            newest_first: order by createdAt descending
        """
        cursor = self.collection.find(predicates or {})
        if newest_first:
            cursor = cursor.sort("createdAt", DESCENDING)
        parsed = (self._parse(doc) for doc in cursor)
        return [doc for doc in parsed if doc is not None]

    def insert(self, fields: Dict[str, Any]) -> str:
        """Insert a document and return its new id as string."""
        result = self.collection.insert_one(dict(fields))
        return str(result.inserted_id)

    def update_by_id(self, doc_id: str, fields: Dict[str, Any]) -> bool:
        """Partial update. Returns True if a document matched."""
        key = self._key(doc_id)
        if key is None:
            return False
        result = self.collection.update_one({"_id": key}, {"$set": fields})
        return result.matched_count > 0

    def transition(self, doc_id: str, from_status: str, fields: Dict[str, Any]) -> bool:
        """Partial update applied only while the document is still in ``from_status``."""
        key = self._key(doc_id)
        if key is None:
            return False
        result = self.collection.update_one({"_id": key, "status": from_status}, {"$set": fields})
        return result.matched_count > 0

    def delete_by_id(self, doc_id: str) -> bool:
        """Delete a document. Returns True if one was removed."""
        key = self._key(doc_id)
        if key is None:
            return False
        result = self.collection.delete_one({"_id": key})
        return result.deleted_count > 0


# ============================================================
# USERS COLLECTION
# Keyed by the identity uid, like the accounts it describes
# ============================================================

class UserService(DocumentService):
    collection_name = COLLECTIONS["users"]
    model = UserDocument

    def _key(self, doc_id: str):
        return doc_id or None

    def create(
        self,
        uid: str,
        email: str,
        name: str,
        phone: str,
        role: UserRole,
        company: str = None,
        contact_person: str = None,
        created_by: str = None,
    ) -> UserDocument:
        """
        Write the profile document for a new identity.

        ``company`` is stored only when given (employers). ``contactPerson`` is
        always written, None when absent. ``createdBy`` only for accounts
        provisioned by an admin.
        """
        doc = {
            "_id": uid,
            "email": email,
            "name": name,
            "phone": phone,
            "role": UserRole(role).value,
            "createdAt": datetime.utcnow(),
            "contactPerson": contact_person or None,
        }
        if company:
            doc["company"] = company
        if created_by:
            doc["createdBy"] = created_by

        self.collection.replace_one({"_id": uid}, doc, upsert=True)
        return self._parse(doc)

    def update_name(self, uid: str, name: str) -> bool:
        return self.update_by_id(uid, {"name": name})


# ============================================================
# JOBS COLLECTION
# ============================================================

class JobService(DocumentService):
    collection_name = COLLECTIONS["jobs"]
    model = JobDocument


# ============================================================
# APPLICATIONS COLLECTION
# ============================================================

class ApplicationService(DocumentService):
    collection_name = COLLECTIONS["applications"]
    model = ApplicationDocument

    def exists_for(self, user_id: str, job_id: str) -> bool:
        """True if the student already has an application for the job."""
        return self.collection.find_one({"userId": user_id, "jobId": job_id}) is not None

    def job_ids_for_user(self, user_id: str) -> set:
        """Ids of every job the student applied to (browse screen badges)."""
        cursor = self.collection.find({"userId": user_id}, {"jobId": 1})
        return {doc["jobId"] for doc in cursor if doc.get("jobId")}


def get_mongo_services(db: Database = None) -> dict:
    """
    Get all MongoDB service instances.

    Usage:
        services = get_mongo_services()
        services['jobs'].get_by_id(...)
    """
    return {
        "users": UserService(db),
        "jobs": JobService(db),
        "applications": ApplicationService(db),
    }
