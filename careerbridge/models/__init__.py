"""
Models module - internal data structures.

These models describe documents as they are stored in MongoDB. API
request/response contracts live in careerbridge.schemas.
"""

from careerbridge.models.documents import (
    ApplicationDocument,
    ApplicationStatus,
    JobDocument,
    JobStatus,
    JobType,
    UserDocument,
    UserRole,
)

__all__ = [
    "ApplicationDocument",
    "ApplicationStatus",
    "JobDocument",
    "JobStatus",
    "JobType",
    "UserDocument",
    "UserRole",
]
