"""
Stored document models - the validation boundary of the document store.

Raw MongoDB documents are parsed into these models before any workflow code
sees them. Field aliases are the camelCase names used in the collections;
attributes are snake_case. Unexpected shapes are coerced where the intent is
clear (ISO date strings, a requirements string, an unknown role) and
rejected otherwise.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from careerbridge.utils.text import split_requirements


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    admin = "admin"
    employer = "employer"
    student = "student"


class JobStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class ApplicationStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class JobType(str, Enum):
    full_time = "Full-time"
    part_time = "Part-time"
    internship = "Internship"
    summer_job = "Summer Job"
    co_op = "Co-op"
    contract = "Contract"


# ============================================================
# DOCUMENTS
# ============================================================

class StoredDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str

    @classmethod
    def from_mongo(cls, doc: Optional[dict]):
        """Build a model from a raw MongoDB document (``_id`` becomes ``id``)."""
        if doc is None:
            return None
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)


class UserDocument(StoredDocument):
    email: str
    name: str = ""
    phone: str = ""
    role: Optional[UserRole] = None
    company: Optional[str] = None
    contact_person: Optional[str] = Field(None, alias="contactPerson")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    created_by: Optional[str] = Field(None, alias="createdBy")

    @field_validator("role", mode="before")
    @classmethod
    def unknown_role_is_none(cls, value):
        if value in {role.value for role in UserRole}:
            return value
        return None


class JobDocument(StoredDocument):
    title: str
    company: str
    location: str = ""
    description: str = ""
    requirements: List[str] = []
    salary: str = ""
    type: str = ""
    employer_id: str = Field(alias="employerId")
    status: JobStatus = JobStatus.pending
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    approved_at: Optional[datetime] = Field(None, alias="approvedAt")
    approved_by: Optional[str] = Field(None, alias="approvedBy")

    @field_validator("requirements", mode="before")
    @classmethod
    def requirements_as_list(cls, value):
        if isinstance(value, str):
            return split_requirements(value)
        return value or []


class ApplicationDocument(StoredDocument):
    job_id: str = Field(alias="jobId")
    user_id: str = Field(alias="userId")
    employer_id: Optional[str] = Field(None, alias="employerId")
    status: ApplicationStatus = ApplicationStatus.pending
    resume: str = ""
    cover_letter: Optional[str] = Field(None, alias="coverLetter")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    decided_at: Optional[datetime] = Field(None, alias="decidedAt")
    decided_by: Optional[str] = Field(None, alias="decidedBy")

    # Job snapshot taken at submission time
    job_title: Optional[str] = Field(None, alias="jobTitle")
    company: Optional[str] = None
    location: Optional[str] = None
    type: Optional[str] = None
    salary: Optional[str] = None
