"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import AfterValidator, AnyHttpUrl, BaseModel, EmailStr, Field, model_validator

from careerbridge.models import (
    ApplicationStatus,
    JobDocument,
    JobType,
    UserDocument,
)


# ============================================================
# ENUMS
# ============================================================

class SignupRole(str, Enum):
    student = "student"
    employer = "employer"


class Decision(str, Enum):
    accepted = "accepted"
    rejected = "rejected"


class StatusFilter(str, Enum):
    all = "all"
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"

    def as_status(self) -> Optional[ApplicationStatus]:
        if self is StatusFilter.all:
            return None
        return ApplicationStatus(self.value)


def _not_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Field is required")
    return value


RequiredText = Annotated[str, AfterValidator(_not_blank)]

JOB_UNAVAILABLE = "Job no longer available"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: RequiredText
    phone: RequiredText
    role: SignupRole = SignupRole.student
    company: Optional[str] = None

    @model_validator(mode="after")
    def employer_needs_company(self):
        if self.role == SignupRole.employer and not (self.company or "").strip():
            raise ValueError("Company is required for employer accounts")
        if self.role != SignupRole.employer:
            self.company = None
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: Optional[str] = None


class ProfileUpdate(BaseModel):
    display_name: RequiredText


class SessionResponse(BaseModel):
    user_id: str
    email: str
    display_name: str
    role: Optional[str] = None
    is_admin: bool
    is_employer: bool
    is_student: bool


# ============================================================
# USER SCHEMAS
# ============================================================

class UserResponse(BaseModel):
    user_id: str
    email: str
    name: str
    phone: str
    role: Optional[str] = None
    company: Optional[str] = None
    contact_person: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, user: UserDocument) -> "UserResponse":
        return cls(
            user_id=user.id, email=user.email, name=user.name, phone=user.phone,
            role=user.role.value if user.role else None, company=user.company,
            contact_person=user.contact_person, created_at=user.created_at
        )


class EmployerCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    company_name: RequiredText
    employer_name: RequiredText
    phone_number: RequiredText
    contact_person: Optional[str] = None


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    title: RequiredText
    company: RequiredText
    location: RequiredText
    type: JobType = JobType.full_time
    salary: RequiredText
    description: RequiredText
    requirements: RequiredText = Field(..., description="One requirement per line")


class JobResponse(BaseModel):
    job_id: str
    title: str
    company: str
    location: str
    description: str
    requirements: List[str] = []
    salary: str
    type: str
    employer_id: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    has_applied: bool = False

    @classmethod
    def from_document(cls, job: JobDocument, has_applied: bool = False) -> "JobResponse":
        return cls(
            job_id=job.id, title=job.title, company=job.company, location=job.location,
            description=job.description, requirements=job.requirements, salary=job.salary,
            type=job.type, employer_id=job.employer_id, status=job.status.value,
            created_at=job.created_at, updated_at=job.updated_at,
            approved_at=job.approved_at, approved_by=job.approved_by,
            has_applied=has_applied
        )


class JobListResponse(BaseModel):
    jobs: List[JobResponse]
    total: int


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    resume: AnyHttpUrl = Field(..., description="Link to the resume, e.g. a shared drive URL")
    cover_letter: Optional[AnyHttpUrl] = None


class ApplicationStatusUpdate(BaseModel):
    status: Decision


class JobSummary(BaseModel):
    job_id: str
    title: str
    company: Optional[str] = None
    location: Optional[str] = None
    type: Optional[str] = None
    salary: Optional[str] = None


class ApplicantSummary(BaseModel):
    user_id: str
    name: str
    email: str
    phone: str


class ApplicationResponse(BaseModel):
    application_id: str
    job_id: str
    user_id: str
    employer_id: Optional[str] = None
    status: str
    resume: str
    cover_letter: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    decided_at: Optional[datetime] = None
    decided_by: Optional[str] = None
    job: JobSummary
    job_available: bool
    applicant: Optional[ApplicantSummary] = None

    @classmethod
    def from_joined(cls, joined) -> "ApplicationResponse":
        """
        Build the display record from a read-join result.

        A deleted job falls back to the snapshot stored on the application.
        """
        app = joined.application

        if joined.job.found:
            job = joined.job.value
            summary = JobSummary(
                job_id=job.id, title=job.title, company=job.company,
                location=job.location, type=job.type, salary=job.salary
            )
        else:
            summary = JobSummary(
                job_id=app.job_id, title=app.job_title or JOB_UNAVAILABLE, company=app.company,
                location=app.location, type=app.type, salary=app.salary
            )

        applicant = None
        if joined.applicant.found:
            user = joined.applicant.value
            applicant = ApplicantSummary(user_id=user.id, name=user.name, email=user.email, phone=user.phone)

        return cls(
            application_id=app.id, job_id=app.job_id, user_id=app.user_id,
            employer_id=app.employer_id, status=app.status.value, resume=app.resume,
            cover_letter=app.cover_letter, created_at=app.created_at, updated_at=app.updated_at,
            decided_at=app.decided_at, decided_by=app.decided_by,
            job=summary, job_available=joined.job.found, applicant=applicant
        )


class ApplicationListResponse(BaseModel):
    applications: List[ApplicationResponse]
    total: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    detail: str
