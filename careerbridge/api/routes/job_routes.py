"""
Job Routes

GET /jobs - List approved jobs with filters (public)
GET /jobs/{job_id} - Get job details
POST /jobs - Submit job posting for approval (employer only)
POST /jobs/{job_id}/apply - Apply to job (student only)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from careerbridge.api.deps import (
    get_application_service,
    get_application_workflow,
    get_job_workflow,
)
from careerbridge.core.auth import get_current_employer, get_current_student, get_session
from careerbridge.core.errors import JobNotFoundError, store_guard
from careerbridge.models import JobStatus, JobType
from careerbridge.schemas.schemas import (
    ApplicationCreate,
    ApplicationResponse,
    JobCreate,
    JobListResponse,
    JobResponse,
)
from careerbridge.services.application_service import ApplicationWorkflow
from careerbridge.services.job_service import JobFilters, JobPostingWorkflow, SalaryBracket
from careerbridge.services.mongo_service import ApplicationService
from careerbridge.services.role_service import Session

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=JobListResponse)
async def list_jobs(
    search: Optional[str] = Query(None, description="Search in title, company and description"),
    type: Optional[JobType] = Query(None),
    location: Optional[str] = Query(None),
    salary: Optional[SalaryBracket] = Query(None),
    session: Session = Depends(get_session),
    workflow: JobPostingWorkflow = Depends(get_job_workflow),
    applications: ApplicationService = Depends(get_application_service),
):
    """List approved job postings. Signed-in students also see which they applied to."""
    filters = JobFilters(search=search, type=type, location=location, salary=salary)
    with store_guard("Failed to load jobs"):
        jobs = workflow.list_approved(filters)
        applied = applications.job_ids_for_user(session.uid) if session.is_student else set()

    return JobListResponse(
        jobs=[JobResponse.from_document(job, has_applied=job.id in applied) for job in jobs],
        total=len(jobs)
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: str,
    session: Session = Depends(get_session),
    workflow: JobPostingWorkflow = Depends(get_job_workflow),
):
    """Get a job. Unapproved jobs are only visible to their employer and admins."""
    with store_guard("Failed to load job details"):
        job = workflow.get(job_id)

    if job.status != JobStatus.approved and not (session.is_admin or job.employer_id == session.uid):
        raise JobNotFoundError()
    return JobResponse.from_document(job)


@router.post("", response_model=JobResponse, status_code=201)
async def submit_job(
    job: JobCreate,
    employer: Session = Depends(get_current_employer),
    workflow: JobPostingWorkflow = Depends(get_job_workflow),
):
    """Submit a job posting. It stays pending until an admin approves it."""
    with store_guard("Failed to submit job posting"):
        created = workflow.submit(
            employer_id=employer.uid,
            title=job.title,
            company=job.company,
            location=job.location,
            description=job.description,
            requirements=job.requirements,
            salary=job.salary,
            type=job.type.value,
        )
    return JobResponse.from_document(created)


@router.post("/{job_id}/apply", response_model=ApplicationResponse, status_code=201)
async def apply_to_job(
    job_id: str,
    application: ApplicationCreate,
    student: Session = Depends(get_current_student),
    workflow: ApplicationWorkflow = Depends(get_application_workflow),
):
    """Apply to an approved job. Students only. Cannot apply twice to same job."""
    with store_guard("Failed to submit application"):
        created = workflow.submit(
            student_id=student.uid,
            job_id=job_id,
            resume=str(application.resume),
            cover_letter=str(application.cover_letter) if application.cover_letter else None,
        )
        joined = await workflow.join_one(created, with_applicant=False)
    return ApplicationResponse.from_joined(joined)
