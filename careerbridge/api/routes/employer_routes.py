"""
Employer Routes

GET /employers/jobs - Get employer's job postings (newest first)
GET /employers/applications - Get applications received, with job and applicant
PUT /employers/applications/{id}/status - Accept or reject an application
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from careerbridge.api.deps import get_application_workflow, get_job_workflow
from careerbridge.core.auth import get_current_employer
from careerbridge.core.errors import store_guard
from careerbridge.models import ApplicationStatus
from careerbridge.schemas.schemas import (
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatusUpdate,
    JobResponse,
    StatusFilter,
)
from careerbridge.services.application_service import ApplicationWorkflow
from careerbridge.services.job_service import JobPostingWorkflow
from careerbridge.services.role_service import Session

router = APIRouter(prefix="/employers", tags=["Employers"])


@router.get("/jobs", response_model=List[JobResponse])
async def get_employer_jobs(
    employer: Session = Depends(get_current_employer),
    workflow: JobPostingWorkflow = Depends(get_job_workflow),
):
    """Get all jobs posted by this employer, any status."""
    with store_guard("Failed to fetch job postings"):
        jobs = workflow.list_for_employer(employer.uid)
    return [JobResponse.from_document(job) for job in jobs]


@router.get("/applications", response_model=ApplicationListResponse)
async def get_applications(
    status: StatusFilter = Query(StatusFilter.all),
    employer: Session = Depends(get_current_employer),
    workflow: ApplicationWorkflow = Depends(get_application_workflow),
):
    """Get all applications addressed to this employer."""
    with store_guard("Failed to fetch applications"):
        joined = await workflow.list_for_employer(employer.uid, status.as_status())

    applications = [ApplicationResponse.from_joined(j) for j in joined]
    return ApplicationListResponse(applications=applications, total=len(applications))


@router.put("/applications/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    employer: Session = Depends(get_current_employer),
    workflow: ApplicationWorkflow = Depends(get_application_workflow),
):
    """Accept or reject a pending application for one of this employer's jobs."""
    with store_guard("Failed to update application status"):
        decided = workflow.decide(application_id, ApplicationStatus(update.status.value), employer)
        joined = await workflow.join_one(decided)
    return ApplicationResponse.from_joined(joined)
