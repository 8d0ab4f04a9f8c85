"""
Admin Routes

GET /admin/users - List every user (read-only)
POST /admin/employers - Create an employer account
GET /admin/jobs - List every job, any status
PUT /admin/jobs/{job_id}/approve - Approve a pending job
DELETE /admin/jobs/{job_id} - Delete (reject) a job
GET /admin/applications - List every application with job and applicant
PUT /admin/applications/{id}/status - Accept or reject an application
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from careerbridge.api.deps import get_application_workflow, get_job_workflow, get_user_service
from careerbridge.core.auth import get_current_admin, get_identity_gateway
from careerbridge.core.errors import store_guard
from careerbridge.models import ApplicationStatus, UserRole
from careerbridge.schemas.schemas import (
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatusUpdate,
    EmployerCreate,
    JobResponse,
    MessageResponse,
    StatusFilter,
    UserResponse,
)
from careerbridge.services.account_service import provision_user
from careerbridge.services.application_service import ApplicationWorkflow
from careerbridge.services.identity_service import IdentityGateway
from careerbridge.services.job_service import JobPostingWorkflow
from careerbridge.services.mongo_service import UserService
from careerbridge.services.role_service import Session

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    admin: Session = Depends(get_current_admin),
    users: UserService = Depends(get_user_service),
):
    with store_guard("Failed to fetch users"):
        docs = users.find()
    return [UserResponse.from_document(user) for user in docs]


@router.post("/employers", response_model=UserResponse, status_code=201)
async def create_employer(
    data: EmployerCreate,
    admin: Session = Depends(get_current_admin),
    gateway: IdentityGateway = Depends(get_identity_gateway),
    users: UserService = Depends(get_user_service),
):
    """Create an employer account on behalf of a company."""
    with store_guard("Failed to create employer account"):
        _, user = provision_user(
            gateway,
            users,
            email=data.email,
            password=data.password,
            name=data.employer_name,
            phone=data.phone_number,
            role=UserRole.employer,
            company=data.company_name,
            contact_person=data.contact_person,
            created_by=admin.uid,
        )
    return UserResponse.from_document(user)


@router.get("/jobs", response_model=List[JobResponse])
async def list_all_jobs(
    admin: Session = Depends(get_current_admin),
    workflow: JobPostingWorkflow = Depends(get_job_workflow),
):
    with store_guard("Failed to fetch jobs"):
        jobs = workflow.list_all()
    return [JobResponse.from_document(job) for job in jobs]


@router.put("/jobs/{job_id}/approve", response_model=JobResponse)
async def approve_job(
    job_id: str,
    admin: Session = Depends(get_current_admin),
    workflow: JobPostingWorkflow = Depends(get_job_workflow),
):
    """Approve a job posting. Approving an approved job changes nothing."""
    with store_guard("Failed to approve job posting"):
        job = workflow.approve(job_id, admin.uid)
    return JobResponse.from_document(job)


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    admin: Session = Depends(get_current_admin),
    workflow: JobPostingWorkflow = Depends(get_job_workflow),
):
    """Delete a job posting (this is also how a posting is rejected)."""
    with store_guard("Failed to delete job posting"):
        workflow.delete(job_id)
    return MessageResponse(message="Job posting deleted successfully")


@router.get("/applications", response_model=ApplicationListResponse)
async def list_all_applications(
    status: StatusFilter = Query(StatusFilter.all),
    admin: Session = Depends(get_current_admin),
    workflow: ApplicationWorkflow = Depends(get_application_workflow),
):
    with store_guard("Failed to fetch applications"):
        joined = await workflow.list_all(status.as_status())

    applications = [ApplicationResponse.from_joined(j) for j in joined]
    return ApplicationListResponse(applications=applications, total=len(applications))


@router.put("/applications/{application_id}/status", response_model=ApplicationResponse)
async def decide_application(
    application_id: str,
    update: ApplicationStatusUpdate,
    admin: Session = Depends(get_current_admin),
    workflow: ApplicationWorkflow = Depends(get_application_workflow),
):
    with store_guard("Failed to update application status"):
        decided = workflow.decide(application_id, ApplicationStatus(update.status.value), admin)
        joined = await workflow.join_one(decided)
    return ApplicationResponse.from_joined(joined)
