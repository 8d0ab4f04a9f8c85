"""
Student Routes

GET /students/applications - Get my applications, each with its job
"""

from fastapi import APIRouter, Depends, Query

from careerbridge.api.deps import get_application_workflow
from careerbridge.core.auth import get_current_student
from careerbridge.core.errors import store_guard
from careerbridge.schemas.schemas import (
    ApplicationListResponse,
    ApplicationResponse,
    StatusFilter,
)
from careerbridge.services.application_service import ApplicationWorkflow
from careerbridge.services.role_service import Session

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("/applications", response_model=ApplicationListResponse)
async def get_my_applications(
    status: StatusFilter = Query(StatusFilter.all),
    student: Session = Depends(get_current_student),
    workflow: ApplicationWorkflow = Depends(get_application_workflow),
):
    """
    Get all job applications for current student, newest first.

    Applications whose job was deleted are still listed, flagged with
    ``job_available = false``.
    """
    with store_guard("Failed to fetch applications"):
        joined = await workflow.list_for_student(student.uid, status.as_status())

    applications = [ApplicationResponse.from_joined(j) for j in joined]
    return ApplicationListResponse(applications=applications, total=len(applications))
