"""
Application Workflow

pending --decide--> accepted | rejected   (both terminal)

Every application is stored in one shape: references (jobId, userId,
employerId) plus a snapshot of the job taken at submission time. Listings
join the live job and applicant documents; the snapshot is only the
fallback once the job has been deleted.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pymongo.errors import DuplicateKeyError

from careerbridge.core.errors import (
    ApplicationNotFoundError,
    DuplicateApplicationError,
    InvalidTransitionError,
    JobNotFoundError,
    JobNotOpenError,
)
from careerbridge.models import ApplicationDocument, ApplicationStatus, JobStatus
from careerbridge.services.mongo_service import (
    ApplicationService,
    JobService,
    UserService,
)
from careerbridge.services.read_join import JoinOutcome, Missing, fetch_references, outcome_for
from careerbridge.services.role_service import Session

logger = logging.getLogger(__name__)

DECISIONS = (ApplicationStatus.accepted, ApplicationStatus.rejected)


@dataclass
class JoinedApplication:
    """An application with its referenced job and applicant resolved."""
    application: ApplicationDocument
    job: JoinOutcome
    applicant: JoinOutcome


class ApplicationWorkflow:

    def __init__(self, applications: ApplicationService, jobs: JobService, users: UserService):
        self.applications = applications
        self.jobs = jobs
        self.users = users

    # ------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------

    def submit(
        self,
        student_id: str,
        job_id: str,
        resume: str,
        cover_letter: Optional[str] = None,
    ) -> ApplicationDocument:
        """
        Apply to an approved job, at most once per (student, job).

        The existence check and the insert are separate calls; the unique
        (userId, jobId) index turns a lost race into the same duplicate error.
        """
        job = self.jobs.get_by_id(job_id)
        if job is None:
            raise JobNotFoundError()
        if job.status != JobStatus.approved:
            raise JobNotOpenError()

        if self.applications.exists_for(student_id, job.id):
            raise DuplicateApplicationError()

        fields = {
            "jobId": job.id,
            "userId": student_id,
            "employerId": job.employer_id,
            "status": ApplicationStatus.pending.value,
            "resume": resume,
            "coverLetter": cover_letter,
            "createdAt": datetime.utcnow(),
            "jobTitle": job.title,
            "company": job.company,
            "location": job.location,
            "type": job.type,
            "salary": job.salary,
        }
        try:
            application_id = self.applications.insert(fields)
        except DuplicateKeyError:
            raise DuplicateApplicationError()

        logger.info("Application %s submitted by %s for job %s", application_id, student_id, job.id)
        return self.applications.get_by_id(application_id)

    def decide(self, application_id: str, decision: ApplicationStatus, actor: Session) -> ApplicationDocument:
        """
        Accept or reject a pending application.

        Admins may decide any application; employers only those addressed to
        them (others look like they do not exist). The decider and time are
        recorded.
        """
        decision = ApplicationStatus(decision)
        if decision not in DECISIONS:
            raise InvalidTransitionError("Decision must be 'accepted' or 'rejected'")

        application = self.applications.get_by_id(application_id)
        if application is None:
            raise ApplicationNotFoundError()
        if not actor.is_admin and application.employer_id != actor.uid:
            raise ApplicationNotFoundError()
        if application.status != ApplicationStatus.pending:
            raise InvalidTransitionError()

        now = datetime.utcnow()
        moved = self.applications.transition(
            application_id,
            ApplicationStatus.pending.value,
            {
                "status": decision.value,
                "decidedAt": now,
                "decidedBy": actor.uid,
                "updatedAt": now,
            },
        )
        if not moved:
            raise InvalidTransitionError()

        logger.info("Application %s %s by %s", application_id, decision.value, actor.uid)
        return self.applications.get_by_id(application_id)

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    async def list_for_student(
        self, student_id: str, status: Optional[ApplicationStatus] = None
    ) -> List[JoinedApplication]:
        applications = self._find({"userId": student_id}, status)
        return await self._join(applications, with_applicant=False)

    async def list_for_employer(
        self, employer_id: str, status: Optional[ApplicationStatus] = None
    ) -> List[JoinedApplication]:
        applications = self._find({"employerId": employer_id}, status)
        return await self._join(applications)

    async def list_all(self, status: Optional[ApplicationStatus] = None) -> List[JoinedApplication]:
        applications = self._find({}, status)
        return await self._join(applications)

    async def join_one(
        self, application: ApplicationDocument, with_applicant: bool = True
    ) -> JoinedApplication:
        joined = await self._join([application], with_applicant=with_applicant)
        return joined[0]

    def _find(self, predicates: dict, status: Optional[ApplicationStatus]) -> List[ApplicationDocument]:
        if status is not None:
            predicates = {**predicates, "status": ApplicationStatus(status).value}
        return self.applications.find(predicates)

    async def _join(
        self, applications: List[ApplicationDocument], with_applicant: bool = True
    ) -> List[JoinedApplication]:
        """One fan-out for jobs and, optionally, one for applicants, run together."""
        lookups = [fetch_references(self.jobs.get_by_id, (a.job_id for a in applications))]
        if with_applicant:
            lookups.append(fetch_references(self.users.get_by_id, (a.user_id for a in applications)))

        results = await asyncio.gather(*lookups)
        jobs = results[0]
        users = results[1] if with_applicant else {}

        return [
            JoinedApplication(
                application=application,
                job=outcome_for(jobs, application.job_id),
                applicant=outcome_for(users, application.user_id) if with_applicant else Missing("not_requested"),
            )
            for application in applications
        ]
