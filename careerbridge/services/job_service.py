"""
Job Posting Workflow

pending --approve--> approved
pending --delete-->  [removed]
approved --delete--> [removed]

Rejecting a posting removes it; nothing moves a job back to pending.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

from careerbridge.core.errors import JobNotFoundError, JobNotPendingError
from careerbridge.models import JobDocument, JobStatus
from careerbridge.services.mongo_service import JobService
from careerbridge.utils.text import parse_salary_amount, split_requirements

logger = logging.getLogger(__name__)


class SalaryBracket(str, Enum):
    up_to_30k = "0-30000"
    from_30k_to_50k = "30000-50000"
    from_50k_to_80k = "50000-80000"
    over_80k = "80000+"

    @property
    def bounds(self):
        low, _, high = self.value.rstrip("+").partition("-")
        return float(low), (float(high) if high else None)

    def matches(self, salary: str) -> bool:
        if salary == self.value:
            return True
        amount = parse_salary_amount(salary)
        if amount is None:
            return False
        low, high = self.bounds
        return amount >= low and (high is None or amount < high)


@dataclass
class JobFilters:
    """Browse-screen filters; empty values match everything."""
    search: Optional[str] = None
    type: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[SalaryBracket] = None

    def matches(self, job: JobDocument) -> bool:
        if self.type and job.type != self.type:
            return False
        if self.location and self.location.lower() not in job.location.lower():
            return False
        if self.salary and not SalaryBracket(self.salary).matches(job.salary):
            return False
        if self.search:
            needle = self.search.lower()
            haystacks = (job.title, job.company, job.description)
            if not any(needle in (text or "").lower() for text in haystacks):
                return False
        return True


def filter_jobs(jobs: Iterable[JobDocument], filters: JobFilters) -> List[JobDocument]:
    return [job for job in jobs if filters.matches(job)]


class JobPostingWorkflow:

    def __init__(self, jobs: JobService):
        self.jobs = jobs

    def submit(
        self,
        employer_id: str,
        title: str,
        company: str,
        location: str,
        description: str,
        requirements: str,
        salary: str,
        type: str,
    ) -> JobDocument:
        """
        Create a pending job posting.

        ``requirements`` is the multi-line form text; it is stored as a list
        with one entry per non-blank line.
        """
        fields = {
            "title": title,
            "company": company,
            "location": location,
            "description": description,
            "requirements": split_requirements(requirements),
            "salary": salary,
            "type": type,
            "employerId": employer_id,
            "status": JobStatus.pending.value,
            "createdAt": datetime.utcnow(),
        }
        job_id = self.jobs.insert(fields)
        logger.info("Job %s submitted by employer %s", job_id, employer_id)
        return self.get(job_id)

    def get(self, job_id: str) -> JobDocument:
        job = self.jobs.get_by_id(job_id)
        if job is None:
            raise JobNotFoundError()
        return job

    def approve(self, job_id: str, admin_id: str) -> JobDocument:
        """
        Approve a pending job. Approving an approved job is a no-op: the first
        approval time and approver are kept and no error is raised. Any other
        state (a stored ``rejected``) cannot be approved.
        """
        job = self.get(job_id)
        if job.status == JobStatus.approved:
            return job
        if job.status != JobStatus.pending:
            raise JobNotPendingError()

        now = datetime.utcnow()
        self.jobs.transition(job_id, JobStatus.pending.value, {
            "status": JobStatus.approved.value,
            "approvedAt": now,
            "approvedBy": admin_id,
            "updatedAt": now,
        })
        logger.info("Job %s approved by %s", job_id, admin_id)
        return self.get(job_id)

    def delete(self, job_id: str) -> None:
        """Remove a job in any state. Its applications are left in place."""
        if not self.jobs.delete_by_id(job_id):
            raise JobNotFoundError()
        logger.info("Job %s deleted", job_id)

    def list_for_employer(self, employer_id: str) -> List[JobDocument]:
        return self.jobs.find({"employerId": employer_id})

    def list_approved(self, filters: JobFilters = None) -> List[JobDocument]:
        jobs = self.jobs.find({"status": JobStatus.approved.value})
        if filters is None:
            return jobs
        return filter_jobs(jobs, filters)

    def list_all(self) -> List[JobDocument]:
        return self.jobs.find()
