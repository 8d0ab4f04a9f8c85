"""
Workflow dependencies for route injection.

Every service is built on the request's database handle, so tests can swap
the store by overriding ``get_database`` alone.
"""

from fastapi import Depends
from pymongo.database import Database

from careerbridge.db.mongodb import get_database
from careerbridge.services.application_service import ApplicationWorkflow
from careerbridge.services.job_service import JobPostingWorkflow
from careerbridge.services.mongo_service import ApplicationService, JobService, UserService


def get_user_service(db: Database = Depends(get_database)) -> UserService:
    return UserService(db)


def get_application_service(db: Database = Depends(get_database)) -> ApplicationService:
    return ApplicationService(db)


def get_job_workflow(db: Database = Depends(get_database)) -> JobPostingWorkflow:
    return JobPostingWorkflow(JobService(db))


def get_application_workflow(db: Database = Depends(get_database)) -> ApplicationWorkflow:
    return ApplicationWorkflow(ApplicationService(db), JobService(db), UserService(db))
