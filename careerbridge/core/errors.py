"""
Domain errors.

Every workflow failure is one of these. Each carries the HTTP status and the
user-facing message the API returns as ``{"detail": ...}``.
"""

import logging
from contextlib import contextmanager

from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class CareerBridgeError(Exception):
    status_code = 400
    detail = "Request failed"

    def __init__(self, detail: str = None):
        self.detail = detail or self.detail
        super().__init__(self.detail)


class NotFoundError(CareerBridgeError):
    status_code = 404
    detail = "Not found"


class JobNotFoundError(NotFoundError):
    detail = "Job not found"


class ApplicationNotFoundError(NotFoundError):
    detail = "Application not found"


class DuplicateApplicationError(CareerBridgeError):
    status_code = 409
    detail = "You have already applied for this position"


class InvalidTransitionError(CareerBridgeError):
    status_code = 409
    detail = "Application has already been decided"


class JobNotOpenError(CareerBridgeError):
    detail = "Job is not accepting applications"


class JobNotPendingError(CareerBridgeError):
    status_code = 409
    detail = "Only pending job postings can be approved"


class AccountExistsError(CareerBridgeError):
    detail = "Email already registered"


class AuthenticationError(CareerBridgeError):
    status_code = 401
    detail = "Invalid email or password"


class StoreError(CareerBridgeError):
    status_code = 503
    detail = "Document store unavailable"


@contextmanager
def store_guard(message: str):
    """
    Turn a document store failure into a scoped StoreError.

    Usage:
        with store_guard("Failed to fetch applications"):
            service.list_for_student(...)
    """
    try:
        yield
    except PyMongoError as e:
        logger.exception("%s: %s", message, e)
        raise StoreError(message) from e
