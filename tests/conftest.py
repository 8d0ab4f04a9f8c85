"""
Shared fixtures: an in-memory MongoDB (mongomock) behind the API, plus
signed-in student, employer and admin callers.
"""

import os

# Settings are read at import time; cheap hashes keep the suite fast
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import mongomock
import pytest
from fastapi.testclient import TestClient

from careerbridge.db.mongodb import get_database, init_mongo_indexes
from careerbridge.main import app
from careerbridge.models import UserRole
from careerbridge.services.account_service import provision_user
from careerbridge.services.identity_service import IdentityGateway
from careerbridge.services.mongo_service import UserService

JOB_PAYLOAD = {
    "title": "Backend Intern",
    "company": "Acme Corp",
    "location": "Toronto, ON",
    "type": "Internship",
    "salary": "45000",
    "description": "Build and maintain REST APIs",
    "requirements": "Python\n\nFastAPI\n  MongoDB  \n",
}

RESUME_URL = "https://drive.example.com/files/resume.pdf"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db():
    client = mongomock.MongoClient()
    database = client["careerbridge_test"]
    init_mongo_indexes(database)
    yield database
    client.close()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_database] = lambda: db
    # Not used as a context manager: startup would reach for a real MongoDB
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register through the API and return {"uid", "token", "headers"}."""
    def _register(email, role="student", company=None, name="Test User", password="secret123"):
        payload = {
            "email": email,
            "password": password,
            "name": name,
            "phone": "+1-555-0100",
            "role": role,
        }
        if company:
            payload["company"] = company
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        return {"uid": body["user_id"], "token": body["access_token"], "headers": bearer(body["access_token"])}
    return _register


@pytest.fixture
def student(register):
    return register("student@example.com", name="Sam Student")


@pytest.fixture
def other_student(register):
    return register("other.student@example.com", name="Olive Other")


@pytest.fixture
def employer(register):
    return register("hr@acme.example.com", role="employer", company="Acme Corp", name="Erin Employer")


@pytest.fixture
def other_employer(register):
    return register("hr@globex.example.com", role="employer", company="Globex", name="Gus Globex")


@pytest.fixture
def admin(db):
    """Admins cannot sign up; provision one the way scripts/create_admin.py does."""
    gateway = IdentityGateway(db)
    identity, _ = provision_user(
        gateway,
        UserService(db),
        email="admin@example.com",
        password="admin-pass",
        name="Ada Admin",
        phone="+1-555-0199",
        role=UserRole.admin,
    )
    token = gateway.issue_token(identity)
    return {"uid": identity.uid, "token": token, "headers": bearer(token)}


@pytest.fixture
def pending_job(client, employer):
    response = client.post("/api/jobs", json=JOB_PAYLOAD, headers=employer["headers"])
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def approved_job(client, admin, pending_job):
    response = client.put(f"/api/admin/jobs/{pending_job['job_id']}/approve", headers=admin["headers"])
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def application(client, student, approved_job):
    response = client.post(
        f"/api/jobs/{approved_job['job_id']}/apply",
        json={"resume": RESUME_URL},
        headers=student["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()
