"""Application workflow: apply, decide, and the joined listings."""

from datetime import datetime

import pytest

from careerbridge.core.errors import DuplicateApplicationError, InvalidTransitionError
from careerbridge.models import ApplicationStatus, UserRole
from careerbridge.schemas.schemas import JOB_UNAVAILABLE
from careerbridge.services.application_service import ApplicationWorkflow
from careerbridge.services.identity_service import Identity
from careerbridge.services.mongo_service import ApplicationService, JobService, UserService
from careerbridge.services.role_service import Session
from conftest import JOB_PAYLOAD, RESUME_URL


@pytest.fixture
def workflow(db):
    return ApplicationWorkflow(ApplicationService(db), JobService(db), UserService(db))


def decide(client, application_id, status, headers, prefix="/api/employers"):
    return client.put(
        f"{prefix}/applications/{application_id}/status",
        json={"status": status},
        headers=headers,
    )


# ============================================================
# APPLY
# ============================================================

def test_apply_creates_pending_application(application, student, employer, approved_job):
    assert application["status"] == "pending"
    assert application["user_id"] == student["uid"]
    assert application["employer_id"] == employer["uid"]
    assert application["job_id"] == approved_job["job_id"]
    assert application["resume"] == RESUME_URL
    assert application["cover_letter"] is None
    assert application["job_available"] is True
    assert application["job"]["title"] == "Backend Intern"
    assert application["applicant"] is None


def test_apply_stores_job_snapshot(db, application):
    doc = db["applications"].find_one()

    assert doc["jobTitle"] == JOB_PAYLOAD["title"]
    assert doc["company"] == JOB_PAYLOAD["company"]
    assert doc["location"] == JOB_PAYLOAD["location"]
    assert doc["type"] == JOB_PAYLOAD["type"]
    assert doc["salary"] == JOB_PAYLOAD["salary"]


def test_apply_with_cover_letter(client, student, approved_job):
    cover = "https://drive.example.com/files/cover.pdf"

    response = client.post(
        f"/api/jobs/{approved_job['job_id']}/apply",
        json={"resume": RESUME_URL, "cover_letter": cover},
        headers=student["headers"],
    )

    assert response.status_code == 201
    assert response.json()["cover_letter"] == cover


def test_apply_twice_is_rejected(client, application, student, approved_job):
    response = client.post(
        f"/api/jobs/{approved_job['job_id']}/apply",
        json={"resume": RESUME_URL},
        headers=student["headers"],
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "You have already applied for this position"


def test_two_students_may_apply_to_same_job(client, application, other_student, approved_job):
    response = client.post(
        f"/api/jobs/{approved_job['job_id']}/apply",
        json={"resume": RESUME_URL},
        headers=other_student["headers"],
    )

    assert response.status_code == 201


def test_apply_to_pending_job(client, student, pending_job):
    response = client.post(
        f"/api/jobs/{pending_job['job_id']}/apply",
        json={"resume": RESUME_URL},
        headers=student["headers"],
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Job is not accepting applications"


def test_apply_to_missing_job(client, student):
    response = client.post(
        "/api/jobs/64b7f0c2a1b2c3d4e5f60718/apply",
        json={"resume": RESUME_URL},
        headers=student["headers"],
    )

    assert response.status_code == 404


def test_apply_requires_resume_link(client, student, approved_job):
    url = f"/api/jobs/{approved_job['job_id']}/apply"

    assert client.post(url, json={}, headers=student["headers"]).status_code == 422
    assert client.post(url, json={"resume": "my resume"}, headers=student["headers"]).status_code == 422


def test_only_students_apply(client, employer, approved_job):
    response = client.post(
        f"/api/jobs/{approved_job['job_id']}/apply",
        json={"resume": RESUME_URL},
        headers=employer["headers"],
    )

    assert response.status_code == 403


def test_unique_index_catches_racing_duplicate(workflow, approved_job, student, monkeypatch):
    workflow.submit(student["uid"], approved_job["job_id"], RESUME_URL)
    # Simulate the second request passing the existence check before the first insert landed
    monkeypatch.setattr(ApplicationService, "exists_for", lambda self, user_id, job_id: False)

    with pytest.raises(DuplicateApplicationError):
        workflow.submit(student["uid"], approved_job["job_id"], RESUME_URL)


# ============================================================
# DECIDE
# ============================================================

@pytest.mark.parametrize("decision", ["accepted", "rejected"])
def test_employer_decides_application(client, application, employer, decision):
    response = decide(client, application["application_id"], decision, employer["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == decision
    assert body["decided_by"] == employer["uid"]
    assert body["decided_at"] is not None
    assert body["applicant"]["name"] == "Sam Student"


def test_decision_is_terminal(client, application, employer, admin):
    decide(client, application["application_id"], "accepted", employer["headers"])

    again = decide(client, application["application_id"], "rejected", employer["headers"])
    by_admin = decide(client, application["application_id"], "rejected", admin["headers"], prefix="/api/admin")

    assert again.status_code == 409
    assert again.json()["detail"] == "Application has already been decided"
    assert by_admin.status_code == 409


def test_decision_must_be_accept_or_reject(client, application, employer):
    response = decide(client, application["application_id"], "pending", employer["headers"])

    assert response.status_code == 422


def test_other_employer_cannot_decide(client, application, other_employer):
    response = decide(client, application["application_id"], "accepted", other_employer["headers"])

    assert response.status_code == 404


def test_student_cannot_decide(client, application, student):
    response = decide(client, application["application_id"], "accepted", student["headers"])

    assert response.status_code == 403


def test_admin_decides_any_application(client, application, admin):
    response = decide(client, application["application_id"], "rejected", admin["headers"], prefix="/api/admin")

    assert response.status_code == 200
    assert response.json()["status"] == "rejected"
    assert response.json()["decided_by"] == admin["uid"]


def test_decide_unknown_application(client, employer):
    response = decide(client, "64b7f0c2a1b2c3d4e5f60718", "accepted", employer["headers"])

    assert response.status_code == 404
    assert response.json()["detail"] == "Application not found"


def test_workflow_rejects_pending_as_decision(workflow, application, employer):
    actor = Session(identity=Identity(uid=employer["uid"], email="hr@acme.example.com"), role=UserRole.employer)

    with pytest.raises(InvalidTransitionError):
        workflow.decide(application["application_id"], ApplicationStatus.pending, actor)


# ============================================================
# LISTINGS
# ============================================================

def test_student_lists_own_applications(client, application, student, other_student):
    mine = client.get("/api/students/applications", headers=student["headers"]).json()
    theirs = client.get("/api/students/applications", headers=other_student["headers"]).json()

    assert mine["total"] == 1
    assert mine["applications"][0]["application_id"] == application["application_id"]
    assert mine["applications"][0]["job"]["company"] == "Acme Corp"
    assert theirs == {"applications": [], "total": 0}


def test_employer_listing_joins_applicant(client, application, employer, other_employer):
    mine = client.get("/api/employers/applications", headers=employer["headers"]).json()
    theirs = client.get("/api/employers/applications", headers=other_employer["headers"]).json()

    assert mine["total"] == 1
    applicant = mine["applications"][0]["applicant"]
    assert applicant["name"] == "Sam Student"
    assert applicant["email"] == "student@example.com"
    assert theirs["total"] == 0


def test_listing_status_filter(client, application, employer, admin):
    decide(client, application["application_id"], "accepted", employer["headers"])

    accepted = client.get("/api/employers/applications", params={"status": "accepted"}, headers=employer["headers"])
    pending = client.get("/api/admin/applications", params={"status": "pending"}, headers=admin["headers"])
    everything = client.get("/api/admin/applications", params={"status": "all"}, headers=admin["headers"])

    assert accepted.json()["total"] == 1
    assert pending.json()["total"] == 0
    assert everything.json()["total"] == 1
    assert client.get(
        "/api/admin/applications", params={"status": "maybe"}, headers=admin["headers"]
    ).status_code == 422


def test_deleted_job_falls_back_to_snapshot(client, application, student, admin, approved_job):
    client.delete(f"/api/admin/jobs/{approved_job['job_id']}", headers=admin["headers"])

    listing = client.get("/api/students/applications", headers=student["headers"]).json()

    assert listing["total"] == 1
    entry = listing["applications"][0]
    assert entry["job_available"] is False
    assert entry["job"]["title"] == "Backend Intern"
    assert entry["job"]["company"] == "Acme Corp"
    assert entry["status"] == "pending"


def test_deleted_job_without_snapshot_is_labelled(client, db, student):
    db["applications"].insert_one({
        "jobId": "64b7f0c2a1b2c3d4e5f60718",
        "userId": student["uid"],
        "status": "pending",
        "resume": RESUME_URL,
        "createdAt": datetime.utcnow(),
    })

    entry = client.get("/api/students/applications", headers=student["headers"]).json()["applications"][0]

    assert entry["job_available"] is False
    assert entry["job"]["title"] == JOB_UNAVAILABLE


def test_admin_listing_survives_missing_applicant(client, db, application, admin, student):
    db["users"].delete_one({"_id": student["uid"]})

    entry = client.get("/api/admin/applications", headers=admin["headers"]).json()["applications"][0]

    assert entry["applicant"] is None
    assert entry["job_available"] is True
