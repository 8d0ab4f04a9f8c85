"""Admin console: users, employer provisioning, and the end-to-end hiring flow."""

from pymongo.errors import AutoReconnect

from careerbridge.services.mongo_service import UserService
from conftest import RESUME_URL


def test_admin_lists_users(client, admin, student, employer):
    response = client.get("/api/admin/users", headers=admin["headers"])

    assert response.status_code == 200
    roles = {user["email"]: user["role"] for user in response.json()}
    assert roles == {
        "admin@example.com": "admin",
        "student@example.com": "student",
        "hr@acme.example.com": "employer",
    }


def test_admin_creates_employer(client, db, admin):
    response = client.post("/api/admin/employers", json={
        "email": "jobs@initech.example.com",
        "password": "initech1",
        "company_name": "Initech",
        "employer_name": "Bill L.",
        "phone_number": "+1-555-0111",
        "contact_person": "Milton",
    }, headers=admin["headers"])

    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "employer"
    assert body["company"] == "Initech"
    assert body["contact_person"] == "Milton"
    stored = db["users"].find_one({"_id": body["user_id"]})
    assert stored["createdBy"] == admin["uid"]
    assert stored["contactPerson"] == "Milton"

    login = client.post("/api/auth/login", json={"email": "jobs@initech.example.com", "password": "initech1"})
    assert login.json()["role"] == "employer"


def test_admin_creates_employer_without_contact_person(client, db, admin):
    response = client.post("/api/admin/employers", json={
        "email": "jobs@hooli.example.com",
        "password": "hooli123",
        "company_name": "Hooli",
        "employer_name": "Gavin",
        "phone_number": "555",
    }, headers=admin["headers"])

    assert response.status_code == 201
    assert response.json()["contact_person"] is None
    assert db["users"].find_one({"_id": response.json()["user_id"]})["contactPerson"] is None


def test_admin_create_employer_rolls_back_account(client, db, admin, monkeypatch):
    def unavailable(self, **kwargs):
        raise AutoReconnect("connection reset")

    monkeypatch.setattr(UserService, "create", unavailable)

    response = client.post("/api/admin/employers", json={
        "email": "jobs@pied.example.com",
        "password": "piper123",
        "company_name": "Pied Piper",
        "employer_name": "Richard",
        "phone_number": "555",
    }, headers=admin["headers"])

    assert response.status_code == 503
    assert response.json()["detail"] == "Failed to create employer account"
    assert db["accounts"].count_documents({"email": "jobs@pied.example.com"}) == 0


def test_admin_create_employer_duplicate_email(client, admin, employer):
    response = client.post("/api/admin/employers", json={
        "email": "hr@acme.example.com",
        "password": "secret123",
        "company_name": "Acme Corp",
        "employer_name": "Dup",
        "phone_number": "555",
    }, headers=admin["headers"])

    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_hiring_flow(client, admin, employer, student):
    job = client.post("/api/jobs", json={
        "title": "Barista",
        "company": "Cafe Co",
        "location": "Austin, TX",
        "type": "Part-time",
        "salary": "Entry Level",
        "description": "Morning shifts",
        "requirements": "Friendly\nPunctual",
    }, headers=employer["headers"]).json()
    assert job["status"] == "pending"
    assert job["requirements"] == ["Friendly", "Punctual"]

    dashboard = client.get("/api/employers/jobs", headers=employer["headers"]).json()
    assert dashboard[0]["job_id"] == job["job_id"]
    assert dashboard[0]["salary"] == "Entry Level"

    approved = client.put(f"/api/admin/jobs/{job['job_id']}/approve", headers=admin["headers"]).json()
    assert approved["status"] == "approved"

    apply_url = f"/api/jobs/{job['job_id']}/apply"
    application = client.post(apply_url, json={"resume": RESUME_URL}, headers=student["headers"])
    assert application.status_code == 201
    assert application.json()["status"] == "pending"

    duplicate = client.post(apply_url, json={"resume": RESUME_URL}, headers=student["headers"])
    assert duplicate.status_code == 409

    application_id = application.json()["application_id"]
    accepted = client.put(
        f"/api/employers/applications/{application_id}/status",
        json={"status": "accepted"},
        headers=employer["headers"],
    )
    assert accepted.json()["status"] == "accepted"

    mine = client.get("/api/students/applications", headers=student["headers"]).json()
    assert mine["total"] == 1
    assert mine["applications"][0]["status"] == "accepted"
    assert mine["applications"][0]["job"]["title"] == "Barista"
    assert mine["applications"][0]["job"]["company"] == "Cafe Co"
