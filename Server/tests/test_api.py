"""
End-to-end tests for the HTTP API using FastAPI's TestClient
"""

import pytest

from models.auth import UserRole
from models.database import STATUS_SELECTED


def _upload(client, headers, title="Night Train", terms="true"):
    return client.post(
        "/api/submissions",
        headers=headers,
        data={"title": title, "description": "A short story", "academicYear": "2024-2025", "termsAccepted": terms},
        files={"file": ("story.pdf", b"%PDF-1.4 story", "application/pdf")},
    )


# ==================== Status ====================

def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_db_test(client):
    assert client.get("/api/db-test").status_code == 200


def test_faculties_are_public(client):
    response = client.get("/api/faculties")

    assert response.status_code == 200
    assert len(response.json()) == 8


# ==================== Authentication ====================

def test_register_then_login(client):
    register = client.post("/api/auth/register", json={
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "Ada@University.edu",
        "facultyId": 4,
        "password": "analytical",
    })

    assert register.status_code == 201
    body = register.json()
    assert body["token"]
    assert body["user"]["role"] == "Student"
    assert body["user"]["faculty"] == 4

    login = client.post("/api/auth/login", json={"email": "ada@university.edu", "password": "analytical"})
    assert login.status_code == 200

    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {login.json()['token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "ada@university.edu"


def test_register_duplicate_email_conflicts(client):
    payload = {"firstName": "A", "lastName": "B", "email": "dup@university.edu", "facultyId": 1,
               "password": "password1"}
    client.post("/api/auth/register", json=payload)

    response = client.post("/api/auth/register", json={**payload, "email": "DUP@university.edu"})

    assert response.status_code == 409
    assert response.json() == {"error": "Email already in use"}


def test_register_missing_fields(client):
    response = client.post("/api/auth/register", json={"email": "x@university.edu"})

    assert response.status_code == 400
    assert response.json() == {"error": "All fields are required"}


def test_login_bad_credentials(client, make_user):
    identity = make_user()

    response = client.post("/api/auth/login", json={"email": identity.email, "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


def test_missing_token_is_401_and_bad_token_is_403(client):
    assert client.get("/api/submissions").status_code == 401

    response = client.get("/api/submissions", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 403


def test_wrong_role_is_403(client, make_user, auth_headers):
    student = make_user()

    response = client.get("/api/manager/dashboard/stats", headers=auth_headers(student))

    assert response.status_code == 403
    assert response.json() == {"error": "Manager access required"}


def test_change_password(client, make_user, auth_headers):
    identity = make_user()
    headers = auth_headers(identity)

    wrong = client.post("/api/users/me/password", headers=headers,
                        json={"currentPassword": "wrong", "newPassword": "new-password-1"})
    assert wrong.status_code == 401

    response = client.post("/api/users/me/password", headers=headers,
                           json={"currentPassword": "correct-horse-battery", "newPassword": "new-password-1"})
    assert response.status_code == 200
    assert response.json()["success"] is True

    login = client.post("/api/auth/login", json={"email": identity.email, "password": "new-password-1"})
    assert login.status_code == 200


# ==================== Review Flow ====================

def test_submission_review_flow(client, make_user, auth_headers):
    """Student uploads, coordinator comments and selects, manager sees and rejects"""
    student = make_user(faculty_id=1)
    coordinator = make_user(UserRole.COORDINATOR, faculty_id=1)
    other_coordinator = make_user(UserRole.COORDINATOR, faculty_id=2)
    manager = make_user(UserRole.MANAGER)

    created = _upload(client, auth_headers(student))
    assert created.status_code == 201
    submission = created.json()["submission"]
    submission_id = submission["submissionId"]
    assert submission["status"] == "Submitted"
    assert submission["needsComment"] is True

    # Another faculty cannot see it
    hidden = client.get(f"/api/coordinator/submissions/{submission_id}", headers=auth_headers(other_coordinator))
    assert hidden.status_code == 404
    assert hidden.json() == {"error": "Submission not found or not in your faculty"}

    worklist = client.get("/api/coordinator/submissions", headers=auth_headers(coordinator),
                          params={"needsComment": "true"})
    assert worklist.status_code == 200
    page = worklist.json()
    assert page["total"] == 1
    assert page["totalPages"] == 1
    assert page["submissions"][0]["needsUrgentComment"] is True

    comment = client.post(f"/api/coordinator/submissions/{submission_id}/comments",
                          headers=auth_headers(coordinator), json={"commentText": "Lovely pacing"})
    assert comment.status_code == 201
    assert comment.json()["comment"]["role"] == "Coordinator"

    detail = client.get(f"/api/submissions/{submission_id}", headers=auth_headers(student)).json()
    assert detail["submission"]["needsComment"] is False
    assert [c["commentText"] for c in detail["comments"]] == ["Lovely pacing"]

    selected = client.patch(f"/api/coordinator/submissions/{submission_id}/select",
                            headers=auth_headers(coordinator), json={"selected": True})
    assert selected.status_code == 200
    assert selected.json()["message"] == "Submission selected successfully"
    assert selected.json()["submission"]["status"] == STATUS_SELECTED

    public = client.get("/api/public/submissions").json()
    assert [s["submissionId"] for s in public] == [submission_id]

    manager_view = client.get("/api/manager/selected-submissions", headers=auth_headers(manager)).json()
    assert [s["submissionId"] for s in manager_view] == [submission_id]

    archive = client.get("/api/manager/download-zip", headers=auth_headers(manager))
    assert archive.status_code == 200
    assert archive.headers["content-type"] == "application/zip"
    assert archive.headers["x-file-count"] == "1"

    rejected = client.patch(f"/api/manager/submissions/{submission_id}/reject", headers=auth_headers(manager))
    assert rejected.status_code == 200
    assert rejected.json()["submission"]["status"] == "Rejected"

    reselect = client.patch(f"/api/coordinator/submissions/{submission_id}/select",
                            headers=auth_headers(coordinator), json={"selected": True})
    assert reselect.status_code == 409


def test_select_requires_boolean(client, make_user, make_submission, auth_headers):
    coordinator = make_user(UserRole.COORDINATOR)
    submission_id = make_submission(make_user())

    response = client.patch(f"/api/coordinator/submissions/{submission_id}/select",
                            headers=auth_headers(coordinator), json={})

    assert response.status_code == 400
    assert response.json() == {"error": "Selected status is required"}


@pytest.mark.parametrize("selected", ["yes", "true", 0, 1])
def test_select_rejects_non_boolean_values(client, make_user, make_submission, auth_headers, selected):
    coordinator = make_user(UserRole.COORDINATOR)
    student = make_user()
    submission_id = make_submission(student)

    response = client.patch(f"/api/coordinator/submissions/{submission_id}/select",
                            headers=auth_headers(coordinator), json={"selected": selected})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid request")

    detail = client.get(f"/api/submissions/{submission_id}", headers=auth_headers(student)).json()
    assert detail["submission"]["status"] == "Submitted"


def test_upload_without_terms_is_rejected(client, make_user, auth_headers):
    response = _upload(client, auth_headers(make_user()), terms="false")

    assert response.status_code == 400
    assert response.json() == {"error": "Terms and conditions must be accepted"}


def test_coordinator_download(client, make_user, auth_headers):
    student = make_user(faculty_id=1)
    coordinator = make_user(UserRole.COORDINATOR, faculty_id=1)
    submission_id = _upload(client, auth_headers(student), title="Map").json()["submission"]["submissionId"]

    response = client.get(f"/api/coordinator/download/{submission_id}", headers=auth_headers(coordinator))

    assert response.status_code == 200
    assert response.content == b"%PDF-1.4 story"
    assert response.headers["content-type"] == "application/pdf"


# ==================== Admin ====================

def test_admin_settings_validation(client, make_user, auth_headers):
    admin = make_user(UserRole.ADMIN)

    response = client.put("/api/admin/settings/security", headers=auth_headers(admin),
                          json={"passwordExpiry": 10, "maxLoginAttempts": 5, "sessionTimeout": 30})

    assert response.status_code == 400
    assert response.json() == {"error": "Password expiry must be between 30 and 365 days"}


def test_admin_user_activity_rejects_unknown_range(client, make_user, auth_headers):
    admin = make_user(UserRole.ADMIN)

    response = client.get("/api/admin/analytics/user-activity", headers=auth_headers(admin),
                          params={"dateRange": "decade"})

    assert response.status_code == 400


def test_admin_changes_user_role(client, make_user, auth_headers):
    admin = make_user(UserRole.ADMIN)
    student = make_user()

    response = client.put(f"/api/admin/users/{student.user_id}/role", headers=auth_headers(admin),
                          json={"role": "MNGR"})

    assert response.status_code == 200
    assert response.json()["role"] == "Manager"
