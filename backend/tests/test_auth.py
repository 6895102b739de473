import pytest
from jose import jwt

from app.config import settings
from app.models.batch import Batch
from app.models.user import User
from tests.conftest import auth_headers


def test_login_success(client, seed_users):
    resp = client.post("/api/auth/login", json={"email": "admin@campus.edu", "password": "password123"})
    assert resp.status_code == 200
    data = resp.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"
    assert data["user"]["role"] == "admin"


def test_login_token_carries_user_id_and_role(client, seed_users):
    resp = client.post("/api/auth/login", json={"email": "alice@campus.edu", "password": "password123"})
    payload = jwt.decode(resp.json()["access_token"], settings.SECRET_KEY, algorithms=["HS256"])
    assert payload["sub"] == str(seed_users["student1"].user_id)
    assert payload["role"] == "student"


def test_login_email_is_case_insensitive(client, seed_users):
    resp = client.post("/api/auth/login", json={"email": "Alice@Campus.edu", "password": "password123"})
    assert resp.status_code == 200


@pytest.mark.parametrize(
    "email,password",
    [("admin@campus.edu", "wrong-password"), ("nobody@campus.edu", "password123")],
)
def test_login_invalid_credentials(client, seed_users, email, password):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 401


def test_me_authenticated(client, seed_users):
    headers = auth_headers(client, "alice@campus.edu")
    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["email"] == "alice@campus.edu"
    assert data["batch"]["batch_name"] == "CS-2024"
    assert "password_hash" not in data


def test_me_unauthenticated(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code in (401, 403)  # HTTPBearer raises 401 or 403 depending on version


def test_me_with_garbage_token(client, seed_users):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_logout(client, seed_users):
    headers = auth_headers(client, "admin@campus.edu")
    resp = client.post("/api/auth/logout", headers=headers)
    assert resp.status_code == 200


def test_register_student(client, seed_batch, db):
    resp = client.post(
        "/api/auth/register",
        json={
            "name": "Carol",
            "email": "carol@campus.edu",
            "password": "secret123",
            "student_id": "S-100",
            "batch_id": seed_batch.batch_id,
            "course": "Computer Science",
            "department": "Engineering",
            "year": 1,
        },
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["user"]["role"] == "student"
    assert data["user"]["is_alumni"] is False
    db.expire_all()
    assert db.get(Batch, seed_batch.batch_id).total_students == 1

    login = client.post("/api/auth/login", json={"email": "carol@campus.edu", "password": "secret123"})
    assert login.status_code == 200


def test_register_student_missing_fields(client, seed_batch):
    resp = client.post(
        "/api/auth/register",
        json={"name": "Carol", "email": "carol@campus.edu", "password": "secret123", "role": "student"},
    )
    assert resp.status_code == 400
    assert "student_id" in resp.json()["detail"]


def test_register_duplicate_email(client, seed_users, seed_batch):
    resp = client.post(
        "/api/auth/register",
        json={
            "name": "Alice Again",
            "email": "alice@campus.edu",
            "password": "secret123",
            "student_id": "S-999",
            "batch_id": seed_batch.batch_id,
            "course": "Computer Science",
            "department": "Engineering",
            "year": 1,
        },
    )
    assert resp.status_code == 400


def test_register_admin_blocked_by_default(client):
    resp = client.post(
        "/api/auth/register",
        json={"name": "Eve", "email": "eve@campus.edu", "password": "secret123", "role": "admin"},
    )
    assert resp.status_code == 403


def test_register_admin_when_enabled(client, monkeypatch):
    monkeypatch.setattr(settings, "ALLOW_ADMIN_REGISTRATION", True)
    resp = client.post(
        "/api/auth/register",
        json={"name": "Root", "email": "root@campus.edu", "password": "secret123", "role": "admin"},
    )
    assert resp.status_code == 201
    assert resp.json()["user"]["role"] == "admin"


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_token_rejected_after_role_change(client, db, seed_users):
    headers = auth_headers(client, "bob@campus.edu")
    bob = db.get(User, seed_users["student2"].user_id)
    bob.role = "admin"
    db.commit()
    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 401
