"""차수 완료 처리와 동문 일괄 전환, 학생 수 캐시 유지 규칙을 검증합니다."""

import pytest
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.models.batch import Batch
from app.models.user import User
from app.services import batch_service
from tests.conftest import PASSWORD_HASH, auth_headers, make_batch, make_student


def _three_student_batch(db):
    batch = make_batch(db, "CS-2020", year=2020)
    for i in range(1, 4):
        make_student(db, batch, f"Student {i}", f"s{i}@campus.edu", f"CS2000{i}")
    return batch


def _admin(db):
    admin = User(name="Admin", email="admin@campus.edu", password_hash=PASSWORD_HASH, role="admin")
    db.add(admin)
    db.commit()
    return admin


def _complete(client, headers, batch_id):
    return client.put(f"/api/batches/{batch_id}/complete", headers=headers)


def test_complete_batch_converts_all_members(client, db):
    _admin(db)
    batch = _three_student_batch(db)
    headers = auth_headers(client, "admin@campus.edu")

    resp = _complete(client, headers, batch.batch_id)
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["batch"]["is_completed"] is True
    assert data["batch"]["completed_date"] is not None
    assert data["batch"]["total_students"] == 3
    assert data["converted_count"] == 3

    db.expire_all()
    students = db.query(User).filter(User.batch_id == batch.batch_id).all()
    assert len(students) == 3
    assert all(s.is_alumni for s in students)
    assert db.get(Batch, batch.batch_id).total_students == 3


def test_student_added_before_completion_is_converted(client, db):
    _admin(db)
    batch = _three_student_batch(db)
    headers = auth_headers(client, "admin@campus.edu")

    resp = client.post(
        "/api/students",
        json={
            "name": "Student 4",
            "email": "s4@campus.edu",
            "password": "secret123",
            "student_id": "CS20004",
            "batch_id": batch.batch_id,
            "course": "Computer Science",
            "department": "Engineering",
            "year": 4,
        },
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    assert client.get(f"/api/batches/{batch.batch_id}", headers=headers).json()["total_students"] == 4

    resp = _complete(client, headers, batch.batch_id)
    assert resp.json()["converted_count"] == 4

    db.expire_all()
    students = db.query(User).filter(User.batch_id == batch.batch_id).all()
    assert len(students) == 4
    assert all(s.is_alumni for s in students)


def test_deleting_alumni_after_completion_keeps_completion(client, db):
    _admin(db)
    batch = _three_student_batch(db)
    headers = auth_headers(client, "admin@campus.edu")
    completed = _complete(client, headers, batch.batch_id).json()["batch"]

    victim = db.query(User).filter(User.student_id == "CS20001").first()
    resp = client.delete(f"/api/students/{victim.user_id}", headers=headers)
    assert resp.status_code == 204

    after = client.get(f"/api/batches/{batch.batch_id}", headers=headers).json()
    assert after["total_students"] == 2
    assert after["is_completed"] is True
    assert after["completed_date"] == completed["completed_date"]

    db.expire_all()
    remaining = db.query(User).filter(User.batch_id == batch.batch_id).all()
    assert len(remaining) == 2
    assert all(s.is_alumni for s in remaining)


def test_complete_already_completed_batch_is_noop(client, db):
    _admin(db)
    batch = _three_student_batch(db)
    headers = auth_headers(client, "admin@campus.edu")
    first = _complete(client, headers, batch.batch_id).json()

    # 완료 후 합류한 동문이 아닌 학생은 재완료로 전환되지 않는다.
    db.expire_all()
    straggler = make_student(db, None, "Late", "late@campus.edu", "CS20009")
    straggler.batch_id = batch.batch_id
    db.commit()

    second = _complete(client, headers, batch.batch_id)
    assert second.status_code == 200
    data = second.json()
    assert data["converted_count"] == 0
    assert data["batch"]["completed_date"] == first["batch"]["completed_date"]
    assert data["batch"]["is_completed"] is True

    db.expire_all()
    assert db.get(User, straggler.user_id).is_alumni is False


def test_complete_batch_leaves_other_batches_untouched(client, db, seed_users, other_batch):
    outsider = make_student(db, other_batch, "Carol", "carol@campus.edu", "IT-001")
    headers = auth_headers(client, "admin@campus.edu")

    resp = _complete(client, headers, seed_users["student1"].batch_id)
    assert resp.json()["converted_count"] == 2

    db.expire_all()
    assert db.get(User, outsider.user_id).is_alumni is False
    assert db.get(Batch, other_batch.batch_id).is_completed is False


def test_complete_empty_batch(client, db, seed_users, other_batch):
    headers = auth_headers(client, "admin@campus.edu")
    resp = _complete(client, headers, other_batch.batch_id)
    assert resp.status_code == 200
    data = resp.json()
    assert data["batch"]["is_completed"] is True
    assert data["converted_count"] == 0
    assert data["batch"]["total_students"] == 0


def test_complete_missing_batch(client, seed_users):
    headers = auth_headers(client, "admin@campus.edu")
    resp = _complete(client, headers, 9999)
    assert resp.status_code == 404


def test_complete_batch_requires_admin(client, seed_users, seed_batch):
    headers = auth_headers(client, "alice@campus.edu")
    resp = _complete(client, headers, seed_batch.batch_id)
    assert resp.status_code == 403


def test_complete_batch_retries_after_concurrent_change(db, seed_users, seed_batch, monkeypatch):
    original = batch_service._apply_completion
    calls = {"n": 0}

    def flaky(session, batch):
        calls["n"] += 1
        if calls["n"] == 1:
            raise StaleDataError("simulated concurrent update")
        return original(session, batch)

    monkeypatch.setattr(batch_service, "_apply_completion", flaky)
    batch, converted = batch_service.complete_batch(db, seed_batch.batch_id)
    assert calls["n"] == 2
    assert batch.is_completed is True
    assert converted == 2


def test_complete_batch_gives_up_after_max_attempts(client, db, seed_users, seed_batch, monkeypatch):
    def always_stale(session, batch):
        raise StaleDataError("simulated concurrent update")

    monkeypatch.setattr(batch_service, "_apply_completion", always_stale)
    headers = auth_headers(client, "admin@campus.edu")
    resp = _complete(client, headers, seed_batch.batch_id)
    assert resp.status_code == 409

    db.expire_all()
    batch = db.get(Batch, seed_batch.batch_id)
    assert batch.is_completed is False
    assert batch.completed_date is None


def test_stale_batch_version_is_detected(db, seed_users, seed_batch):
    other = Session(bind=db.get_bind())
    try:
        mine = db.get(Batch, seed_batch.batch_id)
        loaded_version = mine.version
        theirs = other.get(Batch, seed_batch.batch_id)
        theirs.description = "changed elsewhere"
        other.commit()
        assert theirs.version == loaded_version + 1

        mine.description = "changed here"
        with pytest.raises(StaleDataError):
            db.flush()
        db.rollback()
    finally:
        other.close()


def test_recount_overwrites_drifted_cache(db, seed_users, seed_batch):
    batch = db.get(Batch, seed_batch.batch_id)
    batch.total_students = 42
    db.commit()

    assert batch_service.recount_students(db, seed_batch.batch_id) == 2
    db.commit()
    db.expire_all()
    assert db.get(Batch, seed_batch.batch_id).total_students == 2


def test_reconcile_repairs_count_and_cascade(db, seed_users, seed_batch):
    batch = db.get(Batch, seed_batch.batch_id)
    batch.is_completed = True
    batch.total_students = 7
    db.commit()

    report = batch_service.reconcile_batches(db)
    row = next(r for r in report if r["batch_id"] == seed_batch.batch_id)
    assert row["previous_total"] == 7
    assert row["total_students"] == 2
    assert row["alumni_fixed"] == 2

    db.expire_all()
    batch = db.get(Batch, seed_batch.batch_id)
    assert batch.completed_date is not None
    assert all(s.is_alumni for s in db.query(User).filter(User.batch_id == batch.batch_id))

    again = batch_service.reconcile_batches(db)
    assert next(r for r in again if r["batch_id"] == seed_batch.batch_id)["alumni_fixed"] == 0
