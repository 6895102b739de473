import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.config import settings
from app.database import Base, get_db
from app.main import app
from app.models.user import User
from app.models.batch import Batch
from app.services.batch_service import recount_students
from app.utils.security import hash_password
from datetime import date

TEST_DB_URL = "sqlite:///./test_alumni.db"
DEFAULT_PASSWORD = "password123"

settings.BCRYPT_ROUNDS = 4

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD_HASH = hash_password(DEFAULT_PASSWORD)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


def make_batch(db, batch_name: str, year: int = 2024, is_completed: bool = False) -> Batch:
    batch = Batch(
        batch_name=batch_name,
        year=year,
        course="Computer Science",
        department="Engineering",
        start_date=date(year, 3, 1),
        end_date=date(year + 4, 2, 28),
        is_completed=is_completed,
        total_students=0,
    )
    db.add(batch)
    db.commit()
    db.refresh(batch)
    return batch


def make_student(db, batch, name: str, email: str, student_id: str, is_alumni: bool = False, **extra) -> User:
    student = User(
        name=name,
        email=email,
        password_hash=PASSWORD_HASH,
        role="student",
        student_id=student_id,
        batch_id=batch.batch_id if batch is not None else None,
        course="Computer Science",
        department="Engineering",
        year=1,
        is_alumni=is_alumni,
        current_status="studying",
        **extra,
    )
    db.add(student)
    db.flush()
    if batch is not None:
        recount_students(db, batch.batch_id)
    db.commit()
    db.refresh(student)
    return student


@pytest.fixture
def seed_batch(db):
    return make_batch(db, "CS-2024", year=2024)


@pytest.fixture
def other_batch(db):
    return make_batch(db, "IT-2025", year=2025)


@pytest.fixture
def seed_users(db, seed_batch):
    admin = User(name="Admin", email="admin@campus.edu", password_hash=PASSWORD_HASH, role="admin")
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return {
        "admin": admin,
        "student1": make_student(db, seed_batch, "Alice", "alice@campus.edu", "S-001"),
        "student2": make_student(db, seed_batch, "Bob", "bob@campus.edu", "S-002"),
    }


def get_token(client, email: str, password: str = DEFAULT_PASSWORD) -> str:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str, password: str = DEFAULT_PASSWORD) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email, password)}"}
