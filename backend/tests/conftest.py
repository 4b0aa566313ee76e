import pytest
from fastapi.testclient import TestClient
from datetime import date
from app.config import Settings
from app.database import Database
from app.main import create_app
from app.models.user import User
from app.models.batch import Batch
from app.models.enrollment import Enrollment
from app.services.auth_service import hash_password

TEST_DB_URL = "sqlite:///./test_training_portal.db"
TEST_PASSWORD = "secret123"

test_settings = Settings(DATABASE_URL=TEST_DB_URL, SEED_SAMPLE_BATCHES=False)
database = Database(TEST_DB_URL, max_workers=4)
app = create_app(test_settings, database)


@pytest.fixture(autouse=True)
def setup_db():
    database.create_all()
    yield
    database.drop_all()


@pytest.fixture
def db():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    hashed = hash_password(TEST_PASSWORD)
    users = {
        "admin": User(username="admin", email="admin@training.com", password=hashed,
                      full_name="System Admin", role="admin"),
        "teacher": User(username="teacher1", email="teacher1@training.com", password=hashed,
                        full_name="Teacher Kim", role="teacher"),
        "student": User(username="student1", email="student1@training.com", password=hashed,
                        full_name="Student Lee", role="student"),
        "student2": User(username="student2", email="student2@training.com", password=hashed,
                         full_name="Student Park", role="student"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_batch(db, seed_users):
    batch = Batch(
        name="Web Development Fundamentals",
        instructor_id=seed_users["teacher"].id,
        duration="8 weeks",
        start_date=date(2026, 1, 15),
        status="active",
        max_participants=30,
    )
    db.add(batch)
    db.commit()
    db.refresh(batch)
    return batch


@pytest.fixture
def enrolled_student(db, seed_users, seed_batch):
    db.add(Enrollment(user_id=seed_users["student"].id, batch_id=seed_batch.id))
    db.commit()
    return seed_users["student"]


def get_token(client, username: str, password: str = TEST_PASSWORD) -> str:
    resp = client.post("/api/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def auth_headers(client, username: str, password: str = TEST_PASSWORD) -> dict:
    return {"Authorization": f"Bearer {get_token(client, username, password)}"}
