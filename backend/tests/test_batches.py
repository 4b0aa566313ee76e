"""Test Batches 목록/생성/수강 등록 정원 제약을 검증하는 자동화 테스트입니다."""

from concurrent.futures import ThreadPoolExecutor
from datetime import date

from fastapi.testclient import TestClient

from app.models.batch import Batch
from app.models.enrollment import Enrollment
from app.models.user import User
from app.services.auth_service import create_access_token, hash_password
from tests.conftest import app, auth_headers


def _make_batch(db, **overrides):
    values = {
        "name": "Data Science with Python",
        "duration": "12 weeks",
        "start_date": date(2026, 1, 22),
        "status": "active",
        "max_participants": 20,
    }
    values.update(overrides)
    batch = Batch(**values)
    db.add(batch)
    db.commit()
    db.refresh(batch)
    return batch


def test_list_batches_with_counts(client, seed_users, seed_batch, enrolled_student):
    headers = auth_headers(client, "student1")
    resp = client.get("/api/batches", headers=headers)
    assert resp.status_code == 200
    rows = resp.json()
    assert len(rows) == 1
    assert rows[0]["name"] == "Web Development Fundamentals"
    assert rows[0]["instructor_name"] == "Teacher Kim"
    assert rows[0]["participant_count"] == 1
    assert rows[0]["max_participants"] == 30


def test_list_batches_status_filter(client, db, seed_users, seed_batch):
    _make_batch(db, name="Machine Learning Basics", status="upcoming", start_date=date(2026, 2, 15))
    headers = auth_headers(client, "student1")

    upcoming = client.get("/api/batches", params={"status": "upcoming"}, headers=headers).json()
    assert [b["name"] for b in upcoming] == ["Machine Learning Basics"]

    everything = client.get("/api/batches", params={"status": "all"}, headers=headers).json()
    # start_date 내림차순
    assert [b["name"] for b in everything] == ["Machine Learning Basics", "Web Development Fundamentals"]


def test_create_batch_as_teacher(client, seed_users):
    headers = auth_headers(client, "teacher1")
    resp = client.post(
        "/api/batches",
        json={"name": "Cloud Computing", "duration": "8 weeks", "start_date": "2026-03-01", "status": "upcoming"},
        headers=headers,
    )
    assert resp.status_code == 201
    batch_id = resp.json()["batchId"]

    rows = client.get("/api/batches", headers=headers).json()
    created = next(b for b in rows if b["id"] == batch_id)
    assert created["max_participants"] == 100
    assert created["instructor_id"] == seed_users["teacher"].id


def test_create_batch_forbidden_for_student(client, seed_users):
    headers = auth_headers(client, "student1")
    resp = client.post(
        "/api/batches",
        json={"name": "Nope", "duration": "1 week", "start_date": "2026-03-01", "status": "active"},
        headers=headers,
    )
    assert resp.status_code == 403
    assert resp.json() == {"error": "Insufficient permissions"}


def test_create_batch_missing_fields(client, seed_users):
    headers = auth_headers(client, "admin")
    resp = client.post("/api/batches", json={"name": "Incomplete"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Required fields missing"


def test_create_batch_invalid_status(client, seed_users):
    headers = auth_headers(client, "admin")
    resp = client.post(
        "/api/batches",
        json={"name": "Odd", "duration": "1 week", "start_date": "2026-03-01", "status": "archived"},
        headers=headers,
    )
    assert resp.status_code == 400


def test_enroll_success_and_my_batches(client, seed_users, seed_batch):
    headers = auth_headers(client, "student1")
    resp = client.post(f"/api/batches/{seed_batch.id}/enroll", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Enrolled successfully"}

    mine = client.get("/api/my-batches", headers=headers).json()
    assert [b["id"] for b in mine] == [seed_batch.id]
    assert mine[0]["participant_count"] == 1


def test_enroll_twice_already_enrolled(client, seed_users, seed_batch):
    headers = auth_headers(client, "student1")
    assert client.post(f"/api/batches/{seed_batch.id}/enroll", headers=headers).status_code == 200
    resp = client.post(f"/api/batches/{seed_batch.id}/enroll", headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Already enrolled"}


def test_enroll_unknown_batch(client, seed_users):
    headers = auth_headers(client, "student1")
    resp = client.post("/api/batches/9999/enroll", headers=headers)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Batch not found"}


def test_enroll_capacity_boundary(client, db, seed_users):
    batch = _make_batch(db, max_participants=2)
    db.add(Enrollment(user_id=seed_users["student2"].id, batch_id=batch.id))
    db.commit()

    # max - 1 상태에서는 등록되어 정원이 찬다.
    resp = client.post(f"/api/batches/{batch.id}/enroll", headers=auth_headers(client, "student1"))
    assert resp.status_code == 200
    assert db.query(Enrollment).filter(Enrollment.batch_id == batch.id).count() == 2

    resp = client.post(f"/api/batches/{batch.id}/enroll", headers=auth_headers(client, "teacher1"))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Batch is full"}
    assert db.query(Enrollment).filter(Enrollment.batch_id == batch.id).count() == 2


def test_full_batch_reported_before_duplicate(client, db, seed_users):
    batch = _make_batch(db, max_participants=1)
    db.add(Enrollment(user_id=seed_users["student"].id, batch_id=batch.id))
    db.commit()

    resp = client.post(f"/api/batches/{batch.id}/enroll", headers=auth_headers(client, "student1"))
    assert resp.status_code == 400
    assert resp.json()["error"] == "Batch is full"


def test_participants_ordered_by_name(client, db, seed_users, seed_batch):
    extra = User(username="aaron", email="aaron@training.com", password=hash_password("x"),
                 full_name="Aaron Choi", role="student")
    db.add(extra)
    db.commit()
    for user in (seed_users["student"], extra, seed_users["student2"]):
        db.add(Enrollment(user_id=user.id, batch_id=seed_batch.id))
    db.commit()

    headers = auth_headers(client, "teacher1")
    resp = client.get(f"/api/batches/{seed_batch.id}/participants", headers=headers)
    assert resp.status_code == 200
    names = [p["full_name"] for p in resp.json()]
    assert names == ["Aaron Choi", "Student Lee", "Student Park"]
    assert set(resp.json()[0]) == {"id", "username", "full_name", "email", "enrolled_at"}


def test_participants_unknown_batch(client, seed_users):
    headers = auth_headers(client, "teacher1")
    resp = client.get("/api/batches/4242/participants", headers=headers)
    assert resp.status_code == 404


def test_concurrent_enrollments_respect_capacity(client, db):
    batch = _make_batch(db, max_participants=3)
    students = [
        User(username=f"rush{i}", email=f"rush{i}@training.com", password="x",
             full_name=f"Rush Student {i}", role="student")
        for i in range(12)
    ]
    db.add_all(students)
    db.commit()
    tokens = [create_access_token(s) for s in students]

    def enroll(token):
        return client.post(
            f"/api/batches/{batch.id}/enroll",
            headers={"Authorization": f"Bearer {token}"},
        ).status_code

    with ThreadPoolExecutor(max_workers=12) as pool:
        codes = list(pool.map(enroll, tokens))

    assert set(codes) <= {200, 400}
    enrolled = db.query(Enrollment).filter(Enrollment.batch_id == batch.id).count()
    assert enrolled <= 3
    assert codes.count(200) == enrolled


def test_enroll_with_deleted_user_is_not_reported_as_duplicate(db, seed_users, seed_batch):
    user = seed_users["student2"]
    token = create_access_token(user)
    db.delete(user)
    db.commit()

    client = TestClient(app, raise_server_exceptions=False)
    resp = client.post(
        f"/api/batches/{seed_batch.id}/enroll",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}
    assert db.query(Enrollment).count() == 0
