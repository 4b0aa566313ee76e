"""Test Reports 제출(upsert)과 조회 범위 제한을 검증하는 자동화 테스트입니다."""

from concurrent.futures import ThreadPoolExecutor
from datetime import date

from app.models.enrollment import Enrollment
from app.models.report import Report
from tests.conftest import auth_headers


def _report_payload(batch_id, **overrides):
    payload = {
        "batch_id": batch_id,
        "report_date": "2026-01-20",
        "tasks_completed": "Finished the HTML module",
        "challenges": "CSS grid layouts",
        "hours_worked": 6,
        "notes": "Good day",
    }
    payload.update(overrides)
    return payload


def test_submit_report(client, db, enrolled_student, seed_batch):
    headers = auth_headers(client, "student1")
    resp = client.post("/api/reports", json=_report_payload(seed_batch.id), headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Report submitted successfully"
    report = db.query(Report).one()
    assert resp.json()["reportId"] == report.id
    assert report.hours_worked == 6
    assert report.report_date == date(2026, 1, 20)


def test_resubmission_updates_single_row(client, db, enrolled_student, seed_batch):
    headers = auth_headers(client, "student1")
    first = client.post("/api/reports", json=_report_payload(seed_batch.id), headers=headers)
    assert first.status_code == 200
    original = db.query(Report).one()
    original_id = original.id
    original_created = original.created_at
    original_updated = original.updated_at

    second = client.post(
        "/api/reports",
        json=_report_payload(seed_batch.id, tasks_completed="Rewrote the layout", hours_worked=7.5,
                             challenges=None, notes=None),
        headers=headers,
    )
    assert second.status_code == 200
    assert second.json()["reportId"] == original_id

    db.expire_all()
    rows = db.query(Report).all()
    assert len(rows) == 1
    row = rows[0]
    assert row.id == original_id
    assert row.tasks_completed == "Rewrote the layout"
    assert row.hours_worked == 7.5
    assert row.challenges is None
    assert row.notes is None
    assert row.created_at == original_created
    assert row.updated_at > original_updated


def test_submit_report_not_enrolled(client, seed_users, seed_batch):
    headers = auth_headers(client, "student2")
    resp = client.post("/api/reports", json=_report_payload(seed_batch.id), headers=headers)
    assert resp.status_code == 403
    assert resp.json() == {"error": "Not enrolled in this batch"}


def test_submit_report_requires_tasks_and_hours(client, enrolled_student, seed_batch):
    headers = auth_headers(client, "student1")
    payload = _report_payload(seed_batch.id)
    del payload["hours_worked"]
    resp = client.post("/api/reports", json=payload, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Required fields missing"

    resp = client.post("/api/reports", json=_report_payload(seed_batch.id, tasks_completed=""), headers=headers)
    assert resp.status_code == 400


def test_submit_report_negative_hours(client, enrolled_student, seed_batch):
    headers = auth_headers(client, "student1")
    resp = client.post("/api/reports", json=_report_payload(seed_batch.id, hours_worked=-1), headers=headers)
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_zero_hours_is_allowed(client, enrolled_student, seed_batch):
    headers = auth_headers(client, "student1")
    resp = client.post("/api/reports", json=_report_payload(seed_batch.id, hours_worked=0), headers=headers)
    assert resp.status_code == 200


def _seed_reports(db, user_id, batch_id, dates):
    for day in dates:
        db.add(Report(user_id=user_id, batch_id=batch_id, report_date=day,
                      tasks_completed="work", hours_worked=5))
    db.commit()


def test_student_cannot_read_other_users_reports(client, db, seed_users, seed_batch, enrolled_student):
    other = seed_users["student2"]
    db.add(Enrollment(user_id=other.id, batch_id=seed_batch.id))
    db.commit()
    _seed_reports(db, enrolled_student.id, seed_batch.id, [date(2026, 1, 16)])
    _seed_reports(db, other.id, seed_batch.id, [date(2026, 1, 16), date(2026, 1, 17)])

    headers = auth_headers(client, "student1")
    resp = client.get("/api/reports", params={"user_id": other.id}, headers=headers)
    assert resp.status_code == 200
    rows = resp.json()
    assert len(rows) == 1
    assert {r["user_id"] for r in rows} == {enrolled_student.id}
    assert rows[0]["username"] == "student1"
    assert rows[0]["batch_name"] == "Web Development Fundamentals"


def test_teacher_filters_by_user(client, db, seed_users, seed_batch, enrolled_student):
    other = seed_users["student2"]
    db.add(Enrollment(user_id=other.id, batch_id=seed_batch.id))
    db.commit()
    _seed_reports(db, enrolled_student.id, seed_batch.id, [date(2026, 1, 16)])
    _seed_reports(db, other.id, seed_batch.id, [date(2026, 1, 16), date(2026, 1, 17)])

    headers = auth_headers(client, "teacher1")
    all_rows = client.get("/api/reports", headers=headers).json()
    assert len(all_rows) == 3

    filtered = client.get("/api/reports", params={"user_id": other.id}, headers=headers).json()
    assert [r["report_date"] for r in filtered] == ["2026-01-17", "2026-01-16"]
    assert all(r["user_name"] == "Student Park" for r in filtered)


def test_reports_date_range_and_limit(client, db, enrolled_student, seed_batch):
    _seed_reports(db, enrolled_student.id, seed_batch.id, [date(2026, 1, d) for d in range(15, 25)])
    headers = auth_headers(client, "student1")

    ranged = client.get(
        "/api/reports",
        params={"start_date": "2026-01-18", "end_date": "2026-01-20"},
        headers=headers,
    ).json()
    assert [r["report_date"] for r in ranged] == ["2026-01-20", "2026-01-19", "2026-01-18"]

    limited = client.get("/api/reports", params={"limit": 2}, headers=headers).json()
    assert [r["report_date"] for r in limited] == ["2026-01-24", "2026-01-23"]


def test_reports_limit_must_be_positive(client, enrolled_student):
    headers = auth_headers(client, "student1")
    resp = client.get("/api/reports", params={"limit": 0}, headers=headers)
    assert resp.status_code == 400


def test_reports_limit_is_capped(client, db, enrolled_student, seed_batch, monkeypatch):
    from app.config import settings

    _seed_reports(db, enrolled_student.id, seed_batch.id, [date(2026, 1, d) for d in range(15, 20)])
    monkeypatch.setattr(settings, "REPORT_QUERY_MAX_LIMIT", 3)

    headers = auth_headers(client, "student1")
    resp = client.get("/api/reports", params={"limit": 10_000}, headers=headers)
    assert resp.status_code == 200
    assert len(resp.json()) == 3


def test_submit_report_rejects_non_finite_hours(client, db, enrolled_student, seed_batch):
    headers = auth_headers(client, "student1")
    body = (
        '{"batch_id": %d, "report_date": "2026-01-20", '
        '"tasks_completed": "Finished the HTML module", "hours_worked": 1e999}' % seed_batch.id
    )
    resp = client.post(
        "/api/reports",
        content=body,
        headers={**headers, "Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert "hours_worked" in resp.json()["error"]
    assert db.query(Report).count() == 0


def test_concurrent_submissions_keep_one_row(client, db, enrolled_student, seed_batch):
    headers = auth_headers(client, "student1")

    def submit(i):
        payload = _report_payload(seed_batch.id, tasks_completed=f"attempt {i}", hours_worked=i)
        return client.post("/api/reports", json=payload, headers=headers).status_code

    with ThreadPoolExecutor(max_workers=10) as pool:
        codes = list(pool.map(submit, range(10)))

    assert codes == [200] * 10
    db.expire_all()
    rows = db.query(Report).all()
    assert len(rows) == 1
    assert rows[0].tasks_completed.startswith("attempt ")
