"""Export Service 도메인 서비스 레이어입니다. 관리자용 CSV/JSON 데이터 내보내기를 만듭니다."""

import csv
import io
import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.orm import Session

from app.database import Database
from app.models.batch import Batch
from app.models.enrollment import Enrollment
from app.models.report import Report
from app.models.user import User

logger = logging.getLogger(__name__)

USER_CSV_HEADER = ["ID", "Username", "Email", "Full Name", "Role", "Created At"]
REPORT_CSV_HEADER = [
    "ID", "Date", "Student", "Email", "Batch", "Tasks", "Challenges", "Hours", "Notes", "Submitted",
]


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def _write_csv(header: List[str], rows: List[list]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return output.getvalue()


def _user_rows(db: Session) -> List[dict]:
    users = db.query(User).order_by(User.id.asc()).all()
    # 비밀번호 해시는 내보내지 않는다.
    return [
        {
            "id": u.id,
            "username": u.username,
            "email": u.email,
            "full_name": u.full_name,
            "role": u.role,
            "created_at": _iso(u.created_at),
        }
        for u in users
    ]


def _batch_rows(db: Session) -> List[dict]:
    return [
        {
            "id": b.id,
            "name": b.name,
            "instructor_id": b.instructor_id,
            "duration": b.duration,
            "start_date": _iso(b.start_date),
            "status": b.status,
            "max_participants": b.max_participants,
            "created_at": _iso(b.created_at),
        }
        for b in db.query(Batch).order_by(Batch.id.asc()).all()
    ]


def _enrollment_rows(db: Session) -> List[dict]:
    rows = (
        db.query(Enrollment, User.full_name, Batch.name)
        .join(User, User.id == Enrollment.user_id)
        .join(Batch, Batch.id == Enrollment.batch_id)
        .order_by(Enrollment.id.asc())
        .all()
    )
    return [
        {
            "id": e.id,
            "user_id": e.user_id,
            "batch_id": e.batch_id,
            "enrolled_at": _iso(e.enrolled_at),
            "student_name": student_name,
            "batch_name": batch_name,
        }
        for e, student_name, batch_name in rows
    ]


def _report_rows(db: Session) -> List[dict]:
    rows = (
        db.query(Report, User.full_name, Batch.name)
        .join(User, User.id == Report.user_id)
        .join(Batch, Batch.id == Report.batch_id)
        .order_by(Report.id.asc())
        .all()
    )
    return [
        {
            "id": r.id,
            "user_id": r.user_id,
            "batch_id": r.batch_id,
            "report_date": _iso(r.report_date),
            "tasks_completed": r.tasks_completed,
            "challenges": r.challenges,
            "hours_worked": r.hours_worked,
            "notes": r.notes,
            "created_at": _iso(r.created_at),
            "updated_at": _iso(r.updated_at),
            "student_name": student_name,
            "batch_name": batch_name,
        }
        for r, student_name, batch_name in rows
    ]


def export_users_csv(db: Session) -> str:
    rows = [
        [u["id"], u["username"], u["email"], u["full_name"], u["role"], u["created_at"] or ""]
        for u in _user_rows(db)
    ]
    logger.info("exported %s users as csv", len(rows))
    return _write_csv(USER_CSV_HEADER, rows)


def export_reports_csv(db: Session) -> str:
    rows = (
        db.query(Report, User.full_name, User.email, Batch.name)
        .join(User, User.id == Report.user_id)
        .join(Batch, Batch.id == Report.batch_id)
        .order_by(Report.report_date.desc(), Report.id.desc())
        .all()
    )
    csv_rows = [
        [
            r.id,
            _iso(r.report_date),
            student_name,
            student_email,
            batch_name,
            r.tasks_completed,
            r.challenges or "",
            r.hours_worked,
            r.notes or "",
            _iso(r.created_at) or "",
        ]
        for r, student_name, student_email, batch_name in rows
    ]
    logger.info("exported %s reports as csv", len(csv_rows))
    return _write_csv(REPORT_CSV_HEADER, csv_rows)


def export_all(database: Database) -> dict:
    results = database.gather({
        "users": _user_rows,
        "batches": _batch_rows,
        "enrollments": _enrollment_rows,
        "reports": _report_rows,
    })
    results.update({
        "exportedAt": datetime.now(timezone.utc).isoformat(),
        "totalUsers": len(results["users"]),
        "totalBatches": len(results["batches"]),
        "totalEnrollments": len(results["enrollments"]),
        "totalReports": len(results["reports"]),
    })
    logger.info(
        "exported all data: users=%s batches=%s enrollments=%s reports=%s",
        results["totalUsers"], results["totalBatches"], results["totalEnrollments"], results["totalReports"],
    )
    return results
