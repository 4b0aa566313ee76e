"""Stats Service 도메인 서비스 레이어입니다. 서로 독립적인 집계 쿼리를 동시에 실행해 합칩니다."""

from datetime import date, timedelta
from typing import Callable, Dict

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import Database
from app.models.batch import Batch
from app.models.enrollment import Enrollment
from app.models.report import Report
from app.models.user import User
from app.utils.permissions import STUDENT, TEACHER

RECENT_REPORT_DAYS = 7


def _count(model, *criteria) -> Callable[[Session], int]:
    def query(db: Session) -> int:
        return int(db.query(func.count(model.id)).filter(*criteria).scalar() or 0)
    return query


def _scalar(expr, default: float = 0.0) -> Callable[[Session], float]:
    def query(db: Session) -> float:
        value = db.query(expr).scalar()
        return float(value) if value is not None else default
    return query


def _global_queries() -> Dict[str, Callable[[Session], object]]:
    return {
        "total_batches": _count(Batch),
        "active_batches": _count(Batch, Batch.status == "active"),
        "total_enrollments": _count(Enrollment),
        "total_reports": _count(Report),
    }


def get_global_stats(database: Database) -> dict:
    return database.gather(_global_queries())


def get_admin_stats(database: Database, today: date | None = None) -> dict:
    since = (today or date.today()) - timedelta(days=RECENT_REPORT_DAYS)
    queries = _global_queries()
    queries.update({
        "total_users": _count(User),
        "student_count": _count(User, User.role == STUDENT),
        "teacher_count": _count(User, User.role == TEACHER),
        "total_hours": _scalar(func.sum(Report.hours_worked)),
        "avg_hours": _scalar(func.avg(Report.hours_worked)),
        "recent_reports": _count(Report, Report.report_date >= since),
    })
    return database.gather(queries)
