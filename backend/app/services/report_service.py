"""Report Service 도메인 서비스 레이어입니다. 일일 보고서 제출(upsert)과 조회를 담당합니다."""

import logging
import math
from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import DuplicateReport, NotEnrolled, ValidationError
from app.models.batch import Batch
from app.models.report import Report
from app.models.user import User
from app.schemas.report import ReportSubmit
from app.services.enrollment_service import is_enrolled
from app.utils.permissions import can_view_all_reports

logger = logging.getLogger(__name__)

REPORT_KEY = ("user_id", "batch_id", "report_date")
UPDATABLE_FIELDS = ("tasks_completed", "challenges", "hours_worked", "notes", "updated_at")


def _dialect_upsert(dialect_name: str, values: dict):
    if dialect_name in ("sqlite", "postgresql"):
        if dialect_name == "sqlite":
            from sqlalchemy.dialects.sqlite import insert as dialect_insert
        else:
            from sqlalchemy.dialects.postgresql import insert as dialect_insert
        stmt = dialect_insert(Report).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=list(REPORT_KEY),
            set_={field: stmt.excluded[field] for field in UPDATABLE_FIELDS},
        )
    if dialect_name in ("mysql", "mariadb"):
        from sqlalchemy.dialects.mysql import insert as dialect_insert
        stmt = dialect_insert(Report).values(**values)
        return stmt.on_duplicate_key_update(
            **{field: stmt.inserted[field] for field in UPDATABLE_FIELDS}
        )
    return None


def _find_report(db: Session, user_id: int, batch_id: int, report_date: date) -> Optional[Report]:
    return db.query(Report).filter(
        Report.user_id == user_id,
        Report.batch_id == batch_id,
        Report.report_date == report_date,
    ).first()


def submit_report(db: Session, user_id: int, data: ReportSubmit) -> Report:
    if not math.isfinite(data.hours_worked) or data.hours_worked < 0:
        raise ValidationError("hours_worked must be a non-negative number")
    if not is_enrolled(db, user_id, data.batch_id):
        raise NotEnrolled()

    now = datetime.now(timezone.utc)
    values = {
        "user_id": user_id,
        "batch_id": data.batch_id,
        "report_date": data.report_date,
        "tasks_completed": data.tasks_completed,
        "challenges": data.challenges,
        "hours_worked": data.hours_worked,
        "notes": data.notes,
        "created_at": now,
        "updated_at": now,
    }

    stmt = _dialect_upsert(db.get_bind().dialect.name, values)
    if stmt is not None:
        db.execute(stmt)
    else:
        existing = _find_report(db, user_id, data.batch_id, data.report_date)
        if existing:
            for field in UPDATABLE_FIELDS:
                setattr(existing, field, values[field])
        else:
            db.add(Report(**values))
    try:
        db.commit()
    except IntegrityError:
        # 비원자적 경로에서 동시 제출이 먼저 삽입한 경우
        db.rollback()
        raise DuplicateReport()

    # upsert 문은 ORM 식별자 맵을 거치지 않으므로 최신 행을 다시 읽는다.
    db.expire_all()
    report = _find_report(db, user_id, data.batch_id, data.report_date)
    logger.info(
        "report upserted id=%s user=%s batch=%s date=%s",
        report.id, user_id, data.batch_id, data.report_date,
    )
    return report


def query_reports(
    db: Session,
    current_user,
    batch_id: Optional[int] = None,
    user_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: Optional[int] = None,
) -> List[dict]:
    if limit is None:
        limit = settings.REPORT_QUERY_DEFAULT_LIMIT
    if limit < 1:
        raise ValidationError("limit must be at least 1")
    limit = min(limit, settings.REPORT_QUERY_MAX_LIMIT)

    query = (
        db.query(
            Report,
            User.full_name.label("user_name"),
            User.username.label("username"),
            Batch.name.label("batch_name"),
        )
        .join(User, User.id == Report.user_id)
        .join(Batch, Batch.id == Report.batch_id)
    )

    # 학생은 user_id 필터와 무관하게 본인 보고서만 조회한다.
    if not can_view_all_reports(current_user):
        query = query.filter(Report.user_id == current_user.id)
    elif user_id is not None:
        query = query.filter(Report.user_id == user_id)

    if batch_id is not None:
        query = query.filter(Report.batch_id == batch_id)
    if start_date is not None:
        query = query.filter(Report.report_date >= start_date)
    if end_date is not None:
        query = query.filter(Report.report_date <= end_date)

    rows = (
        query.order_by(Report.report_date.desc(), Report.created_at.desc(), Report.id.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": report.id,
            "user_id": report.user_id,
            "batch_id": report.batch_id,
            "report_date": report.report_date,
            "tasks_completed": report.tasks_completed,
            "challenges": report.challenges,
            "hours_worked": report.hours_worked,
            "notes": report.notes,
            "created_at": report.created_at,
            "updated_at": report.updated_at,
            "user_name": user_name,
            "username": username,
            "batch_name": batch_name,
        }
        for report, user_name, username, batch_name in rows
    ]
