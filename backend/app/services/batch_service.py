"""Batch Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.errors import NotFound
from app.models.batch import Batch
from app.models.enrollment import Enrollment
from app.models.user import User
from app.schemas.batch import BatchCreate

logger = logging.getLogger(__name__)

DEFAULT_MAX_PARTICIPANTS = 100


def _participant_count_subquery():
    return (
        select(func.count(Enrollment.id))
        .where(Enrollment.batch_id == Batch.id)
        .correlate(Batch)
        .scalar_subquery()
    )


def _batch_rows_query(db: Session):
    return (
        db.query(
            Batch,
            User.full_name.label("instructor_name"),
            _participant_count_subquery().label("participant_count"),
        )
        .outerjoin(User, User.id == Batch.instructor_id)
    )


def _to_dict(batch: Batch, instructor_name: Optional[str], participant_count: Optional[int]) -> dict:
    return {
        "id": batch.id,
        "name": batch.name,
        "instructor_id": batch.instructor_id,
        "duration": batch.duration,
        "start_date": batch.start_date,
        "status": batch.status,
        "max_participants": batch.max_participants,
        "created_at": batch.created_at,
        "instructor_name": instructor_name,
        "participant_count": int(participant_count or 0),
    }


def get_batches(db: Session, status: Optional[str] = None) -> List[dict]:
    query = _batch_rows_query(db)
    if status and status != "all":
        query = query.filter(Batch.status == status)
    rows = query.order_by(Batch.start_date.desc(), Batch.id.desc()).all()
    return [_to_dict(batch, name, count) for batch, name, count in rows]


def get_my_batches(db: Session, user_id: int) -> List[dict]:
    rows = (
        _batch_rows_query(db)
        .join(Enrollment, Enrollment.batch_id == Batch.id)
        .filter(Enrollment.user_id == user_id)
        .order_by(Batch.start_date.desc(), Batch.id.desc())
        .all()
    )
    return [_to_dict(batch, name, count) for batch, name, count in rows]


def get_batch(db: Session, batch_id: int) -> Batch:
    batch = db.query(Batch).filter(Batch.id == batch_id).first()
    if not batch:
        raise NotFound("Batch not found")
    return batch


def create_batch(db: Session, data: BatchCreate, instructor_id: int) -> Batch:
    payload = data.model_dump()
    if not payload.get("max_participants"):
        payload["max_participants"] = DEFAULT_MAX_PARTICIPANTS
    batch = Batch(**payload, instructor_id=instructor_id)
    db.add(batch)
    db.commit()
    db.refresh(batch)
    logger.info("batch created id=%s name=%s by user=%s", batch.id, batch.name, instructor_id)
    return batch


def get_participants(db: Session, batch_id: int) -> List[dict]:
    get_batch(db, batch_id)
    rows = (
        db.query(User.id, User.username, User.full_name, User.email, Enrollment.enrolled_at)
        .join(Enrollment, Enrollment.user_id == User.id)
        .filter(Enrollment.batch_id == batch_id)
        .order_by(User.full_name.asc())
        .all()
    )
    return [
        {
            "id": row.id,
            "username": row.username,
            "full_name": row.full_name,
            "email": row.email,
            "enrolled_at": row.enrolled_at,
        }
        for row in rows
    ]
