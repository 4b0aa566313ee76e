"""Enrollment Service 도메인 서비스 레이어입니다. 정원/중복 제약을 지키며 수강 등록을 처리합니다."""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, insert, literal, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import AlreadyEnrolled, BatchFull, NotFound
from app.models.batch import Batch
from app.models.enrollment import Enrollment

logger = logging.getLogger(__name__)


def is_enrolled(db: Session, user_id: int, batch_id: int) -> bool:
    return db.query(Enrollment.id).filter(
        Enrollment.user_id == user_id,
        Enrollment.batch_id == batch_id,
    ).first() is not None


def enroll(db: Session, user_id: int, batch_id: int) -> Enrollment:
    # FOR UPDATE를 지원하는 DB에서는 같은 차수의 동시 등록을 직렬화한다. SQLite에서는 무시된다.
    batch = db.query(Batch).filter(Batch.id == batch_id).with_for_update().first()
    if not batch:
        raise NotFound("Batch not found")

    current_count = (
        select(func.count(Enrollment.id))
        .where(Enrollment.batch_id == batch_id)
        .correlate(None)
        .scalar_subquery()
    )
    # 정원 검사와 삽입을 한 문장으로 묶어 검사 후 삽입 사이의 경쟁을 없앤다.
    stmt = insert(Enrollment).from_select(
        ["user_id", "batch_id", "enrolled_at"],
        select(literal(user_id), Batch.id, literal(datetime.now(timezone.utc)))
        .where(Batch.id == batch_id, current_count < Batch.max_participants),
    )
    try:
        result = db.execute(stmt)
        if result.rowcount == 0:
            db.rollback()
            logger.info("enroll rejected: batch=%s full (max=%s) user=%s", batch_id, batch.max_participants, user_id)
            raise BatchFull()
        db.commit()
    except IntegrityError:
        db.rollback()
        # 유니크 제약 위반만 중복 등록이다. 사용자 FK 위반 등은 그대로 전파한다.
        if not is_enrolled(db, user_id, batch_id):
            logger.error("enroll failed: user=%s batch=%s integrity error", user_id, batch_id)
            raise
        logger.info("enroll rejected: user=%s already in batch=%s", user_id, batch_id)
        raise AlreadyEnrolled()

    enrollment = db.query(Enrollment).filter(
        Enrollment.user_id == user_id,
        Enrollment.batch_id == batch_id,
    ).one()
    logger.info("user=%s enrolled in batch=%s", user_id, batch_id)
    return enrollment
