"""초기 관리자 계정과 샘플 차수를 준비하는 부트스트랩 로직입니다."""

import logging
from datetime import date

from sqlalchemy.orm import Session

from app.config import Settings
from app.models.batch import Batch
from app.models.user import User
from app.services.auth_service import hash_password
from app.utils.permissions import ADMIN

logger = logging.getLogger(__name__)

# (name, duration, start_date, status, max_participants)
SAMPLE_BATCHES = [
    ("Web Development Fundamentals", "8 weeks", date(2026, 1, 15), "active", 30),
    ("Advanced React & Node.js", "10 weeks", date(2026, 1, 8), "active", 25),
    ("Data Science with Python", "12 weeks", date(2026, 1, 22), "active", 20),
    ("UI/UX Design Mastery", "6 weeks", date(2026, 1, 5), "active", 30),
    ("Cloud Computing & DevOps", "8 weeks", date(2026, 1, 20), "active", 20),
    ("Mobile App Development", "10 weeks", date(2026, 1, 10), "active", 25),
    ("Machine Learning Basics", "12 weeks", date(2026, 2, 15), "upcoming", 20),
    ("Cybersecurity Essentials", "8 weeks", date(2026, 2, 20), "upcoming", 25),
]


def ensure_admin(db: Session, settings: Settings) -> User:
    admin = db.query(User).filter(User.username == settings.ADMIN_USERNAME).first()
    if admin:
        return admin
    admin = User(
        username=settings.ADMIN_USERNAME,
        email=settings.ADMIN_EMAIL,
        password=hash_password(settings.ADMIN_PASSWORD),
        full_name=settings.ADMIN_FULL_NAME,
        role=ADMIN,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("default admin created: username=%s", admin.username)
    return admin


def ensure_sample_batches(db: Session, instructor: User) -> int:
    if db.query(Batch.id).first() is not None:
        return 0
    db.add_all([
        Batch(
            name=name,
            instructor_id=instructor.id,
            duration=duration,
            start_date=start_date,
            status=status,
            max_participants=max_participants,
        )
        for name, duration, start_date, status, max_participants in SAMPLE_BATCHES
    ])
    db.commit()
    logger.info("inserted %s sample batches", len(SAMPLE_BATCHES))
    return len(SAMPLE_BATCHES)


def bootstrap(db: Session, settings: Settings) -> None:
    admin = ensure_admin(db, settings)
    if settings.SEED_SAMPLE_BATCHES:
        ensure_sample_batches(db, admin)
