"""DB에 저장된 사용자/차수/수강/보고서 현황을 터미널에 출력합니다."""

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import func  # noqa: E402

from app.config import settings  # noqa: E402
from app.database import Database  # noqa: E402
from app.models.batch import Batch  # noqa: E402
from app.models.enrollment import Enrollment  # noqa: E402
from app.models.report import Report  # noqa: E402
from app.models.user import User  # noqa: E402

RULE = "-" * 80


def print_users(db):
    users = db.query(User).order_by(User.id.asc()).all()
    print(f"USERS ({len(users)} total)")
    print(RULE)
    for user in users:
        print(f"ID: {user.id} | Username: {user.username} | Name: {user.full_name}")
        print(f"   Role: {user.role} | Email: {user.email}")
        print(f"   Created: {user.created_at}")
    print()


def print_batches(db):
    enrolled = (
        db.query(Enrollment.batch_id, func.count(Enrollment.id).label("count"))
        .group_by(Enrollment.batch_id)
        .subquery()
    )
    rows = (
        db.query(Batch, User.full_name, func.coalesce(enrolled.c.count, 0))
        .outerjoin(User, User.id == Batch.instructor_id)
        .outerjoin(enrolled, enrolled.c.batch_id == Batch.id)
        .order_by(Batch.id.asc())
        .all()
    )
    print(f"BATCHES ({len(rows)} total)")
    print(RULE)
    for batch, instructor_name, count in rows:
        print(f"ID: {batch.id} | {batch.name}")
        print(f"   Instructor: {instructor_name or 'TBA'}")
        print(f"   Duration: {batch.duration} | Status: {batch.status}")
        print(f"   Start Date: {batch.start_date}")
        print(f"   Participants: {count} / {batch.max_participants}")
    print()


def print_enrollments(db):
    rows = (
        db.query(User.full_name, Batch.name, Enrollment.enrolled_at)
        .join(User, User.id == Enrollment.user_id)
        .join(Batch, Batch.id == Enrollment.batch_id)
        .order_by(Enrollment.enrolled_at.asc())
        .all()
    )
    print(f"ENROLLMENTS ({len(rows)} total)")
    print(RULE)
    for student, batch_name, enrolled_at in rows:
        print(f"{student} -> {batch_name} (enrolled {enrolled_at})")
    print()


def print_reports(db, limit: int):
    total = db.query(func.count(Report.id)).scalar() or 0
    rows = (
        db.query(Report, User.full_name, Batch.name)
        .join(User, User.id == Report.user_id)
        .join(Batch, Batch.id == Report.batch_id)
        .order_by(Report.report_date.desc(), Report.id.desc())
        .limit(limit)
        .all()
    )
    print(f"DAILY REPORTS ({total} total, showing {len(rows)})")
    print(RULE)
    for report, student, batch_name in rows:
        print(f"{report.report_date} | {student} | {batch_name} | {report.hours_worked}h")
        print(f"   Tasks: {report.tasks_completed}")
        if report.challenges:
            print(f"   Challenges: {report.challenges}")
    print()


def main():
    parser = argparse.ArgumentParser(description="Print the training portal database contents")
    parser.add_argument("--database-url", default=settings.DATABASE_URL)
    parser.add_argument("--reports", type=int, default=10, help="Number of recent reports to show")
    args = parser.parse_args()

    database = Database(args.database_url)
    db = database.SessionLocal()
    try:
        print("=" * 80)
        print("DATABASE CONTENTS - Training Portal")
        print("=" * 80)
        print()
        print_users(db)
        print_batches(db)
        print_enrollments(db)
        print_reports(db, args.reports)
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    main()
