"""Seed the database with demo accounts, sample batches and a week of reports."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date, timedelta
from app.config import settings
from app.database import Database
import app.models  # noqa: F401

from app.models.user import User
from app.models.batch import Batch
from app.models.enrollment import Enrollment
from app.models.report import Report
from app.services.auth_service import hash_password
from app.services.bootstrap_service import bootstrap

DEMO_PASSWORD = "password123"


def seed():
    database = Database(settings.DATABASE_URL)
    database.create_all()
    db = database.SessionLocal()
    try:
        bootstrap(db, settings)
        if db.query(User).filter(User.username == "student1").first():
            print("Database already seeded. Skipping.")
            return

        hashed = hash_password(DEMO_PASSWORD)
        users = [
            User(username="teacher1", email="teacher1@training.com", password=hashed,
                 full_name="Teacher Kim", role="teacher"),
            User(username="student1", email="student1@training.com", password=hashed,
                 full_name="Student Lee", role="student"),
            User(username="student2", email="student2@training.com", password=hashed,
                 full_name="Student Park", role="student"),
        ]
        db.add_all(users)
        db.flush()

        batches = db.query(Batch).filter(Batch.status == "active").order_by(Batch.id.asc()).limit(2).all()
        enrollments = [
            Enrollment(user_id=student.id, batch_id=batch.id)
            for student in users[1:]
            for batch in batches
        ]
        db.add_all(enrollments)
        db.flush()

        reports = []
        if batches:
            start = date.today() - timedelta(days=6)
            for offset in range(7):
                reports.append(Report(
                    user_id=users[1].id,
                    batch_id=batches[0].id,
                    report_date=start + timedelta(days=offset),
                    tasks_completed="Completed the daily exercises",
                    challenges="Debugging async callbacks" if offset % 2 else None,
                    hours_worked=5 + offset % 3,
                ))
        db.add_all(reports)

        db.commit()
        print("Seed data inserted successfully.")
        print(f"  Users: {len(users)}")
        print(f"  Enrollments: {len(enrollments)}")
        print(f"  Reports: {len(reports)}")
        print()
        print("Test login credentials:")
        print(f"  username={settings.ADMIN_USERNAME}  role=admin")
        for u in users:
            print(f"  username={u.username}  password={DEMO_PASSWORD}  role={u.role}  name={u.full_name}")

    except Exception as e:
        db.rollback()
        raise e
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    seed()
