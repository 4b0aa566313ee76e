"""Initialize the database - creates all tables."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings
from app.database import Database
import app.models  # noqa: F401 - registers all models


def init_db():
    print("Creating all database tables...")
    database = Database(settings.DATABASE_URL)
    database.create_all()
    database.dispose()
    print("Database initialized successfully.")


if __name__ == "__main__":
    init_db()
