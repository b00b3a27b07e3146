"""Initialize the database - creates all TeamSpace tables."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from teamspace.database import engine, Base
import teamspace.models  # noqa: F401 - registers all models


def init_db(drop: bool = False):
    if drop:
        print("Dropping all database tables...")
        Base.metadata.drop_all(bind=engine)
    print("Creating all database tables...")
    Base.metadata.create_all(bind=engine)
    print("Database initialized successfully.")


if __name__ == "__main__":
    init_db(drop="--drop" in sys.argv[1:])
