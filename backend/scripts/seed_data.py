"""Seed the database with demo data."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date, timedelta
from teamspace.database import SessionLocal, engine, Base
import teamspace.models  # noqa: F401

from teamspace.models.user import User
from teamspace.models.project import Project, ProjectMember
from teamspace.models.task import Task, Comment
from teamspace.models.discussion import Discussion, DiscussionParticipant, Message
from teamspace.services.auth_service import hash_password
from teamspace.utils.codename import generate_codename
from teamspace.utils.helpers import utcnow

DEMO_PASSWORD = "password123"


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        password_hash = hash_password(DEMO_PASSWORD)
        users = [
            User(name="Alice Admin", email="admin@teamspace.dev", role="admin", department="Operations",
                 location="Seoul", password_hash=password_hash),
            User(name="Bob Builder", email="bob@teamspace.dev", department="Engineering",
                 location="Busan", password_hash=password_hash),
            User(name="Carol Chen", email="carol@teamspace.dev", department="Design",
                 location="Remote", password_hash=password_hash),
            User(name="Dan Viewer", email="dan@teamspace.dev", role="viewer", department="Marketing",
                 password_hash=password_hash),
        ]
        db.add_all(users)
        db.flush()
        admin, bob, carol, dan = users

        today = date.today()
        project = Project(
            name="Website Redesign",
            codename=generate_codename(),
            description="Refresh the marketing site and move it to the new design system.",
            start_date=today,
            end_date=today + timedelta(days=90),
            color="#0ea5e9",
            tags=["web", "design"],
            created_by=bob.user_id,
        )
        db.add(project)
        db.flush()

        db.add_all([
            ProjectMember(project_id=project.project_id, user_id=bob.user_id, role="admin"),
            ProjectMember(project_id=project.project_id, user_id=carol.user_id, role="member"),
            ProjectMember(project_id=project.project_id, user_id=dan.user_id, role="viewer"),
        ])

        now = utcnow()
        tasks = [
            Task(project_id=project.project_id, title="Audit existing pages", status="completed",
                 priority="medium", created_by=bob.user_id, assigned_to=bob.user_id,
                 estimated_hours=6, actual_hours=5, completed_at=now),
            Task(project_id=project.project_id, title="Design new landing page", status="in-progress",
                 priority="high", created_by=bob.user_id, assigned_to=carol.user_id,
                 due_date=now + timedelta(days=14), estimated_hours=16,
                 subtasks=[
                     {"title": "Wireframes", "completed": True, "created_at": now.isoformat()},
                     {"title": "Hi-fi mockups", "completed": False, "created_at": now.isoformat()},
                 ]),
            Task(project_id=project.project_id, title="Set up analytics", status="todo",
                 priority="low", created_by=carol.user_id, due_date=now + timedelta(days=30)),
        ]
        db.add_all(tasks)
        db.flush()
        tasks[1].dependencies = [tasks[0].task_id]

        db.add(Comment(task_id=tasks[1].task_id, author_id=bob.user_id,
                       content="Please share the wireframes before Friday."))

        discussion = Discussion(project_id=project.project_id, title="Kickoff notes",
                                created_by=bob.user_id, tags=["kickoff"], last_message_at=now,
                                message_count=1)
        discussion.participants.append(DiscussionParticipant(user_id=bob.user_id))
        db.add(discussion)
        db.flush()
        db.add(Message(discussion_id=discussion.discussion_id, author_id=bob.user_id,
                       content="Welcome aboard! Agenda is in the project description.",
                       mentions=[carol.user_id]))

        db.commit()
        print(f"Seeded {len(users)} users, 1 project, {len(tasks)} tasks, 1 discussion.")
        print(f"Login with any seeded e-mail and password '{DEMO_PASSWORD}'.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
