"""
Job Board Database Seeder

Creates demo accounts and a handful of jobs:
- One admin who owns every seeded job
- Two candidates, one of whom has already applied
"""

import sys
sys.path.insert(0, ".")

from datetime import datetime, timedelta

from app.db.session import SessionLocal, engine
from app.db.base import Base
from app.models import Application, Job, User
from app.core.security import get_password_hash


SEED_JOBS = [
    {
        "title": "Backend Engineer",
        "company": "Acme Corp",
        "location": "Berlin, Germany",
        "description": "Build and operate the REST APIs behind our hiring products.",
        "requirements": ["3+ years Python", "SQL", "REST API design"],
        "salary": "€65k - €80k",
        "type": "Full-time",
        "category": "Software Development",
    },
    {
        "title": "Frontend Developer",
        "company": "Globex",
        "location": "Remote",
        "description": "Own the React single-page client used by candidates and recruiters.",
        "requirements": ["React", "TypeScript", "Accessibility"],
        "salary": "$90k - $110k",
        "type": "Contract",
        "category": "Software Development",
    },
    {
        "title": "HR Intern",
        "company": "Initech",
        "location": "Austin, TX",
        "description": "Help the people team screen applications and schedule interviews.",
        "requirements": ["Communication", "Organisation"],
        "salary": "$20/hour",
        "type": "Internship",
        "category": "Human Resources",
    },
]


def seed_database():
    """Seed the database with demo data."""

    # Create all tables
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()

    try:
        # Check if already seeded
        existing_admin = db.query(User).filter(User.email == "admin@jobboard.dev").first()
        if existing_admin:
            print("Database already seeded. Skipping...")
            return

        print("Seeding database...")

        # 1. Create Admin User
        admin = User(
            name="Sarah Chen",
            email="admin@jobboard.dev",
            hashed_password=get_password_hash("admin123"),
            role="admin",
        )
        db.add(admin)

        # 2. Create Candidate Users
        john = User(
            name="John Doe",
            email="john.doe@example.com",
            hashed_password=get_password_hash("candidate123"),
            role="candidate",
        )
        jane = User(
            name="Jane Smith",
            email="jane.smith@example.com",
            hashed_password=get_password_hash("candidate123"),
            role="candidate",
        )
        db.add_all([john, jane])
        db.flush()  # Get IDs

        # 3. Create Jobs owned by the admin
        jobs = []
        for job_data in SEED_JOBS:
            job = Job(
                **job_data,
                posted_by_id=admin.id,
                deadline=datetime.utcnow() + timedelta(days=30),
            )
            db.add(job)
            jobs.append(job)
        db.flush()

        # 4. John has applied to the first job
        db.add(
            Application(
                job_id=jobs[0].id,
                candidate_id=john.id,
                resume="John Doe - Senior Software Engineer with 4 years of Python and FastAPI...",
                cover_letter="I have been building REST services for four years and would love to join.",
                status="reviewing",
            )
        )

        # Commit all changes
        db.commit()

        print("✅ Database seeded successfully!")
        print("\n📋 Created Users:")
        print("   - admin@jobboard.dev (password: admin123) [ADMIN]")
        print("   - john.doe@example.com (password: candidate123) [1 APPLICATION]")
        print("   - jane.smith@example.com (password: candidate123)")
        print(f"\n💼 Created {len(jobs)} jobs")

    except Exception as e:
        db.rollback()
        print(f"❌ Error seeding database: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
