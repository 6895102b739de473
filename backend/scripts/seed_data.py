"""Seed the database with demo batches, students, alumni and companies."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date, datetime, timezone
from app.database import SessionLocal, engine, Base
import app.models  # noqa: F401

from app.models.user import User
from app.models.batch import Batch
from app.models.company import Company
from app.services.batch_service import recount_students
from app.utils.security import hash_password

STUDENT_PASSWORD = "student123"


def _student(batch, **kwargs):
    skills = kwargs.pop("skills", [])
    user = User(
        role="student",
        batch_id=batch.batch_id,
        course=batch.course,
        department=batch.department,
        password_hash=hash_password(STUDENT_PASSWORD),
        **kwargs,
    )
    user.skills = skills
    return user


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        # Batches
        cs2020 = Batch(
            batch_name="CS-2020", year=2020, course="Computer Science", department="Engineering",
            start_date=date(2020, 8, 1), end_date=date(2024, 5, 31),
            is_completed=True, completed_date=datetime(2024, 5, 31, tzinfo=timezone.utc),
            description="Computer Science batch of 2020-2024",
        )
        cs2021 = Batch(
            batch_name="CS-2021", year=2021, course="Computer Science", department="Engineering",
            start_date=date(2021, 8, 1), end_date=date(2025, 5, 31),
            description="Computer Science batch of 2021-2025",
        )
        it2022 = Batch(
            batch_name="IT-2022", year=2022, course="Information Technology", department="Engineering",
            start_date=date(2022, 8, 1), end_date=date(2026, 5, 31),
            description="Information Technology batch of 2022-2026",
        )
        batches = [cs2020, cs2021, it2022]
        db.add_all(batches)
        db.flush()

        admin = User(
            name="Admin User", email="admin@campus.edu", role="admin", phone="+1234567890",
            password_hash=hash_password("admin123"),
        )
        db.add(admin)

        # Alumni of the completed batch
        alumni = [
            _student(cs2020, name="John Doe", email="john.doe@email.com", student_id="CS20001", year=4,
                     phone="+1234567891", is_alumni=True, job_role="Software Engineer", company="Google",
                     work_location="Mountain View, CA", salary=120000, experience="2 years",
                     skills=["JavaScript", "React", "Node.js", "Python"],
                     linkedin_profile="https://linkedin.com/in/johndoe",
                     github_profile="https://github.com/johndoe", current_status="employed"),
            _student(cs2020, name="Jane Smith", email="jane.smith@email.com", student_id="CS20002", year=4,
                     phone="+1234567892", is_alumni=True, job_role="Full Stack Developer", company="Microsoft",
                     work_location="Seattle, WA", salary=115000, experience="1.5 years",
                     skills=["C#", ".NET", "Angular", "SQL Server"],
                     linkedin_profile="https://linkedin.com/in/janesmith",
                     github_profile="https://github.com/janesmith", current_status="employed"),
            _student(cs2020, name="Mike Johnson", email="mike.johnson@email.com", student_id="CS20003", year=4,
                     phone="+1234567893", is_alumni=True, job_role="Data Scientist", company="Facebook",
                     work_location="Menlo Park, CA", salary=130000, experience="2 years",
                     skills=["Python", "Machine Learning", "TensorFlow", "SQL"],
                     linkedin_profile="https://linkedin.com/in/mikejohnson",
                     github_profile="https://github.com/mikejohnson", current_status="employed"),
        ]

        # Current students
        students = [
            _student(cs2021, name="Alice Brown", email="alice.brown@email.com", student_id="CS21001", year=3,
                     phone="+1234567894", skills=["Java", "Spring Boot", "MySQL"],
                     linkedin_profile="https://linkedin.com/in/alicebrown",
                     github_profile="https://github.com/alicebrown"),
            _student(cs2021, name="Bob Wilson", email="bob.wilson@email.com", student_id="CS21002", year=3,
                     phone="+1234567895", skills=["Python", "Django", "PostgreSQL"],
                     linkedin_profile="https://linkedin.com/in/bobwilson",
                     github_profile="https://github.com/bobwilson"),
            _student(it2022, name="Carol Davis", email="carol.davis@email.com", student_id="IT22001", year=2,
                     phone="+1234567896", skills=["HTML", "CSS", "JavaScript"],
                     linkedin_profile="https://linkedin.com/in/caroldavis",
                     github_profile="https://github.com/caroldavis"),
            _student(cs2021, name="Demo Student", email="student@campus.edu", student_id="DEMO001", year=3,
                     phone="+1234567890", skills=["JavaScript", "React", "Node.js"]),
        ]
        db.add_all(alumni + students)
        db.flush()

        for batch in batches:
            recount_students(db, batch.batch_id)

        companies = [
            Company(company_name="Tech Solutions Inc", contact_email="hr@techsolutions.com",
                    contact_person="Sarah Manager", contact_phone="+1234567800",
                    website="https://techsolutions.com", description="Leading software development company",
                    industry="Software Development", location="San Francisco, CA"),
            Company(company_name="InnovateLab", contact_email="careers@innovatelab.com",
                    contact_person="David Recruiter", contact_phone="+1234567801",
                    website="https://innovatelab.com", description="Innovative technology solutions provider",
                    industry="Technology", location="Austin, TX"),
            Company(company_name="DataCorp", contact_email="jobs@datacorp.com",
                    contact_person="Lisa Hiring", contact_phone="+1234567802",
                    website="https://datacorp.com", description="Data analytics and AI company",
                    industry="Data Analytics", location="New York, NY"),
        ]
        db.add_all(companies)

        db.commit()
        print("Seed data inserted successfully.")
        for batch in batches:
            state = "completed" if batch.is_completed else "active"
            print(f"  Batch {batch.batch_name} ({state}): {batch.total_students} students")
        print(f"  Companies: {len(companies)}")
        print()
        print("Demo login credentials:")
        print("  admin@campus.edu / admin123")
        for u in alumni + students:
            kind = "alumni" if u.is_alumni else "student"
            print(f"  {u.email} / {STUDENT_PASSWORD}  ({kind})")

    except Exception as e:
        db.rollback()
        raise e
    finally:
        db.close()


if __name__ == "__main__":
    seed()
