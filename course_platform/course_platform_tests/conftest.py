"""
Pytest configuration for course service tests.

Pins the signing secret and an in-memory database before the app is imported.
"""
import os

os.environ["JWT_SECRET"] = "test-signing-secret"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["LOG_LEVEL"] = "DEBUG"

import uuid  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from course_platform.course_platform.course_service import models  # noqa: E402
from course_platform.course_platform.course_service.db import Base, SessionLocal, engine  # noqa: E402
from course_platform.course_platform.course_service.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    # Drop all tables and recreate them before each test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def add_course():
    """Insert a course (and optionally its videos) and return its id."""
    def _add_course(title="Python Basics", course_id=None, price=49, videos=()):
        db = SessionLocal()
        try:
            course = models.Course(id=course_id, title=title, description=f"{title} course", price=price)
            db.add(course)
            db.flush()
            for position, video_title in enumerate(videos):
                db.add(models.Video(
                    course_id=course.id,
                    title=video_title,
                    video_url=f"https://videos.example.com/{course.id}/{position}.mp4",
                    position=position,
                ))
            db.commit()
            return course.id
        finally:
            db.close()
    return _add_course


@pytest.fixture
def user_token(client):
    """Register and log in a fresh user, returning ``(token, user)``."""
    def _user_token(name="Ann", email=None, password="pw12345"):
        email = email or f"user_{uuid.uuid4().hex[:8]}@example.com"
        reg = client.post("/register", json={"name": name, "email": email, "password": password})
        assert reg.status_code == 201
        login = client.post("/login", json={"email": email, "password": password})
        assert login.status_code == 200
        body = login.json()
        return body["token"], body["user"]
    return _user_token