import os
import sys
from pathlib import Path

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import pytest
from fastapi.testclient import TestClient

from app.db.base import Base
from app.db.session import engine
from app.main import app


@pytest.fixture(autouse=True)
def clean_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def register(client, name, email, password="secret123", admin=False):
    path = "/api/auth/admin/register" if admin else "/api/auth/register"
    response = client.post(path, json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return register(client, "Sarah Chen", "sarah@acme.com", admin=True)


@pytest.fixture
def other_admin_headers(client):
    return register(client, "Bill Lumbergh", "bill@initech.com", admin=True)


@pytest.fixture
def candidate_headers(client):
    return register(client, "John Doe", "john@example.com")


@pytest.fixture
def other_candidate_headers(client):
    return register(client, "Jane Smith", "jane@example.com")


def job_payload(**overrides):
    payload = {
        "title": "Backend Engineer",
        "company": "Acme Corp",
        "location": "Berlin, Germany",
        "description": "Build REST APIs in Python.",
        "requirements": ["Python", "SQL"],
        "salary": "€70k",
        "type": "Full-time",
        "category": "Software Development",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_job(client):
    def _make_job(headers, **overrides):
        response = client.post("/api/jobs", json=job_payload(**overrides), headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_job
