from datetime import timedelta

import jwt

from app.api.v1 import auth
from app.core.config import settings
from app.core.security import create_access_token


def test_register_candidate_returns_token_with_identity_and_role(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "John Doe", "email": "John@Example.com", "password": "secret123"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"

    claims = jwt.decode(body["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert claims["name"] == "John Doe"
    assert claims["email"] == "john@example.com"
    assert claims["role"] == "candidate"
    assert claims["sub"].isdigit()
    assert "exp" in claims


def test_admin_register_sets_admin_role(client):
    response = client.post(
        "/api/auth/admin/register",
        json={"name": "Sarah Chen", "email": "sarah@acme.com", "password": "secret123"},
    )

    assert response.status_code == 201
    claims = jwt.decode(
        response.json()["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
    )
    assert claims["role"] == "admin"


def test_register_ignores_role_in_body(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "Sneaky", "email": "sneaky@example.com", "password": "x", "role": "admin"},
    )

    assert response.status_code == 201
    headers = {"Authorization": f"Bearer {response.json()['access_token']}"}
    assert client.get("/api/auth/me", headers=headers).json()["role"] == "candidate"


def test_duplicate_email_is_rejected(client, candidate_headers):
    response = client.post(
        "/api/auth/admin/register",
        json={"name": "John Again", "email": "john@example.com", "password": "secret123"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"


def test_register_rejects_malformed_body(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "No Email", "email": "not-an-email", "password": "secret123"},
    )
    assert response.status_code == 400

    response = client.post("/api/auth/register", json={"email": "a@b.com"})
    assert response.status_code == 400


def test_candidate_login(client, candidate_headers):
    response = client.post(
        "/api/auth/login",
        json={"email": "john@example.com", "password": "secret123"},
    )

    assert response.status_code == 200
    assert response.json()["access_token"]


def test_login_wrong_password(client, candidate_headers):
    response = client.post(
        "/api/auth/login",
        json={"email": "john@example.com", "password": "wrong"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid credentials"


def test_login_unknown_email(client):
    response = client.post(
        "/api/auth/login",
        json={"email": "ghost@example.com", "password": "secret123"},
    )

    assert response.status_code == 400


def test_login_endpoints_are_role_specific(client, candidate_headers, admin_headers):
    # Candidate credentials do not work on the admin login, and vice versa
    response = client.post(
        "/api/auth/admin/login",
        json={"email": "john@example.com", "password": "secret123"},
    )
    assert response.status_code == 400

    response = client.post(
        "/api/auth/login",
        json={"email": "sarah@acme.com", "password": "secret123"},
    )
    assert response.status_code == 400

    response = client.post(
        "/api/auth/admin/login",
        json={"email": "sarah@acme.com", "password": "secret123"},
    )
    assert response.status_code == 200


def test_me_returns_current_user(client, admin_headers):
    response = client.get("/api/auth/me", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Sarah Chen"
    assert body["email"] == "sarah@acme.com"
    assert body["role"] == "admin"
    assert "hashed_password" not in body


def test_missing_token_is_unauthorized(client):
    response = client.get("/api/auth/me")

    assert response.status_code == 401


def test_garbage_token_is_unauthorized(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_expired_token_is_unauthorized(client, candidate_headers):
    token = create_access_token(
        {"sub": "1", "name": "John Doe", "email": "john@example.com", "role": "candidate"},
        expires_delta=timedelta(seconds=-10),
    )

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_token_for_unknown_user_is_unauthorized(client):
    token = create_access_token(
        {"sub": "999", "name": "Ghost", "email": "ghost@example.com", "role": "admin"}
    )

    response = client.post(
        "/api/jobs",
        json={"title": "x", "company": "x", "location": "x", "description": "x"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 401


def test_token_payload_matches_single_page_client(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "John Doe", "email": "john@example.com", "password": "secret123"},
    )

    body = response.json()
    assert body["token"] == body["access_token"]

    claims = jwt.decode(body["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert claims["id"] == claims["sub"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"}).json()
    assert claims["id"] == str(me["id"])


def test_login_error_carries_message(client, candidate_headers):
    response = client.post(
        "/api/auth/login",
        json={"email": "john@example.com", "password": "wrong"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid credentials"


def test_concurrent_duplicate_registration_is_rejected(client, candidate_headers, monkeypatch):
    # Simulate a second request that passed the email pre-check before the first committed
    monkeypatch.setattr(auth, "get_user_by_email", lambda db, email, role=None: None)

    response = client.post(
        "/api/auth/register",
        json={"name": "John Again", "email": "john@example.com", "password": "secret123"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"
