from unittest import mock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from outreach_cms import crud
from outreach_cms.core.security import decode_token
from outreach_cms.main import create_app
from outreach_cms.models.user import UserRole
from tests.conftest import ADMIN_EMAIL, PASSWORD, make_settings


def test_signup_creates_user_role_account(client, db, settings):
    resp = client.post("/api/auth/signup", json={"email": "new@example.org", "password": "secret1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "User created successfully"
    assert body["user"]["email"] == "new@example.org"
    assert body["user"]["role"] == "user"

    claims = decode_token(body["token"], config=settings)
    assert claims.email == "new@example.org"
    assert claims.user_id == body["user"]["id"]

    stored = crud.user.get_by_email(db, email="new@example.org")
    assert stored.role == UserRole.USER
    assert stored.hashed_password != "secret1"


def test_signup_validation(client):
    resp = client.post("/api/auth/signup", json={"email": "x@example.org"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Email and password are required"}

    resp = client.post("/api/auth/signup", json={"email": "x@example.org", "password": "12345"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Password must be at least 6 characters long"}


def test_signup_duplicate_email_conflicts(client, admin):
    resp = client.post("/api/auth/signup", json={"email": ADMIN_EMAIL, "password": "another-pass"})
    assert resp.status_code == 409
    assert resp.json() == {"error": "User already exists"}


def test_login_returns_token_with_stored_role(client, admin, settings):
    resp = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": PASSWORD})
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Login successful"
    assert body["user"] == {"id": str(admin.id), "email": ADMIN_EMAIL, "role": "admin"}
    assert decode_token(body["token"], config=settings).role == "admin"


def test_login_failures_do_not_reveal_which_part_was_wrong(client, admin):
    wrong_password = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "nope-nope"})
    unknown_email = client.post("/api/auth/login", json={"email": "ghost@example.org", "password": PASSWORD})
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"error": "Invalid email or password"}


def test_login_requires_both_fields(client):
    resp = client.post("/api/auth/login", json={"password": PASSWORD})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Email and password are required"


def test_login_malformed_json(client):
    resp = client.post(
        "/api/auth/login",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid JSON body"}


def test_login_database_failure_is_reported_as_connection_error(client, admin):
    failure = OperationalError("SELECT", {}, Exception("connection refused"))
    with mock.patch.object(crud.user, "authenticate", side_effect=failure):
        resp = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": PASSWORD})
    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Database connection error"
    assert "connection refused" in body["details"]


def test_login_database_failure_hides_details_in_production(engine, session_factory, store, admin):
    app = create_app(
        make_settings(ENVIRONMENT="production"),
        engine=engine,
        session_factory=session_factory,
        object_store=store,
    )
    failure = OperationalError("SELECT", {}, Exception("connection refused"))
    with TestClient(app) as client, mock.patch.object(crud.user, "authenticate", side_effect=failure):
        resp = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": PASSWORD})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Database connection error"}


def test_login_without_jwt_secret(engine, session_factory, store, admin):
    app = create_app(
        make_settings(JWT_SECRET=None),
        engine=engine,
        session_factory=session_factory,
        object_store=store,
    )
    with TestClient(app) as client:
        resp = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": PASSWORD})
    assert resp.status_code == 500
    assert resp.json()["error"] == "Server configuration error"


def test_login_without_database(store):
    app = create_app(make_settings(), object_store=store)
    with TestClient(app) as client:
        resp = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": PASSWORD})
    assert resp.status_code == 500
    assert resp.json()["error"] == "Server configuration error"
