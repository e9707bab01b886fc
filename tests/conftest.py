from datetime import datetime
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from outreach_cms import crud, schemas
from outreach_cms.core.config import Settings
from outreach_cms.core.security import TokenClaims, create_access_token, get_password_hash
from outreach_cms.db.database import Base, build_session_factory
from outreach_cms.main import create_app
from outreach_cms.models import Event, Partner, TeamMember, User, UserRole  # noqa: F401
from outreach_cms.models.base import utcnow
from outreach_cms.services.storage import ObjectInfo, ObjectStore

ADMIN_EMAIL = "admin@example.org"
USER_EMAIL = "member@example.org"
PASSWORD = "correct-horse"


class FakeObjectStore(ObjectStore):
    """In-memory stand-in for the staging and public blob containers"""

    def __init__(self):
        super().__init__("test-media", "https://media.example.test/test-media")
        self.staged = {}
        self.objects = {}
        self.signed = []
        self.ready = True
        self._generation = 0

    def _next_generation(self) -> str:
        self._generation += 1
        return str(self._generation)

    def stage(self, path: str, data: bytes = b"\x89PNG\r\n", content_type: Optional[str] = "image/png"):
        """What the browser does with an upload ticket"""
        self.staged[path] = {
            "data": data,
            "content_type": content_type,
            "cache_control": None,
            "committed": False,
            "generation": self._next_generation(),
        }

    @staticmethod
    def _info(path, obj):
        if obj is None:
            return None
        return ObjectInfo(
            path=path,
            size=len(obj["data"]),
            content_type=obj["content_type"],
            generation=obj["generation"],
            committed=obj["committed"],
        )

    def generate_upload_url(self, path, expires_at):
        self.signed.append((path, expires_at))
        return f"https://staging.example.test/{path}?sig=fake"

    def stat_staged(self, path):
        return self._info(path, self.staged.get(path))

    def delete_staged(self, path):
        return self.staged.pop(path, None) is not None

    def publish(self, path, cache_control="no-cache, max-age=0"):
        obj = dict(self.staged.pop(path))
        obj.update(cache_control=cache_control, committed=True, generation=self._next_generation())
        self.objects[path] = obj

    def stat(self, path):
        return self._info(path, self.objects.get(path))

    def save(self, path, data, content_type, cache_control="public, max-age=31536000"):
        self.objects[path] = {
            "data": data,
            "content_type": content_type,
            "cache_control": cache_control,
            "committed": True,
            "generation": self._next_generation(),
        }

    def delete(self, path):
        return self.objects.pop(path, None) is not None

    def is_ready(self):
        return self.ready


def make_settings(**overrides) -> Settings:
    values = {
        "JWT_SECRET": "test-secret-key",
        "ENVIRONMENT": "test",
        "DATABASE_URL": None,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store():
    return FakeObjectStore()


@pytest.fixture
def app(settings, engine, session_factory, store):
    return create_app(settings, engine=engine, session_factory=session_factory, object_store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt at production cost is slow; hash once per run
    return get_password_hash(PASSWORD)


def add_user(db, email: str, role: UserRole, hashed_password: str) -> User:
    user = User(email=email, hashed_password=hashed_password, role=role, created_at=utcnow())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def token_for(user: User, settings: Settings, role: Optional[str] = None) -> str:
    claims = TokenClaims(user_id=str(user.id), email=user.email, role=role or user.role.value)
    return create_access_token(claims, config=settings)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(db, password_hash):
    return add_user(db, ADMIN_EMAIL, UserRole.ADMIN, password_hash)


@pytest.fixture
def member(db, password_hash):
    return add_user(db, USER_EMAIL, UserRole.USER, password_hash)


@pytest.fixture
def admin_headers(admin, settings):
    return bearer(token_for(admin, settings))


@pytest.fixture
def member_headers(member, settings):
    return bearer(token_for(member, settings))


SEED_IMAGE_PATH = "events/1700000000000-seed.png"


@pytest.fixture
def uploaded_image(client, admin_headers, store):
    """Public URL of an event image that went through the upload commit"""
    store.stage(SEED_IMAGE_PATH)
    resp = client.post(
        "/api/admin/events/upload/commit",
        json={"filePath": SEED_IMAGE_PATH},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    return resp.json()["publicUrl"]


@pytest.fixture
def make_event(db, admin, uploaded_image):
    def _make(**overrides):
        values = {
            "title": "Community cleanup",
            "description": "Neighbourhood cleanup day",
            "date": datetime(2025, 3, 1, 10, 0),
            "image_url": uploaded_image,
        }
        values.update(overrides)
        return crud.event.create(db, obj_in=schemas.EventCreate(**values), created_by=admin.id)
    return _make
