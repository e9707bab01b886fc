from unittest import mock

import pytest
from sqlalchemy.exc import OperationalError

from outreach_cms import crud
from outreach_cms.core.security import verify_password
from outreach_cms.models.user import UserRole
from tests.conftest import ADMIN_EMAIL, PASSWORD


def test_get_by_email_is_exact(db, admin):
    assert crud.user.get_by_email(db, email=ADMIN_EMAIL).id == admin.id
    assert crud.user.get_by_email(db, email=ADMIN_EMAIL.upper()) is None
    assert crud.user.get_by_email(db, email="nobody@example.org") is None


def test_get_by_email_propagates_storage_errors():
    db = mock.MagicMock()
    db.query.side_effect = OperationalError("SELECT", {}, Exception("database is down"))
    with pytest.raises(OperationalError):
        crud.user.get_by_email(db, email=ADMIN_EMAIL)


def test_create_user_refuses_duplicates(db, admin):
    assert crud.user.create_user(db, email=ADMIN_EMAIL, password="whatever1") is None


def test_authenticate(db, admin):
    assert crud.user.authenticate(db, email=ADMIN_EMAIL, password=PASSWORD).id == admin.id
    assert crud.user.authenticate(db, email=ADMIN_EMAIL, password="wrong") is None
    assert crud.user.authenticate(db, email="ghost@example.org", password=PASSWORD) is None


def test_update_role_reports_actual_change_only(db, member):
    assert crud.user.update_role(db, id=member.id, role=UserRole.ADMIN) is True
    assert crud.user.update_role(db, id=member.id, role=UserRole.ADMIN) is False
    assert crud.user.update_role(db, id="bogus", role=UserRole.USER) is False


def test_get_all_excludes_hash_column(db, admin, member):
    rows = crud.user.get_all(db)
    assert [r.email for r in rows] == [member.email, admin.email]
    assert all(not hasattr(r, "hashed_password") for r in rows)


def test_remove(db, member):
    assert crud.user.remove(db, id=member.id) is True
    assert crud.user.remove(db, id=member.id) is False
    assert crud.user.remove(db, id="not-an-id") is False


def test_created_user_is_stored_hashed_and_verifiable(db):
    created = crud.user.create_user(db, email="new.editor@example.org", password="s3cret-pass")
    db.expire_all()

    stored = crud.user.get_by_email(db, email="new.editor@example.org")
    assert stored.id == created.id
    assert stored.role == UserRole.USER
    assert stored.hashed_password != "s3cret-pass"
    assert verify_password("s3cret-pass", stored.hashed_password)
    assert not verify_password("wrong-pass", stored.hashed_password)
