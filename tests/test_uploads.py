import re
from datetime import timedelta

import pytest

from outreach_cms.core.exceptions import ValidationError
from outreach_cms.services.uploads import (
    UploadBroker,
    derive_extension,
    generate_object_path,
    with_generation,
)


@pytest.mark.parametrize("file_name, content_type, expected", [
    ("photo.JPEG", "image/jpeg", "jpeg"),
    ("diagram.svg", "image/svg+xml", "svg"),
    ("no-extension", "image/png", "png"),
    ("archive.exe", "image/gif", "gif"),
    (None, "image/webp", "webp"),
    (None, "image/jpeg; charset=binary", "jpg"),
    (None, "image/x-unknown", "jpg"),
    ("../../etc/passwd", None, "jpg"),
])
def test_derive_extension(file_name, content_type, expected):
    assert derive_extension(file_name, content_type) == expected


def test_generated_paths_are_unique_and_namespaced():
    paths = {generate_object_path("events", "png") for _ in range(50)}
    assert len(paths) == 50
    for path in paths:
        assert re.fullmatch(r"events/\d{13}-[0-9a-f]{32}\.png", path)


def test_with_generation():
    assert with_generation("https://x/a.png", "7") == "https://x/a.png?v=7"
    assert with_generation("https://x/a.png", "") == "https://x/a.png"


@pytest.fixture
def broker(store):
    return UploadBroker(store, "events", ticket_ttl=timedelta(minutes=15), max_size=1024)


@pytest.mark.parametrize("path, owned", [
    ("events/1-a.png", True),
    ("events/sub/1-a.png", True),
    ("partners/1-a.png", False),
    ("events/../partners/1-a.png", False),
    ("events/..", False),
    ("events\\..\\x.png", False),
    ("events/", False),
    (None, False),
])
def test_owns_path(broker, path, owned):
    assert broker.owns_path(path) is owned


def test_ticket_expires_after_ttl(broker, store):
    ticket = broker.request_upload("image/png", file_name="a.png", file_size=10)
    path, expires_at = store.signed[0]
    assert path == ticket.file_path
    assert expires_at == ticket.expires_at
    assert ticket.content_type == "image/png"
    assert ticket.upload_url.startswith("https://staging.example.test/events/")


def test_commit_rejects_oversize_objects_and_deletes_them(broker, store):
    store.stage("events/1-big.png", data=b"x" * 2048)
    with pytest.raises(ValidationError) as excinfo:
        broker.commit_upload("events/1-big.png")
    assert excinfo.value.message == "File size must be less than 1KB"
    assert "events/1-big.png" not in store.staged
    assert "events/1-big.png" not in store.objects


def test_commit_moves_object_out_of_staging(broker, store):
    store.stage("events/1-a.png")
    assert store.stat("events/1-a.png") is None

    committed = broker.commit_upload("events/1-a.png")

    assert "events/1-a.png" not in store.staged
    published = store.stat("events/1-a.png")
    assert published.committed
    assert committed.generation == published.generation
    assert committed.public_url == f"{store.public_url('events/1-a.png')}?v={published.generation}"


def test_references_committed_upload(broker, store):
    store.stage("events/1-a.png")
    assert not broker.references_committed_upload(store.public_url("events/1-a.png"))

    broker.commit_upload("events/1-a.png")
    assert broker.references_committed_upload(store.public_url("events/1-a.png"))
    assert broker.references_committed_upload(store.public_url("events/1-a.png") + "?v=3")
    assert not broker.references_committed_upload(store.public_url("events/missing.png"))
    assert not broker.references_committed_upload("https://evil.example.com/test-media/events/1-a.png")
    assert not broker.references_committed_upload(None)


def test_direct_uploads_are_committed(store):
    partner_broker = UploadBroker(store, "partners")
    stored = partner_broker.store_direct(b"GIF89a", "logo.gif", "image/gif")
    assert stored.file_name.startswith("partners/")
    assert store.stat(stored.file_name).committed
    assert partner_broker.references_committed_upload(stored.url)
