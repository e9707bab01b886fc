# File: outreach_cms/services/uploads.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging
import os
import time
import uuid

from outreach_cms.core.exceptions import DependencyError, ValidationError
from outreach_cms.services.storage import LONG_CACHE, NO_CACHE, ObjectInfo, ObjectStore

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "bmp", "tiff", "svg"}

CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/pjpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/bmp": "bmp",
    "image/x-ms-bmp": "bmp",
    "image/tiff": "tiff",
    "image/svg+xml": "svg",
}

DEFAULT_EXTENSION = "jpg"
DEFAULT_TICKET_TTL = timedelta(minutes=15)
DEFAULT_MAX_SIZE = 5 * 1024 * 1024  # 5MB


@dataclass(frozen=True)
class UploadTicket:
    upload_url: str
    file_path: str
    public_url: str
    expires_at: datetime
    content_type: str


@dataclass(frozen=True)
class CommittedUpload:
    public_url: str
    file_path: str
    generation: str


@dataclass(frozen=True)
class StoredUpload:
    url: str
    file_name: str


def is_image_content_type(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.strip().lower().startswith("image/")


def derive_extension(file_name: Optional[str], content_type: Optional[str]) -> str:
    """
    Extension for a new object: the client's own extension when allowed, else one
    derived from the content type, else jpg.
    """
    if file_name:
        ext = os.path.splitext(os.path.basename(file_name.strip()))[1].lower().lstrip(".")
        if ext in ALLOWED_EXTENSIONS:
            return ext
    if content_type:
        mime = content_type.split(";", 1)[0].strip().lower()
        ext = CONTENT_TYPE_EXTENSIONS.get(mime)
        if ext:
            return ext
        subtype = mime.split("/", 1)[1] if "/" in mime else ""
        if subtype in ALLOWED_EXTENSIONS:
            return subtype
    return DEFAULT_EXTENSION


def generate_object_path(namespace: str, ext: str) -> str:
    timestamp = int(time.time() * 1000)
    return f"{namespace}/{timestamp}-{uuid.uuid4().hex}.{ext}"


def with_generation(url: str, generation: Optional[str]) -> str:
    return f"{url}?v={generation}" if generation else url


class UploadBroker:
    """
    Image uploads into one namespace (top-level folder) of the object store.

    Two styles are supported:
    - ticketed: request_upload() signs a short-lived URL the browser PUTs to
      (private staging), commit_upload() then verifies the staged object and
      publishes it;
    - direct: store_direct() receives the bytes and publishes them at once.
    Only published objects count as committed uploads.
    """

    def __init__(
        self,
        store: ObjectStore,
        namespace: str,
        *,
        ticket_ttl: timedelta = DEFAULT_TICKET_TTL,
        max_size: int = DEFAULT_MAX_SIZE,
    ):
        self.store = store
        self.namespace = namespace.strip("/")
        self.ticket_ttl = ticket_ttl
        self.max_size = max_size

    @property
    def max_size_label(self) -> str:
        if self.max_size >= 1024 * 1024:
            return f"{self.max_size // (1024 * 1024)}MB"
        return f"{self.max_size // 1024}KB"

    def owns_path(self, file_path: Optional[str]) -> bool:
        if not file_path or not isinstance(file_path, str):
            return False
        if not file_path.startswith(f"{self.namespace}/"):
            return False
        if "\\" in file_path or "//" in file_path:
            return False
        segments = file_path.split("/")[1:]
        return all(segment not in ("", ".", "..") for segment in segments)

    def _check_size(self, size: Optional[int]) -> None:
        if size is not None and size > self.max_size:
            raise ValidationError(f"File size must be less than {self.max_size_label}")

    def _committed(self, info: ObjectInfo) -> CommittedUpload:
        generation = info.generation or ""
        public_url = with_generation(self.store.public_url(info.path), generation)
        return CommittedUpload(public_url=public_url, file_path=info.path, generation=generation)

    def request_upload(
        self,
        content_type: Optional[str],
        file_name: Optional[str] = None,
        file_size: Optional[int] = None,
    ) -> UploadTicket:
        if not is_image_content_type(content_type):
            raise ValidationError("File must be an image")
        self._check_size(file_size)

        content_type = content_type.strip()
        file_path = generate_object_path(self.namespace, derive_extension(file_name, content_type))
        expires_at = datetime.now(timezone.utc) + self.ticket_ttl
        upload_url = self.store.generate_upload_url(file_path, expires_at)

        logger.info(f"Issued upload ticket for {file_path} (expires {expires_at.isoformat()})")
        return UploadTicket(
            upload_url=upload_url,
            file_path=file_path,
            public_url=self.store.public_url(file_path),
            expires_at=expires_at,
            content_type=content_type,
        )

    def commit_upload(self, file_path: Optional[str]) -> CommittedUpload:
        if not self.owns_path(file_path):
            raise ValidationError("Invalid filePath")

        staged = self.store.stat_staged(file_path)
        if staged is None:
            # a repeated commit answers with the existing publication
            published = self.store.stat(file_path)
            if published is not None and published.committed:
                return self._committed(published)
            raise ValidationError("Uploaded file not found")

        # the signed URL cannot pin the Content-Type, so it is re-checked here
        if not is_image_content_type(staged.content_type):
            self.store.delete_staged(file_path)
            raise ValidationError("File must be an image")
        if staged.size > self.max_size:
            self.store.delete_staged(file_path)
            raise ValidationError(f"File size must be less than {self.max_size_label}")

        self.store.publish(file_path, cache_control=NO_CACHE)

        published = self.store.stat(file_path)
        if published is None:
            raise DependencyError("Failed to publish upload", details=file_path)

        committed = self._committed(published)
        logger.info(f"✅ Committed upload {file_path} (generation {committed.generation or 'n/a'})")
        return committed

    def store_direct(self, data: bytes, file_name: Optional[str], content_type: Optional[str]) -> StoredUpload:
        if not is_image_content_type(content_type):
            raise ValidationError("File must be an image")
        self._check_size(len(data))

        file_path = generate_object_path(self.namespace, derive_extension(file_name, content_type))
        self.store.save(file_path, data, content_type=content_type, cache_control=LONG_CACHE)

        logger.info(f"✅ Stored {len(data)} bytes at {file_path}")
        return StoredUpload(url=self.store.public_url(file_path), file_name=file_path)

    def references_committed_upload(self, url: Optional[str]) -> bool:
        """True when `url` is the public URL of a committed object in this namespace"""
        path = self.store.path_from_public_url(url) if url else None
        if not self.owns_path(path):
            return False
        info = self.store.stat(path)
        return info is not None and info.committed
