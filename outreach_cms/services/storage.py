# File: outreach_cms/services/storage.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from urllib.parse import quote, unquote, urlsplit
import logging

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import (
    BlobSasPermissions,
    BlobServiceClient,
    ContentSettings,
    PublicAccess,
    generate_blob_sas,
)

from outreach_cms.core.config import StorageConfig

logger = logging.getLogger(__name__)

NO_CACHE = "no-cache, max-age=0"
LONG_CACHE = "public, max-age=31536000"

# metadata stamped on every object that went through publish() or save()
COMMITTED_KEY = "committed"
COMMITTED_VALUE = "true"


@dataclass(frozen=True)
class ObjectInfo:
    path: str
    size: int
    content_type: Optional[str]
    generation: Optional[str]
    committed: bool = False


class ObjectStore(ABC):
    """
    Capability the upload broker needs from the object store.

    Client uploads land in a private staging area through a signed URL. Only
    publish() moves an object into the public area, where it gets a public URL.
    """

    def __init__(self, container: str, public_base_url: str):
        self.container = container
        self.public_base_url = public_base_url.rstrip("/")

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{quote(path)}"

    def path_from_public_url(self, url: str) -> Optional[str]:
        """Inverse of public_url; None for URLs that do not point into this store"""
        if not url or not isinstance(url, str):
            return None
        base = urlsplit(self.public_base_url)
        parts = urlsplit(url)
        if (parts.scheme, parts.netloc) != (base.scheme, base.netloc):
            return None
        prefix = base.path.rstrip("/") + "/"
        if not parts.path.startswith(prefix):
            return None
        path = unquote(parts.path[len(prefix):])
        return path or None

    @abstractmethod
    def generate_upload_url(self, path: str, expires_at: datetime) -> str:
        """Signed URL allowing a single create of the staged `path` until `expires_at`"""

    @abstractmethod
    def stat_staged(self, path: str) -> Optional[ObjectInfo]:
        """Metadata of a staged (not yet published) object, or None"""

    @abstractmethod
    def delete_staged(self, path: str) -> bool:
        pass

    @abstractmethod
    def publish(self, path: str, cache_control: str = NO_CACHE) -> None:
        """Move a staged object into the public area and mark it committed"""

    @abstractmethod
    def stat(self, path: str) -> Optional[ObjectInfo]:
        """Metadata of a public object, or None when nothing is published at `path`"""

    @abstractmethod
    def save(self, path: str, data: bytes, content_type: str, cache_control: str = LONG_CACHE) -> None:
        """Write straight into the public area, committed"""

    @abstractmethod
    def delete(self, path: str) -> bool:
        pass

    def is_ready(self) -> bool:
        return True


def _object_info(path: str, props) -> ObjectInfo:
    generation = props.version_id or (props.etag or "").strip('"') or None
    metadata = props.metadata or {}
    return ObjectInfo(
        path=path,
        size=props.size,
        content_type=props.content_settings.content_type,
        generation=generation,
        committed=metadata.get(COMMITTED_KEY) == COMMITTED_VALUE,
    )


class AzureBlobStore(ObjectStore):
    """
    ObjectStore backed by two Azure Blob Storage containers: a private staging
    container the signed URLs write into, and a blob-level public container
    holding published images.
    """

    def __init__(self, config: StorageConfig, service_client: Optional[BlobServiceClient] = None):
        super().__init__(config.container, config.public_base_url)
        self.config = config
        self.service_client = service_client or BlobServiceClient(
            account_url=config.blob_endpoint,
            credential={"account_name": config.account_name, "account_key": config.account_key},
        )
        self.container_client = self.service_client.get_container_client(config.container)
        self.staging_client = self.service_client.get_container_client(config.staging_container)

    def ensure_container(self) -> None:
        # Azure grants anonymous read per container; "blob" level exposes
        # individual blobs without allowing listing. Staging stays private.
        for client, public_access in (
            (self.container_client, PublicAccess.BLOB),
            (self.staging_client, None),
        ):
            try:
                client.create_container(public_access=public_access)
                logger.info(f"Created storage container {client.container_name}")
            except ResourceExistsError:
                logger.debug(f"Storage container {client.container_name} already exists")

    def generate_upload_url(self, path: str, expires_at: datetime) -> str:
        # The SAS cannot restrict the uploaded Content-Type; commit re-checks it.
        sas_token = generate_blob_sas(
            account_name=self.config.account_name,
            container_name=self.config.staging_container,
            blob_name=path,
            account_key=self.config.account_key,
            permission=BlobSasPermissions(create=True),
            expiry=expires_at,
        )
        blob_client = self.staging_client.get_blob_client(path)
        return f"{blob_client.url}?{sas_token}"

    def _stat(self, container_client, path: str) -> Optional[ObjectInfo]:
        blob_client = container_client.get_blob_client(path)
        try:
            props = blob_client.get_blob_properties()
        except ResourceNotFoundError:
            return None
        return _object_info(path, props)

    def _delete(self, container_client, path: str) -> bool:
        blob_client = container_client.get_blob_client(path)
        try:
            blob_client.delete_blob()
        except ResourceNotFoundError:
            return False
        return True

    def stat_staged(self, path: str) -> Optional[ObjectInfo]:
        return self._stat(self.staging_client, path)

    def delete_staged(self, path: str) -> bool:
        return self._delete(self.staging_client, path)

    def publish(self, path: str, cache_control: str = NO_CACHE) -> None:
        staged = self.staging_client.get_blob_client(path)
        props = staged.get_blob_properties()
        # uploads are capped at a few MB, so a download and re-upload is fine
        data = staged.download_blob().readall()
        current = props.content_settings
        self.container_client.get_blob_client(path).upload_blob(
            data,
            overwrite=True,
            metadata={COMMITTED_KEY: COMMITTED_VALUE},
            content_settings=ContentSettings(
                content_type=current.content_type,
                content_encoding=current.content_encoding,
                content_language=current.content_language,
                content_disposition=current.content_disposition,
                cache_control=cache_control,
            ),
        )
        staged.delete_blob()

    def stat(self, path: str) -> Optional[ObjectInfo]:
        return self._stat(self.container_client, path)

    def save(self, path: str, data: bytes, content_type: str, cache_control: str = LONG_CACHE) -> None:
        blob_client = self.container_client.get_blob_client(path)
        blob_client.upload_blob(
            data,
            overwrite=True,
            metadata={COMMITTED_KEY: COMMITTED_VALUE},
            content_settings=ContentSettings(content_type=content_type, cache_control=cache_control),
        )

    def delete(self, path: str) -> bool:
        return self._delete(self.container_client, path)

    def is_ready(self) -> bool:
        return self.container_client.exists() and self.staging_client.exists()
