# File: outreach_cms/schemas/upload.py
from datetime import datetime
from typing import Optional

from outreach_cms.schemas.base import CamelModel


class UploadRequest(CamelModel):
    file_name: Optional[str] = None
    content_type: Optional[str] = None
    file_size: Optional[int] = None


class UploadTicket(CamelModel):
    upload_url: str
    file_path: str
    public_url: str
    expires_at: datetime
    content_type: str


class UploadCommitRequest(CamelModel):
    file_path: Optional[str] = None


class UploadCommitResponse(CamelModel):
    public_url: str
    file_path: str
    generation: str


class DirectUploadResponse(CamelModel):
    message: str
    url: str
    file_name: str
