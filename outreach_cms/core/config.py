# File: outreach_cms/core/config.py
from dataclasses import dataclass
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from outreach_cms.core.exceptions import ConfigurationError

MIN_BCRYPT_ROUNDS = 12


@dataclass(frozen=True)
class StorageConfig:
    """Resolved object-store credentials. Built once at startup."""
    account_name: str
    account_key: str
    container: str
    staging_container: str
    blob_endpoint: str
    public_base_url: str
    source: str


def parse_connection_string(connection_string: str) -> dict:
    """Split an Azure storage connection string into its key/value parts"""
    parts = {}
    for segment in connection_string.strip().split(";"):
        if not segment or "=" not in segment:
            continue
        key, value = segment.split("=", 1)
        parts[key.strip()] = value.strip()
    return parts


class Settings(BaseSettings):
    # ---------------------------
    # Meta / Pydantic settings
    # ---------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # Ignore unexpected env vars instead of erroring
    )

    # ---------------------------
    # API / Project
    # ---------------------------
    PROJECT_NAME: str = "Outreach CMS API"
    API_V1_STR: str = "/api"

    # ---------------------------
    # Environment / Logging
    # ---------------------------
    ENVIRONMENT: str = "development"  # development | staging | production
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "*"

    # ---------------------------
    # Database
    # ---------------------------
    DATABASE_URL: Optional[str] = None

    # ---------------------------
    # Security / Auth
    # ---------------------------
    # No default: tokens are never signed with a fallback key.
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = MIN_BCRYPT_ROUNDS

    # ---------------------------
    # Object storage (Azure Blob)
    # ---------------------------
    AZURE_STORAGE_CONNECTION_STRING: Optional[str] = None
    AZURE_STORAGE_ACCOUNT_NAME: Optional[str] = None
    AZURE_STORAGE_ACCOUNT_KEY: Optional[str] = None
    AZURE_STORAGE_CONTAINER: str = "site-media"
    AZURE_STORAGE_STAGING_CONTAINER: str = "site-media-staging"  # private, upload tickets only
    AZURE_STORAGE_PUBLIC_BASE_URL: Optional[str] = None

    # ---------------------------
    # Uploads
    # ---------------------------
    UPLOAD_URL_EXPIRE_MINUTES: int = 15
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024  # 5MB

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v):
        if v < MIN_BCRYPT_ROUNDS:
            raise ValueError(f"BCRYPT_ROUNDS must be at least {MIN_BCRYPT_ROUNDS}")
        return v

    @field_validator("ACCESS_TOKEN_EXPIRE_MINUTES", "UPLOAD_URL_EXPIRE_MINUTES")
    @classmethod
    def validate_positive_minutes(cls, v):
        if v <= 0:
            raise ValueError("Expiry must be a positive number of minutes")
        return v

    # ---------------------------
    # Derived / Convenience
    # ---------------------------
    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    def require_jwt_secret(self) -> str:
        if not self.JWT_SECRET:
            raise ConfigurationError("Server configuration error", details="JWT_SECRET is not set")
        return self.JWT_SECRET

    def resolve_storage(self) -> StorageConfig:
        """
        Resolve object-store credentials from, in order:
        1) AZURE_STORAGE_CONNECTION_STRING
        2) AZURE_STORAGE_ACCOUNT_NAME + AZURE_STORAGE_ACCOUNT_KEY
        Raises ConfigurationError when neither source is complete.
        """
        account_name = None
        account_key = None
        blob_endpoint = None
        source = None

        if self.AZURE_STORAGE_CONNECTION_STRING:
            parts = parse_connection_string(self.AZURE_STORAGE_CONNECTION_STRING)
            account_name = parts.get("AccountName")
            account_key = parts.get("AccountKey")
            blob_endpoint = parts.get("BlobEndpoint")
            if not blob_endpoint and account_name:
                protocol = parts.get("DefaultEndpointsProtocol", "https")
                suffix = parts.get("EndpointSuffix", "core.windows.net")
                blob_endpoint = f"{protocol}://{account_name}.blob.{suffix}"
            if not (account_name and account_key):
                raise ConfigurationError(
                    "AZURE_STORAGE_CONNECTION_STRING must contain AccountName and AccountKey"
                )
            source = "connection_string"
        elif self.AZURE_STORAGE_ACCOUNT_NAME and self.AZURE_STORAGE_ACCOUNT_KEY:
            account_name = self.AZURE_STORAGE_ACCOUNT_NAME
            account_key = self.AZURE_STORAGE_ACCOUNT_KEY
            blob_endpoint = f"https://{account_name}.blob.core.windows.net"
            source = "account_key"

        if not source:
            raise ConfigurationError(
                "Object storage is not configured. Set AZURE_STORAGE_CONNECTION_STRING "
                "or AZURE_STORAGE_ACCOUNT_NAME and AZURE_STORAGE_ACCOUNT_KEY."
            )

        if self.AZURE_STORAGE_STAGING_CONTAINER == self.AZURE_STORAGE_CONTAINER:
            raise ConfigurationError(
                "AZURE_STORAGE_STAGING_CONTAINER must differ from AZURE_STORAGE_CONTAINER"
            )

        blob_endpoint = blob_endpoint.rstrip("/")
        public_base_url = self.AZURE_STORAGE_PUBLIC_BASE_URL or (
            f"{blob_endpoint}/{self.AZURE_STORAGE_CONTAINER}"
        )
        return StorageConfig(
            account_name=account_name,
            account_key=account_key,
            container=self.AZURE_STORAGE_CONTAINER,
            staging_container=self.AZURE_STORAGE_STAGING_CONTAINER,
            blob_endpoint=blob_endpoint,
            public_base_url=public_base_url.rstrip("/"),
            source=source,
        )


settings = Settings()
