# File: outreach_cms/core/exceptions.py
from typing import Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP status and a client-safe message."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class AuthenticationError(AppError):
    status_code = 401


class AuthorizationError(AppError):
    status_code = 403


class ValidationError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class DependencyError(AppError):
    """Database or object store unreachable or misconfigured"""
    status_code = 500


class ConfigurationError(DependencyError):
    pass
