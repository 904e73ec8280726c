"""Custom exceptions for the migration toolkit."""

from __future__ import annotations


class MigrationError(Exception):
    """Base exception for all migration errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(MigrationError):
    """Raised when configuration values are missing or invalid."""

    pass


class CredentialNotFoundError(ConfigurationError):
    """Raised when a service-account key file does not exist."""

    def __init__(self, path: str, details: dict | None = None) -> None:
        super().__init__(f"Service account key not found: {path}", details)
        self.path = path


class FirebaseInitializationError(MigrationError):
    """Raised when a Firebase Admin app cannot be created."""

    pass


class UserAlreadyExistsError(MigrationError):
    """Raised when the target project already holds a user with the same uid."""

    def __init__(self, uid: str) -> None:
        super().__init__(f"User already exists: {uid}", {"uid": uid})
        self.uid = uid
