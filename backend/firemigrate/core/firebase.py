"""
Firebase Project Connection

Wraps one Firebase Admin app per project so that source and target can be
open side by side. Apps are created on open() and deleted on close(); nothing
is initialized at import time.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, firestore, storage
from google.cloud.firestore_v1 import Client
from google.cloud.storage import Bucket

from firemigrate.core.config import ProjectConfig
from firemigrate.core.exceptions import CredentialNotFoundError, FirebaseInitializationError
from firemigrate.core.logging import get_logger

logger = get_logger("firemigrate.core.firebase")


class FirebaseProject:
    """A named Firebase Admin app bound to one project's service account."""

    def __init__(self, config: ProjectConfig, name: str) -> None:
        self.config = config
        self.name = name
        self._app: Optional[firebase_admin.App] = None

    @property
    def app(self) -> firebase_admin.App:
        if self._app is None:
            raise FirebaseInitializationError(
                f"Firebase app '{self.name}' is not open",
                {"project_id": self.config.project_id},
            )
        return self._app

    @property
    def is_open(self) -> bool:
        return self._app is not None

    def open(self) -> "FirebaseProject":
        """Initialize the Firebase Admin app from the service-account key file."""
        if self._app is not None:
            return self

        path = self.config.credential_path
        if not path.is_file():
            raise CredentialNotFoundError(str(path), {"project_id": self.config.project_id})

        try:
            cred = credentials.Certificate(str(path))
            self._app = firebase_admin.initialize_app(
                cred,
                {
                    "projectId": self.config.project_id,
                    "storageBucket": self.config.storage_bucket,
                },
                name=self.name,
            )
        except (ValueError, OSError) as e:
            raise FirebaseInitializationError(
                f"Failed to initialize Firebase app '{self.name}': {e}",
                {"project_id": self.config.project_id},
            ) from e

        logger.info(f"Opened Firebase app '{self.name}' for project {self.config.project_id}")
        return self

    def close(self) -> None:
        """Delete the Firebase Admin app. Safe to call more than once."""
        if self._app is None:
            return
        firebase_admin.delete_app(self._app)
        self._app = None
        logger.debug(f"Closed Firebase app '{self.name}'")

    def firestore(self) -> Client:
        return firestore.client(app=self.app)

    def bucket(self) -> Bucket:
        return storage.bucket(app=self.app)

    def service_account_info(self) -> dict[str, Any]:
        """Read the service-account key file (project_id, client_email, ...)."""
        with open(self.config.credential_path, encoding="utf-8") as f:
            return json.load(f)

    def __enter__(self) -> "FirebaseProject":
        return self.open()

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: Any) -> bool:
        self.close()
        return False
