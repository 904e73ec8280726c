"""Pytest fixtures and in-memory doubles for Firestore, Storage and Auth."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

from firemigrate.core.config import MigrationConfig, ProjectConfig


class FakeDocumentReference:
    def __init__(self, db: "FakeFirestore", collection: str, doc_id: str) -> None:
        self.db = db
        self.collection = collection
        self.id = doc_id

    def get(self) -> "FakeSnapshot":
        data = self.db.data.get(self.collection, {}).get(self.id)
        return FakeSnapshot(self, data)


class FakeSnapshot:
    def __init__(self, reference: FakeDocumentReference, data: Optional[dict[str, Any]]) -> None:
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[dict[str, Any]]:
        return dict(self._data) if self._data is not None else None


class FakeQuery:
    def __init__(self, collection: "FakeCollection", limit: Optional[int] = None) -> None:
        self.collection = collection
        self._limit = limit

    def get(self) -> list[FakeSnapshot]:
        docs = self.collection.snapshots()
        return docs[: self._limit] if self._limit is not None else docs


class FakeCollection:
    def __init__(self, db: "FakeFirestore", name: str) -> None:
        self.db = db
        self.name = name

    def document(self, doc_id: str) -> FakeDocumentReference:
        return FakeDocumentReference(self.db, self.name, doc_id)

    def snapshots(self) -> list[FakeSnapshot]:
        if self.name in self.db.failing_collections:
            raise RuntimeError(f"read failed for {self.name}")
        docs = self.db.data.get(self.name, {})
        return [FakeSnapshot(self.document(doc_id), data) for doc_id, data in docs.items()]

    def get(self) -> list[FakeSnapshot]:
        return FakeQuery(self).get()

    def limit(self, count: int) -> FakeQuery:
        return FakeQuery(self, count)


class FakeBatch:
    def __init__(self, db: "FakeFirestore") -> None:
        self.db = db
        self.ops: list[tuple[str, FakeDocumentReference, Optional[dict[str, Any]]]] = []

    def set(self, ref: FakeDocumentReference, data: dict[str, Any]) -> None:
        self.ops.append(("set", ref, data))

    def delete(self, ref: FakeDocumentReference) -> None:
        self.ops.append(("delete", ref, None))

    def commit(self) -> None:
        if len(self.ops) > 500:
            raise ValueError("maximum 500 writes allowed per request")
        for op, ref, data in self.ops:
            docs = self.db.data.setdefault(ref.collection, {})
            if op == "set":
                docs[ref.id] = dict(data)
            else:
                docs.pop(ref.id, None)
        self.db.commits.append(len(self.ops))


class FakeFirestore:
    """Dict-backed stand-in for google.cloud.firestore_v1.Client."""

    def __init__(self, data: Optional[dict[str, dict[str, dict[str, Any]]]] = None) -> None:
        self.data = data or {}
        self.commits: list[int] = []
        self.failing_collections: set[str] = set()

    def collection(self, name: str) -> FakeCollection:
        return FakeCollection(self, name)

    def batch(self) -> FakeBatch:
        return FakeBatch(self)


def make_documents(count: int, prefix: str = "doc") -> dict[str, dict[str, Any]]:
    return {f"{prefix}{i:04d}": {"index": i, "text": f"prayer {i}"} for i in range(count)}


def make_blob(name: str, content: bytes = b"data", content_type: str = "image/jpeg", metadata=None):
    blob = MagicMock()
    blob.name = name
    blob.content_type = content_type
    blob.cache_control = None
    blob.content_disposition = None
    blob.content_encoding = None
    blob.content_language = None
    blob.metadata = metadata
    blob.download_as_bytes.return_value = content
    return blob


def make_user(uid: str, email: Optional[str] = None, password_hash=None, password_salt=None):
    record = MagicMock()
    record.uid = uid
    record.email = email or f"{uid}@example.com"
    record.email_verified = True
    record.display_name = f"User {uid}"
    record.photo_url = None
    record.disabled = False
    record.user_metadata.creation_timestamp = 1700000000000
    record.user_metadata.last_sign_in_timestamp = 1700000500000
    record.password_hash = password_hash
    record.password_salt = password_salt
    return record


class FakeAuthService:
    """Stand-in for FirebaseAuthService holding users in paged lists."""

    def __init__(self, pages: Optional[list[list[Any]]] = None) -> None:
        self.pages = pages if pages is not None else [[]]
        self.created: dict[str, dict[str, Any]] = {}
        self.deleted: list[str] = []
        self.pages_listed = 0
        self.fail_listing_at: Optional[int] = None

    def iter_pages(self):
        for index, page in enumerate(self.pages):
            if self.fail_listing_at == index:
                raise RuntimeError("listing failed")
            self.pages_listed += 1
            yield list(page)

    def create_user(self, payload: dict[str, Any]) -> None:
        from firemigrate.core.exceptions import UserAlreadyExistsError

        if payload["uid"] in self.created:
            raise UserAlreadyExistsError(payload["uid"])
        self.created[payload["uid"]] = payload

    def delete_user(self, uid: str) -> None:
        self.deleted.append(uid)


@pytest.fixture
def source_db() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture
def target_db() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture
def credential_files(tmp_path: Path) -> dict[str, Path]:
    """Write fake service-account key files for both projects."""
    paths = {}
    for role, project_id in (("source", "prayforo"), ("target", "foroprayo")):
        path = tmp_path / f"{project_id}-service-account-key.json"
        path.write_text(json.dumps({
            "type": "service_account",
            "project_id": project_id,
            "client_email": f"migrator@{project_id}.iam.gserviceaccount.com",
        }))
        paths[role] = path
    return paths


@pytest.fixture
def migration_config(credential_files: dict[str, Path]) -> MigrationConfig:
    return MigrationConfig(
        source=ProjectConfig("prayforo", "prayforo.appspot.com", credential_files["source"]),
        target=ProjectConfig("foroprayo", "foroprayo.firebasestorage.app", credential_files["target"]),
    )


@pytest.fixture
def clean_env(monkeypatch):
    """Remove migration-related variables and stop .env files from loading."""
    for name in (
        "MIGRATION_CREDENTIALS_DIR",
        "SOURCE_PROJECT_ID",
        "SOURCE_STORAGE_BUCKET",
        "SOURCE_CREDENTIALS",
        "TARGET_PROJECT_ID",
        "TARGET_STORAGE_BUCKET",
        "TARGET_CREDENTIALS",
        "MIGRATION_BATCH_SIZE",
        "MIGRATION_AUTH_PAGE_SIZE",
        "READINESS_MAX_ATTEMPTS",
        "READINESS_INTERVAL_SECONDS",
        "SOURCE_HASH_KEY",
        "SOURCE_HASH_SALT_SEPARATOR",
        "SOURCE_HASH_ROUNDS",
        "SOURCE_HASH_MEMORY_COST",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("firemigrate.core.config.load_dotenv", lambda *args, **kwargs: False)
