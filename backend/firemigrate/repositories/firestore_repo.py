"""
Firestore Repository

Collection-level reads, batched writes and batched deletes against a single
Firestore database. Used on both sides of a migration.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from google.cloud.firestore_v1 import Client

from firemigrate.core.config import MAX_BATCH_SIZE
from firemigrate.core.logging import get_logger

logger = get_logger("firemigrate.repositories.firestore")


class BatchWriter:
    """
    Accumulates write/delete operations into Firestore write batches.

    A batch is committed as soon as it holds `limit` operations and a fresh
    one is started. flush() commits whatever remains. Batches never exceed
    the limit and empty batches are never committed.
    """

    def __init__(
        self,
        db: Client,
        limit: int = MAX_BATCH_SIZE,
        on_commit: Optional[Callable[[int], None]] = None,
    ) -> None:
        if not 1 <= limit <= MAX_BATCH_SIZE:
            raise ValueError(f"Batch limit must be between 1 and {MAX_BATCH_SIZE}")
        self.db = db
        self.limit = limit
        self.on_commit = on_commit
        self.commits = 0
        self.committed = 0
        self._batch = None
        self._pending = 0

    @property
    def pending(self) -> int:
        return self._pending

    def set(self, ref, data: dict[str, Any]) -> None:
        self._current().set(ref, data)
        self._added()

    def delete(self, ref) -> None:
        self._current().delete(ref)
        self._added()

    def flush(self) -> None:
        """Commit the current batch if it holds any operations."""
        if self._pending == 0:
            return
        self._batch.commit()
        self.commits += 1
        self.committed += self._pending
        self._batch = None
        self._pending = 0
        if self.on_commit is not None:
            self.on_commit(self.committed)

    def _current(self):
        if self._batch is None:
            self._batch = self.db.batch()
        return self._batch

    def _added(self) -> None:
        self._pending += 1
        if self._pending >= self.limit:
            self.flush()

    def __enter__(self) -> "BatchWriter":
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: Any) -> bool:
        # Uncommitted operations are dropped when the block raised
        if exc_type is None:
            self.flush()
        return False


class FirestoreRepository:
    """Repository for whole-collection operations on one Firestore database."""

    def __init__(self, db: Client, batch_size: int = MAX_BATCH_SIZE) -> None:
        self.db = db
        self.batch_size = batch_size

    def list_documents(self, collection: str) -> list:
        """
        Read every document of a collection in a single query.

        No pagination cursor is used; the whole collection is held in memory.
        """
        return list(self.db.collection(collection).get())

    def sample_documents(self, collection: str, limit: int = 5) -> list:
        return list(self.db.collection(collection).limit(limit).get())

    def write_documents(self, collection: str, documents: list) -> int:
        """
        Write document snapshots into `collection`, keeping their IDs.

        Args:
            collection: Target collection name
            documents: Snapshots (from any database) with .id and .to_dict()

        Returns:
            Number of documents written
        """
        collection_ref = self.db.collection(collection)

        def progress(committed: int) -> None:
            logger.info(f"Committed {committed} documents to {collection}")

        with BatchWriter(self.db, self.batch_size, on_commit=progress) as writer:
            for doc in documents:
                writer.set(collection_ref.document(doc.id), doc.to_dict())

        return writer.committed

    def delete_documents(self, collection: str) -> int:
        """
        Delete every document in a collection using batched deletes.

        Returns:
            Number of documents deleted
        """
        documents = self.list_documents(collection)
        if not documents:
            return 0

        def progress(committed: int) -> None:
            logger.info(f"Deleted {committed} documents from {collection}")

        with BatchWriter(self.db, self.batch_size, on_commit=progress) as writer:
            for doc in documents:
                writer.delete(doc.reference)

        return writer.committed

    def get_document(self, collection: str, document_id: str):
        return self.db.collection(collection).document(document_id).get()

    def probe(self) -> None:
        """Run a minimal read; raises if Firestore is not reachable or enabled."""
        self.db.collection("test").limit(1).get()
