"""Copies Firestore collections between projects, keeping document IDs."""

from __future__ import annotations

from typing import Iterable

from firemigrate.core.logging import get_logger
from firemigrate.repositories.firestore_repo import FirestoreRepository
from firemigrate.schemas.models import CollectionResult

logger = get_logger("firemigrate.services.collections")


class CollectionCopier:
    """Best-effort copy of named collections from a source to a target database."""

    def __init__(self, source: FirestoreRepository, target: FirestoreRepository) -> None:
        self.source = source
        self.target = target

    def copy_collection(self, name: str) -> int:
        """Copy one collection. Errors propagate to the caller."""
        logger.info(f"Copying collection: {name}")
        documents = self.source.list_documents(name)
        copied = self.target.write_documents(name, documents)
        logger.info(f"{name}: {copied} documents copied")
        return copied

    def copy_collections(self, names: Iterable[str]) -> list[CollectionResult]:
        """
        Copy each collection in order.

        A failing collection is logged and recorded; the remaining
        collections are still copied.
        """
        results = []
        for name in names:
            try:
                copied = self.copy_collection(name)
                results.append(CollectionResult(collection=name, documents=copied))
            except Exception as e:
                logger.error(f"Error copying collection {name}: {e}", exc_info=True)
                results.append(CollectionResult(collection=name, error=str(e)))

        total = sum(r.documents for r in results)
        logger.info(f"Firestore copy finished: {total} documents in {len(results)} collections")
        return results
