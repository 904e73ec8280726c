"""Copies Storage objects between buckets under identical paths."""

from __future__ import annotations

from typing import Iterable

from firemigrate.core.logging import get_logger
from firemigrate.schemas.models import StorageResult
from firemigrate.storage.cloud_storage import CloudStorageService

logger = get_logger("firemigrate.services.storage")


class StorageCopier:
    """Best-effort copy of every object under a set of path prefixes."""

    def __init__(self, source: CloudStorageService, target: CloudStorageService) -> None:
        self.source = source
        self.target = target

    def copy_prefix(self, prefix: str) -> StorageResult:
        result = StorageResult(prefix=prefix)
        logger.info(f"Copying storage path: {prefix}")

        for blob in self.source.list_objects(prefix):
            try:
                content = self.source.download(blob)
                self.target.upload(blob.name, content, source=blob)
                result.copied += 1
                logger.info(f"Copied object: {blob.name}")
            except Exception as e:
                result.failed += 1
                result.failed_objects.append(blob.name)
                logger.error(f"Error copying object {blob.name}: {e}")

        logger.info(f"{prefix}: {result.copied} objects copied, {result.failed} failed")
        return result

    def copy_prefixes(self, prefixes: Iterable[str]) -> list[StorageResult]:
        results = []
        for prefix in prefixes:
            try:
                results.append(self.copy_prefix(prefix))
            except Exception as e:
                logger.error(f"Error copying storage path {prefix}: {e}", exc_info=True)
                results.append(StorageResult(prefix=prefix, error=str(e)))
        return results
