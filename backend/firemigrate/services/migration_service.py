"""
Migration Service

Runs the copy phases for a migration scope and collects their results.
Full migrations run Firestore, then Storage, then Authentication.
"""

from __future__ import annotations

from firemigrate.auth.firebase_auth import FirebaseAuthService
from firemigrate.core.config import MigrationConfig
from firemigrate.core.firebase import FirebaseProject
from firemigrate.core.logging import LogContext, get_logger
from firemigrate.repositories.firestore_repo import FirestoreRepository
from firemigrate.schemas.models import MigrationReport
from firemigrate.services.auth_copier import AuthCopier
from firemigrate.services.collection_copier import CollectionCopier
from firemigrate.services.storage_copier import StorageCopier
from firemigrate.storage.cloud_storage import CloudStorageService

logger = get_logger("firemigrate.services.migration")

MIGRATION_SCOPES = ("full", "firestore", "storage", "auth")


class MigrationService:
    """Coordinates the collection, storage and auth copiers for one run."""

    def __init__(
        self,
        config: MigrationConfig,
        collection_copier: CollectionCopier,
        storage_copier: StorageCopier,
        auth_copier: AuthCopier,
    ) -> None:
        self.config = config
        self.collection_copier = collection_copier
        self.storage_copier = storage_copier
        self.auth_copier = auth_copier

    @classmethod
    def from_projects(
        cls,
        config: MigrationConfig,
        source: FirebaseProject,
        target: FirebaseProject,
    ) -> "MigrationService":
        """Wire the copiers to two open Firebase projects."""
        collection_copier = CollectionCopier(
            FirestoreRepository(source.firestore(), config.batch_size),
            FirestoreRepository(target.firestore(), config.batch_size),
        )
        storage_copier = StorageCopier(
            CloudStorageService(source.bucket()),
            CloudStorageService(target.bucket()),
        )
        auth_copier = AuthCopier(
            FirebaseAuthService(source.app, config.auth_page_size),
            FirebaseAuthService(target.app, config.auth_page_size, config.source_hash),
        )
        return cls(config, collection_copier, storage_copier, auth_copier)

    def run(self, scope: str = "full") -> MigrationReport:
        """
        Run one migration scope.

        Args:
            scope: "full", "firestore", "storage" or "auth"

        Returns:
            Per-phase results. An unexpected phase error is recorded in
            report.error and stops the remaining phases.
        """
        if scope not in MIGRATION_SCOPES:
            raise ValueError(f"Unknown migration scope: {scope}")

        report = MigrationReport(
            scope=scope,
            source_project=self.config.source.project_id,
            target_project=self.config.target.project_id,
        )
        logger.info(f"Source project: {report.source_project}")
        logger.info(f"Target project: {report.target_project}")

        try:
            if scope in ("full", "firestore"):
                with LogContext(logger, "Firestore migration", scope=scope):
                    report.collections = self.collection_copier.copy_collections(self.config.collections)

            if scope in ("full", "storage"):
                with LogContext(logger, "Storage migration", scope=scope):
                    report.storage = self.storage_copier.copy_prefixes(self.config.storage_prefixes)

            if scope in ("full", "auth"):
                with LogContext(logger, "Authentication migration", scope=scope):
                    report.auth = self.auth_copier.copy_users()
        except Exception as e:
            report.error = str(e)

        return report
