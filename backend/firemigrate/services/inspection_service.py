"""
Project Inspector

Read-only health check of one Firebase project: service-account identity,
Firestore connectivity, a sample of each collection, and the first users.
Works for either side of a migration.
"""

from __future__ import annotations

from typing import Any, Iterable

from firebase_admin import exceptions

from firemigrate.auth.firebase_auth import FirebaseAuthService
from firemigrate.core.logging import get_logger
from firemigrate.repositories.firestore_repo import FirestoreRepository
from firemigrate.schemas.models import CollectionSample, InspectionReport, UserSummary

logger = get_logger("firemigrate.services.inspection")

SAMPLE_SIZE = 5
USER_PAGE_SIZE = 10
USERS_SHOWN = 3

IAM_HINT = (
    "Make sure the service account has the Firebase Authentication Admin role "
    "and check the IAM settings in the Firebase Console."
)


class ProjectInspector:
    """Inspects one project through its repository and auth service."""

    def __init__(
        self,
        repository: FirestoreRepository,
        auth_service: FirebaseAuthService,
        service_account: dict[str, Any],
        collections: Iterable[str],
    ) -> None:
        self.repository = repository
        self.auth_service = auth_service
        self.service_account = service_account
        self.collections = tuple(collections)

    def check_project_info(self, report: InspectionReport) -> None:
        logger.info(f"Project ID: {report.project_id}")
        logger.info(f"Service account: {report.client_email}")
        try:
            self.repository.get_document("test", "connection-test")
        except Exception as e:
            report.connection_error = str(e)
            logger.error(f"Connection check failed: {e}")
            return
        report.connection_ok = True
        logger.info("Firestore connection OK")

    def check_collections(self, report: InspectionReport) -> None:
        for name in self.collections:
            sample = CollectionSample(collection=name)
            try:
                docs = self.repository.sample_documents(name, SAMPLE_SIZE)
            except Exception as e:
                sample.error = str(e)
                logger.error(f"Error reading {name}: {e}")
                report.collections.append(sample)
                continue

            sample.sample_size = len(docs)
            if docs:
                sample.first_document_id = docs[0].id
            logger.info(f"{name}: {sample.sample_size} documents sampled")
            report.collections.append(sample)

    def check_users(self, report: InspectionReport) -> None:
        try:
            page = self.auth_service.list_page(max_results=USER_PAGE_SIZE)
        except Exception as e:
            report.auth_error = str(e)
            logger.error(f"Error listing users: {e}")
            if isinstance(e, exceptions.PermissionDeniedError) or "insufficient" in str(e).lower():
                report.auth_hint = IAM_HINT
                logger.info(IAM_HINT)
            return

        users = list(page.users)
        report.user_count = len(users)
        if not users:
            logger.warning("No users found")
            return

        for record in users[:USERS_SHOWN]:
            metadata = record.user_metadata
            summary = UserSummary(
                uid=record.uid,
                email=record.email,
                display_name=record.display_name,
                creation_timestamp=metadata.creation_timestamp if metadata else None,
            )
            report.users.append(summary)
            logger.info(
                f"User {summary.uid}: email={summary.email or 'not set'}, "
                f"name={summary.display_name or 'not set'}, created={summary.creation_timestamp}"
            )

    def inspect(self) -> InspectionReport:
        report = InspectionReport(
            project_id=self.service_account.get("project_id", "unknown"),
            client_email=self.service_account.get("client_email"),
        )
        self.check_project_info(report)
        self.check_collections(report)
        self.check_users(report)
        return report
