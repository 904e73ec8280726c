"""
Source Cleanup Service

Deletes the migrated data from the source project. Every entry point is
gated by an operator confirmation; without it nothing is deleted. The
service does not check that the target holds a complete copy.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from firemigrate.auth.firebase_auth import FirebaseAuthService
from firemigrate.core.logging import get_logger
from firemigrate.repositories.firestore_repo import FirestoreRepository
from firemigrate.schemas.models import CleanupResult, CollectionResult

logger = get_logger("firemigrate.services.cleanup")

CONFIRMATION_WORD = "YES"
CLEANUP_SCOPES = ("full", "firestore", "auth")


def confirm_destruction(
    project_id: str,
    prompt: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> bool:
    """
    Warn the operator and ask for the exact confirmation word.

    Args:
        project_id: Project whose data will be deleted
        prompt: Reads one line of input (defaults to input())
        output: Writes one line of output (defaults to print())

    Returns:
        True only when the answer is exactly "YES"
    """
    output(f"WARNING: this permanently deletes all data in project '{project_id}':")
    output("  - every document in the migrated Firestore collections")
    output("  - every Authentication user")
    output("")
    answer = prompt(f"Delete all data in {project_id}? (type \"{CONFIRMATION_WORD}\" to confirm): ")
    return answer == CONFIRMATION_WORD


class CleanupService:
    """Deletes migrated collections and users from the source project."""

    def __init__(
        self,
        repository: FirestoreRepository,
        auth_service: FirebaseAuthService,
        collections: Iterable[str],
    ) -> None:
        self.repository = repository
        self.auth_service = auth_service
        self.collections = tuple(collections)

    def cleanup_firestore(self, result: Optional[CleanupResult] = None) -> CleanupResult:
        result = result or CleanupResult()

        for name in self.collections:
            logger.info(f"Cleaning collection: {name}")
            try:
                deleted = self.repository.delete_documents(name)
            except Exception as e:
                logger.error(f"Error cleaning collection {name}: {e}")
                result.collections.append(CollectionResult(collection=name, error=str(e)))
                continue

            if deleted == 0:
                logger.info(f"Collection {name} is already empty")
            else:
                logger.info(f"{name}: {deleted} documents deleted")
            result.collections.append(CollectionResult(collection=name, documents=deleted))

        logger.info(f"Firestore cleanup finished: {result.documents_deleted} documents deleted")
        return result

    def cleanup_auth(self, result: Optional[CleanupResult] = None) -> CleanupResult:
        result = result or CleanupResult()
        pages = self.auth_service.iter_pages()

        while True:
            try:
                users = next(pages)
            except StopIteration:
                break
            except Exception as e:
                result.listing_error = str(e)
                logger.error(f"Error listing users: {e}")
                break

            for record in users:
                try:
                    self.auth_service.delete_user(record.uid)
                except Exception as e:
                    result.users_failed += 1
                    logger.error(f"Error deleting user {record.uid}: {e}")
                    continue
                result.users_deleted += 1
                logger.info(f"Deleted user: {record.uid} ({record.email})")

        logger.info(f"Auth cleanup finished: {result.users_deleted} users deleted")
        return result

    def run(self, scope: str, confirm: Callable[[], bool]) -> Optional[CleanupResult]:
        """
        Run a cleanup scope after asking for confirmation.

        Args:
            scope: "full", "firestore" or "auth"
            confirm: Called once before any delete; must return True to proceed

        Returns:
            The cleanup result, or None when the operator did not confirm
        """
        if scope not in CLEANUP_SCOPES:
            raise ValueError(f"Unknown cleanup scope: {scope}")

        if not confirm():
            logger.info("Cleanup cancelled by operator")
            return None

        result = CleanupResult()
        if scope in ("full", "firestore"):
            self.cleanup_firestore(result)
        if scope in ("full", "auth"):
            self.cleanup_auth(result)
        return result
