"""Copies Authentication users between projects, keeping their uids."""

from __future__ import annotations

from firemigrate.auth.firebase_auth import FirebaseAuthService, build_user_payload
from firemigrate.core.exceptions import UserAlreadyExistsError
from firemigrate.core.logging import get_logger
from firemigrate.schemas.models import AuthResult

logger = get_logger("firemigrate.services.auth")


class AuthCopier:
    """
    Recreates every source user in the target project.

    Users that already exist in the target are skipped, which makes reruns
    safe. Other per-user failures are logged and the copy moves on. A failure
    to list a page ends the paging loop.
    """

    def __init__(self, source: FirebaseAuthService, target: FirebaseAuthService) -> None:
        self.source = source
        self.target = target

    def copy_user(self, record, result: AuthResult) -> None:
        payload = build_user_payload(record)
        try:
            self.target.create_user(payload)
        except UserAlreadyExistsError:
            result.skipped += 1
            logger.info(f"User already exists: {record.uid}")
            return
        except Exception as e:
            result.failed += 1
            result.failed_uids.append(record.uid)
            logger.error(f"Error copying user {record.uid}: {e}")
            return

        result.created += 1
        logger.info(f"Copied user: {record.uid} ({record.email})")

    def copy_users(self) -> AuthResult:
        result = AuthResult()
        pages = self.source.iter_pages()

        while True:
            try:
                users = next(pages)
            except StopIteration:
                break
            except Exception as e:
                result.listing_error = str(e)
                logger.error(f"Error listing users: {e}", exc_info=True)
                break

            for record in users:
                self.copy_user(record, result)

        logger.info(
            f"Auth copy finished: {result.created} created, "
            f"{result.skipped} already present, {result.failed} failed"
        )
        return result
