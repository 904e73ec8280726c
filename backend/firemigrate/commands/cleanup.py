"""
Source Project Cleanup

Deletes the migrated data from the source project, turning the copy into a
move. Run only after the target has been checked by hand. Asks for an exact
"YES" before deleting anything.

Usage:
    python -m firemigrate.commands.cleanup             # Firestore and Authentication (default)
    python -m firemigrate.commands.cleanup firestore   # Firestore only
    python -m firemigrate.commands.cleanup auth        # Authentication only
"""

import argparse
import sys
from pathlib import Path
from typing import Callable, Optional

from firemigrate.auth.firebase_auth import FirebaseAuthService
from firemigrate.core.config import MigrationConfig, load_config
from firemigrate.core.exceptions import MigrationError
from firemigrate.core.firebase import FirebaseProject
from firemigrate.core.logging import get_logger
from firemigrate.repositories.firestore_repo import FirestoreRepository
from firemigrate.schemas.models import CleanupResult
from firemigrate.services.cleanup_service import CLEANUP_SCOPES, CleanupService, confirm_destruction

logger = get_logger("firemigrate.commands.cleanup")


def cmd_cleanup(
    config: MigrationConfig,
    scope: str,
    prompt: Callable[[str], str] = input,
) -> Optional[CleanupResult]:
    source = FirebaseProject(config.source, "source")
    try:
        source.open()
        service = CleanupService(
            FirestoreRepository(source.firestore(), config.batch_size),
            FirebaseAuthService(source.app, config.auth_page_size),
            config.collections,
        )
        result = service.run(
            scope,
            confirm=lambda: confirm_destruction(config.source.project_id, prompt=prompt),
        )
    finally:
        source.close()

    if result is None:
        logger.info("Operation cancelled, nothing was deleted")
    else:
        logger.info(
            f"Cleanup finished: {result.documents_deleted} documents and "
            f"{result.users_deleted} users deleted from {config.source.project_id}"
        )
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="firemigrate-cleanup",
        description="Delete migrated data from the source Firebase project",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="full",
        help="full (default), firestore or auth",
    )
    parser.add_argument("--env-file", type=Path, default=None, help="Load settings from this .env file")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in CLEANUP_SCOPES:
        parser.print_help()
        return 0

    try:
        config = load_config(args.env_file)
        cmd_cleanup(config, args.command)
    except MigrationError as e:
        logger.error(f"Setup failed: {e.message}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error during cleanup: {e}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
