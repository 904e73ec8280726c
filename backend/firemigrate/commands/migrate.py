"""
Firebase Project Migration

Copies Firestore collections, Storage objects and Authentication users from
the source project to the target project.

Usage:
    python -m firemigrate.commands.migrate             # Full migration (default)
    python -m firemigrate.commands.migrate firestore   # Firestore only
    python -m firemigrate.commands.migrate storage     # Storage only
    python -m firemigrate.commands.migrate auth        # Authentication only
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from firemigrate.core.config import MigrationConfig, load_config
from firemigrate.core.exceptions import MigrationError
from firemigrate.core.firebase import FirebaseProject
from firemigrate.core.logging import get_logger
from firemigrate.schemas.models import MigrationReport
from firemigrate.services.migration_service import MIGRATION_SCOPES, MigrationService

logger = get_logger("firemigrate.commands.migrate")


def log_summary(report: MigrationReport) -> None:
    logger.info("=" * 40)
    for result in report.collections:
        if result.ok:
            logger.info(f"  {result.collection}: {result.documents} documents copied")
        else:
            logger.info(f"  {result.collection}: failed ({result.error})")
    for result in report.storage:
        status = f"failed ({result.error})" if result.error else f"{result.copied} objects copied, {result.failed} failed"
        logger.info(f"  {result.prefix} {status}")
    if report.auth is not None:
        logger.info(
            f"  users: {report.auth.created} created, {report.auth.skipped} already present, "
            f"{report.auth.failed} failed"
        )
    if report.error:
        logger.error(f"Migration stopped early: {report.error}")
    else:
        logger.info(f"Migration '{report.scope}' finished")


def cmd_migrate(config: MigrationConfig, scope: str) -> MigrationReport:
    """Open both projects, run the scope, and always dispose the apps."""
    source = FirebaseProject(config.source, "source")
    target = FirebaseProject(config.target, "target")
    try:
        source.open()
        target.open()
        report = MigrationService.from_projects(config, source, target).run(scope)
    finally:
        try:
            source.close()
        finally:
            target.close()

    log_summary(report)
    return report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="firemigrate",
        description="Copy a Firebase project into another project",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="full",
        help="full (default), firestore, storage or auth",
    )
    parser.add_argument("--env-file", type=Path, default=None, help="Load settings from this .env file")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in MIGRATION_SCOPES:
        parser.print_help()
        return 0

    try:
        config = load_config(args.env_file)
        cmd_migrate(config, args.command)
    except MigrationError as e:
        logger.error(f"Setup failed: {e.message}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error during migration: {e}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
