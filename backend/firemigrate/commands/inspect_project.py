"""
Project Inspection

Prints a read-only overview of the source or target project: service
account, Firestore connectivity, sampled collections and the first users.

Usage:
    python -m firemigrate.commands.inspect_project           # Source project (default)
    python -m firemigrate.commands.inspect_project target    # Target project
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from firemigrate.auth.firebase_auth import FirebaseAuthService
from firemigrate.core.config import MigrationConfig, load_config
from firemigrate.core.exceptions import MigrationError
from firemigrate.core.firebase import FirebaseProject
from firemigrate.core.logging import get_logger
from firemigrate.repositories.firestore_repo import FirestoreRepository
from firemigrate.schemas.models import InspectionReport
from firemigrate.services.inspection_service import ProjectInspector

logger = get_logger("firemigrate.commands.inspect_project")

ROLES = ("source", "target")


def cmd_inspect(config: MigrationConfig, role: str) -> InspectionReport:
    project_config = config.project(role)
    logger.info(f"Inspecting {role} project {project_config.project_id}")

    with FirebaseProject(project_config, role) as project:
        inspector = ProjectInspector(
            FirestoreRepository(project.firestore()),
            FirebaseAuthService(project.app),
            project.service_account_info(),
            config.inspected_collections,
        )
        return inspector.inspect()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="firemigrate-inspect",
        description="Inspect the data in the source or target Firebase project",
    )
    parser.add_argument("command", nargs="?", default="source", help="source (default) or target")
    parser.add_argument("--env-file", type=Path, default=None, help="Load settings from this .env file")
    args = parser.parse_args(argv)

    if args.command not in ROLES:
        parser.print_help()
        return 0

    try:
        config = load_config(args.env_file)
        cmd_inspect(config, args.command)
    except MigrationError as e:
        logger.error(f"Setup failed: {e.message}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error during inspection: {e}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
