"""
Wait for Target Services

Polls the target project until Firestore and Authentication are enabled.
Run it right after creating the target project, before migrating.

Usage:
    python -m firemigrate.commands.wait_and_check
"""

import argparse
import sys
import time
from pathlib import Path
from typing import Callable, Optional

from firemigrate.auth.firebase_auth import FirebaseAuthService
from firemigrate.core.config import MigrationConfig, load_config
from firemigrate.core.exceptions import MigrationError
from firemigrate.core.firebase import FirebaseProject
from firemigrate.core.logging import get_logger
from firemigrate.repositories.firestore_repo import FirestoreRepository
from firemigrate.services.readiness_service import (
    ProbeResult,
    ReadinessPoller,
    ReadinessState,
    probe_auth,
    probe_firestore,
)

logger = get_logger("firemigrate.commands.wait_and_check")


def make_target_probe(config: MigrationConfig) -> Callable[[], ProbeResult]:
    """Build a probe that opens a fresh app for the target on every attempt."""

    def probe() -> ProbeResult:
        name = f"target-{int(time.time() * 1000)}"
        with FirebaseProject(config.target, name) as project:
            repository = FirestoreRepository(project.firestore())
            auth_service = FirebaseAuthService(project.app)
            return ProbeResult(
                firestore_ready=probe_firestore(repository),
                auth_ready=probe_auth(auth_service),
            )

    return probe


def cmd_wait(config: MigrationConfig, sleep: Callable[[float], None] = time.sleep) -> ReadinessState:
    logger.info(f"Waiting for Firebase services in {config.target.project_id} (usually 3-5 minutes)")
    poller = ReadinessPoller(
        make_target_probe(config),
        max_attempts=config.readiness_max_attempts,
        interval=config.readiness_interval,
        sleep=sleep,
    )
    return poller.poll()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="firemigrate-wait",
        description="Wait until the target project's Firestore and Authentication are enabled",
    )
    parser.add_argument("--env-file", type=Path, default=None, help="Load settings from this .env file")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.env_file)
        cmd_wait(config)
    except MigrationError as e:
        logger.error(f"Setup failed: {e.message}")
        return 1
    except Exception as e:
        logger.error(f"Error while checking services: {e}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
