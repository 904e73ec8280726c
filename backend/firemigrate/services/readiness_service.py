"""
Service Readiness Poller

Polls the target project until both Firestore and Authentication answer,
or until the attempt budget runs out.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from firemigrate.auth.firebase_auth import FirebaseAuthService
from firemigrate.core.logging import get_logger
from firemigrate.repositories.firestore_repo import FirestoreRepository

logger = get_logger("firemigrate.services.readiness")


class ReadinessState(str, Enum):
    CHECKING = "checking"
    NOT_READY = "not-ready"
    READY = "ready"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class ProbeResult:
    firestore_ready: bool
    auth_ready: bool

    @property
    def ready(self) -> bool:
        return self.firestore_ready and self.auth_ready


def _short(error: Exception, limit: int = 100) -> str:
    return str(error)[:limit]


def probe_firestore(repository: FirestoreRepository) -> bool:
    try:
        repository.probe()
    except Exception as e:
        if "PERMISSION_DENIED" in str(e):
            logger.warning("Firestore: not enabled yet")
        else:
            logger.warning(f"Firestore: unknown state - {_short(e)}")
        return False
    logger.info("Firestore: enabled")
    return True


def probe_auth(auth_service: FirebaseAuthService) -> bool:
    try:
        auth_service.probe()
    except Exception as e:
        if "no configuration" in str(e).lower():
            logger.warning("Authentication: not enabled yet")
        else:
            logger.warning(f"Authentication: unknown state - {_short(e)}")
        return False
    logger.info("Authentication: enabled")
    return True


class ReadinessPoller:
    """
    Bounded polling loop over a readiness probe.

    The probe is called once per attempt and must report both services; the
    poller is ready only when both are ready in the same attempt. It sleeps
    `interval` seconds between attempts, never after the last one.
    """

    def __init__(
        self,
        probe: Callable[[], ProbeResult],
        max_attempts: int = 10,
        interval: float = 30.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.probe = probe
        self.max_attempts = max_attempts
        self.interval = interval
        self.sleep = sleep
        self.state = ReadinessState.CHECKING
        self.attempts = 0

    def poll(self) -> ReadinessState:
        self.state = ReadinessState.CHECKING
        self.attempts = 0

        while self.attempts < self.max_attempts:
            self.attempts += 1
            self.state = ReadinessState.CHECKING
            logger.info(f"Check {self.attempts}/{self.max_attempts}...")

            if self.probe().ready:
                self.state = ReadinessState.READY
                logger.info("All services are enabled, the migration can run now")
                return self.state

            self.state = ReadinessState.NOT_READY
            if self.attempts < self.max_attempts:
                logger.info(f"Waiting {self.interval:g} seconds before the next check...")
                self.sleep(self.interval)

        self.state = ReadinessState.EXHAUSTED
        logger.warning(
            "Some services may still be disabled. Verify in the Firebase Console that "
            "Firestore and Authentication are enabled for the right project and that the "
            "service account has access, then rerun firemigrate-inspect target."
        )
        return self.state
