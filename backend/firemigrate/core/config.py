"""
Migration Configuration

Source/target project settings and run parameters. Values come from the
environment (optionally a .env file) and fall back to the prayforo ->
foroprayo project pair.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from firemigrate.core.exceptions import ConfigurationError

# Firestore batch write limit
MAX_BATCH_SIZE = 500

COLLECTIONS: tuple[str, ...] = (
    "users",
    "avatars",
    "user_backgrounds",
    "prayers",
    "prayer_responses",
    "prayer_likes",
    "prayer_response_likes",
    "baptism",
    "baptism_responses",
    "journey",
    "journey_responses",
    "miracle",
    "miracle_responses",
)

STORAGE_PREFIXES: tuple[str, ...] = (
    "avatars/",
    "prayer-images/",
    "response-images/",
    "test/",
)

INSPECTED_COLLECTIONS: tuple[str, ...] = (
    "users",
    "prayers",
    "prayer_responses",
    "baptism",
    "journey",
    "miracle",
)


@dataclass(frozen=True)
class HashConfig:
    """Firebase scrypt parameters of the project the password hashes came from."""

    key: str
    salt_separator: str = "Bw=="
    rounds: int = 8
    memory_cost: int = 14


@dataclass(frozen=True)
class ProjectConfig:
    """Connection settings for one Firebase project."""

    project_id: str
    storage_bucket: str
    credential_path: Path


@dataclass(frozen=True)
class MigrationConfig:
    """Everything a migration, cleanup or readiness run needs."""

    source: ProjectConfig
    target: ProjectConfig
    collections: tuple[str, ...] = COLLECTIONS
    storage_prefixes: tuple[str, ...] = STORAGE_PREFIXES
    inspected_collections: tuple[str, ...] = INSPECTED_COLLECTIONS
    batch_size: int = MAX_BATCH_SIZE
    auth_page_size: int = 1000
    readiness_max_attempts: int = 10
    readiness_interval: float = 30.0
    source_hash: Optional[HashConfig] = field(default=None)

    def __post_init__(self) -> None:
        if not 1 <= self.batch_size <= MAX_BATCH_SIZE:
            raise ConfigurationError(
                f"batch_size must be between 1 and {MAX_BATCH_SIZE}",
                {"batch_size": self.batch_size},
            )
        if not 1 <= self.auth_page_size <= 1000:
            raise ConfigurationError(
                "auth_page_size must be between 1 and 1000",
                {"auth_page_size": self.auth_page_size},
            )
        if self.readiness_max_attempts < 1:
            raise ConfigurationError(
                "readiness_max_attempts must be at least 1",
                {"readiness_max_attempts": self.readiness_max_attempts},
            )

    def project(self, role: str) -> ProjectConfig:
        """Return the source or target project config by role name."""
        if role == "source":
            return self.source
        if role == "target":
            return self.target
        raise ConfigurationError(f"Unknown project role: {role}", {"role": role})


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer", {name: raw})


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number", {name: raw})


def _project_from_env(prefix: str, project_id: str, bucket: str, key_dir: Path) -> ProjectConfig:
    project_id = os.environ.get(f"{prefix}_PROJECT_ID", project_id)
    credential = os.environ.get(
        f"{prefix}_CREDENTIALS",
        str(key_dir / f"{project_id}-service-account-key.json"),
    )
    return ProjectConfig(
        project_id=project_id,
        storage_bucket=os.environ.get(f"{prefix}_STORAGE_BUCKET", bucket),
        credential_path=Path(credential),
    )


def _hash_from_env() -> Optional[HashConfig]:
    key = os.environ.get("SOURCE_HASH_KEY")
    if not key:
        return None
    return HashConfig(
        key=key,
        salt_separator=os.environ.get("SOURCE_HASH_SALT_SEPARATOR", "Bw=="),
        rounds=_int_env("SOURCE_HASH_ROUNDS", 8),
        memory_cost=_int_env("SOURCE_HASH_MEMORY_COST", 14),
    )


def load_config(env_file: Optional[Path] = None) -> MigrationConfig:
    """
    Build a MigrationConfig from the environment.

    Args:
        env_file: Optional .env file to load first. Existing environment
                  variables take precedence over values in the file.

    Returns:
        The resolved configuration
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()

    key_dir = Path(os.environ.get("MIGRATION_CREDENTIALS_DIR", "."))

    return MigrationConfig(
        source=_project_from_env("SOURCE", "prayforo", "prayforo.appspot.com", key_dir),
        target=_project_from_env("TARGET", "foroprayo", "foroprayo.firebasestorage.app", key_dir),
        batch_size=_int_env("MIGRATION_BATCH_SIZE", MAX_BATCH_SIZE),
        auth_page_size=_int_env("MIGRATION_AUTH_PAGE_SIZE", 1000),
        readiness_max_attempts=_int_env("READINESS_MAX_ATTEMPTS", 10),
        readiness_interval=_float_env("READINESS_INTERVAL_SECONDS", 30.0),
        source_hash=_hash_from_env(),
    )
