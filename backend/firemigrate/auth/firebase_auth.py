"""
Firebase Authentication Service

Lists, creates and deletes Authentication users of one Firebase project
through the Admin SDK. Users are created with import_users so that uid,
metadata timestamps and (when the hash parameters are known) password
hashes survive the move.
"""

import base64
from typing import Any, Iterator, Optional

import firebase_admin
from firebase_admin import auth

from firemigrate.core.config import HashConfig
from firemigrate.core.exceptions import MigrationError, UserAlreadyExistsError
from firemigrate.core.logging import get_logger

logger = get_logger("firemigrate.auth")

# What the backend returns in place of a hash when the caller lacks permission
REDACTED_HASH = base64.urlsafe_b64encode(b"REDACTED").decode()


def _decode_b64(value: str) -> bytes:
    """Decode standard or URL-safe base64, tolerating missing padding."""
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def build_user_payload(record) -> dict[str, Any]:
    """
    Build the creation payload for a source user record.

    Args:
        record: ExportedUserRecord from list_users()

    Returns:
        Dict with uid, email, email_verified, display_name, photo_url,
        disabled, creation/last sign-in timestamps, and password_hash /
        password_salt only when the source exposes a real hash.
    """
    metadata = record.user_metadata
    payload: dict[str, Any] = {
        "uid": record.uid,
        "email": record.email,
        "email_verified": bool(record.email_verified),
        "display_name": record.display_name,
        "photo_url": record.photo_url,
        "disabled": bool(record.disabled),
        "creation_timestamp": metadata.creation_timestamp if metadata else None,
        "last_sign_in_timestamp": metadata.last_sign_in_timestamp if metadata else None,
    }

    password_hash = getattr(record, "password_hash", None)
    if password_hash and password_hash != REDACTED_HASH:
        payload["password_hash"] = password_hash
        payload["password_salt"] = getattr(record, "password_salt", None)

    return payload


class FirebaseAuthService:
    """Service for Authentication users of a single Firebase project."""

    def __init__(
        self,
        app: firebase_admin.App,
        page_size: int = 1000,
        hash_config: Optional[HashConfig] = None,
    ) -> None:
        self.app = app
        self.page_size = page_size
        self.hash_config = hash_config

    def list_page(self, page_token: Optional[str] = None, max_results: Optional[int] = None):
        """Fetch one page of users."""
        return auth.list_users(
            page_token=page_token,
            max_results=max_results or self.page_size,
            app=self.app,
        )

    def iter_pages(self) -> Iterator[list]:
        """
        Yield pages of users until the continuation token is empty.

        Errors from the listing call propagate to the caller.
        """
        page_token = None
        while True:
            page = self.list_page(page_token)
            yield list(page.users)
            page_token = page.next_page_token
            if not page_token:
                return

    def user_exists(self, uid: str) -> bool:
        try:
            auth.get_user(uid, app=self.app)
        except auth.UserNotFoundError:
            return False
        return True

    def email_owner(self, email: str) -> Optional[str]:
        """Return the uid that holds `email` in this project, or None."""
        try:
            return auth.get_user_by_email(email, app=self.app).uid
        except auth.UserNotFoundError:
            return None

    def create_user(self, payload: dict[str, Any]) -> None:
        """
        Create a user from a payload built by build_user_payload().

        Raises:
            UserAlreadyExistsError: uid is already present in this project
            MigrationError: the backend rejected the user, or another uid
                already holds the email
        """
        uid = payload["uid"]
        if self.user_exists(uid):
            raise UserAlreadyExistsError(uid)

        email = payload.get("email")
        if email:
            owner = self.email_owner(email)
            if owner is not None and owner != uid:
                raise MigrationError(
                    f"Email {email} already belongs to user {owner}",
                    {"uid": uid, "email": email, "owner": owner},
                )

        record_kwargs: dict[str, Any] = {
            "uid": uid,
            "email": email,
            "email_verified": payload.get("email_verified"),
            "display_name": payload.get("display_name"),
            "photo_url": payload.get("photo_url"),
            "disabled": payload.get("disabled"),
        }

        created = payload.get("creation_timestamp")
        last_sign_in = payload.get("last_sign_in_timestamp")
        if created or last_sign_in:
            record_kwargs["user_metadata"] = auth.UserMetadata(
                creation_timestamp=created,
                last_sign_in_timestamp=last_sign_in,
            )

        hash_alg = None
        if payload.get("password_hash"):
            if self.hash_config is None:
                logger.warning(f"No hash parameters configured, importing {uid} without password")
            else:
                record_kwargs["password_hash"] = _decode_b64(payload["password_hash"])
                if payload.get("password_salt"):
                    record_kwargs["password_salt"] = _decode_b64(payload["password_salt"])
                hash_alg = self._hash_alg()

        result = auth.import_users(
            [auth.ImportUserRecord(**record_kwargs)],
            hash_alg=hash_alg,
            app=self.app,
        )

        if result.failure_count:
            reason = result.errors[0].reason if result.errors else "unknown error"
            if "exist" in reason.lower():
                raise UserAlreadyExistsError(uid)
            raise MigrationError(f"Failed to import user {uid}: {reason}", {"uid": uid})

    def delete_user(self, uid: str) -> None:
        auth.delete_user(uid, app=self.app)

    def probe(self) -> None:
        """Run a minimal listing; raises if Authentication is not configured."""
        self.list_page(max_results=1)

    def _hash_alg(self):
        cfg = self.hash_config
        return auth.UserImportHash.scrypt(
            key=base64.b64decode(cfg.key),
            rounds=cfg.rounds,
            memory_cost=cfg.memory_cost,
            salt_separator=base64.b64decode(cfg.salt_separator),
        )
